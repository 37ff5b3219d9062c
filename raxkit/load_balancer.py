"""Distribution of alignment sites among parallel processes."""

from __future__ import annotations

import copy
import math
from abc import ABC, abstractmethod

from .partition_assignment import PartitionAssignment, PartitionRange
from .types import RaxmlError


class LoadBalancerError(RaxmlError):
    """Raised when sites cannot be distributed among processes."""


class LoadBalancer(ABC):
    """Splits partitions into per-process site ranges."""

    def get_all_assignments(self, part_sizes: PartitionAssignment,
                            num_procs: int) -> list[PartitionAssignment]:
        if num_procs == 1:
            return [copy.deepcopy(part_sizes)]
        if part_sizes.length() < num_procs:
            raise LoadBalancerError(
                f"There are fewer alignment sites ({part_sizes.length()}) "
                f"than processes ({num_procs})!")
        return self.compute_assignments(part_sizes, num_procs)

    def get_proc_assignments(self, part_sizes: PartitionAssignment, num_procs: int,
                             proc_id: int) -> PartitionAssignment:
        if proc_id >= num_procs:
            raise IndexError("Process ID out of range")
        if num_procs == 1:
            return copy.deepcopy(part_sizes)
        return self.compute_assignments(part_sizes, num_procs)[proc_id]

    @abstractmethod
    def compute_assignments(self, part_sizes: PartitionAssignment,
                            num_procs: int) -> list[PartitionAssignment]:
        """Return one assignment per process."""


class SimpleLoadBalancer(LoadBalancer):
    """Cuts every partition into equal slices, one per process."""

    def compute_assignments(self, part_sizes, num_procs):
        part_assign = [PartitionAssignment() for _ in range(num_procs)]
        for proc_id, proc_assign in enumerate(part_assign):
            for full_range in part_sizes:
                total_sites = full_range.length
                proc_sites = total_sites // num_procs
                start = full_range.start + proc_id * proc_sites
                length = total_sites - start if proc_id == num_procs - 1 else proc_sites
                proc_assign.assign_sites(full_range.part_id, start, length)
        return part_assign


class KassianLoadBalancer(LoadBalancer):
    """Balances site counts, splitting as few partitions as possible."""

    def compute_assignments(self, part_sizes, num_procs):
        bins = [PartitionAssignment() for _ in range(num_procs)]
        sorted_partitions = sorted(part_sizes, key=lambda r: r.length)
        total_sites = sum(r.length for r in part_sizes)

        orig_max_sites = (total_sites - 1) // num_procs + 1
        max_sites = orig_max_sites
        target_full_bins = num_procs - (max_sites * num_procs - total_sites)
        full_bins = 0
        current_bin = 0
        curr_part = 0

        # phase 1: whole partitions, cyclically, until one does not fit
        for idx, partition in enumerate(sorted_partitions):
            current_bin = idx % num_procs
            bin_ = bins[current_bin]
            if partition.length + bin_.length() > max_sites:
                curr_part = idx
                break
            bin_.assign_sites(partition.part_id, 0, partition.length,
                              partition.per_site_weight)
            if bin_.length() == max_sites:
                full_bins += 1
                if full_bins == target_full_bins:
                    max_sites -= 1
        else:
            return bins

        # phase 2: split the remaining partitions across bins
        qlow: list[PartitionAssignment] = []
        qhigh: list[PartitionAssignment] = []
        for i, bin_ in enumerate(bins):
            if bin_.length() >= max_sites:
                continue
            (qhigh if i < current_bin else qlow).append(bin_)

        remaining = sorted_partitions[curr_part].length
        while curr_part < len(sorted_partitions) and (qlow or qhigh):
            if not qlow:
                qlow = qhigh
            partition = sorted_partitions[curr_part]
            offset = partition.length - remaining

            if qhigh and qhigh[-1].length() + remaining >= max_sites:
                queue = qhigh
            elif qlow[-1].length() + remaining >= max_sites:
                queue = qlow
            else:
                queue = None

            if queue is not None:
                bin_ = queue.pop()
                toassign = max_sites - bin_.length()
                bin_.assign_sites(partition.part_id, offset, toassign,
                                  partition.per_site_weight)
                assert remaining >= toassign
                remaining -= toassign
                full_bins += 1
                if full_bins == target_full_bins:
                    max_sites -= 1
            else:
                bin_ = qlow.pop()
                bin_.assign_sites(partition.part_id, offset, remaining,
                                  partition.per_site_weight)
                remaining = 0
                qhigh.append(bin_)

            if not qlow:
                qlow = qhigh
            if not remaining:
                curr_part += 1
                if curr_part < len(sorted_partitions):
                    remaining = sorted_partitions[curr_part].length

        assert orig_max_sites - max_sites <= 1
        return bins


class _BenoitState:
    """Working state of the weight-aware balancing algorithm."""

    def __init__(self, part_sizes: PartitionAssignment, num_procs: int) -> None:
        self.bins = [PartitionAssignment() for _ in range(num_procs)]
        self.empty_bins = num_procs
        self.num_parts = part_sizes.num_parts()
        self.sorted_partitions: list[PartitionRange] = sorted(
            part_sizes, key=lambda r: r.weight())
        self.total_remaining = part_sizes.length()

        site_weights = [r.per_site_weight for r in part_sizes]
        max_site_weight = max([0.0, *site_weights])
        min_site_weight = min(site_weights, default=math.inf)
        if max_site_weight <= 0.0:
            raise ValueError("per-site weights must be positive")

        self.opt_bin_weight = part_sizes.weight() / num_procs
        self.min_bin_weight = max(self.opt_bin_weight - max_site_weight, min_site_weight)
        self.max_bin_weight = self.opt_bin_weight + max_site_weight
        self.rest_over_weight = 0.8 * self.opt_bin_weight

        self.curr_part = 0
        self.current_bin = 0
        self.remaining = 0
        self.qlow: list[PartitionAssignment] = []
        self.qhigh: list[PartitionAssignment] = []

    def assign_sites(self, bin_: PartitionAssignment, part_id: int, offset: int,
                     length: int, per_site_weight: float) -> int:
        if not length:
            return 0
        if bin_.empty():
            self.empty_bins -= 1
        toassign = min(length, self.total_remaining - self.empty_bins)
        bin_.assign_sites(part_id, offset, toassign, per_site_weight)
        self.total_remaining -= toassign
        return toassign

    def _account_overweight(self, bin_: PartitionAssignment) -> None:
        if bin_.weight() > self.opt_bin_weight:
            self.rest_over_weight -= bin_.weight() - self.opt_bin_weight

    def phase1(self) -> None:
        """Assign whole partitions cyclically until one is too big."""
        while self.curr_part < len(self.sorted_partitions):
            self.current_bin = self.curr_part % len(self.bins)
            bin_ = self.bins[self.current_bin]
            partition = self.sorted_partitions[self.curr_part]
            if partition.weight() + bin_.weight() > self.max_bin_weight:
                break
            self.assign_sites(bin_, partition.part_id, 0, partition.length,
                              partition.per_site_weight)
            self._account_overweight(bin_)
            self.curr_part += 1

    def fill_queues(self) -> None:
        for i, bin_ in enumerate(self.bins):
            if bin_.weight() >= self.min_bin_weight:
                continue
            (self.qhigh if i < self.current_bin else self.qlow).append(bin_)

    def can_fill_bin(self, queue: list[PartitionAssignment], add_weight: float,
                     per_site_weight: float) -> bool:
        if not queue:
            return False
        free_capacity = self.opt_bin_weight - queue[-1].weight()
        return add_weight >= free_capacity and (
            per_site_weight < free_capacity or self.rest_over_weight > 0)

    def fill_bin(self, queue: list[PartitionAssignment]) -> None:
        partition = self.sorted_partitions[self.curr_part]
        bin_ = queue.pop()

        if not self.qhigh and not self.qlow:
            # the last bin takes every remaining site
            assert self.curr_part == self.num_parts - 1
            toassign = self.remaining
        else:
            opt_toassign = (self.opt_bin_weight - bin_.weight()) / partition.per_site_weight
            rounded = math.ceil(opt_toassign) if self.rest_over_weight > 0.0 \
                else math.floor(opt_toassign)
            toassign = min(int(rounded), self.remaining)
        assert 0 < toassign <= self.remaining

        self.remaining -= self.assign_sites(
            bin_, partition.part_id, partition.length - self.remaining, toassign,
            partition.per_site_weight)
        self._account_overweight(bin_)

    def phase2(self) -> None:
        """Assign partial partitions to the bins that still have room."""
        qlow = self.qlow
        qhigh = self.qhigh
        self.remaining = self.sorted_partitions[self.curr_part].length
        while self.curr_part < len(self.sorted_partitions) and (qlow or qhigh):
            if not qlow:
                qlow = qhigh
            partition = self.sorted_partitions[self.curr_part]
            remaining_weight = self.remaining * partition.per_site_weight

            if self.can_fill_bin(qhigh, remaining_weight, partition.per_site_weight):
                self.fill_bin(qhigh)
            elif self.can_fill_bin(qlow, remaining_weight, partition.per_site_weight):
                self.fill_bin(qlow)
            else:
                bin_ = qlow.pop()
                self.remaining -= self.assign_sites(
                    bin_, partition.part_id, partition.length - self.remaining,
                    self.remaining, partition.per_site_weight)
                if bin_.weight() < self.min_bin_weight:
                    qhigh.append(bin_)

            if not qlow:
                qlow = qhigh
            if not self.remaining:
                self.curr_part += 1
                if self.curr_part < len(self.sorted_partitions):
                    self.remaining = self.sorted_partitions[self.curr_part].length

        assert self.remaining == 0
        assert self.curr_part == self.num_parts


class BenoitLoadBalancer(LoadBalancer):
    """Balances total site weight rather than site counts."""

    def compute_assignments(self, part_sizes, num_procs):
        state = _BenoitState(part_sizes, num_procs)
        state.phase1()
        if state.curr_part < state.num_parts:
            state.fill_queues()
            state.phase2()
        return state.bins