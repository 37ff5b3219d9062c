"""Bootstrap convergence test based on majority-rule extended consensus trees."""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from typing import Iterable, Sequence, Union

Split = Union[int, Iterable[int]]


def _mask(tip_count: int) -> int:
    return (1 << tip_count) - 1


def compatible_splits(split1: int, split2: int, tip_count: int) -> bool:
    """True if two bipartitions (as tip bit masks) can coexist in one tree."""
    full = _mask(tip_count)
    a = split1 & full
    b = split2 & full
    not_a = ~a & full
    not_b = ~b & full
    return not (a & b) or not (a & not_b) or not (not_a & b) or not (not_a & not_b)


def _to_mask(split: Split, num_tips: int) -> int:
    if isinstance(split, int):
        mask = split
    else:
        mask = 0
        for tip in split:
            if not 0 <= tip < num_tips:
                raise ValueError(f"Tip index out of range: {tip}")
            mask |= 1 << tip
    full = _mask(num_tips)
    if mask < 0 or mask > full:
        raise ValueError("Split does not fit the number of tips")
    # normalise so that tip 0 is never on the flagged side
    if mask & 1:
        mask = ~mask & full
    return mask


class BootstopCheck(ABC):
    """Collects bootstrap tree splits and decides whether enough trees were drawn."""

    def __init__(self, max_bs_trees: int) -> None:
        self._max_bs_trees = max_bs_trees
        self._num_bs_trees = 0
        self._num_tips: int | None = None
        self._split_ids: dict[int, int] = {}
        self._splits: list[int] = []
        self._split_occurrence: list[list[int]] = []

    def add_bootstrap_tree(self, splits: Iterable[Split], num_tips: int) -> None:
        """Record the non-trivial splits of one bootstrap tree."""
        if self._num_bs_trees == self._max_bs_trees:
            raise RuntimeError("BootstopCheck::add_bootstrap_tree: "
                               "Maximum number of bootstrap trees reached: "
                               + str(self._max_bs_trees))
        if self._num_tips is None:
            self._num_tips = num_tips
        elif num_tips != self._num_tips:
            raise ValueError(f"Tree has {num_tips} tips, expected {self._num_tips}")

        for split in splits:
            mask = _to_mask(split, num_tips)
            bip = self._split_ids.get(mask)
            if bip is None:
                bip = len(self._splits)
                self._split_ids[mask] = bip
                self._splits.append(mask)
                self._split_occurrence.append([])
            occ = self._split_occurrence[bip]
            if not occ or occ[-1] != self._num_bs_trees:
                occ.append(self._num_bs_trees)

        self._num_bs_trees += 1

    def all_splits(self) -> list[int]:
        """Ids of all distinct splits seen so far."""
        return list(range(len(self._splits)))

    def converged(self, random_seed: int = 0) -> bool:
        rng = random.Random(random_seed)
        if not self._num_bs_trees:
            return False
        return self.check_convergence(rng)

    def num_bs_trees(self) -> int:
        return self._num_bs_trees

    def max_bs_trees(self) -> int:
        return self._max_bs_trees

    def set_max_bs_trees(self, value: int) -> None:
        """Change the tree limit; ignored once trees have been added."""
        if not self._num_bs_trees:
            self._max_bs_trees = value

    @abstractmethod
    def check_convergence(self, rng: random.Random) -> bool:
        """Decide convergence using the given random generator."""


class BootstopCheckMRE(BootstopCheck):
    """Convergence test comparing MRE consensus trees of random tree halves."""

    def __init__(self, max_bs_trees: int, cutoff: float, num_permutations: int) -> None:
        super().__init__(max_bs_trees)
        self._wrf_cutoff = cutoff
        self._num_permutations = num_permutations
        self._avg_wrf = 0.0
        self._avg_pct = 0.0
        self._num_better = 0

    def avg_wrf(self) -> float:
        return self._avg_wrf

    def avg_pct(self) -> float:
        return self._avg_pct

    def num_better(self) -> int:
        return self._num_better

    def mre(self, split_ids: list[int], support: Sequence[int]) -> list[int]:
        """Build an MRE consensus split set; ``split_ids`` is re-sorted in place."""
        mr_support_cutoff = self._num_bs_trees // 4
        tip_count = self._num_tips or 0
        max_splits = tip_count - 3

        split_ids.sort(key=lambda bip: support[bip], reverse=True)

        consensus: list[int] = []
        for bip in split_ids:
            compatible = True
            if support[bip] <= mr_support_cutoff:
                mask = self._splits[bip]
                compatible = all(compatible_splits(self._splits[ce], mask, tip_count)
                                 for ce in reversed(consensus))
            if compatible:
                consensus.append(bip)
            if len(consensus) == max_splits:
                break

        consensus.sort()
        return consensus

    def consensus_wrf_distance(self, splits1: Sequence[int], splits2: Sequence[int],
                               support1: Sequence[int], support2: Sequence[int]) -> float:
        """Weighted Robinson-Foulds distance between two consensus split sets."""
        set1 = set(splits1)
        set2 = set(splits2)
        wrf = 0.0
        for bip in set1 | set2:
            if bip in set1 and bip in set2:
                wrf += abs(support1[bip] - support2[bip])
            elif bip in set1:
                wrf += support1[bip]
            else:
                wrf += support2[bip]
        return wrf

    def check_convergence(self, rng: random.Random) -> bool:
        num_splits = len(self._splits)
        perm = list(range(self._num_bs_trees))
        support1 = [0] * num_splits
        support2 = [0] * num_splits

        min_better_count = int(0.99 * self._num_permutations)
        wrf_thresh_avg = 0.0
        self._num_better = 0
        self._avg_pct = 0.0
        self._avg_wrf = 0.0

        splits_all = self.all_splits()

        for _ in range(self._num_permutations):
            rng.shuffle(perm)

            for bip in splits_all:
                occ = self._split_occurrence[bip]
                cnt1 = sum(1 for j in occ if perm[j] % 2 == 0)
                support1[bip] = cnt1
                support2[bip] = len(occ) - cnt1

            cons1 = self.mre(splits_all, support1)
            cons2 = self.mre(splits_all, support2)

            wrf = self.consensus_wrf_distance(cons1, cons2, support1, support2)
            half_split_count = 0.5 * self._num_bs_trees * (len(cons1) + len(cons2))
            wrf_thresh = self._wrf_cutoff * half_split_count

            if wrf <= wrf_thresh:
                self._num_better += 1

            if half_split_count:
                self._avg_pct += wrf / half_split_count * 100.0
            else:
                self._avg_pct += math.nan if wrf == 0 else math.inf
            self._avg_wrf += wrf
            wrf_thresh_avg += wrf_thresh

        if self._num_permutations:
            self._avg_pct /= self._num_permutations
            self._avg_wrf /= self._num_permutations
            wrf_thresh_avg /= self._num_permutations

        return self._num_better >= min_better_count and self._avg_wrf <= wrf_thresh_avg