"""Assignment of alignment site ranges to processing units."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence


@dataclass
class PartitionRange:
    """A contiguous block of sites taken from one partition."""

    part_id: int = 0
    start: int = 0
    length: int = 0
    per_site_weight: float = 1.0

    def master(self) -> bool:
        """True if this range holds the first site of its partition."""
        return self.start == 0

    def weight(self) -> float:
        return self.length * self.per_site_weight


class PartitionAssignment:
    """The ranges of sites assigned to one processing unit."""

    def __init__(self) -> None:
        self._ranges: list[PartitionRange] = []
        self._length = 0
        self._weight = 0.0

    def assign_sites(self, partition_id: int, offset: int, length: int,
                     site_weight: float = 1.0) -> None:
        self._ranges.append(PartitionRange(partition_id, offset, length, site_weight))
        self._length += length
        self._weight += length * site_weight

    def find(self, part_id: int) -> PartitionRange | None:
        """The first range belonging to ``part_id``, or None."""
        return next((r for r in self._ranges if r.part_id == part_id), None)

    def empty(self) -> bool:
        return not self._ranges

    def num_parts(self) -> int:
        return len(self._ranges)

    def length(self) -> int:
        return self._length

    def weight(self) -> float:
        return self._weight

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[PartitionRange]:
        return iter(self._ranges)

    def __getitem__(self, index: int) -> PartitionRange:
        return self._ranges[index]

    def __str__(self) -> str:
        lines = ["part#\tstart\tlength"]
        lines.extend(f"{r.part_id}\t{r.start}\t{r.length}" for r in self._ranges)
        return "\n".join(lines) + "\n"


class PartitionAssignmentStats:
    """Summary of how evenly a list of assignments spreads the work."""

    def __init__(self, part_assign: Sequence[PartitionAssignment]) -> None:
        self.num_cores = len(part_assign)
        self.total_parts = 0
        self.total_sites = 0
        self.total_weight = 0
        self.max_thread_sites = 0
        self.max_thread_parts = 0
        self.max_thread_weight = 0.0
        self.min_thread_sites = sys.maxsize
        self.min_thread_parts = sys.maxsize
        self.min_thread_weight = sys.float_info.max
        for pa in part_assign:
            self.min_thread_parts = min(self.min_thread_parts, pa.num_parts())
            self.max_thread_parts = max(self.max_thread_parts, pa.num_parts())
            self.min_thread_sites = min(self.min_thread_sites, pa.length())
            self.max_thread_sites = max(self.max_thread_sites, pa.length())
            self.min_thread_weight = min(self.min_thread_weight, pa.weight())
            self.max_thread_weight = max(self.max_thread_weight, pa.weight())
            self.total_sites += pa.length()
            # the total weight is kept as a whole number
            self.total_weight = int(self.total_weight + pa.weight())
            self.total_parts += pa.num_parts()

    def __str__(self) -> str:
        return (f"max. partitions/sites/weight per thread: {self.max_thread_parts} / "
                f"{self.max_thread_sites} / {int(self.max_thread_weight)}")


def format_assignment_list(part_assign: Iterable[PartitionAssignment]) -> str:
    """Tabulate every range of every assignment, one block per thread."""
    lines = ["thread#\tpart#\tstart\tlength\tweight"]
    for i, pa in enumerate(part_assign):
        lines.extend(f"{i}\t{r.part_id}\t{r.start}\t{r.length}\t{int(r.weight())}"
                     for r in pa)
        lines.append("")
    return "\n".join(lines) + "\n"