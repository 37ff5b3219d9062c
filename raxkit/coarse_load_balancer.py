"""Distribution of whole search jobs among worker groups."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class CoarseLoadBalancer(ABC):
    """Splits a list of job ids into one list per worker."""

    def get_all_assignments(self, search_ids: Sequence[int],
                            num_workers: int) -> list[list[int]]:
        if num_workers == 1:
            return [list(search_ids)]
        return self.compute_assignments(search_ids, num_workers)

    def get_proc_assignments(self, search_ids: Sequence[int], num_workers: int,
                             worker_id: int) -> list[int]:
        if worker_id >= num_workers:
            raise IndexError("Worker ID out of range")
        if num_workers == 1:
            return list(search_ids)
        return self.compute_assignments(search_ids, num_workers)[worker_id]

    @abstractmethod
    def compute_assignments(self, search_ids: Sequence[int],
                            num_workers: int) -> list[list[int]]:
        """Return one list of job ids per worker."""


class SimpleCoarseLoadBalancer(CoarseLoadBalancer):
    """Hands job ids to workers in round-robin order."""

    def compute_assignments(self, search_ids, num_workers):
        assignments: list[list[int]] = [[] for _ in range(num_workers)]
        for i, search_id in enumerate(search_ids):
            assignments[i % num_workers].append(search_id)
        return assignments