from __future__ import annotations

import heapq
from collections import deque
from typing import Deque, Dict, Generic, List, TypeVar

T = TypeVar("T")


class PriorityFrontier(Generic[T]):
    """Min-priority queue bucketing items that share a priority.

    Distinct priorities live in a heap; each maps to a FIFO bucket, so ties
    come out in insertion order. Size is tracked on push/pop.
    """

    def __init__(self) -> None:
        self._keys: List[float] = []
        self._buckets: Dict[float, Deque[T]] = {}
        self._size = 0
        self.max_size = 0

    def push(self, item: T, priority: float) -> None:
        priority = float(priority)
        bucket = self._buckets.get(priority)
        if bucket is None:
            bucket = deque()
            self._buckets[priority] = bucket
            heapq.heappush(self._keys, priority)
        bucket.append(item)
        self._size += 1
        if self._size > self.max_size:
            self.max_size = self._size

    def pop(self) -> T:
        if not self._size:
            raise IndexError("pop from an empty frontier")
        priority = self._keys[0]
        bucket = self._buckets[priority]
        item = bucket.popleft()
        if not bucket:
            heapq.heappop(self._keys)
            del self._buckets[priority]
        self._size -= 1
        return item

    def peek_priority(self) -> float:
        if not self._size:
            raise IndexError("peek into an empty frontier")
        return self._keys[0]

    def contains(self, item: T, priority: float) -> bool:
        bucket = self._buckets.get(float(priority))
        if bucket is None:
            return False
        return any(queued is item for queued in bucket)

    def __contains__(self, item: object) -> bool:
        return any(queued is item for bucket in self._buckets.values() for queued in bucket)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0


__all__ = ["PriorityFrontier"]
