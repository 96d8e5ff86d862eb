from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

import numpy as np

from BnBTSP.matrix import prepare_matrix
from BnBTSP.solvers.base import (
    AlgorithmResult,
    BaseSolver,
    SearchCancelled,
    TimeLimitExpired,
    best_cycle,
    compute_cycle_cost,
    current_time,
    enforce_time_budget,
)
from BnBTSP.utils.taxonomy import AlgorithmFamily

if TYPE_CHECKING:
    from BnBTSP.utils.cancellation import CancellationToken


def iter_nearest_neighbor(dist_matrix: np.ndarray, start: int = 0) -> Iterator[int]:
    """Yield the cities after ``start`` in greedy order; ties go to the lower index."""
    n = dist_matrix.shape[0]
    last = start
    unvisited = [city for city in range(n) if city != start]
    while unvisited:
        _, last = min((float(dist_matrix[last, city]), city) for city in unvisited)
        unvisited.remove(last)
        yield last


def nearest_neighbor_tour(dist_matrix: np.ndarray, start: int = 0) -> list[int]:
    """Greedy open tour from ``start``."""
    return [start, *iter_nearest_neighbor(dist_matrix, start)]


class SimpleNearestNeighborSolver(BaseSolver):
    name = "simple_nearest_neighbor"
    family = AlgorithmFamily.HEURISTIC
    supports_directed = True

    def __init__(self, start: int = 0):
        self.start = start

    def solve(
        self,
        graph: np.ndarray,
        time_limit: float | None = 5.0,
        cancel: "CancellationToken | None" = None,
    ) -> AlgorithmResult:
        dist_matrix = prepare_matrix(graph)
        start_time = current_time()
        n = dist_matrix.shape[0]
        visited = [self.start % n]
        status = "complete"

        try:
            steps = iter_nearest_neighbor(dist_matrix, visited[0])
            for _ in range(1, n):
                enforce_time_budget(start_time, time_limit)
                if cancel is not None:
                    cancel.raise_if_cancelled()
                visited.append(next(steps))
        except TimeLimitExpired:
            status = "timeout"
        except SearchCancelled:
            status = "cancelled"

        if len(visited) < n:
            # Finish in index order so the caller still gets a full tour.
            visited.extend(city for city in range(n) if city not in visited)

        cycle = best_cycle(visited)
        return AlgorithmResult(
            name=self.name,
            path=cycle,
            cost=compute_cycle_cost(dist_matrix, cycle),
            elapsed=current_time() - start_time,
            status=status,
            metadata={"nodes_visited": len(visited)},
        )


__all__ = ["SimpleNearestNeighborSolver", "iter_nearest_neighbor", "nearest_neighbor_tour"]
