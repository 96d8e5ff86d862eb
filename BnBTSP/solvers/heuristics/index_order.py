from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from BnBTSP.matrix import prepare_matrix
from BnBTSP.solvers.base import (
    AlgorithmResult,
    BaseSolver,
    best_cycle,
    compute_cycle_cost,
    current_time,
)
from BnBTSP.solvers.heuristics.simple_nearest_neighbor import nearest_neighbor_tour
from BnBTSP.utils.taxonomy import AlgorithmFamily

if TYPE_CHECKING:
    from BnBTSP.utils.cancellation import CancellationToken


def index_order_tour(n: int, start: int = 0) -> list[int]:
    """Cities in index order, rotated to begin at ``start``."""
    return [(start + offset) % n for offset in range(n)]


class IndexOrderSolver(BaseSolver):
    """Visit cities in the order they were given.

    Cheap initial upper bound for branch and bound. When the index-order
    tour uses a closed edge it falls back to nearest neighbour.
    """

    name = "index_order"
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
        start = self.start % n

        cycle = best_cycle(index_order_tour(n, start))
        cost = compute_cycle_cost(dist_matrix, cycle)
        fallback = False
        if not np.isfinite(cost):
            cycle = best_cycle(nearest_neighbor_tour(dist_matrix, start))
            cost = compute_cycle_cost(dist_matrix, cycle)
            fallback = True

        return AlgorithmResult(
            name=self.name,
            path=cycle,
            cost=cost,
            elapsed=current_time() - start_time,
            status="complete",
            metadata={"fallback_nearest_neighbor": fallback},
        )


__all__ = ["IndexOrderSolver", "index_order_tour"]
