from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Sequence, Type

import numpy as np

from BnBTSP.exceptions import InvalidInput, NodeLimitReached, SearchCancelled, TimeLimitExpired
from BnBTSP.utils.taxonomy import AlgorithmFamily

if TYPE_CHECKING:
    from BnBTSP.utils.cancellation import CancellationToken


@dataclass
class AlgorithmResult:
    """Container capturing the outcome of running a TSP solver."""

    name: str
    path: List[int] | None
    cost: float | None
    elapsed: float
    status: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def optimal(self) -> bool:
        return bool(self.metadata.get("optimal", False))


def current_time() -> float:
    return time.perf_counter()


def remaining_budget(start_time: float, time_limit: float | None) -> float:
    if time_limit is None:
        return float("inf")
    return time_limit - (current_time() - start_time)


def enforce_time_budget(start_time: float, time_limit: float | None) -> None:
    if remaining_budget(start_time, time_limit) <= 0:
        raise TimeLimitExpired("Time budget exhausted")


def compute_cycle_cost(dist_matrix: np.ndarray, cycle: Sequence[int]) -> float:
    """Compute tour cost (including return leg).

    Accepts an open tour or a closed cycle as built by :func:`best_cycle`.
    """
    tour = open_tour(cycle)
    if not tour:
        return float("inf")
    cost = 0.0
    for i in range(len(tour)):
        a = tour[i]
        b = tour[(i + 1) % len(tour)]
        cost += float(dist_matrix[a, b])
    return cost


def best_cycle(points: Sequence[int]) -> List[int]:
    cycle = list(points)
    if cycle and cycle[0] != cycle[-1]:
        cycle.append(cycle[0])
    return cycle


def open_tour(cycle: Sequence[int]) -> List[int]:
    """Drop the repeated start city from a closed cycle."""
    tour = list(cycle)
    if len(tour) > 1 and tour[0] == tour[-1]:
        tour.pop()
    return tour


@dataclass(frozen=True)
class SolverSpec:
    """Metadata describing a solver implementation."""

    name: str
    cls: Type["BaseSolver"]
    family: AlgorithmFamily
    supports_directed: bool = True


class BaseSolver:
    """Common interface for BnBTSP solvers."""

    name: str
    family: AlgorithmFamily
    supports_directed: bool = True

    def solve(
        self,
        graph: np.ndarray,
        time_limit: float | None = 5.0,
        cancel: "CancellationToken | None" = None,
    ) -> AlgorithmResult:  # noqa: D401
        """Solve a TSP instance represented as a distance matrix."""
        raise NotImplementedError

    def __call__(
        self,
        graph: np.ndarray,
        time_limit: float | None = 5.0,
        cancel: "CancellationToken | None" = None,
    ) -> AlgorithmResult:
        return self.solve(graph, time_limit=time_limit, cancel=cancel)


__all__ = [
    "AlgorithmResult",
    "AlgorithmFamily",
    "BaseSolver",
    "InvalidInput",
    "NodeLimitReached",
    "SearchCancelled",
    "SolverSpec",
    "TimeLimitExpired",
    "best_cycle",
    "compute_cycle_cost",
    "current_time",
    "enforce_time_budget",
    "open_tour",
    "remaining_budget",
]
