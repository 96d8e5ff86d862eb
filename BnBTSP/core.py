from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import numpy as np

from BnBTSP.exceptions import InvalidInput
from BnBTSP.geometry import City, coordinates_array, get_metric, to_cities
from BnBTSP.matrix import build_matrix, matrix_from_coordinates, validate_matrix
from BnBTSP.solvers import AlgorithmResult
from BnBTSP.solvers.base import open_tour
from BnBTSP.solvers.exact import BranchAndBoundSolver, SearchConfig
from BnBTSP.utils.cancellation import CancellationToken


@dataclass
class Tour:
    """A tour handed back to the caller; implicitly closed back to ``cities[0]``."""

    cities: List[City] | None
    order: List[int]
    cost: float
    optimal: bool
    status: str
    result: AlgorithmResult


class BnBTSP:
    """Caller-facing entry point: city set in, tour and cost out."""

    def __init__(self, config: SearchConfig | None = None, **overrides):
        self.solver = BranchAndBoundSolver(config, **overrides)

    def solve(
        self,
        problem_data: Dict[str, Any] | Sequence[Any] | np.ndarray,
        time_budget: float | None = 60.0,
        cancel: CancellationToken | None = None,
    ) -> Tour:
        start_time = time.perf_counter()
        cities, dist_matrix = self._prepare(problem_data)
        result = self.solver.solve(dist_matrix, time_limit=time_budget, cancel=cancel)
        result.metadata["wallclock_total"] = time.perf_counter() - start_time

        order = open_tour(result.path or [])
        return Tour(
            cities=[cities[i] for i in order] if cities is not None else None,
            order=order,
            cost=float(result.cost) if result.cost is not None else float("inf"),
            optimal=result.optimal,
            status=result.status,
            result=result,
        )

    def _prepare(self, problem_data: Any) -> tuple[List[City] | None, np.ndarray]:
        if not isinstance(problem_data, dict):
            cities = to_cities(problem_data)
            return cities, matrix_from_coordinates(coordinates_array(cities))

        if problem_data.get("distance_matrix") is not None:
            dist_matrix = validate_matrix(problem_data["distance_matrix"])
            cities = None
            if problem_data.get("coordinates") is not None:
                cities = to_cities(problem_data["coordinates"])
                if len(cities) != dist_matrix.shape[0]:
                    raise InvalidInput("Coordinates and distance matrix disagree on the number of cities")
            return cities, dist_matrix

        if problem_data.get("coordinates") is None:
            raise InvalidInput("Problem data must contain either 'distance_matrix' or 'coordinates'.")
        cities = to_cities(problem_data["coordinates"])
        metric = problem_data.get("metric") or "euclidean"
        if callable(metric):
            return cities, build_matrix(cities, metric)
        try:
            get_metric(metric)
        except KeyError as exc:
            raise InvalidInput(str(exc)) from exc
        return cities, matrix_from_coordinates(coordinates_array(cities), metric)


__all__ = ["BnBTSP", "Tour"]
