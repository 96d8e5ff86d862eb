from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from BnBTSP.exceptions import InvalidInput
from BnBTSP.geometry import City, Metric, euclidean

# Closed edge marker. inf - m stays inf for any finite m.
INF = np.inf


def is_closed(value: float) -> bool:
    return bool(np.isinf(value))


def build_matrix(cities: Sequence[City], metric: Metric | None = None) -> np.ndarray:
    """Cost matrix with ``cost(city_i -> city_j)`` off the diagonal and ``INF`` on it."""
    if metric is None:
        metric = euclidean
    n = len(cities)
    if n < 2:
        raise InvalidInput(f"At least two cities are required, got {n}")
    matrix = np.empty((n, n), dtype=float)
    for i, src in enumerate(cities):
        for j, dst in enumerate(cities):
            if i == j:
                matrix[i, j] = INF
                continue
            cost = float(src.cost_to(dst, metric))
            if cost < 0 or np.isnan(cost):
                raise InvalidInput(f"Metric returned invalid cost {cost} for edge {i}->{j}")
            matrix[i, j] = cost
    return matrix


def matrix_from_coordinates(coordinates: np.ndarray, metric: str = "euclidean") -> np.ndarray:
    coords = np.asarray(coordinates, dtype=float)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise InvalidInput(f"Coordinates must have shape (n, 2), got {coords.shape}")
    if not np.isfinite(coords).all():
        raise InvalidInput("Coordinates must be finite")
    if metric is None:
        metric = "euclidean"
    if not isinstance(metric, str):
        raise InvalidInput(f"Metric name must be a string, got {type(metric).__name__}")
    diff = coords[:, None, :] - coords[None, :, :]
    if metric.lower() == "manhattan":
        matrix = np.abs(diff).sum(axis=-1)
    else:
        matrix = np.linalg.norm(diff, axis=-1)
    np.fill_diagonal(matrix, INF)
    return matrix


def validate_matrix(graph: Any) -> np.ndarray:
    """Return ``graph`` as a float matrix or raise :class:`InvalidInput`."""
    if graph is None:
        raise InvalidInput("No cost matrix supplied")
    try:
        dist_matrix = np.asarray(graph, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Cost matrix is not numeric: {exc}") from exc
    if dist_matrix.ndim != 2 or dist_matrix.shape[0] != dist_matrix.shape[1]:
        raise InvalidInput(f"Cost matrix must be square, got shape {dist_matrix.shape}")
    if dist_matrix.shape[0] < 2:
        raise InvalidInput(f"At least two cities are required, got {dist_matrix.shape[0]}")
    if np.isnan(dist_matrix).any():
        raise InvalidInput("Cost matrix contains NaN entries")
    off_diagonal = ~np.eye(dist_matrix.shape[0], dtype=bool)
    if (dist_matrix[off_diagonal] < 0).any():
        raise InvalidInput("Cost matrix contains negative costs")
    return dist_matrix


def prepare_matrix(graph: np.ndarray) -> np.ndarray:
    """Validated private copy of ``graph`` with the diagonal closed."""
    matrix = validate_matrix(graph).copy()
    np.fill_diagonal(matrix, INF)
    return matrix


def row_minima(matrix: np.ndarray) -> np.ndarray:
    """Cheapest outbound cost per city, self excluded."""
    masked = np.array(matrix, dtype=float, copy=True)
    np.fill_diagonal(masked, INF)
    return masked.min(axis=1)


__all__ = [
    "INF",
    "build_matrix",
    "is_closed",
    "matrix_from_coordinates",
    "prepare_matrix",
    "row_minima",
    "validate_matrix",
]
