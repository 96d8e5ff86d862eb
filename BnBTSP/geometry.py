from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

import numpy as np

from BnBTSP.exceptions import InvalidInput


@dataclass(frozen=True)
class City:
    """A point in the plane. Travel cost between cities is directional."""

    x: float
    y: float

    def cost_to(self, destination: "City", metric: "Metric | None" = None) -> float:
        if metric is None:
            metric = euclidean
        return metric(self, destination)


Metric = Callable[[City, City], float]


def euclidean(a: City, b: City) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def manhattan(a: City, b: City) -> float:
    return abs(a.x - b.x) + abs(a.y - b.y)


METRICS: Dict[str, Metric] = {
    "euclidean": euclidean,
    "manhattan": manhattan,
}


def get_metric(name: str) -> Metric:
    if name is None:
        name = "euclidean"
    if not isinstance(name, str):
        raise KeyError(f"Metric name must be a string, got {type(name).__name__}")
    metric = METRICS.get(name.lower())
    if metric is None:
        raise KeyError(f"Unknown metric: {name}")
    return metric


def to_cities(points: Any) -> List[City]:
    """Normalise a point collection into a list of :class:`City`.

    Accepts ``City`` instances, ``(x, y)`` pairs or an ``(n, 2)`` array.
    """
    if points is None:
        raise InvalidInput("No cities supplied")
    if isinstance(points, np.ndarray):
        points = points.tolist()
    try:
        items = list(points)
    except TypeError as exc:
        raise InvalidInput("Cities must be an iterable of points") from exc
    if len(items) < 2:
        raise InvalidInput(f"At least two cities are required, got {len(items)}")

    cities: List[City] = []
    for idx, item in enumerate(items):
        if isinstance(item, City):
            x, y = item.x, item.y
        else:
            try:
                x, y = item
                x, y = float(x), float(y)
            except (TypeError, ValueError) as exc:
                raise InvalidInput(f"City {idx} is not an (x, y) pair: {item!r}") from exc
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidInput(f"City {idx} has non-finite coordinates: ({x}, {y})")
        cities.append(item if isinstance(item, City) else City(x, y))
    return cities


def coordinates_array(cities: Sequence[City]) -> np.ndarray:
    return np.asarray([(city.x, city.y) for city in cities], dtype=float)


__all__ = [
    "City",
    "METRICS",
    "Metric",
    "coordinates_array",
    "euclidean",
    "get_metric",
    "manhattan",
    "to_cities",
]
