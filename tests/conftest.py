from __future__ import annotations

import itertools
import pathlib
import sys

import numpy as np
import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from BnBTSP.matrix import INF, matrix_from_coordinates


def brute_force_cost(matrix: np.ndarray, root: int = 0) -> float:
    n = matrix.shape[0]
    others = [city for city in range(n) if city != root]
    best = float("inf")
    for perm in itertools.permutations(others):
        tour = (root,) + perm
        cost = sum(float(matrix[tour[i], tour[(i + 1) % n]]) for i in range(n))
        best = min(best, cost)
    return best


def closed_path_cost(matrix: np.ndarray, path) -> float:
    return sum(float(matrix[a, b]) for a, b in zip(path, path[1:]))


def assert_valid_cycle(path, n: int) -> None:
    assert path[0] == path[-1]
    assert sorted(path[:-1]) == list(range(n))


def random_points(n: int, seed: int, scale: float = 100.0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.random((n, 2)) * scale


@pytest.fixture
def square():
    return [(0, 0), (0, 10), (10, 10), (10, 0)]


@pytest.fixture
def asymmetric_three():
    return np.array(
        [
            [INF, 1.0, 5.0],
            [2.0, INF, 3.0],
            [4.0, 6.0, INF],
        ]
    )


@pytest.fixture
def random_matrix():
    def _make(n: int, seed: int) -> np.ndarray:
        return matrix_from_coordinates(random_points(n, seed))

    return _make
