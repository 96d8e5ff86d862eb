import math

import numpy as np
import pytest

from BnBTSP.exceptions import InvalidInput
from BnBTSP.geometry import City, coordinates_array, euclidean, get_metric, manhattan, to_cities


def test_city_cost_defaults_to_euclidean():
    assert City(0, 0).cost_to(City(3, 4)) == pytest.approx(5.0)


def test_city_cost_accepts_custom_metric():
    uphill = lambda a, b: max(0.0, b.y - a.y) * 2 + euclidean(a, b)  # noqa: E731
    low, high = City(0, 0), City(0, 1)
    assert low.cost_to(high, uphill) == pytest.approx(3.0)
    assert high.cost_to(low, uphill) == pytest.approx(1.0)


def test_city_is_immutable():
    city = City(1, 2)
    with pytest.raises(AttributeError):
        city.x = 5


def test_manhattan_metric():
    assert manhattan(City(0, 0), City(3, 4)) == pytest.approx(7.0)


def test_get_metric_by_name():
    assert get_metric("Euclidean") is euclidean
    assert get_metric("manhattan") is manhattan
    with pytest.raises(KeyError):
        get_metric("chebyshev")
    with pytest.raises(KeyError):
        get_metric(5)


def test_to_cities_accepts_pairs_cities_and_arrays():
    from_pairs = to_cities([(0, 0), (1, 2)])
    from_cities = to_cities([City(0, 0), City(1, 2)])
    from_array = to_cities(np.array([[0.0, 0.0], [1.0, 2.0]]))
    assert from_pairs == from_cities == from_array == [City(0.0, 0.0), City(1.0, 2.0)]


@pytest.mark.parametrize("points", [None, [], [(0, 0)]])
def test_to_cities_rejects_fewer_than_two(points):
    with pytest.raises(InvalidInput):
        to_cities(points)


@pytest.mark.parametrize(
    "points",
    [
        [(0, 0), (1,)],
        [(0, 0), ("a", 1)],
        [(0, 0), (math.nan, 1)],
        [(0, 0), (math.inf, 1)],
        42,
    ],
)
def test_to_cities_rejects_malformed_coordinates(points):
    with pytest.raises(InvalidInput):
        to_cities(points)


def test_duplicate_points_are_allowed():
    cities = to_cities([(1, 1), (1, 1)])
    assert cities[0].cost_to(cities[1]) == 0.0


def test_coordinates_array_shape():
    coords = coordinates_array([City(0, 1), City(2, 3), City(4, 5)])
    assert coords.shape == (3, 2)
    assert coords[2].tolist() == [4.0, 5.0]
