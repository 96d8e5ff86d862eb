import pytest

from BnBTSP.exceptions import SearchCancelled
from BnBTSP.matrix import matrix_from_coordinates
from BnBTSP.solvers.exact import BranchAndBoundSolver
from BnBTSP.utils.cancellation import CancellationToken, run_in_background

from conftest import assert_valid_cycle, closed_path_cost, random_points


def test_token_lifecycle():
    token = CancellationToken()
    assert not token.cancelled
    token.raise_if_cancelled()
    token.cancel()
    assert token.cancelled
    with pytest.raises(SearchCancelled):
        token.raise_if_cancelled()


def test_background_search_can_be_cancelled():
    matrix = matrix_from_coordinates(random_points(16, seed=30))
    future, token = run_in_background(BranchAndBoundSolver(), matrix, time_limit=60.0)
    token.cancel()
    result = future.result(timeout=120)
    assert result.status in {"cancelled", "optimal"}
    assert result.optimal == (result.status == "optimal")
    assert_valid_cycle(result.path, 16)
    assert result.cost == pytest.approx(closed_path_cost(matrix, result.path))


def test_background_search_runs_to_completion():
    matrix = matrix_from_coordinates(random_points(6, seed=31))
    future, _ = run_in_background(BranchAndBoundSolver(), matrix)
    result = future.result(timeout=60)
    assert result.status == "optimal"


def test_cancel_mid_search_returns_costed_tour():
    matrix = matrix_from_coordinates(random_points(14, seed=32))
    token = CancellationToken()
    events = []

    def trace(event, state, incumbent_cost):
        events.append(event)
        if len(events) >= 20:
            token.cancel()

    result = BranchAndBoundSolver(trace=trace).solve(matrix, time_limit=None, cancel=token)
    assert result.status == "cancelled"
    assert not result.optimal
    assert result.metadata["expanded"] > 0
    assert_valid_cycle(result.path, 14)
    assert result.cost == pytest.approx(closed_path_cost(matrix, result.path))
    assert result.cost <= result.metadata["initial_cost"]
