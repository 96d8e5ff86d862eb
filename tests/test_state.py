import itertools

import numpy as np
import pytest

from BnBTSP.matrix import INF, is_closed, prepare_matrix
from BnBTSP.solvers.exact.state import SearchState, expand_state, reduce_state

from conftest import brute_force_cost


def cheapest_completion(costs, state):
    n = costs.shape[0]
    prefix = state.tour
    if state.is_terminal:
        return state.cost
    best = float("inf")
    for perm in itertools.permutations(state.remaining):
        tour = prefix + perm
        cost = sum(float(costs[tour[i], tour[(i + 1) % n]]) for i in range(n))
        best = min(best, cost)
    return best


def test_root_state_bound_on_hand_example(asymmetric_three):
    root = SearchState.root_state(asymmetric_three)
    assert root.bound == pytest.approx(8.0)
    assert root.remaining == (1, 2)
    assert root.path == ()
    assert root.city == 0
    assert root.depth == 1
    assert not root.is_terminal
    assert root.closed_lines == 0


def test_root_state_does_not_touch_input(asymmetric_three):
    original = asymmetric_three.copy()
    SearchState.root_state(asymmetric_three)
    np.testing.assert_array_equal(asymmetric_three, original)


def test_expand_hand_example(asymmetric_three):
    root = SearchState.root_state(asymmetric_three)
    to_one, to_two = expand_state(root, asymmetric_three)

    assert to_one.city == 1 and to_two.city == 2
    assert to_one.bound == pytest.approx(8.0)
    assert to_two.bound == pytest.approx(13.0)
    assert to_one.cost == pytest.approx(1.0)
    assert to_two.cost == pytest.approx(5.0)
    assert to_one.path == (0,) and to_one.remaining == (2,)
    assert to_one.depth == 2

    (done,) = expand_state(to_one, asymmetric_three)
    assert done.is_terminal
    assert done.path == (0, 1, 2)
    assert done.cost == pytest.approx(8.0)
    assert done.bound == done.cost


def test_expansion_is_copy_on_branch(random_matrix):
    costs = prepare_matrix(random_matrix(6, seed=3))
    root = SearchState.root_state(costs)
    before = root.matrix.copy()
    children = expand_state(root, costs)

    np.testing.assert_array_equal(root.matrix, before)
    assert root.remaining == (1, 2, 3, 4, 5)
    for a, b in itertools.combinations(children, 2):
        assert not np.shares_memory(a.matrix, b.matrix)
    for child in children:
        assert not np.shares_memory(child.matrix, root.matrix)
        assert all(is_closed(v) for v in child.matrix[root.city, :])
        assert all(is_closed(v) for v in child.matrix[:, child.city])
        assert is_closed(child.matrix[child.city, root.root])


def test_terminal_state_reduction_adds_nothing():
    matrix = np.array([[INF, 1.0], [1.0, INF]])
    state = SearchState(bound=3.0, remaining=(), matrix=matrix, path=(0, 1), cost=2.0, city=1, depth=2)
    assert state.is_terminal
    assert reduce_state(state) == 0.0


def test_closed_row_marks_state_dead():
    matrix = np.array(
        [
            [INF, 1.0, 1.0],
            [INF, INF, INF],
            [1.0, 1.0, INF],
        ]
    )
    state = SearchState(bound=0.0, remaining=(1, 2), matrix=matrix, path=(), cost=0.0, city=0, depth=1)
    assert is_closed(reduce_state(state))
    assert state.closed_lines >= 1


def test_closed_edges_produce_no_child():
    costs = np.array(
        [
            [INF, INF, 2.0],
            [1.0, INF, 1.0],
            [3.0, 1.0, INF],
        ]
    )
    root = SearchState.root_state(costs)
    children = expand_state(root, costs)
    assert [child.city for child in children] == [2]


@pytest.mark.parametrize("seed", range(4))
def test_bounds_never_exceed_cheapest_completion(random_matrix, seed):
    costs = prepare_matrix(random_matrix(6, seed=seed))
    frontier = [SearchState.root_state(costs)]
    root_bound = frontier[0].bound
    assert 0.0 <= root_bound <= brute_force_cost(costs) + 1e-9
    while frontier:
        state = frontier.pop()
        assert state.bound >= 0.0
        assert state.bound <= cheapest_completion(costs, state) + 1e-9
        if not state.is_terminal:
            frontier.extend(expand_state(state, costs))


def test_asymmetric_bounds_are_admissible():
    rng = np.random.default_rng(11)
    costs = prepare_matrix(rng.integers(1, 50, size=(5, 5)).astype(float))
    stack = [SearchState.root_state(costs)]
    while stack:
        state = stack.pop()
        assert state.bound <= cheapest_completion(costs, state) + 1e-9
        if not state.is_terminal:
            stack.extend(expand_state(state, costs))
