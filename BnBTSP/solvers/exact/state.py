from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from BnBTSP.matrix import INF, is_closed


@dataclass(eq=False)
class SearchState:
    """One node of the branch-and-bound tree.

    ``path`` holds the cities already left behind, ``city`` is where the
    partial tour currently stands. Once a state is terminal ``path`` is the
    complete tour and ``cost`` includes the closing edge back to ``root``.
    The matrix is private to the state; children always work on a copy.
    """

    bound: float
    remaining: Tuple[int, ...]
    matrix: np.ndarray
    path: Tuple[int, ...]
    cost: float
    city: int
    depth: int
    root: int = 0
    is_terminal: bool = False
    closed_lines: int = 0

    def __post_init__(self) -> None:
        self.is_terminal = not self.remaining

    @classmethod
    def root_state(cls, matrix: np.ndarray, root: int = 0) -> "SearchState":
        n = matrix.shape[0]
        remaining = tuple(city for city in range(n) if city != root)
        state = cls(
            bound=0.0,
            remaining=remaining,
            matrix=np.array(matrix, dtype=float, copy=True),
            path=(),
            cost=0.0,
            city=root,
            depth=1,
            root=root,
        )
        state.bound += reduce_state(state)
        return state

    @property
    def tour(self) -> Tuple[int, ...]:
        """Visited cities in order, current city included."""
        if self.is_terminal:
            return self.path
        return self.path + (self.city,)


def reduce_state(state: SearchState) -> float:
    """Row-then-column reduce ``state.matrix`` in place.

    Rows range over the current city and the unvisited cities, columns over
    the unvisited cities and the root (somebody has to close the tour). The
    returned amount is what the reduction adds to the state's bound: 0 for a
    terminal state, ``INF`` when a row or column is fully closed, meaning the
    partial tour cannot be completed at finite cost.
    """
    if not state.remaining:
        state.is_terminal = True
        return 0.0

    rows = np.array((state.city,) + state.remaining)
    cols = np.array(state.remaining + (state.root,))
    block = state.matrix[np.ix_(rows, cols)]

    row_mins = block.min(axis=1)
    closed_rows = np.isinf(row_mins)
    row_mins[closed_rows] = 0.0
    block -= row_mins[:, None]

    col_mins = block.min(axis=0)
    closed_cols = np.isinf(col_mins)
    col_mins[closed_cols] = 0.0
    block -= col_mins[None, :]

    state.matrix[np.ix_(rows, cols)] = block
    state.closed_lines = int(closed_rows.sum() + closed_cols.sum())
    if state.closed_lines:
        return INF
    return float(row_mins.sum() + col_mins.sum())


def expand_state(parent: SearchState, costs: np.ndarray) -> List[SearchState]:
    """Generate one reduced child per edge ``parent.city -> c`` still open.

    ``costs`` is the unreduced matrix; it supplies the real edge costs.
    """
    children: List[SearchState] = []
    src = parent.city
    for dst in parent.remaining:
        edge = float(parent.matrix[src, dst])
        if is_closed(edge):
            continue
        matrix = parent.matrix.copy()
        matrix[src, :] = INF
        matrix[:, dst] = INF
        remaining = tuple(city for city in parent.remaining if city != dst)
        if remaining:
            matrix[dst, parent.root] = INF

        child = SearchState(
            bound=parent.bound + edge,
            remaining=remaining,
            matrix=matrix,
            path=parent.path + (src,),
            cost=parent.cost + float(costs[src, dst]),
            city=dst,
            depth=parent.depth + 1,
            root=parent.root,
        )
        child.bound += reduce_state(child)

        if child.is_terminal:
            child.path = child.path + (dst,)
            child.cost += float(costs[dst, parent.root])
            child.bound = child.cost
        children.append(child)
    return children


__all__ = ["SearchState", "expand_state", "reduce_state"]
