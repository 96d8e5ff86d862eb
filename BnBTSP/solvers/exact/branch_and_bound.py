from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from BnBTSP.matrix import prepare_matrix, row_minima
from BnBTSP.solvers.base import (
    AlgorithmResult,
    BaseSolver,
    InvalidInput,
    NodeLimitReached,
    SearchCancelled,
    TimeLimitExpired,
    best_cycle,
    compute_cycle_cost,
    current_time,
    enforce_time_budget,
    open_tour,
)
from BnBTSP.solvers.exact.frontier import PriorityFrontier
from BnBTSP.solvers.exact.state import SearchState, expand_state
from BnBTSP.solvers.heuristics import IndexOrderSolver, SimpleNearestNeighborSolver
from BnBTSP.utils.cancellation import CancellationToken
from BnBTSP.utils.taxonomy import AlgorithmFamily

logger = logging.getLogger(__name__)

TraceHook = Callable[[str, SearchState, float], None]

INITIAL_TOURS = {
    "index_order": IndexOrderSolver,
    "nearest_neighbor": SimpleNearestNeighborSolver,
}


@dataclass
class SearchConfig:
    """Knobs for :class:`BranchAndBoundSolver`.

    ``max_nodes`` caps the number of expanded states; the frontier can grow
    exponentially with the number of cities, so large instances should set
    either it or a time limit.
    """

    root: int = 0
    initial_tour: str = "index_order"
    max_nodes: Optional[int] = None
    log_every: int = 10_000
    trace: Optional[TraceHook] = None


@dataclass
class SearchStats:
    expanded: int = 0
    created: int = 0
    pruned: int = 0
    solutions: int = 0
    max_frontier: int = 0


@dataclass
class Incumbent:
    """Best complete tour found so far (BSSF)."""

    tour: List[int]
    cost: float
    history: List[Tuple[float, float]] = field(default_factory=list)

    def offer(self, tour: Sequence[int], cost: float, elapsed: float) -> bool:
        if cost >= self.cost:
            return False
        self.tour = list(tour)
        self.cost = cost
        self.history.append((elapsed, cost))
        return True


class BranchAndBoundSolver(BaseSolver):
    """Best-first branch and bound with reduced-matrix lower bounds."""

    name = "branch_and_bound"
    family = AlgorithmFamily.EXACT
    supports_directed = True

    def __init__(self, config: SearchConfig | None = None, **overrides):
        config = config or SearchConfig()
        if overrides:
            config = replace(config, **overrides)
        if config.initial_tour not in INITIAL_TOURS:
            raise KeyError(f"Unknown initial tour heuristic: {config.initial_tour}")
        self.config = config

    def solve(
        self,
        graph: np.ndarray,
        time_limit: float | None = 5.0,
        cancel: CancellationToken | None = None,
    ) -> AlgorithmResult:
        costs = prepare_matrix(graph)
        n = costs.shape[0]
        root = self.config.root
        if not 0 <= root < n:
            raise InvalidInput(f"Root city {root} outside 0..{n - 1}")

        start_time = current_time()
        incumbent = self._initial_incumbent(costs, root)
        initial_cost = incumbent.cost
        minima = row_minima(costs)
        stats = SearchStats()

        root_state = SearchState.root_state(costs, root)
        frontier: PriorityFrontier[SearchState] = PriorityFrontier()
        frontier.push(root_state, root_state.bound)
        stats.created = 1
        logger.debug(
            "branch and bound on %d cities: root bound %.4f, initial tour %.4f",
            n,
            root_state.bound,
            initial_cost,
        )

        status = "optimal"
        try:
            self._search(costs, root_state.bound, minima, frontier, incumbent, stats, start_time, time_limit, cancel)
        except TimeLimitExpired:
            status = "timeout"
        except SearchCancelled:
            status = "cancelled"
        except NodeLimitReached:
            status = "node_limit"

        if status == "optimal" and not np.isfinite(incumbent.cost):
            status = "infeasible"

        stats.max_frontier = frontier.max_size
        elapsed = current_time() - start_time
        cycle = best_cycle(incumbent.tour)
        logger.info(
            "branch and bound %s after %.3fs: cost %.4f, %d expanded, %d pruned",
            status,
            elapsed,
            incumbent.cost,
            stats.expanded,
            stats.pruned,
        )
        return AlgorithmResult(
            name=self.name,
            path=cycle,
            cost=incumbent.cost,
            elapsed=elapsed,
            status=status,
            metadata={
                "optimal": status == "optimal",
                "root_bound": root_state.bound,
                "initial_cost": initial_cost,
                "history": list(incumbent.history),
                "frontier_remaining": len(frontier),
                **asdict(stats),
            },
        )

    def _initial_incumbent(self, costs: np.ndarray, root: int) -> Incumbent:
        seed = INITIAL_TOURS[self.config.initial_tour](start=root).solve(costs, time_limit=None)
        tour = open_tour(seed.path or [])
        cost = compute_cycle_cost(costs, tour)
        return Incumbent(tour=tour, cost=cost, history=[(0.0, cost)])

    def _search(
        self,
        costs: np.ndarray,
        root_bound: float,
        minima: np.ndarray,
        frontier: PriorityFrontier[SearchState],
        incumbent: Incumbent,
        stats: SearchStats,
        start_time: float,
        time_limit: float | None,
        cancel: CancellationToken | None,
    ) -> None:
        trace = self.config.trace
        max_nodes = self.config.max_nodes
        log_every = self.config.log_every

        while frontier and incumbent.cost > root_bound:
            enforce_time_budget(start_time, time_limit)
            if cancel is not None:
                cancel.raise_if_cancelled()
            if max_nodes is not None and stats.expanded >= max_nodes:
                raise NodeLimitReached(f"Expanded {stats.expanded} states")

            state = frontier.pop()
            if state.bound >= incumbent.cost:
                stats.pruned += 1
                if trace is not None:
                    trace("prune", state, incumbent.cost)
                continue

            if trace is not None:
                trace("expand", state, incumbent.cost)
            children = expand_state(state, costs)
            stats.expanded += 1
            stats.created += len(children)
            if log_every and stats.expanded % log_every == 0:
                logger.debug(
                    "expanded %d states, frontier %d, best %.4f",
                    stats.expanded,
                    len(frontier),
                    incumbent.cost,
                )

            for child in children:
                if child.bound >= incumbent.cost:
                    stats.pruned += 1
                    if trace is not None:
                        trace("prune", child, incumbent.cost)
                elif child.is_terminal:
                    if incumbent.offer(child.path, child.cost, current_time() - start_time):
                        stats.solutions += 1
                        logger.debug("new best tour %.4f at depth %d", child.cost, child.depth)
                        if trace is not None:
                            trace("improve", child, incumbent.cost)
                else:
                    priority = child.bound + float(minima[list(child.remaining)].sum())
                    frontier.push(child, priority)


__all__ = ["BranchAndBoundSolver", "Incumbent", "SearchConfig", "SearchStats"]
