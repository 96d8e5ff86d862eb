from BnBTSP.solvers.exact.branch_and_bound import BranchAndBoundSolver, Incumbent, SearchConfig, SearchStats
from BnBTSP.solvers.exact.frontier import PriorityFrontier
from BnBTSP.solvers.exact.state import SearchState, expand_state, reduce_state

__all__ = [
    "BranchAndBoundSolver",
    "Incumbent",
    "PriorityFrontier",
    "SearchConfig",
    "SearchState",
    "SearchStats",
    "expand_state",
    "reduce_state",
]
