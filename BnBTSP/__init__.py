from BnBTSP.core import BnBTSP, Tour
from BnBTSP.exceptions import InvalidInput, NodeLimitReached, SearchCancelled, TimeLimitExpired
from BnBTSP.geometry import City, euclidean, manhattan, to_cities
from BnBTSP.matrix import INF, build_matrix, row_minima
from BnBTSP.solvers import (
    AlgorithmResult,
    BaseSolver,
    SOLVER_FAMILIES,
    SOLVER_REGISTRY,
    SOLVER_SPECS,
    SOLVER_SUPPORT,
    get_solver,
)
from BnBTSP.solvers.exact import BranchAndBoundSolver, PriorityFrontier, SearchConfig, SearchState
from BnBTSP.utils.cancellation import CancellationToken, run_in_background
from BnBTSP.utils.taxonomy import AlgorithmFamily

__all__ = [
    "BnBTSP",
    "AlgorithmResult",
    "AlgorithmFamily",
    "BaseSolver",
    "BranchAndBoundSolver",
    "CancellationToken",
    "City",
    "INF",
    "InvalidInput",
    "NodeLimitReached",
    "PriorityFrontier",
    "SOLVER_FAMILIES",
    "SOLVER_REGISTRY",
    "SOLVER_SPECS",
    "SOLVER_SUPPORT",
    "SearchCancelled",
    "SearchConfig",
    "SearchState",
    "TimeLimitExpired",
    "Tour",
    "build_matrix",
    "euclidean",
    "get_solver",
    "manhattan",
    "row_minima",
    "run_in_background",
    "to_cities",
]
