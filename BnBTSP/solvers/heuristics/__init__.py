from BnBTSP.solvers.heuristics.index_order import IndexOrderSolver
from BnBTSP.solvers.heuristics.simple_nearest_neighbor import SimpleNearestNeighborSolver

__all__ = [
    "IndexOrderSolver",
    "SimpleNearestNeighborSolver",
]
