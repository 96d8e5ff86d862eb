from __future__ import annotations

from BnBTSP.solvers.base import AlgorithmResult, BaseSolver, SolverSpec
from BnBTSP.solvers.exact import BranchAndBoundSolver
from BnBTSP.solvers.heuristics import IndexOrderSolver, SimpleNearestNeighborSolver
from BnBTSP.utils.taxonomy import AlgorithmFamily

SOLVER_SPECS: dict[str, SolverSpec] = {
    solver_cls.name: SolverSpec(
        name=solver_cls.name,
        cls=solver_cls,
        family=solver_cls.family,
        supports_directed=solver_cls.supports_directed,
    )
    for solver_cls in (BranchAndBoundSolver, IndexOrderSolver, SimpleNearestNeighborSolver)
}

SOLVER_REGISTRY: dict[str, type[BaseSolver]] = {name: spec.cls for name, spec in SOLVER_SPECS.items()}
SOLVER_FAMILIES: dict[str, AlgorithmFamily] = {name: spec.family for name, spec in SOLVER_SPECS.items()}
SOLVER_SUPPORT: dict[str, bool] = {name: spec.supports_directed for name, spec in SOLVER_SPECS.items()}


def get_solver(name: str, **kwargs) -> BaseSolver:
    solver_cls = SOLVER_REGISTRY.get(name)
    if solver_cls is None:
        raise KeyError(f"Unknown solver: {name}")
    return solver_cls(**kwargs)


__all__ = [
    "AlgorithmResult",
    "BaseSolver",
    "SOLVER_FAMILIES",
    "SOLVER_REGISTRY",
    "SOLVER_SPECS",
    "SOLVER_SUPPORT",
    "AlgorithmFamily",
    "get_solver",
    "BranchAndBoundSolver",
    "IndexOrderSolver",
    "SimpleNearestNeighborSolver",
]
