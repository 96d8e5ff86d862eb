from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Tuple

import numpy as np

from BnBTSP.exceptions import SearchCancelled

if TYPE_CHECKING:
    from BnBTSP.solvers.base import AlgorithmResult, BaseSolver


class CancellationToken:
    """Cooperative stop flag shared between a caller and a running solver."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SearchCancelled("Search cancelled by caller")


def run_in_background(
    solver: "BaseSolver",
    graph: np.ndarray,
    time_limit: float | None = None,
) -> Tuple["Future[AlgorithmResult]", CancellationToken]:
    """Run ``solver`` on a worker thread; cancel through the returned token."""
    token = CancellationToken()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="bnbtsp-search")
    future = executor.submit(solver.solve, graph, time_limit=time_limit, cancel=token)
    executor.shutdown(wait=False)
    return future, token


__all__ = ["CancellationToken", "run_in_background"]
