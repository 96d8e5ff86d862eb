from __future__ import annotations

from enum import Enum


class AlgorithmFamily(str, Enum):
    EXACT = "exact"
    HEURISTIC = "heuristic"


__all__ = ["AlgorithmFamily"]
