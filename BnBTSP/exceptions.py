from __future__ import annotations


class InvalidInput(ValueError):
    """Raised when a city set or cost matrix cannot describe a tour."""


class TimeLimitExpired(Exception):
    """Raised when an algorithm exceeds the allotted wall clock budget."""


class SearchCancelled(Exception):
    """Raised when a caller asked a running search to stop."""


class NodeLimitReached(Exception):
    """Raised when a search has expanded its configured number of states."""


__all__ = ["InvalidInput", "NodeLimitReached", "SearchCancelled", "TimeLimitExpired"]
