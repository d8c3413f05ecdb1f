"""Domain layer definitions."""

from .history import HistoryEntry, LedgerState, SessionInfo

__all__ = [
    "HistoryEntry",
    "LedgerState",
    "SessionInfo",
]
