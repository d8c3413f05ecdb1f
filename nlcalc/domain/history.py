"""Domain entities for the calculation ledger."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Immutable snapshot of one successful calculation."""

    input: str
    expression: str
    operation_type: str
    result: float | str
    timestamp: str


@dataclass(slots=True)
class LedgerState:
    """Bounded history plus the last numeric answer of a session."""

    entries: deque[HistoryEntry]
    last_answer: float | None = None

    @classmethod
    def empty(cls, limit: int) -> "LedgerState":
        return cls(entries=deque(maxlen=limit))


@dataclass(slots=True)
class SessionInfo:
    name: str
    version: str
    supported_operations: list[str] = field(default_factory=list)
    capabilities: list[str] = field(default_factory=list)
