"""Infrastructure layer for the calculation ledger."""
from __future__ import annotations

import threading
from typing import Protocol

from nlcalc.core.settings import DEFAULT_HISTORY_LIMIT
from nlcalc.domain import HistoryEntry, LedgerState


class HistoryRepository(Protocol):
    """Persistence contract for the ledger and the last-answer slot."""

    @property
    def limit(self) -> int: ...

    def record(self, entry: HistoryEntry, *, answer: float | None = None) -> None: ...

    def get_history(self, n: int | None = None) -> list[HistoryEntry]: ...

    def get_entry(self, index: int) -> HistoryEntry | None: ...

    def get_last_answer(self) -> float | None: ...

    def clear(self) -> None: ...


class InMemoryHistoryRepository:
    """Process-lifetime ledger, oldest entries evicted first.

    Writes come from worker threads while HTTP reads run on the event loop,
    so every access to the state goes through one lock.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self._limit = limit
        self._state = LedgerState.empty(limit)
        self._lock = threading.RLock()

    @property
    def limit(self) -> int:
        return self._limit

    def record(self, entry: HistoryEntry, *, answer: float | None = None) -> None:
        """Append ``entry`` and, for numeric results, replace the last answer."""

        with self._lock:
            self._state.entries.append(entry)
            if answer is not None:
                self._state.last_answer = answer

    def get_history(self, n: int | None = None) -> list[HistoryEntry]:
        """Return the ``n`` most recent entries, newest first."""

        with self._lock:
            newest_first = list(reversed(self._state.entries))
        if n is None:
            return newest_first
        return newest_first[: max(n, 0)]

    def get_entry(self, index: int) -> HistoryEntry | None:
        """1-based lookup where 1 is the most recent entry."""

        with self._lock:
            if index < 1 or index > len(self._state.entries):
                return None
            return self._state.entries[-index]

    def get_last_answer(self) -> float | None:
        with self._lock:
            return self._state.last_answer

    def clear(self) -> None:
        with self._lock:
            self._state = LedgerState.empty(self._limit)

    def __len__(self) -> int:
        with self._lock:
            return len(self._state.entries)
