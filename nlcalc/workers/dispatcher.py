from __future__ import annotations

import asyncio
import logging

from nlcalc.application import CalculatorService, get_calculator_service
from nlcalc.core.schema import CalculationResult

logger = logging.getLogger(__name__)


class CalculationWorker:
    """Runs calculations one at a time off the event loop.

    The ledger and the last answer are shared by every request, so the lock
    keeps history order equal to completion order.
    """

    def __init__(self, service: CalculatorService | None = None) -> None:
        self._lock = asyncio.Lock()
        self._service = service

    @property
    def service(self) -> CalculatorService:
        return self._service or get_calculator_service()

    async def submit(self, raw: str) -> CalculationResult:
        async with self._lock:
            logger.debug("processing %r", raw)
            return await asyncio.to_thread(self.service.calculate, raw)

    async def clear_history(self) -> None:
        async with self._lock:
            self.service.clear_history()


_worker: CalculationWorker | None = None


def get_calculation_worker() -> CalculationWorker:
    global _worker
    if _worker is None:
        _worker = CalculationWorker()
    return _worker


def reset_calculation_worker() -> None:
    global _worker
    _worker = None
