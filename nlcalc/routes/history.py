from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query

from nlcalc.application import get_calculator_service
from nlcalc.workers.dispatcher import get_calculation_worker

router = APIRouter(tags=["history"])


@router.get("/history")
async def get_history(n: int = Query(default=10, ge=0)) -> dict:
    service = get_calculator_service()
    items = [asdict(entry) for entry in service.get_history(n)]
    return {"items": items, "last_answer": service.get_last_answer()}


@router.get("/history/{index}")
async def recall_entry(index: int) -> dict:
    service = get_calculator_service()
    entry = service.recall(index)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"no history entry at index {index}")
    return asdict(entry)


@router.post("/clear-history")
async def clear_history() -> dict:
    await get_calculation_worker().clear_history()
    return {"cleared": True}
