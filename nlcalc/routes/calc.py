from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from nlcalc.application import get_calculator_service
from nlcalc.core.formatter import format_result
from nlcalc.workers.dispatcher import get_calculation_worker

router = APIRouter(tags=["calculation"])


@router.post("/calculate")
async def calculate(payload: dict) -> dict:
    raw = payload.get("input")
    if not isinstance(raw, str) or not raw.strip():
        raise HTTPException(status_code=400, detail="input is required")

    worker = get_calculation_worker()
    result = await worker.submit(raw)
    body = result.model_dump(mode="json")
    body["formatted"] = format_result(result)
    return body


@router.get("/info")
async def get_info() -> dict:
    service = get_calculator_service()
    return asdict(service.get_info())
