"""Application services."""

from .calculator import (
    AGENT_NAME,
    VERSION,
    CalculatorService,
    build_calculator_service,
    configure_calculator_service,
    get_calculator_service,
    reset_calculator_state,
)

__all__ = [
    "AGENT_NAME",
    "VERSION",
    "CalculatorService",
    "build_calculator_service",
    "configure_calculator_service",
    "get_calculator_service",
    "reset_calculator_state",
]
