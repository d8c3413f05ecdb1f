from __future__ import annotations

from nlcalc.core.schema import CalculationResult, PlotArtifact


def format_number(value: float) -> str:
    """Fixed point with six decimals, trailing zeros and a dangling point removed."""

    text = f"{value:.6f}".rstrip("0").rstrip(".")
    if text in {"-0", ""}:
        return "0"
    return text


def format_value(value: float | PlotArtifact | str | None) -> str:
    if isinstance(value, PlotArtifact):
        return value.path
    if isinstance(value, (int, float)):
        return format_number(float(value))
    return "" if value is None else str(value)


def format_result(result: CalculationResult) -> str:
    if not result.success:
        return f"❌ Error: {result.error}"

    value = result.result
    if result.operation_type == "graphing" and isinstance(value, PlotArtifact):
        return f"✅ Chart saved: {value.path} ({value.points} points)"
    if result.operation_type == "unit conversion" and result.to_unit:
        return f"✅ Result: {format_value(value)} {result.to_unit}"
    return f"✅ Result: {format_value(value)}"


def format_details(result: CalculationResult) -> list[str]:
    if not result.success:
        return []
    return [f"Expression: {result.expression}", f"Operation: {result.operation_type}"]
