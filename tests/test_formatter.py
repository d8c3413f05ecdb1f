import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from nlcalc.core.formatter import format_details, format_number, format_result
from nlcalc.core.schema import CalculationResult, ConversionOperation, PlotArtifact


@pytest.mark.parametrize(
    "value, text",
    [
        (14.0, "14"),
        (0.1 + 0.2, "0.3"),
        (3.75, "3.75"),
        (1 / 3, "0.333333"),
        (-2.5, "-2.5"),
        (-0.0000001, "0"),
        (1234.5678901, "1234.56789"),
        (0.0, "0"),
    ],
)
def test_format_number(value, text):
    assert format_number(value) == text


def test_format_plain_result():
    result = CalculationResult(
        success=True, input="2 + 3", expression="2 + 3", operation_type="arithmetic", result=5.0
    )
    assert format_result(result) == "✅ Result: 5"
    assert format_details(result) == ["Expression: 2 + 3", "Operation: arithmetic"]


def test_format_conversion_appends_target_unit():
    operation = ConversionOperation(value=32, from_unit="fahrenheit", to_unit="celsius", category="temperature")
    result = CalculationResult(
        success=True,
        input="convert 32 fahrenheit to celsius",
        expression=operation.canonical_expression(),
        operation_type="unit conversion",
        operation=operation,
        result=0.0,
    )
    assert result.to_unit == "celsius"
    assert format_result(result) == "✅ Result: 0 celsius"


def test_format_graphing_shows_artifact():
    artifact = PlotArtifact(kind="function", path="plots/function_1.html", title="y = x^2", points=101, requested=101)
    result = CalculationResult(
        success=True, input="plot x^2", expression="plot x^2 from -10 to 10", operation_type="graphing", result=artifact
    )
    assert format_result(result) == "✅ Chart saved: plots/function_1.html (101 points)"


def test_format_error():
    result = CalculationResult(success=False, input="1/0", error="Calculation error: division by zero")
    assert format_result(result) == "❌ Error: Calculation error: division by zero"
    assert format_details(result) == []


def test_result_outcome_is_consistent():
    with pytest.raises(ValidationError):
        CalculationResult(success=False, input="x", result=1.0, error="boom")
    with pytest.raises(ValidationError):
        CalculationResult(success=False, input="x")
    with pytest.raises(ValidationError):
        CalculationResult(success=True, input="x", result=1.0, error="boom")
