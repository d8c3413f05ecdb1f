import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from nlcalc.core.errors import ExtractionError
from nlcalc.core.schema import FunctionPlot, HistogramPlot, ScatterPlot
from nlcalc.extractors import arithmetic, conversion, graphing, statistics, trigonometry


@pytest.mark.parametrize(
    "text, expression",
    [
        ("what is 15 plus 27", "15 + 27"),
        ("what is two times three", "2 * 3"),
        ("calculate 10 times 4", "10 * 4"),
        ("what is 10 divided by 4", "10 / 4"),
        ("calculate the square root of 144", "sqrt(144)"),
        ("what is 2 to the power of 10", "2 ^ 10"),
        ("five squared", "5 ^ 2"),
        ("add 5 and 7", "5 + 7"),
        ("multiply 6 by 7", "6 * 7"),
        ("add 5 and 7 then multiply by 3", "(5 + 7) * 3"),
        ("subtract 3 from 10", "10 - 3"),
        ("subtract 3 from 10 then multiply by 2", "(10 - 3) * 2"),
        ("subtract 2 squared from 10", "10 - (2 ^ 2)"),
        ("what is 3 4", "3 4"),
    ],
)
def test_arithmetic_builds_infix_expression(text, expression):
    assert arithmetic.build_expression(text) == expression


def test_arithmetic_only_knows_small_number_words():
    assert arithmetic.build_expression("twenty plus one") == "20 + 1"
    with pytest.raises(ExtractionError):
        arithmetic.build_expression("thirty plus one")


@pytest.mark.parametrize("text", ["subtract 3 10", "subtract 3 from", "add 5"])
def test_arithmetic_rejects_unplaced_operator(text):
    with pytest.raises(ExtractionError):
        arithmetic.build_expression(text)


def test_arithmetic_parse_labels_operation():
    assert arithmetic.parse("find the square root of 25").operation_type == "square root"
    assert arithmetic.parse("what is 15 plus 27").operation_type == "arithmetic"


def test_arithmetic_without_operands_fails():
    with pytest.raises(ExtractionError):
        arithmetic.parse("hello there")


@pytest.mark.parametrize(
    "text, stat_op",
    [
        ("find the mean of 10, 20, 30", "mean"),
        ("what is the average of 1 2 3", "mean"),
        ("median of 3 1 2", "median"),
        ("mode of 1 2 2 3", "mode"),
        ("standard deviation of 2 4 4 4", "std"),
        ("variance of 1 2 3 4", "var"),
        ("sum of 1 2 3", "sum"),
        ("count 4 5 6", "count"),
        ("numbers 1 2 3", "mean"),
    ],
)
def test_statistics_detects_operation(text, stat_op):
    assert statistics.detect_stat_op(text) == stat_op


def test_statistics_extracts_signed_decimals_in_order():
    operation = statistics.parse("mean of -1.5, 2, .5 and 10")
    assert operation.stat_op == "mean"
    assert operation.operands == [-1.5, 2.0, 0.5, 10.0]
    assert operation.canonical_expression() == "mean(-1.5, 2, 0.5, 10)"


def test_statistics_without_numbers_fails():
    with pytest.raises(ExtractionError):
        statistics.parse("what is the average")


@pytest.mark.parametrize(
    "text, expression",
    [
        ("what is the sine of 30 degrees", "sin(30 deg)"),
        ("cosine of 60", "cos(60 deg)"),
        ("tangent of 45", "tan(45 deg)"),
        ("sine and cosine of 30", "sin(30 deg)"),
        ("tan of 1 radian", "tan(1)"),
        ("trig 30 please sin", "sin(30 deg)"),
    ],
)
def test_trigonometry_builds_degree_call(text, expression):
    operation = trigonometry.parse(text)
    assert operation.expression == expression
    assert operation.operation_type == "trigonometry"


def test_trigonometry_without_angle_fails():
    with pytest.raises(ExtractionError):
        trigonometry.parse("what is the sine")


@pytest.mark.parametrize(
    "text, value, from_unit, to_unit, category",
    [
        ("convert 32 fahrenheit to celsius", 32, "fahrenheit", "celsius", "temperature"),
        ("convert 5 feet to inches", 5, "foot", "inch", "length"),
        ("5 km in miles", 5, "kilometer", "mile", "length"),
        ("convert 2.5 kg to pounds", 2.5, "kilogram", "pound", "weight"),
        ("convert 100 square meters to acres", 100, "square meter", "acre", "area"),
        ("convert 1 hour to seconds", 1, "hour", "second", "time"),
        ("5 kg pounds", 5, "kilogram", "pound", "weight"),
        ("convert 1 gallon as liters", 1, "gallon", "liter", "volume"),
    ],
)
def test_conversion_extracts_units(text, value, from_unit, to_unit, category):
    operation = conversion.parse(text)
    assert operation.value == value
    assert operation.from_unit == from_unit
    assert operation.to_unit == to_unit
    assert operation.category == category


def test_conversion_target_must_share_category():
    with pytest.raises(ExtractionError, match="Cannot convert weight"):
        conversion.parse("convert 5 kg to meters")


def test_conversion_needs_value_and_units():
    with pytest.raises(ExtractionError):
        conversion.parse("convert feet to inches")
    with pytest.raises(ExtractionError):
        conversion.parse("convert 5 to inches")
    with pytest.raises(ExtractionError):
        conversion.parse("convert 5 feet")


def test_graphing_function_with_range():
    operation = graphing.parse("plot x^2 from -5 to 5")
    plot = operation.plot
    assert isinstance(plot, FunctionPlot)
    assert (plot.body, plot.start, plot.end, plot.samples) == ("x^2", -5.0, 5.0, 101)
    assert operation.canonical_expression() == "plot x^2 from -5 to 5"


def test_graphing_function_defaults_and_prefixes():
    plot = graphing.parse("draw y 2*x + 3").plot
    assert (plot.body, plot.start, plot.end) == ("2*x + 3", -10.0, 10.0)
    assert graphing.parse("plot exponential function e^x").plot.body == "e^x"
    assert graphing.parse("draw the graph of x^3", samples=11).plot.samples == 11


def test_graphing_bounds_may_be_expressions():
    plot = graphing.parse("graph sin(x) from 0 to 2*pi").plot
    assert plot.end == pytest.approx(2 * math.pi)
    plot = graphing.parse("visualize cos(x) from -pi to pi").plot
    assert plot.start == pytest.approx(-math.pi)


def test_graphing_rejects_empty_body_and_inverted_range():
    with pytest.raises(ExtractionError):
        graphing.parse("plot")
    with pytest.raises(ExtractionError):
        graphing.parse("plot x from 5 to 1")
    with pytest.raises(ExtractionError):
        graphing.parse("plot x from a to 1")


def test_scatter_pairs_by_parity():
    plot = graphing.parse("show scatter plot with points 1,2 3,4 5,6").plot
    assert isinstance(plot, ScatterPlot)
    assert plot.x == [1.0, 3.0, 5.0]
    assert plot.y == [2.0, 4.0, 6.0]


@pytest.mark.parametrize("text", ["scatter 1,2", "scatter 1,2 3", "scatter points"])
def test_scatter_needs_even_count_of_at_least_four(text):
    with pytest.raises(ExtractionError):
        graphing.parse(text)


def test_histogram_collects_all_numbers():
    plot = graphing.parse("create histogram of 1,2,3,4,5").plot
    assert isinstance(plot, HistogramPlot)
    assert plot.data == [1.0, 2.0, 3.0, 4.0, 5.0]
    with pytest.raises(ExtractionError):
        graphing.parse("histogram of nothing")
