"""Graphing requests: function plots, scatter plots and histograms.

Function bodies are not validated here.  They are evaluated point by point
while sampling and points that fail are dropped.
"""

from __future__ import annotations

import re

from nlcalc.core.errors import EvaluationError, ExtractionError
from nlcalc.core.evaluator import evaluate
from nlcalc.core.normalize import extract_numbers
from nlcalc.core.schema import FunctionPlot, GraphOperation, HistogramPlot, ScatterPlot
from nlcalc.core.settings import DEFAULT_PLOT_SAMPLES

SCATTER_KEYWORDS = re.compile(r"\b(?:scatter|points)\b")
HISTOGRAM_KEYWORDS = re.compile(r"\b(?:histogram|distribution)\b")

COMMAND = re.compile(r"\b(?:plot|graph|draw|show|display|visuali[sz]e|chart)\b\s*(?P<rest>.*)$")
RANGE = re.compile(r"^(?P<body>.*?)(?:\s+from\s+(?P<start>\S+))?(?:\s+to\s+(?P<end>\S+))?\s*$")
BODY_PREFIX = re.compile(r"^(?:(?:the|a|an|function|graph|curve|of|exponential|linear|quadratic|y|f\(x\))\s+)+")

DEFAULT_START = -10.0
DEFAULT_END = 10.0


def detect_plot_kind(text: str) -> str:
    if SCATTER_KEYWORDS.search(text):
        return "scatter"
    if HISTOGRAM_KEYWORDS.search(text):
        return "histogram"
    return "function"


def _bound(raw: str | None, default: float, label: str) -> float:
    if raw is None:
        return default
    try:
        return evaluate(raw)
    except EvaluationError as exc:
        raise ExtractionError(f"Invalid plot range {label} value: {raw}") from exc


def parse_function(cleaned: str, samples: int = DEFAULT_PLOT_SAMPLES) -> FunctionPlot:
    command = COMMAND.search(cleaned)
    if command is None:
        raise ExtractionError("Could not understand the plot request, try 'plot x^2 from -5 to 5'")
    clause = RANGE.match(command.group("rest"))
    if clause is None:
        raise ExtractionError("Could not understand the plot request, try 'plot x^2 from -5 to 5'")

    body = BODY_PREFIX.sub("", clause.group("body").strip()).strip()
    if not body:
        raise ExtractionError("No function to plot")

    start = _bound(clause.group("start"), DEFAULT_START, "start")
    end = _bound(clause.group("end"), DEFAULT_END, "end")
    if start >= end:
        raise ExtractionError(f"Plot range start ({start:g}) must be less than end ({end:g})")
    return FunctionPlot(body=body, start=start, end=end, samples=samples)


def parse_scatter(cleaned: str) -> ScatterPlot:
    numbers = extract_numbers(cleaned)
    if len(numbers) < 4 or len(numbers) % 2:
        raise ExtractionError("Scatter plots need an even number of values, at least two x,y points")
    return ScatterPlot(x=numbers[0::2], y=numbers[1::2])


def parse_histogram(cleaned: str) -> HistogramPlot:
    numbers = extract_numbers(cleaned)
    if not numbers:
        raise ExtractionError("Histograms need at least one number")
    return HistogramPlot(data=numbers)


def parse(cleaned: str, samples: int = DEFAULT_PLOT_SAMPLES) -> GraphOperation:
    kind = detect_plot_kind(cleaned)
    if kind == "scatter":
        return GraphOperation(plot=parse_scatter(cleaned))
    if kind == "histogram":
        return GraphOperation(plot=parse_histogram(cleaned))
    return GraphOperation(plot=parse_function(cleaned, samples))
