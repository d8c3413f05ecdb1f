"""Application service layer for the calculation pipeline."""
from __future__ import annotations

import logging
import math
from functools import partial
from pathlib import Path
from typing import Callable

import pandas as pd

from nlcalc.core import evaluator, units
from nlcalc.core.csvio import write_history_to_csv
from nlcalc.core.errors import CalculatorError, ClassificationError, EvaluationError
from nlcalc.core.formatter import format_number
from nlcalc.core.normalize import normalize_text, substitute_answer
from nlcalc.core.schema import (
    CalculationResult,
    CanonicalOperation,
    ClassifiedInput,
    ConversionOperation,
    Domain,
    ExpressionOperation,
    FunctionPlot,
    GraphOperation,
    HistogramPlot,
    OperationType,
    PlotArtifact,
    ScatterPlot,
    StatisticsOperation,
    utc_timestamp,
)
from nlcalc.core.settings import Settings, load_settings
from nlcalc.domain import HistoryEntry, SessionInfo
from nlcalc.extractors import arithmetic, conversion, detect, graphing, statistics, trigonometry
from nlcalc.infrastructure import (
    ChartSpec,
    ChartWriter,
    HistoryRepository,
    HtmlChartWriter,
    InMemoryHistoryRepository,
)

logger = logging.getLogger(__name__)

AGENT_NAME = "AI Calculator Agent"
VERSION = "1.0.0"

Extractor = Callable[[str], CanonicalOperation]


def sturges_bins(count: int) -> int:
    return max(1, math.ceil(math.log2(count)) + 1) if count > 0 else 1


class CalculatorService:
    """Coordinates classification, extraction, evaluation and the ledger."""

    SUPPORTED_OPERATIONS: list[str] = [
        "arithmetic",
        "statistics",
        "trigonometry",
        "logarithm",
        "square root",
        "exponentiation",
        "unit conversion",
        "graphing",
    ]

    CAPABILITIES: list[str] = [
        "Mathematical expressions with +, -, *, /, ^, sqrt, log and ln",
        "Natural language questions such as 'what is 15 plus 27'",
        "Statistics: mean, median, mode, standard deviation, variance, sum, count",
        "Trigonometry in degrees, or radians on request",
        "Unit conversion for length, weight, temperature, area, volume and time",
        "Function plots, scatter plots and histograms saved as HTML charts",
        "History with recall and the 'ans' token for the last numeric answer",
    ]

    def __init__(
        self,
        repository: HistoryRepository,
        chart_writer: ChartWriter,
        settings: Settings,
    ) -> None:
        self._repository = repository
        self._chart_writer = chart_writer
        self._settings = settings
        self._extractors: dict[Domain, Extractor] = {
            Domain.ARITHMETIC: arithmetic.parse,
            Domain.STATISTICS: statistics.parse,
            Domain.TRIGONOMETRY: trigonometry.parse,
            Domain.UNIT_CONVERSION: conversion.parse,
            Domain.GRAPHING: partial(graphing.parse, samples=settings.plot_samples),
        }

    @property
    def settings(self) -> Settings:
        return self._settings

    # ------------------------------------------------------------------
    # pipeline
    # ------------------------------------------------------------------
    def calculate(self, raw: str) -> CalculationResult:
        """Run one request end to end.  Never raises; failures come back as results."""

        raw = raw if isinstance(raw, str) else str(raw)
        try:
            return self._calculate(raw)
        except CalculatorError as exc:
            logger.info("calculation failed (%s): %s", type(exc).__name__, exc)
            return CalculationResult(success=False, input=raw, error=str(exc))
        except Exception as exc:
            logger.exception("unexpected failure while calculating %r", raw)
            return CalculationResult(success=False, input=raw, error=f"Unexpected error: {exc}")

    def _calculate(self, raw: str) -> CalculationResult:
        substituted = substitute_answer(raw, self._repository.get_last_answer())
        cleaned = normalize_text(substituted)
        if not cleaned:
            raise ClassificationError("Please enter a calculation or a question")

        classified = detect.classify(cleaned)
        operation = self._extract(cleaned, classified)
        expression = operation.canonical_expression()
        logger.debug("input=%r domain=%s expression=%r", raw, classified.domain.value, expression)

        if isinstance(operation, ExpressionOperation) and not evaluator.is_valid_expression(expression):
            raise EvaluationError(f"Invalid mathematical expression: {expression}")

        value = self._evaluate(operation)
        result = CalculationResult(
            success=True,
            input=raw,
            expression=expression,
            operation_type=self._operation_type(operation),
            operation=operation,
            result=value,
            timestamp=utc_timestamp(),
        )
        self._record(result)
        return result

    def _extract(self, cleaned: str, classified: ClassifiedInput) -> CanonicalOperation:
        if not classified.is_natural_language:
            return ExpressionOperation(expression=cleaned, operation_type=detect.detect_operation_type(cleaned))
        extractor = self._extractors.get(classified.domain)
        if extractor is None:
            raise ClassificationError(f"No handler for {classified.domain.value} requests")
        return extractor(cleaned)

    @staticmethod
    def _operation_type(operation: CanonicalOperation) -> OperationType:
        if isinstance(operation, ExpressionOperation):
            return operation.operation_type
        if isinstance(operation, StatisticsOperation):
            return "statistics"
        if isinstance(operation, ConversionOperation):
            return "unit conversion"
        return "graphing"

    def _evaluate(self, operation: CanonicalOperation) -> float | PlotArtifact:
        if isinstance(operation, ExpressionOperation):
            return evaluator.evaluate(operation.expression)
        if isinstance(operation, StatisticsOperation):
            return evaluator.compute_statistic(operation.stat_op, operation.operands)
        if isinstance(operation, ConversionOperation):
            return units.convert_units(operation.value, operation.from_unit, operation.to_unit, operation.category)
        if isinstance(operation, GraphOperation):
            return self._plot(operation)
        raise EvaluationError(f"Unsupported operation: {operation!r}")

    def _plot(self, operation: GraphOperation) -> PlotArtifact:
        plot = operation.plot
        requested: int | None = None
        if isinstance(plot, FunctionPlot):
            points = evaluator.sample_function(plot.body, plot.start, plot.end, plot.samples)
            if not points:
                raise EvaluationError(
                    f"'{plot.body}' has no finite values between {format_number(plot.start)} and {format_number(plot.end)}"
                )
            spec = ChartSpec(kind="function", title=f"y = {plot.body}", points=points)
            count = len(points)
            requested = plot.samples
        elif isinstance(plot, ScatterPlot):
            spec = ChartSpec(kind="scatter", title="Scatter plot", points=list(zip(plot.x, plot.y)))
            count = len(plot.x)
        elif isinstance(plot, HistogramPlot):
            spec = self._histogram_spec(plot)
            count = len(plot.data)
        else:
            raise EvaluationError(f"Unsupported plot: {plot!r}")

        path = self._chart_writer.write(spec)
        return PlotArtifact(kind=plot.kind, path=str(path), title=spec.title, points=count, requested=requested)

    @staticmethod
    def _histogram_spec(plot: HistogramPlot) -> ChartSpec:
        series = pd.Series(plot.data, dtype="float64")
        counts = series.value_counts(bins=sturges_bins(len(series)), sort=False)
        labels = [f"{format_number(interval.left)} to {format_number(interval.right)}" for interval in counts.index]
        return ChartSpec(
            kind="histogram",
            title=f"Histogram of {len(series)} values",
            x_label="value",
            y_label="frequency",
            labels=labels,
            values=[float(count) for count in counts.tolist()],
        )

    def _record(self, result: CalculationResult) -> None:
        value = result.result
        answer = value if isinstance(value, float) else None
        stored = value.path if isinstance(value, PlotArtifact) else value
        entry = HistoryEntry(
            input=result.input,
            expression=result.expression or "",
            operation_type=result.operation_type or "arithmetic",
            result=stored,
            timestamp=result.timestamp,
        )
        self._repository.record(entry, answer=answer)

    # ------------------------------------------------------------------
    # ledger
    # ------------------------------------------------------------------
    def get_history(self, n: int | None = None) -> list[HistoryEntry]:
        return self._repository.get_history(n)

    def recall(self, index: int = 1) -> HistoryEntry | None:
        return self._repository.get_entry(index)

    def get_last_answer(self) -> float | None:
        return self._repository.get_last_answer()

    def clear_history(self) -> None:
        self._repository.clear()

    def export_history(self, path: Path) -> Path:
        """Write the ledger, oldest first, to a CSV file."""

        entries = list(reversed(self._repository.get_history()))
        return write_history_to_csv(Path(path), entries)

    def get_info(self) -> SessionInfo:
        return SessionInfo(
            name=AGENT_NAME,
            version=VERSION,
            supported_operations=list(self.SUPPORTED_OPERATIONS),
            capabilities=list(self.CAPABILITIES),
        )


def build_calculator_service(settings: Settings | None = None) -> CalculatorService:
    settings = settings or load_settings()
    return CalculatorService(
        InMemoryHistoryRepository(settings.history_limit),
        HtmlChartWriter(settings.output_dir),
        settings,
    )


_service: CalculatorService | None = None


def get_calculator_service() -> CalculatorService:
    """Return the calculator service for the process, building it from the environment on first use."""

    global _service
    if _service is None:
        _service = build_calculator_service()
    return _service


def configure_calculator_service(service: CalculatorService) -> None:
    global _service
    _service = service


def reset_calculator_state() -> None:
    """Drop the process-wide service (used in tests)."""

    global _service
    _service = None
