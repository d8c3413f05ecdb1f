from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from nlcalc.core.normalize import number_literal


class Domain(str, Enum):
    ARITHMETIC = "arithmetic"
    STATISTICS = "statistics"
    TRIGONOMETRY = "trigonometry"
    UNIT_CONVERSION = "unit conversion"
    GRAPHING = "graphing"


OperationType = Literal[
    "arithmetic",
    "statistics",
    "trigonometry",
    "unit conversion",
    "graphing",
    "logarithm",
    "square root",
    "exponentiation",
]

StatOp = Literal["mean", "median", "mode", "std", "var", "sum", "count"]

UnitCategory = Literal["length", "weight", "temperature", "area", "volume", "time"]

PlotKind = Literal["function", "scatter", "histogram"]


class ClassifiedInput(BaseModel):
    tokens: list[str]
    is_natural_language: bool
    domain: Domain


class ExpressionOperation(BaseModel):
    """Arithmetic, trigonometric and logarithmic requests: a string for the evaluator."""

    kind: Literal["expression"] = "expression"
    expression: str
    operation_type: OperationType = "arithmetic"

    def canonical_expression(self) -> str:
        return self.expression


class StatisticsOperation(BaseModel):
    kind: Literal["statistics"] = "statistics"
    stat_op: StatOp
    operands: list[float] = Field(min_length=1)

    def canonical_expression(self) -> str:
        return f"{self.stat_op}({', '.join(number_literal(value) for value in self.operands)})"


class ConversionOperation(BaseModel):
    kind: Literal["conversion"] = "conversion"
    value: float
    from_unit: str
    to_unit: str
    category: UnitCategory

    def canonical_expression(self) -> str:
        return f"{number_literal(self.value)} {self.from_unit} to {self.to_unit}"


class FunctionPlot(BaseModel):
    kind: Literal["function"] = "function"
    body: str
    start: float = -10.0
    end: float = 10.0
    samples: int = Field(default=101, ge=2)

    @model_validator(mode="after")
    def _check_range(self) -> "FunctionPlot":
        if self.start >= self.end:
            raise ValueError("range start must be less than range end")
        return self


class ScatterPlot(BaseModel):
    kind: Literal["scatter"] = "scatter"
    x: list[float]
    y: list[float]

    @model_validator(mode="after")
    def _check_pairs(self) -> "ScatterPlot":
        if len(self.x) != len(self.y):
            raise ValueError("scatter plot needs the same number of x and y values")
        if len(self.x) < 2:
            raise ValueError("scatter plot needs at least two points")
        return self


class HistogramPlot(BaseModel):
    kind: Literal["histogram"] = "histogram"
    data: list[float] = Field(min_length=1)


PlotPayload = Annotated[Union[FunctionPlot, ScatterPlot, HistogramPlot], Field(discriminator="kind")]


class GraphOperation(BaseModel):
    kind: Literal["graph"] = "graph"
    plot: PlotPayload

    def canonical_expression(self) -> str:
        plot = self.plot
        if isinstance(plot, FunctionPlot):
            return f"plot {plot.body} from {number_literal(plot.start)} to {number_literal(plot.end)}"
        if isinstance(plot, ScatterPlot):
            pairs = " ".join(f"{number_literal(x)},{number_literal(y)}" for x, y in zip(plot.x, plot.y))
            return f"scatter {pairs}"
        return f"histogram {', '.join(number_literal(value) for value in plot.data)}"


CanonicalOperation = Annotated[
    Union[ExpressionOperation, StatisticsOperation, ConversionOperation, GraphOperation],
    Field(discriminator="kind"),
]


class PlotArtifact(BaseModel):
    kind: PlotKind
    path: str
    title: str
    points: int
    requested: int | None = None


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class CalculationResult(BaseModel):
    success: bool
    input: str
    expression: str | None = None
    operation_type: OperationType | None = None
    operation: CanonicalOperation | None = None
    result: float | PlotArtifact | None = None
    error: str | None = None
    timestamp: str = Field(default_factory=utc_timestamp)
    agent: str = "AI Calculator Agent"

    @model_validator(mode="after")
    def _check_outcome(self) -> "CalculationResult":
        if self.success:
            if self.error is not None:
                raise ValueError("successful results cannot carry an error")
        else:
            if self.result is not None:
                raise ValueError("failed results cannot carry a result")
            if not self.error:
                raise ValueError("failed results must carry an error message")
        return self

    @property
    def to_unit(self) -> str | None:
        if isinstance(self.operation, ConversionOperation):
            return self.operation.to_unit
        return None
