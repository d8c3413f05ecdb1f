from __future__ import annotations


class CalculatorError(Exception):
    """Base class for failures that are reported back to the user."""


class ClassificationError(CalculatorError):
    """Raised when input cannot be routed to any domain."""


class ExtractionError(CalculatorError):
    """Raised when a domain extractor cannot build an operation from the text."""


class EvaluationError(CalculatorError):
    """Raised when the numeric evaluator rejects an expression."""


class ChartWriteError(CalculatorError):
    """Raised when a chart artifact cannot be written to disk."""
