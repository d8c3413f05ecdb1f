from __future__ import annotations

import re

from nlcalc.core.errors import ExtractionError
from nlcalc.core.normalize import extract_numbers, number_literal
from nlcalc.core.schema import ExpressionOperation

TRIG_FUNCTIONS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("sin", re.compile(r"\b(?:sin|sine)\b")),
    ("cos", re.compile(r"\b(?:cos|cosine)\b")),
    ("tan", re.compile(r"\b(?:tan|tangent)\b")),
)

RADIANS = re.compile(r"\b(?:rad|rads|radian|radians)\b")


def detect_function(text: str) -> str:
    for name, pattern in TRIG_FUNCTIONS:
        if pattern.search(text):
            return name
    return "sin"


def parse(cleaned: str) -> ExpressionOperation:
    """Single-angle requests; the angle is in degrees unless radians are named."""

    numbers = extract_numbers(cleaned)
    if not numbers:
        raise ExtractionError("No angle found for the trigonometric calculation")
    function = detect_function(cleaned)
    angle = number_literal(numbers[0])
    argument = angle if RADIANS.search(cleaned) else f"{angle} deg"
    return ExpressionOperation(expression=f"{function}({argument})", operation_type="trigonometry")
