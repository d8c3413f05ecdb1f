from __future__ import annotations

import re

from nlcalc.core.errors import ExtractionError
from nlcalc.core.normalize import extract_numbers
from nlcalc.core.schema import StatisticsOperation

# Ordered: the first keyword present in the text decides the operation.
STAT_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("mean", "mean"),
    ("average", "mean"),
    ("avg", "mean"),
    ("median", "median"),
    ("mode", "mode"),
    ("standard deviation", "std"),
    ("std", "std"),
    ("variance", "var"),
    ("sum", "sum"),
    ("count", "count"),
)


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    body = r"\s+".join(re.escape(part) for part in keyword.split())
    return re.compile(rf"\b{body}\b")


_PATTERNS = tuple((_keyword_pattern(keyword), operation) for keyword, operation in STAT_KEYWORDS)


def detect_stat_op(text: str) -> str:
    for pattern, operation in _PATTERNS:
        if pattern.search(text):
            return operation
    return "mean"


def parse(cleaned: str) -> StatisticsOperation:
    operands = extract_numbers(cleaned)
    if not operands:
        raise ExtractionError("No numbers found for the statistical calculation")
    return StatisticsOperation(stat_op=detect_stat_op(cleaned), operands=operands)
