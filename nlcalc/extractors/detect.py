"""Input classification for calculator requests.

The classifier decides whether cleaned text is a literal expression or a
natural-language request and, for the latter, which extractor should handle
it.  Routing is a single ordered table; the first predicate that matches wins:

* graphing keywords → ``graphing``
* conversion keywords or a known unit name → ``unit conversion``
* statistics keywords → ``statistics``
* trigonometry keywords → ``trigonometry``
* anything else → ``arithmetic``

Graphing requests count as natural language even when they carry math
symbols (``plot x^2 from -5 to 5``).  Input without letters is always a
literal expression.
"""

from __future__ import annotations

import re
from typing import Callable

from nlcalc.core.normalize import tokenize
from nlcalc.core.schema import ClassifiedInput, Domain, OperationType
from nlcalc.core.units import load_unit_table


def _words(*keywords: str) -> re.Pattern[str]:
    alternation = "|".join(r"\s+".join(map(re.escape, keyword.split())) for keyword in keywords)
    return re.compile(rf"\b(?:{alternation})\b")


KEYWORDS_GRAPHING = _words("plot", "graph", "draw", "chart", "visualize", "visualise", "scatter", "histogram")
KEYWORDS_CONVERSION = _words("convert", "conversion")
KEYWORDS_STATISTICS = _words(
    "mean",
    "average",
    "avg",
    "median",
    "mode",
    "standard deviation",
    "std",
    "variance",
    "sum",
    "count",
)
KEYWORDS_TRIGONOMETRY = _words("sin", "cos", "tan", "sine", "cosine", "tangent")

MATH_SYMBOLS = re.compile(r"[+\-*/^√()]")
LETTERS = re.compile(r"[^\W\d_]")

LITERAL_STATISTICS = re.compile(r"\b(?:mean|median|mode|std|var|sum|count)\s*\(")
LITERAL_TRIGONOMETRY = re.compile(r"\b(?:a?sin|a?cos|a?tan)h?\s*\(")
LITERAL_LOGARITHM = re.compile(r"\b(?:log|log10|log2|ln)\b")
LITERAL_ROOT = re.compile(r"\bsqrt\b|√")
LITERAL_POWER = re.compile(r"\^|\*\*")


def is_graphing_request(text: str) -> bool:
    return bool(KEYWORDS_GRAPHING.search(text))


def is_conversion_request(text: str) -> bool:
    return bool(KEYWORDS_CONVERSION.search(text)) or load_unit_table().mentions_unit(text)


def is_statistics_request(text: str) -> bool:
    return bool(KEYWORDS_STATISTICS.search(text))


def is_trigonometry_request(text: str) -> bool:
    return bool(KEYWORDS_TRIGONOMETRY.search(text))


ROUTES: tuple[tuple[Domain, Callable[[str], bool]], ...] = (
    (Domain.GRAPHING, is_graphing_request),
    (Domain.UNIT_CONVERSION, is_conversion_request),
    (Domain.STATISTICS, is_statistics_request),
    (Domain.TRIGONOMETRY, is_trigonometry_request),
)


def is_natural_language(text: str) -> bool:
    if is_graphing_request(text):
        return True
    return bool(LETTERS.search(text)) and not MATH_SYMBOLS.search(text)


def route(text: str) -> Domain:
    for domain, matches in ROUTES:
        if matches(text):
            return domain
    return Domain.ARITHMETIC


def classify(cleaned: str) -> ClassifiedInput:
    """Classify normalised text.  Total: every input maps to exactly one domain."""

    tokens = tokenize(cleaned)
    if not is_natural_language(cleaned):
        return ClassifiedInput(tokens=tokens, is_natural_language=False, domain=Domain.ARITHMETIC)
    return ClassifiedInput(tokens=tokens, is_natural_language=True, domain=route(cleaned))


def detect_operation_type(expression: str) -> OperationType:
    """Label a literal expression by the most specific operation it uses."""

    if LITERAL_STATISTICS.search(expression):
        return "statistics"
    if LITERAL_TRIGONOMETRY.search(expression):
        return "trigonometry"
    if LITERAL_LOGARITHM.search(expression):
        return "logarithm"
    if LITERAL_ROOT.search(expression):
        return "square root"
    if LITERAL_POWER.search(expression):
        return "exponentiation"
    return "arithmetic"
