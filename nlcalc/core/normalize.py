"""Text normalisation helpers shared by the classifier and the extractors."""

from __future__ import annotations

import re

ANSWER_TOKEN = "ans"

_DISALLOWED = re.compile(r"[^\w\s+\-*/().,^√π]")
_WHITESPACE = re.compile(r"\s+")
_ANSWER = re.compile(rf"\b{ANSWER_TOKEN}\b", re.IGNORECASE)
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?|-?\.\d+")
_TOKEN = re.compile(r"\d+(?:\.\d+)?|\.\d+|[^\W\d_]+|[+\-*/^√(),]")


def normalize_text(text: str) -> str:
    """Lowercase, drop characters outside the calculator alphabet and collapse whitespace.

    Applying the function twice yields the same string as applying it once.
    """

    lowered = text.lower().strip()
    stripped = _DISALLOWED.sub("", lowered)
    return _WHITESPACE.sub(" ", stripped).strip()


def tokenize(text: str) -> list[str]:
    return _TOKEN.findall(text)


def extract_numbers(text: str) -> list[float]:
    """Return every signed decimal literal in ``text`` in left-to-right order."""

    return [float(match) for match in _NUMBER.findall(text)]


def is_number(token: str) -> bool:
    try:
        value = float(token)
    except ValueError:
        return False
    return value == value and value not in (float("inf"), float("-inf"))


def number_literal(value: float) -> str:
    """Render ``value`` as the shortest literal that reads back to the same float."""

    if float(value).is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def substitute_answer(text: str, last_answer: float | None) -> str:
    """Replace the reserved ``ans`` token with the last numeric answer.

    Without a recorded answer the token is left untouched.
    """

    if last_answer is None:
        return text
    literal = number_literal(last_answer)
    if last_answer < 0:
        literal = f"({literal})"
    return _ANSWER.sub(literal, text)
