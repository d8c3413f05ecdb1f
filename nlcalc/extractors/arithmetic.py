"""Natural-language arithmetic: words in, a flat infix expression out.

Only the number words zero to twenty are understood; larger numbers must be
written with digits.
"""

from __future__ import annotations

import re

from nlcalc.core.errors import ExtractionError
from nlcalc.core.normalize import is_number, tokenize
from nlcalc.core.schema import ExpressionOperation
from nlcalc.extractors.detect import detect_operation_type

NUMBER_WORDS: dict[str, int] = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
}

OPERATOR_WORDS: dict[str, str] = {
    "add": "+",
    "plus": "+",
    "addition": "+",
    "subtract": "-",
    "minus": "-",
    "negative": "-",
    "subtraction": "-",
    "difference": "-",
    "multiply": "*",
    "times": "*",
    "multiplication": "*",
    "product": "*",
    "divide": "/",
    "over": "/",
    "division": "/",
    "quotient": "/",
    "power": "^",
    "exponent": "^",
    "exponentiation": "^",
}

FUNCTION_WORDS: dict[str, str] = {
    "sqrt": "sqrt",
    "root": "sqrt",
    "cbrt": "cbrt",
    "log": "log",
    "logarithm": "log",
    "ln": "ln",
    "√": "sqrt",
}

SYMBOLS = {"+", "-", "*", "/", "^", "(", ")"}

OPERATOR_SYMBOLS = SYMBOLS - {"(", ")"}

CONSTANT_WORDS: dict[str, str] = {"pi": "pi", "π": "pi", "e": "e"}

CONNECTOR_WORDS = {"and", "with", "by"}

UNARY_WORDS = {"minus", "negative"}

PHRASES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bcube root of\b"), "cbrt"),
    (re.compile(r"\bsquare root of\b"), "sqrt"),
    (re.compile(r"\bsquare root\b"), "sqrt"),
    (re.compile(r"\bnatural log(?:arithm)? of\b"), "ln"),
    (re.compile(r"\b(?:to the power of|raised to the power of|raised to)\b"), "power"),
    (re.compile(r"\bmultiplied by\b"), "times"),
    (re.compile(r"\bdivided by\b"), "over"),
    (re.compile(r"\bsquared\b"), "power 2"),
    (re.compile(r"\bcubed\b"), "power 3"),
)


def _apply_phrases(text: str) -> str:
    for pattern, replacement in PHRASES:
        text = pattern.sub(replacement, text)
    return text


def _operand(token: str) -> str | None:
    if is_number(token):
        return token
    if token in NUMBER_WORDS:
        return str(NUMBER_WORDS[token])
    if token in CONSTANT_WORDS:
        return CONSTANT_WORDS[token]
    return None


def build_expression(text: str) -> str:
    """Walk the tokens of ``text`` and emit an infix expression.

    Operator words become symbols, connector words are dropped (or stand in
    for a leading operator verb: ``add 5 and 7``), function words wrap the next
    operand, and ``then`` parenthesises everything built so far.
    ``subtract A from B`` becomes ``B - A``.

    Raises :class:`ExtractionError` when a leading operator verb is never
    placed and no other operator joins the operands.
    """

    pieces: list[str] = []
    pending_prefix: str | None = None
    pending_function: str | None = None
    subtrahend: str | None = None
    has_operand = False

    def settle() -> None:
        nonlocal subtrahend
        if subtrahend is not None and pieces:
            pieces.extend(["-", subtrahend])
            subtrahend = None

    for token in tokenize(_apply_phrases(text)):
        operand = _operand(token)
        if operand is not None:
            if pending_function:
                operand = f"{pending_function}({operand})"
                pending_function = None
            pieces.append(operand)
            has_operand = True
        elif token in OPERATOR_WORDS:
            symbol = OPERATOR_WORDS[token]
            if not has_operand and token not in UNARY_WORDS:
                pending_prefix = symbol
            else:
                pieces.append(symbol)
        elif token in SYMBOLS:
            pieces.append(token)
        elif token in FUNCTION_WORDS:
            pending_function = FUNCTION_WORDS[token]
        elif token in CONNECTOR_WORDS:
            if pending_prefix and has_operand:
                pieces.append(pending_prefix)
                pending_prefix = None
        elif token == "from" and pending_prefix == "-" and has_operand and subtrahend is None:
            subtrahend = pieces[0] if len(pieces) == 1 else "(" + " ".join(pieces) + ")"
            pieces = []
            pending_prefix = None
            has_operand = False
        elif token == "then" and pieces:
            settle()
            pieces = ["(" + " ".join(pieces) + ")"]
            pending_prefix = None

    settle()
    if subtrahend is not None:
        raise ExtractionError(f"Nothing to subtract {subtrahend} from")
    if pending_prefix and not any(piece in OPERATOR_SYMBOLS for piece in pieces):
        raise ExtractionError(f"Could not place the '{pending_prefix}' operator between two numbers")
    return " ".join(pieces)


def parse(cleaned: str) -> ExpressionOperation:
    expression = build_expression(cleaned)
    if not expression:
        raise ExtractionError("Could not find a calculation in the input")
    return ExpressionOperation(expression=expression, operation_type=detect_operation_type(expression))
