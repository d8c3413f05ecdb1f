"""Adapter around the SymPy expression parser.

The calculator never implements its own math grammar.  Canonical expressions
are handed to :func:`sympy.parsing.sympy_parser.parse_expr` with a restricted
namespace that exposes the calculator vocabulary:

* infix arithmetic with ``^`` (or ``**``) for powers and implicit
  multiplication (``2pi``, ``30 deg``)
* ``sqrt``, ``log`` (base 10, optional base as second argument), ``ln``
* ``sin``/``cos``/``tan`` and their inverses, in radians; ``deg`` is the
  constant pi/180 so ``sin(30 deg)`` is the sine of thirty degrees
* ``pi`` and ``e``
* statistical functions over varargs or list literals (``mean(1, 2, 3)``)

SymPy computes integer powers and factorials exactly while parsing, so every
expression is first parsed unevaluated and refused when a power or factorial
would run past ``MAX_EXACT_DIGITS`` digits.
"""

from __future__ import annotations

import math
import re
from functools import partial
from tokenize import TokenError
from typing import Any, Callable, Iterable

import pandas as pd
import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
    stringify_expr,
)

from nlcalc.core.errors import EvaluationError
from nlcalc.core.normalize import number_literal

TRANSFORMATIONS = standard_transformations + (implicit_multiplication, convert_xor)

STAT_FUNCTIONS = ("mean", "median", "mode", "std", "var", "sum", "count")

_UNSAFE = re.compile(r"_|[a-z)\]]\s*\.|\.(?!\d)|\blambda\b")
_ROOT = re.compile(r"√\s*(\d+(?:\.\d+)?|[a-z]+)")
_FREE_VARIABLE = re.compile(r"(?<![a-z_])x(?![a-z_])")


def _flatten(values: Iterable[Any]) -> list[float]:
    flat: list[float] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            flat.extend(_flatten(value))
            continue
        try:
            flat.append(float(value))
        except (TypeError, ValueError) as exc:
            raise EvaluationError(f"Statistical functions need numeric values, got {value}") from exc
    return flat


def compute_statistic(stat_op: str, operands: Iterable[float]) -> float:
    """Apply ``stat_op`` to ``operands`` using pandas."""

    values = _flatten(operands)
    if not values:
        raise EvaluationError(f"{stat_op} needs at least one value")
    series = pd.Series(values, dtype="float64")
    if stat_op == "mean":
        result = series.mean()
    elif stat_op == "median":
        result = series.median()
    elif stat_op == "mode":
        result = series.mode().min()
    elif stat_op in {"std", "var"}:
        if len(values) < 2:
            raise EvaluationError(f"{stat_op} needs at least two values")
        result = series.std() if stat_op == "std" else series.var()
    elif stat_op == "sum":
        result = series.sum()
    elif stat_op == "count":
        result = series.count()
    else:
        raise EvaluationError(f"Unknown statistical operation: {stat_op}")
    return float(result)


def _stat_function(stat_op: str) -> Callable[..., sp.Float]:
    def apply(*args: Any) -> sp.Float:
        return sp.Float(compute_statistic(stat_op, args))

    apply.__name__ = stat_op
    return apply


def _log(value: Any, base: Any = 10, **options: Any) -> sp.Expr:
    return sp.log(value, base, **options)


_OPERANDS = sp.Function("operands")


def _operands(*args: Any, **options: Any) -> sp.Expr:
    nodes: list[Any] = []
    for arg in args:
        if isinstance(arg, (list, tuple)):
            nodes.extend(_operands(*arg).args)
        else:
            nodes.append(arg)
    return _OPERANDS(*nodes)


FUNCTIONS: dict[str, Callable[..., Any]] = {
    "sqrt": sp.sqrt,
    "cbrt": sp.cbrt,
    "log": _log,
    "log10": partial(_log, base=10),
    "log2": partial(_log, base=2),
    "ln": sp.log,
    "exp": sp.exp,
    "abs": sp.Abs,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "factorial": sp.factorial,
}

CONSTANTS: dict[str, Any] = {"pi": sp.pi, "e": sp.E, "deg": sp.pi / 180}

LOCAL_NAMESPACE: dict[str, Any] = {
    **FUNCTIONS,
    **CONSTANTS,
    **{name: _stat_function(name) for name in STAT_FUNCTIONS},
}

GLOBAL_NAMESPACE: dict[str, Any] = {
    "__builtins__": {},
    "Integer": sp.Integer,
    "Float": sp.Float,
    "Rational": sp.Rational,
    "Symbol": sp.Symbol,
    "Function": sp.Function,
}

# Namespaces for the unevaluated parse that is size-checked before any exact
# arithmetic runs.  Statistical calls only collect their operands there.
SIZE_LOCAL_NAMESPACE: dict[str, Any] = {
    **{name: partial(function, evaluate=False) for name, function in FUNCTIONS.items()},
    **CONSTANTS,
    **{name: _operands for name in STAT_FUNCTIONS},
}

SIZE_GLOBAL_NAMESPACE: dict[str, Any] = {
    **GLOBAL_NAMESPACE,
    "Add": sp.Add,
    "Mul": sp.Mul,
    "Pow": sp.Pow,
}

# Exact integer and rational results are refused beyond this many digits.
MAX_EXACT_DIGITS = 10_000

_FLOAT_FUNCTIONS: dict[Any, Callable[..., float]] = {
    sp.sin: math.sin,
    sp.cos: math.cos,
    sp.tan: math.tan,
    sp.asin: math.asin,
    sp.acos: math.acos,
    sp.atan: math.atan,
    sp.sinh: math.sinh,
    sp.cosh: math.cosh,
    sp.tanh: math.tanh,
    sp.exp: math.exp,
    sp.log: math.log,
    sp.Abs: abs,
    sp.floor: math.floor,
    sp.ceiling: math.ceil,
    sp.factorial: lambda count: math.gamma(count + 1),
}


def _approximate(node: sp.Basic) -> float:
    """Float estimate of an unevaluated subtree: inf on overflow, nan when unknown."""

    if node.is_Number or node.is_NumberSymbol:
        try:
            return float(node)
        except OverflowError:
            return math.inf if node > 0 else -math.inf
        except TypeError:
            return math.nan
    args = [_approximate(arg) for arg in node.args]
    try:
        if node.is_Add:
            return math.fsum(args)
        if node.is_Mul:
            return math.prod(args)
        if node.is_Pow:
            return math.pow(*args)
        function = _FLOAT_FUNCTIONS.get(node.func)
        if function is not None:
            return float(function(*args))
    except OverflowError:
        return math.inf
    except (ValueError, TypeError, ZeroDivisionError):
        return math.nan
    return math.nan


def _check_size(tree: sp.Basic) -> None:
    """Refuse powers and factorials whose exact value would be enormous."""

    for node in sp.preorder_traversal(tree):
        if not isinstance(node, sp.Basic):
            continue
        if node.is_Pow:
            base, exponent = (_approximate(arg) for arg in node.args)
            if base == 0 or math.isnan(base):
                continue
            digits = exponent * math.log10(abs(base))
            if digits > MAX_EXACT_DIGITS:
                raise EvaluationError("Calculation error: result is not finite")
            if digits < -MAX_EXACT_DIGITS:
                raise EvaluationError("Calculation error: result is too small to represent")
        elif isinstance(node, sp.factorial):
            count = _approximate(node.args[0])
            if count > 1 and math.lgamma(count + 1) / math.log(10) > MAX_EXACT_DIGITS:
                raise EvaluationError("Calculation error: result is not finite")


def prepare(expression: str) -> str:
    """Rewrite calculator-only glyphs into the parser's vocabulary."""

    prepared = expression.strip().replace("π", "pi")
    prepared = _ROOT.sub(r"sqrt(\1)", prepared)
    return prepared.replace("√", "sqrt")


def _check_safe(expression: str) -> None:
    if _UNSAFE.search(expression):
        raise EvaluationError("Invalid mathematical expression")


def is_valid_expression(expression: str) -> bool:
    """Compile-only check: can the expression be parsed at all?"""

    if not expression or not expression.strip():
        return False
    prepared = prepare(expression)
    try:
        _check_safe(prepared)
        code = stringify_expr(prepared, dict(LOCAL_NAMESPACE), dict(GLOBAL_NAMESPACE), TRANSFORMATIONS)
        compile(code, "<expression>", "eval")
    except (EvaluationError, TokenError, SyntaxError, ValueError, TypeError):
        return False
    return True


def evaluate(expression: str) -> float:
    """Evaluate ``expression`` to a finite real number."""

    if not expression or not expression.strip():
        raise EvaluationError("Empty expression")
    prepared = prepare(expression)
    _check_safe(prepared)
    try:
        _check_size(
            parse_expr(
                prepared,
                local_dict=dict(SIZE_LOCAL_NAMESPACE),
                global_dict=dict(SIZE_GLOBAL_NAMESPACE),
                transformations=TRANSFORMATIONS,
                evaluate=False,
            )
        )
        parsed = parse_expr(
            prepared,
            local_dict=dict(LOCAL_NAMESPACE),
            global_dict=dict(GLOBAL_NAMESPACE),
            transformations=TRANSFORMATIONS,
        )
    except EvaluationError:
        raise
    except (TokenError, SyntaxError) as exc:
        raise EvaluationError(f"Calculation error: could not parse '{expression}'") from exc
    except Exception as exc:
        raise EvaluationError(f"Calculation error: {exc}") from exc

    if not isinstance(parsed, sp.Basic):
        raise EvaluationError("Calculation error: expression does not produce a number")
    if parsed.free_symbols:
        names = ", ".join(sorted(str(symbol) for symbol in parsed.free_symbols))
        raise EvaluationError(f"Calculation error: undefined symbol(s) {names}")
    if parsed.has(sp.zoo, sp.oo, -sp.oo, sp.nan):
        raise EvaluationError("Calculation error: result is undefined (division by zero?)")

    try:
        numeric = complex(parsed.evalf())
    except OverflowError as exc:
        raise EvaluationError("Calculation error: result is not finite") from exc
    except (TypeError, ValueError) as exc:
        raise EvaluationError(f"Calculation error: cannot reduce '{expression}' to a number") from exc

    if abs(numeric.imag) > 1e-12 * max(1.0, abs(numeric.real)):
        raise EvaluationError("Calculation error: result is not a real number")
    value = numeric.real
    if not math.isfinite(value):
        raise EvaluationError("Calculation error: result is not finite")
    return value


def substitute_variable(body: str, value: float) -> str:
    """Replace every free ``x`` in ``body`` with a parenthesised literal."""

    return _FREE_VARIABLE.sub(f"({number_literal(value)})", body)


def sample_function(body: str, start: float, end: float, samples: int) -> list[tuple[float, float]]:
    """Evaluate ``body`` at ``samples`` evenly spaced points in ``[start, end]``.

    Samples that raise or are not finite are dropped, so a singular point leaves
    no marker in the returned series.
    """

    step = (end - start) / (samples - 1)
    points: list[tuple[float, float]] = []
    for index in range(samples):
        x_value = start + index * step
        try:
            y_value = evaluate(substitute_variable(body, x_value))
        except EvaluationError:
            continue
        points.append((x_value, y_value))
    return points
