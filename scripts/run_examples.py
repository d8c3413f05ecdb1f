#!/usr/bin/env python
from __future__ import annotations

import argparse
import tempfile
from pathlib import Path

from nlcalc.application import build_calculator_service
from nlcalc.core.settings import Settings

CASES: list[tuple[str, float, str]] = [
    ("2 + 3", 5, "Basic addition"),
    ("10 - 4", 6, "Basic subtraction"),
    ("6 * 7", 42, "Basic multiplication"),
    ("15 / 3", 5, "Basic division"),
    ("2^8", 256, "Exponentiation"),
    ("sqrt(16)", 4, "Square root"),
    ("log(100)", 2, "Logarithm"),
    ("sin(30 deg)", 0.5, "Sine function"),
    ("What is 5 plus 3?", 8, "Natural language addition"),
    ("Calculate 10 times 4", 40, "Natural language multiplication"),
    ("Find the square root of 25", 5, "Natural language square root"),
    ("mean([1, 2, 3, 4, 5])", 3, "Mean calculation"),
    ("What is the average of 10, 20, 30?", 20, "Natural language mean"),
    ("convert 32 fahrenheit to celsius", 0, "Temperature conversion"),
    ("(2 + 3) * 4", 20, "Parentheses"),
    ("2 + 3 * 4", 14, "Order of operations"),
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Evaluate the example table and print a pass/fail summary")
    parser.add_argument("--tolerance", type=float, default=1e-4, help="Allowed absolute difference")
    parser.add_argument("--verbose", action="store_true", help="Print the canonical expression of every case")
    args = parser.parse_args()

    with tempfile.TemporaryDirectory() as tmp:
        service = build_calculator_service(Settings(output_dir=Path(tmp)))
        failures: list[str] = []
        for raw, expected, description in CASES:
            result = service.calculate(raw)
            if not result.success:
                failures.append(f"{description}: {raw!r} -> error {result.error}")
                print(f"FAIL {description}\n   Error: {result.error}")
                continue
            actual = result.result
            passed = isinstance(actual, float) and abs(actual - expected) < args.tolerance
            print(f"{'PASS' if passed else 'FAIL'} {description}")
            if args.verbose:
                print(f"   Expression: {result.expression}")
            if not passed:
                failures.append(f"{description}: {raw!r} -> expected {expected}, got {actual}")

    total = len(CASES)
    passed_count = total - len(failures)
    print()
    print(f"Total: {total}  Passed: {passed_count}  Failed: {len(failures)}")
    print(f"Success rate: {passed_count / total * 100:.1f}%")
    for failure in failures:
        print(f"  - {failure}")
    if failures:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
