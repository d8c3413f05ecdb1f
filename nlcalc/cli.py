#!/usr/bin/env python
"""Command line interface for the natural-language calculator.

Running without a subcommand starts the interactive session.
"""
from __future__ import annotations

import argparse
import re
import shlex
from pathlib import Path
from typing import Sequence

import uvicorn
from rich.console import Console

from nlcalc.app import create_app
from nlcalc.application import AGENT_NAME, VERSION, CalculatorService, get_calculator_service
from nlcalc.core.formatter import format_details, format_result, format_value
from nlcalc.core.logs import configure_logging
from nlcalc.core.normalize import number_literal
from nlcalc.core.schema import CalculationResult
from nlcalc.domain import HistoryEntry

DEFAULT_HISTORY_ROWS = 10

EXAMPLES: dict[str, list[str]] = {
    "Mathematical Expressions": [
        "2 + 3 * 4",
        "sqrt(16)",
        "sin(30 deg)",
        "log(100)",
        "2^8",
        "mean([1, 2, 3, 4, 5])",
    ],
    "Natural Language": [
        "What is 15 plus 27?",
        "Calculate the square root of 144",
        "What is the sine of 45 degrees?",
        "Find the mean of 10, 20, 30, 40, 50",
        "What is 2 to the power of 10?",
        "Add 5 and 7 then multiply by 3",
    ],
    "Unit Conversions": [
        "Convert 100 cm to meters",
        "Convert 32 fahrenheit to celsius",
        "Convert 5 feet to inches",
        "Convert 2.5 kg to pounds",
        "Convert 1 gallon to liters",
        "Convert 1 hour to seconds",
        "Convert 100 square meters to acres",
    ],
    "Graphing & Visualization": [
        "Plot x^2 from -5 to 5",
        "Graph sin(x) from 0 to 2*pi",
        "Draw y = 2*x + 3",
        "Show scatter plot with points 1,2 3,4 5,6",
        "Create histogram of 1,2,3,4,5,6,7,8,9,10",
        "Visualize cos(x) from -pi to pi",
        "Plot exponential function e^x",
    ],
    "Memory": [
        "2 + 3",
        "ans * 4",
        "history",
        "history -n 5",
        "recall",
        "recall 2",
        "clear-history",
    ],
}

HELP_LINES = [
    ("help, h", "Show this help message"),
    ("info", "Show agent information"),
    ("examples, e", "Show example calculations"),
    ("history [-n N]", "Show recent calculations"),
    ("recall [index]", "Recall a previous result (1 is the latest)"),
    ("clear-history", "Clear history and the last answer"),
    ("clear", "Clear the screen"),
    ("exit, quit", "Exit the program"),
]


class CalculatorCLI:
    """Presentation shell around :class:`CalculatorService`."""

    def __init__(self, service: CalculatorService, console: Console | None = None) -> None:
        self.service = service
        self.console = console or Console(highlight=False, emoji=False, soft_wrap=True)

    def _line(self, text: str, style: str | None = None) -> None:
        self.console.print(text, style=style, markup=False)

    # ------------------------------------------------------------------
    # calculations
    # ------------------------------------------------------------------
    def show_result(self, result: CalculationResult, indent: str = "") -> int:
        self._line(format_result(result), "green" if result.success else "red")
        for detail in format_details(result):
            self._line(f"{indent}{detail}", "bright_black")
        return 0 if result.success else 1

    def calculate(self, text: str, banner: str | None = None) -> int:
        result = self.service.calculate(text)
        if banner:
            self._line(banner, "cyan")
        return self.show_result(result)

    def convert(self, value: str, from_unit: str, to_unit: str) -> int:
        return self.calculate(
            f"convert {value} {from_unit} to {to_unit}",
            banner=f"🔄 Converting: {value} {from_unit} to {to_unit}",
        )

    def plot(self, expression: str, start: str, end: str) -> int:
        start, end = start.replace(" ", ""), end.replace(" ", "")
        return self.calculate(
            f"plot {expression} from {start} to {end}",
            banner=f"📊 Plotting: {expression} from {start} to {end}",
        )

    def scatter(self, points: Sequence[str]) -> int:
        pairs: list[tuple[float, float]] = []
        for point in points:
            try:
                x_text, y_text = point.split(",")
                pairs.append((float(x_text), float(y_text)))
            except ValueError:
                self._line(f"❌ Error: '{point}' is not an x,y point", "red")
                return 1
        if len(pairs) < 2:
            self._line("❌ Error: At least 2 data points are required for a scatter plot", "red")
            return 1
        query = " ".join(f"{number_literal(x)},{number_literal(y)}" for x, y in pairs)
        return self.calculate(
            f"scatter plot {query}",
            banner=f"📊 Creating scatter plot with {len(pairs)} points",
        )

    def histogram(self, data: Sequence[str]) -> int:
        values: list[float] = []
        for item in re.split(r"[,\s]+", " ".join(data)):
            if not item:
                continue
            try:
                values.append(float(item))
            except ValueError:
                continue
        if not values:
            self._line("❌ Error: No valid numbers found in data", "red")
            return 1
        query = ", ".join(number_literal(value) for value in values)
        return self.calculate(
            f"histogram {query}",
            banner=f"📊 Creating histogram with {len(values)} data points",
        )

    # ------------------------------------------------------------------
    # ledger
    # ------------------------------------------------------------------
    def show_history(self, n: int = DEFAULT_HISTORY_ROWS, export: Path | None = None) -> int:
        if export is not None:
            path = self.service.export_history(export)
            self._line(f"History written to {path}", "green")
            return 0

        entries = self.service.get_history(n)
        if not entries:
            self._line("History is empty.", "yellow")
            return 0
        self._line(f"\n📝 Last {len(entries)} calculations:\n", "bold cyan")
        for index, entry in enumerate(entries, start=1):
            self._line(f"#{index} {entry.operation_type} → {format_value(entry.result)}")
            self._line(f"   Input: {entry.input}", "bright_black")
            self._line(f"   Expr:  {entry.expression}", "bright_black")
            self._line(f"   At:    {entry.timestamp}", "bright_black")
        self._line("")
        return 0

    def recall(self, index: int = 1) -> int:
        if not self.service.get_history(1):
            self._line("History is empty.", "yellow")
            return 1
        entry: HistoryEntry | None = self.service.recall(index)
        if entry is None:
            self._line("Invalid history index.", "red")
            return 1
        self._line(f"Recalled #{index}: {format_value(entry.result)}", "green")
        return 0

    def clear_history(self) -> int:
        self.service.clear_history()
        self._line("History and last answer cleared.", "yellow")
        return 0

    # ------------------------------------------------------------------
    # information
    # ------------------------------------------------------------------
    def show_info(self) -> int:
        info = self.service.get_info()
        self._line(f"\n🤖 {info.name} Information\n", "bold cyan")
        self._line(f"Name: {info.name}")
        self._line(f"Version: {info.version}")
        self._line(f"Supported Operations: {', '.join(info.supported_operations)}")
        self._line("\nCapabilities:")
        for capability in info.capabilities:
            self._line(f"  • {capability}", "bright_black")
        self._line("")
        return 0

    def show_examples(self) -> int:
        self._line("\n💡 Example Calculations:\n", "bold cyan")
        for section, examples in EXAMPLES.items():
            self._line(f"{section}:", "bold")
            for example in examples:
                self._line(f"  • {example}", "bright_black")
            self._line("")
        return 0

    def show_help(self) -> None:
        self._line("\n📚 Available Commands:\n", "bold cyan")
        for command, description in HELP_LINES:
            self._line(f"{command:<22}- {description}")
        self._line("\nYou can also type mathematical expressions or natural language questions directly.\n", "bright_black")

    # ------------------------------------------------------------------
    # interactive session
    # ------------------------------------------------------------------
    def _banner(self) -> None:
        self._line(f"\n🤖 {AGENT_NAME} - Interactive Mode", "bold cyan")
        self._line('Type "help" for commands, "exit" to quit\n', "bright_black")

    def _session_command(self, line: str) -> bool:
        """Handle built-in session commands; return False for calculator input."""

        try:
            words = shlex.split(line)
        except ValueError:
            return False
        if not words:
            return False
        command, args = words[0], words[1:]

        if command in {"help", "h"} and not args:
            self.show_help()
        elif command == "info" and not args:
            self.show_info()
        elif command in {"examples", "example", "e"} and not args:
            self.show_examples()
        elif command == "clear" and not args:
            self.console.clear()
            self._banner()
        elif command == "clear-history" and not args:
            self.clear_history()
        elif command == "history":
            rows = DEFAULT_HISTORY_ROWS
            if len(args) == 2 and args[0] in {"-n", "--num"} and args[1].isdigit():
                rows = int(args[1])
            elif args:
                return False
            self.show_history(rows)
        elif command == "recall" and len(args) <= 1:
            if args and not args[0].isdigit():
                return False
            self.recall(int(args[0]) if args else 1)
        else:
            return False
        return True

    def interactive(self) -> int:
        self._banner()
        while True:
            try:
                line = self.console.input("calc> ").strip()
            except (EOFError, KeyboardInterrupt):
                self._line("\n👋 Goodbye!", "yellow")
                return 0

            if not line:
                continue
            if line in {"exit", "quit"}:
                self._line("👋 Goodbye!", "yellow")
                return 0
            if self._session_command(line):
                continue
            self.show_result(self.service.calculate(line), indent="   ")
            self._line("")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nlcalc",
        description="Calculator that understands expressions and natural-language questions",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("interactive", aliases=["i"], help="Start an interactive calculator session")

    calc = sub.add_parser("calc", aliases=["c"], help="Calculate a single expression")
    calc.add_argument("expression", nargs="+")

    ask = sub.add_parser("ask", aliases=["a"], help="Ask a question in natural language")
    ask.add_argument("question", nargs="+")

    convert = sub.add_parser("convert", aliases=["conv"], help="Convert between units (e.g. convert 100 cm m)")
    convert.add_argument("value")
    convert.add_argument("from_unit")
    convert.add_argument("to_unit")

    plot = sub.add_parser("plot", aliases=["graph"], help="Plot a function of x (e.g. plot x^2)")
    plot.add_argument("expression", nargs="+")
    plot.add_argument("-f", "--from", dest="start", default="-10", help="Start of the x range")
    plot.add_argument("-t", "--to", dest="end", default="10", help="End of the x range")

    scatter = sub.add_parser("scatter", help="Scatter plot from x,y points")
    scatter.add_argument("points", nargs="+", help="Points written as x,y")

    histogram = sub.add_parser("histogram", help="Histogram from comma separated numbers")
    histogram.add_argument("data", nargs="+")

    history = sub.add_parser("history", help="Show recent calculation history")
    history.add_argument("-n", "--num", type=int, default=DEFAULT_HISTORY_ROWS, help="Number of entries to show")
    history.add_argument("--export", type=Path, help="Write the whole history to a CSV file")

    recall = sub.add_parser("recall", help="Recall a previous result by index (default: last)")
    recall.add_argument("index", nargs="?", type=int, default=1)

    sub.add_parser("clear-history", help="Clear calculation history and last answer")
    sub.add_parser("info", help="Show agent information and capabilities")
    sub.add_parser("examples", help="Show example calculations")

    web = sub.add_parser("web", help="Start the HTTP interface")
    web.add_argument("--host", default="127.0.0.1")
    web.add_argument("-p", "--port", type=int, default=3000)
    return parser


def _serve(service: CalculatorService, host: str, port: int) -> int:
    uvicorn.run(create_app(service), host=host, port=port)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    service = get_calculator_service()
    configure_logging(service.settings.log_level)
    cli = CalculatorCLI(service)

    command = args.command
    if command in {None, "interactive", "i"}:
        return cli.interactive()
    if command in {"calc", "c"}:
        return cli.calculate(" ".join(args.expression))
    if command in {"ask", "a"}:
        question = " ".join(args.question)
        return cli.calculate(question, banner=f"🤖 Question: {question}")
    if command in {"convert", "conv"}:
        return cli.convert(args.value, args.from_unit, args.to_unit)
    if command in {"plot", "graph"}:
        return cli.plot(" ".join(args.expression), args.start, args.end)
    if command == "scatter":
        return cli.scatter(args.points)
    if command == "histogram":
        return cli.histogram(args.data)
    if command == "history":
        return cli.show_history(args.num, args.export)
    if command == "recall":
        return cli.recall(args.index)
    if command == "clear-history":
        return cli.clear_history()
    if command == "info":
        return cli.show_info()
    if command == "examples":
        return cli.show_examples()
    if command == "web":
        return _serve(service, args.host, args.port)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
