"""Chart artifact writers.

A chart is stored as a single self-contained HTML document that embeds a
Chart.js configuration object (series data, chart type, axis labels).  The
document loads Chart.js from a CDN when it is opened; nothing is rendered on
the server.
"""
from __future__ import annotations

import html
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from nlcalc.core.errors import ChartWriteError

logger = logging.getLogger(__name__)

CHART_JS_URL = "https://cdn.jsdelivr.net/npm/chart.js@4"

_CHART_TYPES = {"function": "scatter", "scatter": "scatter", "histogram": "bar"}


@dataclass(slots=True)
class ChartSpec:
    """Declarative description of one chart."""

    kind: str
    title: str
    x_label: str = "x"
    y_label: str = "y"
    points: list[tuple[float, float]] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    values: list[float] = field(default_factory=list)

    def to_chartjs(self) -> dict[str, Any]:
        if self.kind == "histogram":
            data: dict[str, Any] = {
                "labels": self.labels,
                "datasets": [{"label": self.title, "data": self.values, "categoryPercentage": 1.0, "barPercentage": 1.0}],
            }
            x_scale: dict[str, Any] = {"type": "category", "title": {"display": True, "text": self.x_label}}
        else:
            dataset: dict[str, Any] = {
                "label": self.title,
                "data": [{"x": x, "y": y} for x, y in self.points],
            }
            if self.kind == "function":
                dataset.update({"showLine": True, "pointRadius": 0, "borderWidth": 2})
            data = {"datasets": [dataset]}
            x_scale = {"type": "linear", "title": {"display": True, "text": self.x_label}}

        return {
            "type": _CHART_TYPES.get(self.kind, "scatter"),
            "data": data,
            "options": {
                "responsive": True,
                "plugins": {"title": {"display": True, "text": self.title}},
                "scales": {"x": x_scale, "y": {"title": {"display": True, "text": self.y_label}}},
            },
        }


class ChartWriter(Protocol):
    """Contract for chart artifact storage."""

    def write(self, spec: ChartSpec) -> Path:
        """Persist ``spec`` and return the artifact location."""


_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<script src="{script}"></script>
<style>body {{ font-family: sans-serif; margin: 2rem; }} #chart {{ max-width: 960px; }}</style>
</head>
<body>
<h1>{title}</h1>
<canvas id="chart"></canvas>
<script id="chart-config" type="application/json">{config}</script>
<script>
const config = JSON.parse(document.getElementById("chart-config").textContent);
new Chart(document.getElementById("chart"), config);
</script>
</body>
</html>
"""


class HtmlChartWriter:
    """Writes one HTML document per chart under ``output_dir``."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = Path(output_dir)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def _filename(self, kind: str) -> str:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        return f"{kind}_{stamp}_{uuid.uuid4().hex[:8]}.html"

    def render(self, spec: ChartSpec) -> str:
        config = json.dumps(spec.to_chartjs()).replace("</", "<\\/")
        return _TEMPLATE.format(title=html.escape(spec.title), script=CHART_JS_URL, config=config)

    def write(self, spec: ChartSpec) -> Path:
        target = self._output_dir / self._filename(spec.kind)
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            target.write_text(self.render(spec), encoding="utf-8")
        except OSError as exc:
            raise ChartWriteError(f"Could not write chart to {target}: {exc.strerror or exc}") from exc
        logger.info("chart written: %s", target)
        return target
