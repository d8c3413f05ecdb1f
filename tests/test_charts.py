import json
import re
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from nlcalc.core.errors import ChartWriteError
from nlcalc.infrastructure import ChartSpec, HtmlChartWriter


def _embedded_config(document: str) -> dict:
    match = re.search(r'<script id="chart-config" type="application/json">(.*?)</script>', document, re.S)
    assert match is not None
    return json.loads(match.group(1))


def test_function_chart_is_a_line_through_points():
    spec = ChartSpec(kind="function", title="y = x^2", points=[(0.0, 0.0), (1.0, 1.0)])
    config = spec.to_chartjs()
    assert config["type"] == "scatter"
    dataset = config["data"]["datasets"][0]
    assert dataset["showLine"] is True
    assert dataset["data"] == [{"x": 0.0, "y": 0.0}, {"x": 1.0, "y": 1.0}]


def test_histogram_chart_uses_bars():
    spec = ChartSpec(kind="histogram", title="Histogram", labels=["0 to 1", "1 to 2"], values=[2.0, 3.0])
    config = spec.to_chartjs()
    assert config["type"] == "bar"
    assert config["data"]["labels"] == ["0 to 1", "1 to 2"]
    assert config["data"]["datasets"][0]["data"] == [2.0, 3.0]


def test_writer_creates_one_file_per_chart(tmp_path):
    writer = HtmlChartWriter(tmp_path / "plots")
    spec = ChartSpec(kind="scatter", title="Scatter <plot>", points=[(1.0, 2.0), (3.0, 4.0)])

    first = writer.write(spec)
    second = writer.write(spec)

    assert first != second
    assert first.parent == tmp_path / "plots"
    assert re.fullmatch(r"scatter_\d{8}T\d{12}_[0-9a-f]{8}\.html", first.name)
    document = first.read_text(encoding="utf-8")
    assert "Scatter &lt;plot&gt;" in document
    assert _embedded_config(document) == json.loads(json.dumps(spec.to_chartjs()))


def test_writer_wraps_os_errors(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("x", encoding="utf-8")
    writer = HtmlChartWriter(blocker)
    with pytest.raises(ChartWriteError):
        writer.write(ChartSpec(kind="function", title="y = x", points=[(0.0, 0.0)]))
