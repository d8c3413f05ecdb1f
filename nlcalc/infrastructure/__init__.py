"""Infrastructure layer exports."""

from .charts import ChartSpec, ChartWriter, HtmlChartWriter
from .history import HistoryRepository, InMemoryHistoryRepository

__all__ = [
    "ChartSpec",
    "ChartWriter",
    "HtmlChartWriter",
    "HistoryRepository",
    "InMemoryHistoryRepository",
]
