from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Iterable

import pandas as pd

from nlcalc.domain import HistoryEntry

HISTORY_COLUMNS = ["timestamp", "input", "expression", "operation_type", "result"]


def write_history_to_csv(path: Path, entries: Iterable[HistoryEntry]) -> Path:
    df = pd.DataFrame([asdict(entry) for entry in entries], columns=HISTORY_COLUMNS)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
