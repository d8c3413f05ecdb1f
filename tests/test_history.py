import sys
import threading
from pathlib import Path

import pandas as pd
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from nlcalc.core.csvio import HISTORY_COLUMNS, write_history_to_csv
from nlcalc.domain import HistoryEntry
from nlcalc.infrastructure import InMemoryHistoryRepository


def _entry(index: int, result: float | str | None = None) -> HistoryEntry:
    return HistoryEntry(
        input=f"{index} + 0",
        expression=f"{index} + 0",
        operation_type="arithmetic",
        result=float(index) if result is None else result,
        timestamp=f"2024-01-01T00:00:{index:02d}+00:00",
    )


def test_history_is_newest_first():
    repository = InMemoryHistoryRepository()
    for index in range(1, 4):
        repository.record(_entry(index), answer=float(index))

    assert [entry.result for entry in repository.get_history()] == [3.0, 2.0, 1.0]
    assert [entry.result for entry in repository.get_history(2)] == [3.0, 2.0]
    assert repository.get_history(0) == []
    assert repository.get_entry(1).result == 3.0
    assert repository.get_entry(3).result == 1.0
    assert repository.get_entry(4) is None
    assert repository.get_entry(0) is None


def test_history_evicts_oldest_beyond_limit():
    repository = InMemoryHistoryRepository()
    for index in range(1, 56):
        repository.record(_entry(index), answer=float(index))

    assert len(repository) == 50
    results = [entry.result for entry in repository.get_history()]
    assert results[0] == 55.0
    assert results[-1] == 6.0
    assert 5.0 not in results


def test_last_answer_tracks_numeric_results_only():
    repository = InMemoryHistoryRepository(limit=5)
    assert repository.get_last_answer() is None
    repository.record(_entry(1), answer=1.0)
    repository.record(_entry(2, result="plots/function.html"))
    assert repository.get_last_answer() == 1.0


def test_clear_resets_entries_and_last_answer():
    repository = InMemoryHistoryRepository(limit=3)
    repository.record(_entry(1), answer=1.0)
    repository.clear()
    assert repository.get_history() == []
    assert repository.get_last_answer() is None
    assert repository.limit == 3


def test_reads_while_another_thread_records():
    repository = InMemoryHistoryRepository(limit=50)
    stop = threading.Event()

    def record_forever():
        recorded = 0
        while recorded < 100 or not stop.is_set():
            recorded += 1
            repository.record(_entry(recorded % 59 + 1), answer=float(recorded))

    writer = threading.Thread(target=record_forever)
    writer.start()
    try:
        for _ in range(2000):
            assert len(repository.get_history(10)) <= 10
            repository.get_entry(1)
    finally:
        stop.set()
        writer.join()
    assert len(repository.get_history()) == 50


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        InMemoryHistoryRepository(limit=0)


def test_history_csv_export(tmp_path):
    entries = [_entry(1), _entry(2, result="plots/chart.html")]
    path = write_history_to_csv(tmp_path / "out" / "history.csv", entries)

    frame = pd.read_csv(path)
    assert list(frame.columns) == HISTORY_COLUMNS
    assert frame["input"].tolist() == ["1 + 0", "2 + 0"]
    assert frame["result"].tolist() == ["1.0", "plots/chart.html"]
