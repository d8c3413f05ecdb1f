from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_PLOT_SAMPLES = 101


@dataclass(frozen=True, slots=True)
class Settings:
    """Explicit configuration for a calculator session."""

    output_dir: Path
    history_limit: int = DEFAULT_HISTORY_LIMIT
    plot_samples: int = DEFAULT_PLOT_SAMPLES
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        if self.plot_samples < 2:
            raise ValueError("plot_samples must be at least 2")


def _output_root() -> Path:
    env_root = os.getenv("CALC_OUTPUT_DIR")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path.cwd() / "plots"


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build settings from ``CALC_*`` environment variables."""

    return Settings(
        output_dir=_output_root(),
        history_limit=_int_from_env("CALC_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
        plot_samples=_int_from_env("CALC_PLOT_SAMPLES", DEFAULT_PLOT_SAMPLES),
        log_level=os.getenv("CALC_LOG_LEVEL", "WARNING").upper(),
    )
