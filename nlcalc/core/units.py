"""Unit tables and conversion arithmetic."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import yaml

from nlcalc.core.errors import EvaluationError

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

TEMPERATURE = "temperature"


@dataclass(frozen=True, slots=True)
class UnitDefinition:
    name: str
    category: str
    factor: float | None
    aliases: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class UnitMatch:
    unit: UnitDefinition
    alias: str
    start: int
    end: int


def _alias_pattern(aliases: list[str]) -> re.Pattern[str]:
    ordered = sorted(set(aliases), key=len, reverse=True)
    alternation = "|".join(r"\s+".join(re.escape(part) for part in alias.split()) for alias in ordered)
    return re.compile(rf"(?<![a-z_])(?:{alternation})(?![\w])")


class UnitTable:
    """Category to unit lookup with whole-word alias scanning."""

    def __init__(self, categories: dict[str, dict[str, UnitDefinition]], bases: dict[str, str]) -> None:
        self._categories = categories
        self._bases = bases
        self._aliases: dict[str, dict[str, UnitDefinition]] = {}
        self._patterns: dict[str, re.Pattern[str]] = {}
        for category, units in categories.items():
            lookup: dict[str, UnitDefinition] = {}
            for unit in units.values():
                lookup[unit.name] = unit
                for alias in unit.aliases:
                    lookup[" ".join(alias.split())] = unit
            self._aliases[category] = lookup
            self._patterns[category] = _alias_pattern(list(lookup))

    @classmethod
    def from_mapping(cls, data: dict) -> "UnitTable":
        categories: dict[str, dict[str, UnitDefinition]] = {}
        bases: dict[str, str] = {}
        for category, spec in data.items():
            units: dict[str, UnitDefinition] = {}
            for name, unit_spec in (spec.get("units") or {}).items():
                unit_spec = unit_spec or {}
                factor = unit_spec.get("factor")
                if category != TEMPERATURE and factor is None:
                    raise ValueError(f"unit {name!r} in {category!r} needs a factor")
                aliases = tuple(str(alias).lower() for alias in unit_spec.get("aliases") or [])
                units[name] = UnitDefinition(
                    name=name,
                    category=category,
                    factor=float(factor) if factor is not None else None,
                    aliases=aliases,
                )
            categories[category] = units
            bases[category] = str(spec.get("base") or next(iter(units), ""))
        return cls(categories, bases)

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    def base_unit(self, category: str) -> str:
        return self._bases[category]

    def units(self, category: str) -> list[UnitDefinition]:
        return list(self._categories.get(category, {}).values())

    def lookup(self, name: str, category: str | None = None) -> UnitDefinition | None:
        key = " ".join(name.lower().split())
        categories = [category] if category else self.categories
        for candidate in categories:
            unit = self._aliases.get(candidate, {}).get(key)
            if unit is not None:
                return unit
        return None

    def find_units(self, text: str, category: str | None = None) -> list[UnitMatch]:
        """Every alias occurrence in ``text``, leftmost first, longest first on ties."""

        categories = [category] if category else self.categories
        matches: list[UnitMatch] = []
        for candidate in categories:
            pattern = self._patterns.get(candidate)
            if pattern is None:
                continue
            lookup = self._aliases[candidate]
            for found in pattern.finditer(text):
                alias = " ".join(found.group(0).split())
                matches.append(UnitMatch(unit=lookup[alias], alias=alias, start=found.start(), end=found.end()))
        matches.sort(key=lambda item: (item.start, -(item.end - item.start)))
        return matches

    def find_first(self, text: str, category: str | None = None) -> UnitMatch | None:
        matches = self.find_units(text, category)
        return matches[0] if matches else None

    def mentions_unit(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self._patterns.values())


def _to_celsius(value: float, unit: str) -> float:
    if unit == "celsius":
        return value
    if unit == "fahrenheit":
        return (value - 32) * 5 / 9
    if unit == "kelvin":
        return value - 273.15
    raise EvaluationError(f"Unknown temperature unit: {unit}")


def _from_celsius(value: float, unit: str) -> float:
    if unit == "celsius":
        return value
    if unit == "fahrenheit":
        return value * 9 / 5 + 32
    if unit == "kelvin":
        return value + 273.15
    raise EvaluationError(f"Unknown temperature unit: {unit}")


def convert(value: float, source: UnitDefinition, target: UnitDefinition) -> float:
    if source.category != target.category:
        raise EvaluationError(f"Cannot convert {source.category} ({source.name}) to {target.category} ({target.name})")
    if source.category == TEMPERATURE:
        return _from_celsius(_to_celsius(value, source.name), target.name)
    if source.factor is None or target.factor is None:
        raise EvaluationError(f"No conversion factor for {source.name} or {target.name}")
    return value * source.factor / target.factor


def _load_unit_data(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as fp:
        return yaml.safe_load(fp) or {}


@lru_cache(maxsize=None)
def load_unit_table(path: Path | None = None) -> UnitTable:
    return UnitTable.from_mapping(_load_unit_data(path or CONFIG_DIR / "units.yaml"))


def convert_units(value: float, from_unit: str, to_unit: str, category: str | None = None) -> float:
    """Convert ``value`` between two unit names or aliases."""

    table = load_unit_table()
    source = table.lookup(from_unit, category)
    if source is None:
        raise EvaluationError(f"Unknown unit: {from_unit}")
    target = table.lookup(to_unit, source.category)
    if target is None:
        raise EvaluationError(f"Cannot convert {from_unit} to {to_unit}")
    return convert(value, source, target)
