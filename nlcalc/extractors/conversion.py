"""Unit conversion requests such as ``convert 5 feet to inches``."""

from __future__ import annotations

import re

from nlcalc.core.errors import ExtractionError
from nlcalc.core.normalize import extract_numbers
from nlcalc.core.schema import ConversionOperation
from nlcalc.core.units import UnitMatch, UnitTable, load_unit_table

SEPARATOR = re.compile(r"\b(?:to|in|as)\b")


def _split(text: str) -> tuple[str, str] | None:
    match = SEPARATOR.search(text)
    if match is None:
        return None
    return text[: match.start()], text[match.end():]


def _units_with_separator(table: UnitTable, before: str, after: str) -> tuple[UnitMatch, UnitMatch]:
    source = table.find_first(before)
    if source is None:
        raise ExtractionError("Could not find the unit to convert from")
    category = source.unit.category
    target = table.find_first(after, category)
    if target is None:
        foreign = table.find_first(after)
        if foreign is not None:
            raise ExtractionError(
                f"Cannot convert {category} ({source.unit.name}) to {foreign.unit.category} ({foreign.unit.name})"
            )
        raise ExtractionError(f"Could not find a {category} unit to convert to")
    return source, target


def _units_without_separator(table: UnitTable, text: str) -> tuple[UnitMatch, UnitMatch]:
    source = table.find_first(text)
    if source is None:
        raise ExtractionError("Could not find the unit to convert from")
    for candidate in table.find_units(text, source.unit.category):
        if candidate.start >= source.end and candidate.unit.name != source.unit.name:
            return source, candidate
    raise ExtractionError(f"Could not find a {source.unit.category} unit to convert to")


def parse(cleaned: str, table: UnitTable | None = None) -> ConversionOperation:
    table = table or load_unit_table()
    numbers = extract_numbers(cleaned)
    if not numbers:
        raise ExtractionError("No value found to convert")

    parts = _split(cleaned)
    if parts is not None:
        source, target = _units_with_separator(table, *parts)
    else:
        source, target = _units_without_separator(table, cleaned)

    return ConversionOperation(
        value=numbers[0],
        from_unit=source.unit.name,
        to_unit=target.unit.name,
        category=source.unit.category,
    )
