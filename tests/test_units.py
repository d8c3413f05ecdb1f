import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from nlcalc.core.errors import EvaluationError
from nlcalc.core.units import UnitTable, convert, convert_units, load_unit_table


def test_unit_table_loads_all_categories():
    table = load_unit_table()
    assert set(table.categories) == {"length", "weight", "temperature", "area", "volume", "time"}
    assert table.base_unit("length") == "meter"
    assert table.lookup("Feet").name == "foot"
    assert table.lookup("kg", "length") is None


def test_find_units_prefers_longest_alias_at_same_position():
    table = load_unit_table()
    matches = table.find_units("100 square meters")
    assert matches[0].unit.name == "square meter"
    assert table.find_first("5kg").unit.name == "kilogram"
    assert not table.mentions_unit("the mean of 3 numbers")


def test_ordinal_suffix_is_not_a_unit():
    table = load_unit_table()
    assert not table.mentions_unit("what is the 1st number plus 2")
    assert table.find_first("2 stone").unit.name == "stone"


@pytest.mark.parametrize(
    "value, source, target, expected",
    [
        (32, "fahrenheit", "celsius", 0.0),
        (100, "celsius", "fahrenheit", 212.0),
        (0, "celsius", "kelvin", 273.15),
        (100, "cm", "meters", 1.0),
        (5, "feet", "inches", 60.0),
        (1, "mile", "km", 1.609344),
        (2.5, "kg", "lb", 5.511556555),
        (1, "hour", "seconds", 3600.0),
        (1, "gallon", "liters", 3.785411784),
        (1, "hectare", "acres", 2.471053815),
    ],
)
def test_convert_units(value, source, target, expected):
    assert convert_units(value, source, target) == pytest.approx(expected, rel=1e-9)


@pytest.mark.parametrize(
    "category",
    ["length", "weight", "temperature", "area", "volume", "time"],
)
def test_round_trip_within_category(category):
    table = load_unit_table()
    units = table.units(category)
    for value in (-40.0, 0.0, 1.5, 1234.5):
        for source in units:
            for target in units:
                there = convert(value, source, target)
                back = convert(there, target, source)
                assert back == pytest.approx(value, rel=1e-9, abs=1e-9)


def test_cross_category_conversion_fails():
    with pytest.raises(EvaluationError):
        convert_units(1, "kg", "meters")
    with pytest.raises(EvaluationError):
        convert_units(1, "parsecs", "meters")


def test_non_temperature_units_require_factor():
    with pytest.raises(ValueError):
        UnitTable.from_mapping({"length": {"base": "meter", "units": {"meter": {"aliases": ["m"]}}}})
