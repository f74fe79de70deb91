"""Unit tests for value extraction and unit conversion."""

from __future__ import annotations

import pytest

from services.parsing import extract_numeric, read_path
from services.units import fahrenheit_to_celsius, inches_hg_to_hectopascals


def test_freezing_point_converts_to_zero() -> None:
    assert fahrenheit_to_celsius(32) == 0
    assert fahrenheit_to_celsius(212) == pytest.approx(100.0)
    assert fahrenheit_to_celsius(-40) == pytest.approx(-40.0)


def test_one_inch_of_mercury_in_hectopascals() -> None:
    assert inches_hg_to_hectopascals(1) == 33.8639
    assert inches_hg_to_hectopascals(0) == 0


@pytest.mark.parametrize(
    "node",
    [
        None,
        {},
        {"value": None},
        {"value": ""},
        {"value": "   "},
        {"value": "n/a"},
        {"value": "inHg 12.3"},
        {"value": "."},
        {"value": "-"},
        {"value": "nan"},
        {"value": True},
        {"value": ["1"]},
        "72.5",
    ],
)
def test_extract_numeric_missing_or_invalid(node) -> None:
    assert extract_numeric(node) is None


@pytest.mark.parametrize(
    ("node", "expected"),
    [
        ({"value": "0"}, 0.0),
        ({"value": 0}, 0.0),
        ({"value": "29.92"}, 29.92),
        ({"value": "12.3 inHg"}, 12.3),
        ({"value": "1.5.3"}, 1.5),
        ({"value": "-.5C"}, -0.5),
        ({"value": "2e3%"}, 2000.0),
        ({"value": " -4.5 "}, -4.5),
        ({"value": 71}, 71.0),
        ({"time": "1700000000", "unit": "ºF", "value": "68.0"}, 68.0),
    ],
)
def test_extract_numeric_parses_values(node, expected: float) -> None:
    result = extract_numeric(node)

    assert result is not None
    assert result == expected


def test_read_path_walks_nested_mappings() -> None:
    payload = {"pressure": {"relative": {"value": "29.9"}}}

    assert read_path(payload, "pressure", "relative") == {"value": "29.9"}
    assert read_path(payload, "pressure", "absolute") is None
    assert read_path(payload, "outdoor", "temperature") is None
    assert read_path({"pressure": "29.9"}, "pressure", "relative") is None
    assert read_path(None, "pressure") is None
