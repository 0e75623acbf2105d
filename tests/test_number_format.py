"""Tests for number formatting and partial-input handling."""

import pytest

from pyqt_metafields.core.culture import CultureFormat
from pyqt_metafields.core.number_format import (
    commit_value, constrain_number_input, format_for_edit, format_number,
    normalize_for_storage, validate_number_input,
)

GERMAN = CultureFormat(culture_code="de-DE", thousands_separator=".", decimal_separator=",")


@pytest.mark.parametrize("value, kwargs, expected", [
    (1234.5, {}, "1,234.50"),
    ("1234567.891", {"decimal_places": 1}, "1,234,567.9"),
    (0.125, {}, "0.13"),
    (-9876, {"decimal_places": 0}, "-9,876"),
    ("12.5", {"fmt": "percentage"}, "12.50%"),
    (None, {}, "-"),
    ("", {}, "-"),
    ("abc", {}, "-"),
    (float("nan"), {}, "-"),
])
def test_format_number(value, kwargs, expected):
    assert format_number(value, **kwargs) == expected


def test_format_number_uses_culture_separators():
    assert format_number(1234.5, culture=GERMAN) == "1.234,50"


def test_format_for_edit():
    assert format_for_edit(None) == ""
    assert format_for_edit("12.345") == "12.35"
    assert format_for_edit(12.6, decimal_places=0) == "13"
    assert format_for_edit("1234.5", culture=GERMAN) == "1234,50"


def test_normalize_for_storage():
    assert normalize_for_storage("12,5", GERMAN) == "12.5"
    assert normalize_for_storage("-", GERMAN) == "-"
    assert normalize_for_storage("12.5") == "12.5"


@pytest.mark.parametrize("text, expected", [
    ("", ""),
    ("-", "-"),
    ("12a3", "123"),
    ("1.2.3", "1.23"),
    ("-1.23456789", "-1.23456"),
    ("--5", "-5"),
    ("12.", "12."),
])
def test_constrain_number_input(text, expected):
    assert constrain_number_input(text) == expected


def test_constrain_caps_integer_digits():
    assert constrain_number_input("1" * 20, decimal_places=2) == "1" * 15


def test_constrain_drops_separator_without_decimals():
    assert constrain_number_input("12.5", decimal_places=0) == "12"


def test_validate_number_input():
    assert validate_number_input("")
    assert validate_number_input("-")
    assert validate_number_input("12.")
    assert validate_number_input("12,5", culture=GERMAN)
    assert not validate_number_input("1.2.3")
    assert not validate_number_input("1.234567", decimal_places=5)
    assert not validate_number_input("12.", decimal_places=0)
    assert validate_number_input("12", decimal_places=0)


@pytest.mark.parametrize("text, expected", [
    ("", (True, None)),
    ("-", (False, None)),
    ("12.", (False, None)),
    ("12.5", (True, "12.5")),
    ("-0.5", (True, "-0.5")),
    ("007", (True, "007")),
])
def test_commit_value(text, expected):
    assert commit_value(text) == expected


def test_commit_value_with_culture_separator():
    assert commit_value("12,5", GERMAN) == (True, "12.5")
    assert commit_value("12,", GERMAN) == (False, None)


def test_large_values_format_without_precision_errors():
    assert format_number("123456789012345678901234567") == "123,456,789,012,345,678,901,234,567.00"
    assert format_number("1e30", decimal_places=0) == "1" + ",000" * 10
    assert format_for_edit("1e30") == "1" + "0" * 30 + ".00"
