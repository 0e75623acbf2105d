"""Tests for date/time normalization and formatting."""

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

import pytest

from pyqt_metafields.core.culture import CultureFormat
from pyqt_metafields.core.datetime_normalization import (
    FieldKind, InvalidDateValue, combine_date, combine_time, format_instant,
    format_stored_value, normalize_stored_value, resolve_timezone, to_storage_string,
    utc_to_user_zoned,
)

NEW_YORK = ZoneInfo("America/New_York")
TOKYO = ZoneInfo("Asia/Tokyo")


def test_date_only_is_utc_midnight():
    assert normalize_stored_value("2024-03-10") == datetime(2024, 3, 10, tzinfo=timezone.utc)


@pytest.mark.parametrize("value, expected", [
    ("2024-03-10T14:30:00Z", datetime(2024, 3, 10, 14, 30, tzinfo=timezone.utc)),
    ("2024-03-10T14:30:00.000Z", datetime(2024, 3, 10, 14, 30, tzinfo=timezone.utc)),
    ("2024-03-10T16:30:00+02:00", datetime(2024, 3, 10, 14, 30, tzinfo=timezone.utc)),
])
def test_zoned_timestamps_normalize_to_utc(value, expected):
    assert normalize_stored_value(value) == expected


@pytest.mark.parametrize("value", ["2024-03-10T14:30:00", "yesterday", "2024-13-40"])
def test_ambiguous_or_malformed_values_are_rejected(value):
    with pytest.raises(InvalidDateValue):
        normalize_stored_value(value)


def test_empty_values_normalize_to_none():
    assert normalize_stored_value(None) is None
    assert normalize_stored_value("") is None


def test_naive_datetime_is_rejected():
    with pytest.raises(InvalidDateValue):
        normalize_stored_value(datetime(2024, 3, 10))


def test_date_kind_keeps_calendar_day_in_any_timezone():
    instant = normalize_stored_value("2024-03-10")
    for tz in (NEW_YORK, TOKYO):
        assert format_instant(instant, FieldKind.DATE, tz) == "03-10-2024"


def test_date_edit_round_trip_keeps_calendar_date():
    instant = normalize_stored_value("2024-03-10")
    picked = utc_to_user_zoned(instant, NEW_YORK, FieldKind.DATE).date()
    stored = to_storage_string(combine_date(picked, NEW_YORK, FieldKind.DATE))
    assert stored == "2024-03-10T00:00:00.000Z"
    assert format_stored_value(stored, FieldKind.DATE, NEW_YORK) == "03-10-2024"


def test_datetime_displays_in_user_timezone():
    text = format_stored_value("2024-03-10T14:30:00Z", FieldKind.DATE_TIME, TOKYO)
    assert text == "03-10-2024 23:30"


def test_time_edit_converts_wall_clock_to_utc():
    existing = normalize_stored_value("2024-07-01T12:00:00Z")
    instant = combine_time(time(9, 15), NEW_YORK, FieldKind.TIME, existing=existing)
    assert to_storage_string(instant) == "2024-07-01T13:15:00.000Z"


def test_time_edit_without_existing_uses_given_day():
    instant = combine_time(time(8, 0), TOKYO, FieldKind.DATE_TIME, today=date(2024, 1, 2))
    assert instant == datetime(2024, 1, 1, 23, 0, tzinfo=timezone.utc)


def test_datetime_date_pick_keeps_wall_clock_time():
    existing = normalize_stored_value("2024-03-10T14:30:00Z")
    instant = combine_date(date(2024, 3, 12), TOKYO, FieldKind.DATE_TIME, existing=existing)
    assert format_instant(instant, FieldKind.DATE_TIME, TOKYO) == "03-12-2024 23:30"


def test_format_helpers_for_empty_and_invalid():
    assert format_instant(None, FieldKind.DATE, NEW_YORK) == "-"
    assert format_stored_value("", FieldKind.TIME, NEW_YORK) == "-"
    assert format_stored_value("2024-03-10T14:30:00", FieldKind.DATE_TIME, NEW_YORK) == "Invalid date"


def test_culture_patterns_are_applied():
    culture = CultureFormat(culture_code="de-DE", date_format="dd.MM.yyyy", time_format="hh:mm tt",
                            date_time_format="dddd, d MMMM yyyy 'um' HH:mm")
    instant = normalize_stored_value("2024-03-10T14:05:00Z")
    utc = timezone.utc
    assert format_instant(instant, FieldKind.DATE, utc, culture) == "10.03.2024"
    assert format_instant(instant, FieldKind.TIME, utc, culture) == "02:05 PM"
    assert format_instant(instant, FieldKind.DATE_TIME, utc, culture) == "Sunday, 10 March 2024 um 14:05"


def test_unknown_timezone_falls_back_to_local():
    assert resolve_timezone("Not/AZone") is not None
    assert resolve_timezone("Asia/Tokyo") == TOKYO
