"""
Date/time normalization shared by every render mode.

Storage is always UTC. Stored strings are accepted in exactly two shapes:

1. Date only (``YYYY-MM-DD``): interpreted as UTC midnight.
2. Timestamp with an explicit zone: a ``Z`` suffix or a ``+HH:MM`` offset.

A timestamp without a zone is ambiguous local time and is rejected with
InvalidDateValue instead of being guessed.

Date fields are calendar days and ignore timezones. Time and DateTime fields
are shown in the display timezone and converted back to UTC on edit.
"""

import logging
import re
from datetime import date, datetime, time, timezone, tzinfo
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pyqt_metafields.core.culture import CultureFormat, DEFAULT_CULTURE, format_with_pattern

logger = logging.getLogger(__name__)

EMPTY_DISPLAY = "-"
INVALID_DATE_TEXT = "Invalid date"

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_OFFSET_RE = re.compile(r"[+-]\d{2}:\d{2}$")


class FieldKind(Enum):
    """Date/time field flavours."""
    DATE = "Date"
    TIME = "Time"
    DATE_TIME = "DateTime"


class InvalidDateValue(ValueError):
    """Raised when a stored date/time string cannot be interpreted safely."""


StoredDate = Union[str, datetime, None]


def normalize_stored_value(value: StoredDate) -> Optional[datetime]:
    """
    Convert a stored value into a timezone-aware UTC datetime.

    Args:
        value: Stored string, aware datetime, or None/empty

    Returns:
        Aware datetime in UTC, or None for an empty value

    Raises:
        InvalidDateValue: If the string is malformed or lacks an explicit zone
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise InvalidDateValue(f"Naive datetime has no timezone: {value!r}")
        return value.astimezone(timezone.utc)

    if not isinstance(value, str):
        raise InvalidDateValue(f"Unsupported date value type: {type(value).__name__}")

    if _DATE_ONLY_RE.match(value):
        try:
            parsed = date.fromisoformat(value)
        except ValueError as e:
            raise InvalidDateValue(f"Invalid date-only string: {value}") from e
        return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)

    if value.endswith("Z") or _OFFSET_RE.search(value):
        iso = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            parsed_dt = datetime.fromisoformat(iso)
        except ValueError as e:
            raise InvalidDateValue(f"Invalid datetime string: {value}") from e
        return parsed_dt.astimezone(timezone.utc)

    raise InvalidDateValue(
        f"Datetime string without explicit timezone: {value}. "
        f"Use a 'Z' suffix, a numeric offset, or a date-only (YYYY-MM-DD) value."
    )


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """
    Resolve a display timezone.

    Args:
        name: IANA zone name, or None for the system local zone

    Returns:
        tzinfo for the zone; the system local zone if the name is unknown
    """
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone '{name}', falling back to system local time")
    return datetime.now().astimezone().tzinfo


def utc_to_user_zoned(instant: datetime, user_tz: tzinfo, kind: FieldKind) -> datetime:
    """
    Return the naive wall-clock value of ``instant`` as the user sees it.

    Date fields keep the UTC calendar day; Time/DateTime are shifted into
    ``user_tz``.
    """
    if kind is FieldKind.DATE:
        utc = instant.astimezone(timezone.utc)
        return datetime(utc.year, utc.month, utc.day)
    return instant.astimezone(user_tz).replace(tzinfo=None)


def user_zoned_to_utc(wall_clock: datetime, user_tz: tzinfo, kind: FieldKind) -> datetime:
    """
    Interpret a naive wall-clock value in ``user_tz`` and return UTC.

    Date fields are stored as UTC midnight of the picked calendar day.
    """
    if kind is FieldKind.DATE:
        return datetime(wall_clock.year, wall_clock.month, wall_clock.day, tzinfo=timezone.utc)
    aware = wall_clock.replace(second=0, microsecond=0, tzinfo=user_tz)
    return aware.astimezone(timezone.utc)


def combine_date(picked: date, user_tz: tzinfo, kind: FieldKind,
                 existing: Optional[datetime] = None) -> datetime:
    """
    Build the UTC instant for a day picked in a calendar.

    DateTime fields keep the wall-clock time of ``existing`` (midnight when
    there is none).
    """
    hour = minute = 0
    if kind is FieldKind.DATE_TIME and existing is not None:
        wall = utc_to_user_zoned(existing, user_tz, kind)
        hour, minute = wall.hour, wall.minute
    wall_clock = datetime(picked.year, picked.month, picked.day, hour, minute)
    return user_zoned_to_utc(wall_clock, user_tz, kind)


def combine_time(picked: time, user_tz: tzinfo, kind: FieldKind,
                 existing: Optional[datetime] = None,
                 today: Optional[date] = None) -> datetime:
    """
    Build the UTC instant for a time typed by the user.

    The calendar day comes from ``existing`` in the user's zone, else today.
    """
    if existing is not None:
        base = utc_to_user_zoned(existing, user_tz, kind).date()
    else:
        base = today or datetime.now(user_tz).date()
    wall_clock = datetime.combine(base, time(picked.hour, picked.minute))
    return user_zoned_to_utc(wall_clock, user_tz, kind)


def format_instant(instant: Optional[datetime], kind: FieldKind,
                   user_tz: tzinfo, culture: CultureFormat = DEFAULT_CULTURE) -> str:
    """
    Format a normalized instant for display.

    Returns "-" for None. Edit, view and table modes all use this so they
    never disagree on the same stored value.
    """
    if instant is None:
        return EMPTY_DISPLAY

    wall = utc_to_user_zoned(instant, user_tz, kind)
    pattern = {
        FieldKind.DATE: culture.date_format,
        FieldKind.TIME: culture.time_format,
        FieldKind.DATE_TIME: culture.date_time_format,
    }[kind]
    return format_with_pattern(wall, pattern)


def format_stored_value(value: StoredDate, kind: FieldKind, user_tz: tzinfo,
                        culture: CultureFormat = DEFAULT_CULTURE) -> str:
    """Normalize and format a stored value; malformed input yields "Invalid date"."""
    try:
        instant = normalize_stored_value(value)
    except InvalidDateValue as e:
        logger.error(f"Cannot display date value: {e}")
        return INVALID_DATE_TEXT
    return format_instant(instant, kind, user_tz, culture)


def to_storage_string(instant: Optional[datetime]) -> Optional[str]:
    """Serialize an instant as an ISO 8601 UTC string with a ``Z`` suffix."""
    if instant is None:
        return None
    utc = instant.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
