"""Culture formats and culture-pattern rendering."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

DEFAULT_CULTURE_CODE = "en-US"

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Longest tokens first so "yyyy" wins over "yy", "MMMM" over "MM", etc.
_TOKEN_RE = re.compile(
    r"yyyy|yy|MMMM|MMM|MM|M|dddd|ddd|dd|d|HH|H|hh|h|mm|m|ss|s|tt|t|'[^']*'"
)


@dataclass(frozen=True)
class CultureFormat:
    """Number and date conventions of one culture.

    Patterns use the XML metadata token set (``yyyy``, ``MM``, ``dd``,
    ``HH``, ``hh``, ``mm``, ``ss``, ``tt``) rather than strftime codes.
    """
    culture_code: str = DEFAULT_CULTURE_CODE
    thousands_separator: str = ","
    decimal_separator: str = "."
    date_format: str = "MM-dd-yyyy"
    time_format: str = "HH:mm"
    date_time_format: str = "MM-dd-yyyy HH:mm"
    default_time_presentation: str = "12h"

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'CultureFormat':
        """Build from a culture-code record as served by the backend."""
        default = cls()
        return cls(
            culture_code=record.get("cultureCode") or default.culture_code,
            thousands_separator=record.get("numberThousandsSeparator") or default.thousands_separator,
            decimal_separator=record.get("numberDecimalSeparator") or default.decimal_separator,
            date_format=record.get("dateFormat") or default.date_format,
            time_format=record.get("timeFormat") or default.time_format,
            date_time_format=record.get("dateTimeFormat") or default.date_time_format,
            default_time_presentation=record.get("defaultTimePresentation") or default.default_time_presentation,
        )


DEFAULT_CULTURE = CultureFormat()


def format_with_pattern(value: datetime, pattern: str) -> str:
    """
    Render ``value`` with a culture pattern.

    Quoted literals (``'at'``) are copied verbatim; unknown characters pass
    through unchanged.
    """
    def replace(match: re.Match) -> str:
        token = match.group(0)
        if token.startswith("'"):
            return token[1:-1]
        return _render_token(value, token)

    return _TOKEN_RE.sub(replace, pattern)


def _render_token(value: datetime, token: str) -> str:
    hour12 = value.hour % 12 or 12
    renderers = {
        "yyyy": lambda: f"{value.year:04d}",
        "yy": lambda: f"{value.year % 100:02d}",
        "MMMM": lambda: _MONTH_NAMES[value.month - 1],
        "MMM": lambda: _MONTH_NAMES[value.month - 1][:3],
        "MM": lambda: f"{value.month:02d}",
        "M": lambda: str(value.month),
        "dddd": lambda: _DAY_NAMES[value.weekday()],
        "ddd": lambda: _DAY_NAMES[value.weekday()][:3],
        "dd": lambda: f"{value.day:02d}",
        "d": lambda: str(value.day),
        "HH": lambda: f"{value.hour:02d}",
        "H": lambda: str(value.hour),
        "hh": lambda: f"{hour12:02d}",
        "h": lambda: str(hour12),
        "mm": lambda: f"{value.minute:02d}",
        "m": lambda: str(value.minute),
        "ss": lambda: f"{value.second:02d}",
        "s": lambda: str(value.second),
        "tt": lambda: "AM" if value.hour < 12 else "PM",
        "t": lambda: "A" if value.hour < 12 else "P",
    }
    return renderers[token]()
