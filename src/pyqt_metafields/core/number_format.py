"""
Culture-aware number formatting and input constraint.

Edit mode keeps whatever partial text the user typed (``-``, ``12.``) while
only committing values that are complete numbers. View and table modes use
format_number.
"""

import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional, Tuple, Union

from pyqt_metafields.core.culture import CultureFormat, DEFAULT_CULTURE

MAX_PRECISION = 17
DEFAULT_DECIMAL_PLACES = 2
DEFAULT_INPUT_DECIMAL_PLACES = 5
EMPTY_DISPLAY = "-"

_GROUPING_RE = re.compile(r"\B(?=(\d{3})+(?!\d))")

NumberValue = Union[str, int, float, None]


def _to_decimal(value: NumberValue, culture: CultureFormat) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        text = value.strip()
        if culture.decimal_separator != ".":
            text = text.replace(culture.decimal_separator, ".")
    else:
        if isinstance(value, float) and not math.isfinite(value):
            return None
        text = repr(value) if isinstance(value, float) else str(value)
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def _fixed(number: Decimal, decimal_places: int) -> Optional[str]:
    quantum = Decimal(1).scaleb(-decimal_places)
    # quantize fails once the result has more digits than the context precision
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + decimal_places + 2)
        try:
            return str(number.quantize(quantum, rounding=ROUND_HALF_UP))
        except InvalidOperation:
            return None


def format_number(value: NumberValue, decimal_places: int = DEFAULT_DECIMAL_PLACES,
                  fmt: str = "number", culture: CultureFormat = DEFAULT_CULTURE) -> str:
    """
    Format a stored number for view/table display.

    Args:
        value: Stored number or numeric string
        decimal_places: Fixed number of fraction digits
        fmt: "number" or "percentage" (appends "%")
        culture: Separators to use

    Returns:
        Formatted string, or "-" for empty/unparseable values
    """
    number = _to_decimal(value, culture)
    if number is None:
        return EMPTY_DISPLAY

    fixed = _fixed(number, decimal_places)
    if fixed is None:
        return EMPTY_DISPLAY
    integer_part, _, fractional_part = fixed.partition(".")
    integer_part = _GROUPING_RE.sub(culture.thousands_separator, integer_part)

    if decimal_places == 0:
        result = integer_part
    else:
        result = f"{integer_part}{culture.decimal_separator}{fractional_part}"

    if fmt == "percentage":
        result = f"{result}%"
    return result


def format_for_edit(value: NumberValue, decimal_places: int = DEFAULT_DECIMAL_PLACES,
                    culture: CultureFormat = DEFAULT_CULTURE) -> str:
    """Format a stored number as editable text (no grouping)."""
    number = _to_decimal(value, culture)
    if number is None:
        return ""
    fixed = _fixed(number, decimal_places)
    if fixed is None:
        return ""
    if decimal_places == 0:
        return fixed
    return fixed.replace(".", culture.decimal_separator)


def normalize_for_storage(text: str, culture: CultureFormat = DEFAULT_CULTURE) -> str:
    """Replace the culture decimal separator with "."."""
    if text in ("", "-") or culture.decimal_separator == ".":
        return text
    return text.replace(culture.decimal_separator, ".", 1)


def validate_number_input(text: str, decimal_places: int = DEFAULT_INPUT_DECIMAL_PLACES,
                          culture: CultureFormat = DEFAULT_CULTURE) -> bool:
    """Return True if ``text`` is a valid (possibly partial) number entry."""
    if text in ("", "-"):
        return True

    sep = re.escape(culture.decimal_separator)
    if not re.fullmatch(rf"-?\d*{sep}?\d*", text):
        return False
    if decimal_places == 0 and culture.decimal_separator in text:
        return False

    integer_part, _, fractional_part = text.replace("-", "").partition(culture.decimal_separator)
    if len(integer_part) > MAX_PRECISION - decimal_places:
        return False
    return len(fractional_part) <= decimal_places


def constrain_number_input(text: str, decimal_places: int = DEFAULT_INPUT_DECIMAL_PLACES,
                           culture: CultureFormat = DEFAULT_CULTURE) -> str:
    """
    Coerce raw typed text into a valid partial number entry.

    Drops characters other than digits and the decimal separator, keeps
    only the first separator, and truncates integer and fraction digits to
    the precision limits. A leading minus sign survives.
    """
    if text in ("", "-"):
        return text

    sep = culture.decimal_separator
    is_negative = text.startswith("-")
    clean = re.sub(rf"[^\d{re.escape(sep)}]", "", text.replace("-", ""))

    sep_index = clean.find(sep)
    if sep_index != -1:
        clean = clean[:sep_index] + sep + clean[sep_index + 1:].replace(sep, "")

    integer_part, has_sep, fractional_part = clean.partition(sep)
    integer_part = integer_part[:MAX_PRECISION - decimal_places]
    fractional_part = fractional_part[:decimal_places]

    result = integer_part
    if has_sep and decimal_places > 0:
        result += sep + fractional_part

    if is_negative and result != "":
        result = "-" + result
    return result


def commit_value(text: str, culture: CultureFormat = DEFAULT_CULTURE) -> Tuple[bool, Optional[str]]:
    """
    Decide whether constrained edit text is ready to commit.

    Returns:
        (should_commit, value): ``(True, None)`` for empty text, ``(True, s)``
        for a complete finite number in storage form, ``(False, None)`` for
        partial states such as "-" or a trailing separator
    """
    if text == "":
        return True, None
    if text == "-" or text.endswith(culture.decimal_separator):
        return False, None

    normalized = normalize_for_storage(text, culture)
    try:
        number = float(normalized)
    except ValueError:
        return False, None
    if not math.isfinite(number):
        return False, None
    return True, normalized
