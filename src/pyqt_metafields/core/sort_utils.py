"""Sorting utilities for display-only ordering of value-set rows."""

import re
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from pyqt_metafields.core.xml_shape import first_value


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"
    NONE = "none"


def natural_key(value: Any) -> list:
    """Sort key that orders embedded numbers numerically and text case-insensitively."""
    parts = re.split(r"(\d+)", str(value))
    return [(0, int(p), "") if p.isdigit() else (1, 0, p.casefold()) for p in parts]


def next_sort_state(current_column: Optional[str], current_direction: SortDirection,
                    clicked_column: str) -> Tuple[Optional[str], SortDirection]:
    """
    Advance the header sort state after a click.

    A new column starts ascending; the same column cycles asc -> desc -> none.
    """
    if current_column != clicked_column:
        return clicked_column, SortDirection.ASC
    if current_direction is SortDirection.ASC:
        return clicked_column, SortDirection.DESC
    return None, SortDirection.NONE


def sorted_rows(rows: Sequence[Mapping[str, Any]], column: Optional[str],
                direction: SortDirection) -> List[Mapping[str, Any]]:
    """
    Return a display-ordered copy of ``rows``.

    The input sequence is never reordered in place.
    """
    if not column or direction is SortDirection.NONE:
        return list(rows)
    return sorted(
        rows,
        key=lambda row: natural_key(first_value(row, column)),
        reverse=direction is SortDirection.DESC,
    )
