"""
Core utilities.

Pure-Python normalization, formatting and change-detection helpers with no
Qt or network dependencies. The Qt background task runner lives in
``background_task`` and is imported from there.
"""

from .xml_shape import as_list, first_value, wrap_value, get_collection, flatten_xml_metadata
from .dirty_tracking import ValueSetSnapshot, canonicalize_rows, compute_diff
from .culture import CultureFormat, DEFAULT_CULTURE, format_with_pattern
from .datetime_normalization import (
    FieldKind,
    InvalidDateValue,
    normalize_stored_value,
    format_instant,
    format_stored_value,
)
from .sort_utils import SortDirection, next_sort_state, sorted_rows

__all__ = [
    "as_list",
    "first_value",
    "wrap_value",
    "get_collection",
    "flatten_xml_metadata",
    "ValueSetSnapshot",
    "canonicalize_rows",
    "compute_diff",
    "CultureFormat",
    "DEFAULT_CULTURE",
    "format_with_pattern",
    "FieldKind",
    "InvalidDateValue",
    "normalize_stored_value",
    "format_instant",
    "format_stored_value",
    "SortDirection",
    "next_sort_state",
    "sorted_rows",
]
