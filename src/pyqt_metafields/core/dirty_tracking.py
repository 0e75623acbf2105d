"""
Snapshot-based change detection for value-set editing.

The working copy of a value set is compared against an immutable baseline
captured at load time and after every successful save. Both sides are
canonicalized first: client-only keys are stripped, positions are made
explicit, and absent fields compare equal to their documented defaults.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple
import json
import logging

from pyqt_metafields.core.xml_shape import first_value, strip_keys

logger = logging.getLogger(__name__)

TEMP_ID_KEY = "_tempId"

# Row fields compared by the diff, with the value an absent field stands for
ROW_FIELD_DEFAULTS: Dict[str, str] = {
    "label": "",
    "code": "",
    "default": "false",
    "iconSet": "",
    "icon": "",
    "order": "",
}

NO_SORTING = "no sorting"


@dataclass(frozen=True)
class ValueSetSnapshot:
    """Immutable canonical state of a value set.

    Rows are stored as tuples of (field, value) pairs, ROW_FIELD_DEFAULTS
    fields first and any other loaded fields after them by name, so the
    snapshot is hashable and never aliases the working rows. The title is
    compared trimmed, the way it is saved.
    """
    sorting: str = NO_SORTING
    title: str = ""
    rows: Tuple[Tuple[Tuple[str, str], ...], ...] = field(default_factory=tuple)

    @classmethod
    def capture(cls, rows: Iterable[Mapping[str, Any]], sorting: str, title: str) -> 'ValueSetSnapshot':
        """Build a snapshot from working rows and document-level fields."""
        return cls(
            sorting=sorting,
            title=(title or "").strip(),
            rows=tuple(_freeze_row(row) for row in canonicalize_rows(rows)),
        )

    def row_dicts(self) -> list:
        """Export rows as plain dicts (for debugging and tests)."""
        return [dict(row) for row in self.rows]


def canonicalize_rows(rows: Iterable[Mapping[str, Any]]) -> list:
    """
    Strip client-only keys and make positional order explicit.

    Args:
        rows: Working rows in XML shape, possibly carrying temporary ids

    Returns:
        New list of rows without temporary ids, with ``order`` set to the
        1-based position of each row
    """
    canonical = strip_keys(rows, TEMP_ID_KEY)
    for index, row in enumerate(canonical):
        row["order"] = [str(index + 1)]
    return canonical


def compute_diff(baseline: ValueSetSnapshot, current: ValueSetSnapshot) -> bool:
    """
    Return True when ``current`` differs from ``baseline``.

    Document-level fields are checked first, then the row count, then rows
    field by field. The first difference found ends the comparison.
    """
    if baseline.sorting != current.sorting or baseline.title != current.title:
        logger.debug("Value set differs in document-level fields")
        return True

    if len(baseline.rows) != len(current.rows):
        logger.debug(f"Value set row count changed: {len(baseline.rows)} -> {len(current.rows)}")
        return True

    for index, (orig, now) in enumerate(zip(baseline.rows, current.rows)):
        if orig != now:
            logger.debug(f"Value set row {index} differs")
            return True

    return False


def _freeze_row(row: Mapping[str, Any]) -> Tuple[Tuple[str, str], ...]:
    known = tuple(
        (name, first_value(row, name) or default)
        for name, default in ROW_FIELD_DEFAULTS.items()
    )
    extra = tuple(
        (name, json.dumps(row[name], sort_keys=True, default=str))
        for name in sorted(row) if name not in ROW_FIELD_DEFAULTS
    )
    return known + extra
