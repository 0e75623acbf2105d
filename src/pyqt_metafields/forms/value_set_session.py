"""
Editing session for a dropdown-list value set.

Holds the working rows of one metadata document, the document-level title
and sorting fields, and the snapshot they are compared against. Every
mutation recomputes the dirty flag. The session has no Qt or network
dependencies; DropDownListFieldTypeEditor renders it and performs I/O.
"""

import logging
import uuid
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pyqt_metafields.core.dirty_tracking import (
    NO_SORTING, ROW_FIELD_DEFAULTS, TEMP_ID_KEY,
    ValueSetSnapshot, canonicalize_rows, compute_diff,
)
from pyqt_metafields.core.sort_utils import SortDirection, sorted_rows
from pyqt_metafields.core.xml_shape import first_value, get_collection, wrap_value

logger = logging.getLogger(__name__)

SORTING_OPTIONS = (NO_SORTING, "ascending", "descending")


class EditorState(Enum):
    LOADING = "loading"
    CLEAN = "clean"
    DIRTY = "dirty"


class ValueSetSession:
    """
    Working copy of a value set with snapshot-based dirty tracking.

    Rows are addressed by their temporary id (``existing-{i}`` for loaded
    rows, ``new-{hex}`` for added ones), never by index, so a view-sorted
    table can edit the right row.
    """

    def __init__(self, root_key: str, item_key: str):
        self.root_key = root_key
        self.item_key = item_key
        self.rows: List[Dict[str, Any]] = []
        self.title = ""
        self.sorting = NO_SORTING
        self.state = EditorState.LOADING
        self._snapshot = ValueSetSnapshot()

    @property
    def is_dirty(self) -> bool:
        return self.state is EditorState.DIRTY

    @property
    def is_loaded(self) -> bool:
        return self.state is not EditorState.LOADING

    @property
    def snapshot(self) -> ValueSetSnapshot:
        return self._snapshot

    def load(self, document: Optional[Mapping[str, Any]]) -> None:
        """
        Replace the working state with the contents of ``document``.

        Rows are ordered by their stored ``order`` (rows without one keep
        their position), get fresh ``existing-{i}`` ids, and the result
        becomes the clean baseline.
        """
        root = document.get(self.root_key) if document else None
        root = root if isinstance(root, Mapping) else {}

        items = []
        for position, item in enumerate(get_collection(document, self.root_key, self.item_key)):
            if not isinstance(item, Mapping):
                logger.warning(f"Skipping malformed '{self.item_key}' entry: {item!r}")
                continue
            items.append((_order_of(item, position + 1), position, item))
        items.sort(key=lambda entry: (entry[0], entry[1]))

        self.rows = []
        for index, (_order, _position, item) in enumerate(items):
            row = {key: _copy_leaf(value) for key, value in item.items()}
            row[TEMP_ID_KEY] = f"existing-{index}"
            self.rows.append(row)

        self.title = first_value(root, "title")
        self.sorting = first_value(root, "sorting") or NO_SORTING
        self._take_snapshot()
        logger.debug(f"Loaded value set with {len(self.rows)} row(s)")

    def add_row(self) -> str:
        """Append a defaulted row and return its temporary id."""
        self._require_loaded()
        temp_id = f"new-{uuid.uuid4().hex}"
        row = {name: wrap_value(default) for name, default in ROW_FIELD_DEFAULTS.items()}
        row["order"] = wrap_value(len(self.rows) + 1)
        row[TEMP_ID_KEY] = temp_id
        self.rows.append(row)
        self.recompute()
        return temp_id

    def delete_row(self, temp_id: str) -> None:
        self._require_loaded()
        index = self._index_of(temp_id)
        del self.rows[index]
        self._renumber()
        self.recompute()

    def edit_cell(self, temp_id: str, field_name: str, value: str) -> None:
        """Replace one text field of a row."""
        self._require_loaded()
        if field_name in (TEMP_ID_KEY, "order"):
            raise ValueError(f"Field '{field_name}' is managed by the session")
        row = self.rows[self._index_of(temp_id)]
        row[field_name] = wrap_value(value)
        self.recompute()

    def set_default(self, temp_id: str, checked: bool) -> None:
        self._require_loaded()
        row = self.rows[self._index_of(temp_id)]
        row["default"] = wrap_value("true" if checked else "false")
        self.recompute()

    def move_row(self, from_index: int, to_index: int) -> None:
        """Move a row to a new position and renumber ``order``."""
        self._require_loaded()
        if not (0 <= from_index < len(self.rows) and 0 <= to_index < len(self.rows)):
            raise IndexError(f"Cannot move row {from_index} to {to_index} of {len(self.rows)}")
        if from_index == to_index:
            return
        row = self.rows.pop(from_index)
        self.rows.insert(to_index, row)
        self._renumber()
        self.recompute()

    def set_title(self, title: str) -> None:
        self._require_loaded()
        self.title = title
        self.recompute()

    def set_sorting(self, sorting: str) -> None:
        self._require_loaded()
        if sorting not in SORTING_OPTIONS:
            raise ValueError(f"Unknown sorting '{sorting}', expected one of {SORTING_OPTIONS}")
        self.sorting = sorting
        self.recompute()

    def sorted_view(self, column: Optional[str], direction: SortDirection) -> List[Dict[str, Any]]:
        """Rows in display order for a header sort; the working order is untouched."""
        return sorted_rows(self.rows, column, direction)

    def recompute(self) -> bool:
        """Compare the working state against the snapshot and update the state."""
        current = ValueSetSnapshot.capture(self.rows, self.sorting, self.title)
        dirty = compute_diff(self._snapshot, current)
        new_state = EditorState.DIRTY if dirty else EditorState.CLEAN
        if new_state is not self.state:
            logger.debug(f"Value set state {self.state.value} -> {new_state.value}")
        self.state = new_state
        return dirty

    def build_document(self) -> Dict[str, Any]:
        """
        Build the document to persist.

        Temporary ids are stripped and ``order`` is renumbered. ``title`` is
        written only when non-blank, ``sorting`` only when it is not
        "no sorting".
        """
        root: Dict[str, Any] = {self.item_key: canonicalize_rows(self.rows)}
        title = self.title.strip()
        if title:
            root["title"] = wrap_value(title)
        if self.sorting and self.sorting != NO_SORTING:
            root["sorting"] = wrap_value(self.sorting)
        return {self.root_key: root}

    def mark_saved(self, document: Optional[Mapping[str, Any]] = None) -> None:
        """
        Accept a successful save of ``document`` (default: the current state).

        The saved document becomes the baseline and the working rows are kept,
        so edits made while the save was in flight stay dirty.
        """
        self._require_loaded()
        if document is None:
            document = self.build_document()
        root = document.get(self.root_key)
        root = root if isinstance(root, Mapping) else {}
        self._snapshot = ValueSetSnapshot.capture(
            get_collection(document, self.root_key, self.item_key),
            first_value(root, "sorting") or NO_SORTING,
            first_value(root, "title"),
        )
        self._renumber()
        dirty = self.recompute()
        logger.debug(f"Value set saved; baseline reset ({'still dirty' if dirty else 'clean'})")

    def _take_snapshot(self) -> None:
        self._snapshot = ValueSetSnapshot.capture(self.rows, self.sorting, self.title)
        self.state = EditorState.CLEAN

    def _renumber(self) -> None:
        for index, row in enumerate(self.rows):
            row["order"] = wrap_value(index + 1)

    def _index_of(self, temp_id: str) -> int:
        for index, row in enumerate(self.rows):
            if row.get(TEMP_ID_KEY) == temp_id:
                return index
        raise KeyError(f"No row with id '{temp_id}'")

    def _require_loaded(self) -> None:
        if self.state is EditorState.LOADING:
            raise RuntimeError("Value set is still loading")


def _order_of(item: Mapping[str, Any], fallback: int) -> int:
    try:
        return int(first_value(item, "order"))
    except (TypeError, ValueError):
        return fallback


def _copy_leaf(value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    if isinstance(value, Mapping):
        return dict(value)
    return wrap_value(value)
