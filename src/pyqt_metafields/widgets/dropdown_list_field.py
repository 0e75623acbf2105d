"""
Dropdown-list field backed by a metadata document.

Options are the items under ``root_key``/``item_key`` of the document at the
field's source path. By default both the option value and its display text
are the first field of each item.
"""

import logging
from typing import Any, Callable, List, Optional, Tuple

from PyQt6.QtWidgets import QLabel, QWidget

from pyqt_metafields.core.background_task import BackgroundTaskManager
from pyqt_metafields.core.xml_shape import first_value
from pyqt_metafields.services.metadata_service import MetadataQuery, MetadataSourceAccessor, QueryStatus
from pyqt_metafields.widgets.field_base import EMPTY_DISPLAY, ERROR_STYLE, MetaFieldWidget
from pyqt_metafields.widgets.no_scroll_combo import NoScrollComboBox

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER = "Select an option"
DEFAULT_ROOT_KEY = "root"
DEFAULT_ITEM_KEY = "item"
MISSING_SOURCE_TEXT = "Missing metadata source path for field"
LOADING_TEXT = "Loading options..."
LOAD_FAILED_TEXT = "Failed to load options"

ItemGetter = Callable[[Any], str]


def first_field(item: Any) -> str:
    """Default extractor: the item itself if it is a string, else its first field."""
    if isinstance(item, str):
        return item
    if not isinstance(item, dict) or not item:
        return ""
    return first_value(item, next(iter(item))) or ""


class DropDownListField(MetaFieldWidget):
    """
    Dropdown-list field in edit, view or table mode.

    Usage:
        field = DropDownListField(accessor=accessor, source_path="lists/currencies",
                                  root_key="currencies", item_key="currency",
                                  field_code="currency")
    """

    def __init__(self, accessor: Optional[MetadataSourceAccessor] = None,
                 root_key: str = DEFAULT_ROOT_KEY, item_key: str = DEFAULT_ITEM_KEY,
                 get_value: Optional[ItemGetter] = None, get_display_value: Optional[ItemGetter] = None,
                 options_task_manager=None, **kwargs):
        super().__init__(**kwargs)
        self.accessor = accessor
        self.root_key = root_key
        self.item_key = item_key
        self._get_value = get_value or first_field
        self._get_display = get_display_value or first_field
        self._options_tasks = options_task_manager or BackgroundTaskManager()
        self._query: Optional[MetadataQuery] = None
        self._requested_path: Optional[str] = None
        self.combo: Optional[NoScrollComboBox] = None
        self._initialize()

    # --- options ------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        path = self.props.source_path
        return bool(path) and self.accessor is not None and (
            self._query is None or self._query.path != path
        )

    def options(self) -> List[Tuple[str, str]]:
        """(value, display) pairs of the loaded document, empty until loaded."""
        if self._query is None or not self._query.is_loaded:
            return []
        items = self.accessor.get_items(self._query.data, self.root_key, self.item_key)
        return [(self._get_value(item), self._get_display(item)) for item in items]

    def _ensure_options(self) -> None:
        path = self.props.source_path
        if not path or self.accessor is None or path == self._requested_path:
            return
        self._requested_path = path
        logger.debug(f"Loading dropdown options from '{path}'")
        self._options_tasks.run(
            target=self.accessor.fetch,
            args=(path,),
            on_success=self._on_options_loaded,
            on_error=self._on_options_error,
        )

    def _on_options_loaded(self, query: MetadataQuery) -> None:
        self._query = query
        self.render()
        if query.error is not None:
            self.show_error(LOAD_FAILED_TEXT)

    def _on_options_error(self, error: Exception) -> None:
        logger.error(f"Dropdown options for '{self._requested_path}' failed: {error}")
        self._on_options_loaded(MetadataQuery(path=self._requested_path, status=QueryStatus.ERROR, error=error))

    # --- rendering ----------------------------------------------------------

    def render(self) -> None:
        super().render()
        self._ensure_options()

    def display_text(self) -> str:
        for value, display in self.options():
            if self._value and value == self._value:
                return display
        return str(self._value) if self._value else EMPTY_DISPLAY

    def _build_edit(self) -> QWidget:
        self.combo = None
        if not self.props.source_path:
            label = QLabel(MISSING_SOURCE_TEXT)
            label.setStyleSheet(ERROR_STYLE)
            return label
        if self.is_loading:
            return QLabel(LOADING_TEXT)

        combo = NoScrollComboBox(placeholder=self.props.placeholder or DEFAULT_PLACEHOLDER)
        for value, display in self.options():
            combo.addItem(display, value)
        if self.props.allow_search:
            combo.enable_search()
        combo.set_value(self._value)
        combo.connect_change_signal(self._on_selected)
        self.combo = combo
        return combo

    def _on_selected(self, value: Any) -> None:
        if value is not None and value != self._value:
            self._commit(value)
