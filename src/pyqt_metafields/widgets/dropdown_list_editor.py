"""
Dropdown-list value-set editor.

Edits the rows of one metadata document (label, code, default, icon set,
icon), its title and its sorting preference, and saves the whole document
back. Save is enabled only while there are unsaved changes and no save is
pending.
"""

import logging
from typing import Any, Dict, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox, QFormLayout, QHBoxLayout, QHeaderView, QLabel, QLineEdit,
    QPushButton, QVBoxLayout, QWidget,
)

from pyqt_metafields.core.background_task import BackgroundTaskManager
from pyqt_metafields.core.dirty_tracking import TEMP_ID_KEY
from pyqt_metafields.core.sort_utils import SortDirection, next_sort_state
from pyqt_metafields.core.xml_shape import first_value
from pyqt_metafields.forms.value_set_session import SORTING_OPTIONS, ValueSetSession
from pyqt_metafields.protocols import get_config
from pyqt_metafields.services.metadata_service import MetadataQuery, MetadataSourceAccessor
from pyqt_metafields.widgets.field_base import ERROR_STYLE, MUTED_STYLE
from pyqt_metafields.widgets.no_scroll_combo import NoScrollComboBox
from pyqt_metafields.widgets.reorderable_table import ReorderableTableWidget

logger = logging.getLogger(__name__)

EMPTY_TEXT = 'No items. Click "Add Row" to create a new entry.'
UNSAVED_TEXT = 'You have unsaved changes. Click "Save Changes" to persist your modifications.'
SAVE_SUCCESS_TEXT = "Metadata updated successfully"
SAVE_FAILED_TEXT = "Failed to update metadata"
LOAD_FAILED_TEXT = "Failed to load metadata"
LOADING_TEXT = "Loading..."
SAVE_TEXT = "Save Changes"
SAVING_TEXT = "Saving..."
SUCCESS_STYLE = "color: #27ae60;"

SORTING_LABELS = {
    "no sorting": "No Sorting",
    "ascending": "Ascending",
    "descending": "Descending",
}

# (header, row field); the Default column holds a checkbox, the last column actions
COLUMNS = (
    ("Label", "label"),
    ("Code", "code"),
    ("Default", "default"),
    ("Icon Set", "iconSet"),
    ("Icon", "icon"),
    ("Actions", None),
)


class DropDownListFieldTypeEditor(QWidget):
    """
    Table editor for a value-set metadata document.

    Signals:
        saved(dict): Emitted with the persisted document after a successful save
        error_occurred(str): Emitted with the message of a failed load or save

    Clicking a text column header sorts the displayed rows
    (ascending, descending, off) without changing their saved order. Rows can
    be dragged to a new position while no header sort is active.
    """

    saved = pyqtSignal(dict)
    error_occurred = pyqtSignal(str)

    def __init__(self, accessor: MetadataSourceAccessor, source_path: str,
                 root_key: Optional[str] = None, item_key: Optional[str] = None,
                 title: str = "Metadata Editor", task_manager=None, parent=None):
        super().__init__(parent)
        config = get_config()
        self.accessor = accessor
        self.source_path = source_path
        self.session = ValueSetSession(root_key or config.default_root_key,
                                       item_key or config.default_item_key)
        self._task_manager = task_manager or BackgroundTaskManager()
        self._sort_column: Optional[str] = None
        self._sort_direction = SortDirection.NONE

        self._setup_ui(title)
        self._setup_connections()
        self.load()

    # --- UI -----------------------------------------------------------------

    def _setup_ui(self, title: str):
        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        self.title_label = QLabel(title)
        font = self.title_label.font()
        font.setBold(True)
        self.title_label.setFont(font)
        header.addWidget(self.title_label, 1)

        self.add_button = QPushButton("Add Row")
        self.add_button.setObjectName("button-add-row")
        header.addWidget(self.add_button)

        self.save_button = QPushButton(SAVE_TEXT)
        self.save_button.setObjectName("button-save")
        header.addWidget(self.save_button)
        layout.addLayout(header)

        self.status_label = QLabel()
        self.status_label.setObjectName("text-status")
        self.status_label.setVisible(False)
        layout.addWidget(self.status_label)

        form = QFormLayout()
        self.title_input = QLineEdit()
        self.title_input.setObjectName("input-xml-title")
        self.title_input.setPlaceholderText("Enter value set title")
        form.addRow("Title", self.title_input)

        self.sorting_input = NoScrollComboBox()
        self.sorting_input.setObjectName("select-xml-sorting")
        for option in SORTING_OPTIONS:
            self.sorting_input.addItem(SORTING_LABELS[option], option)
        form.addRow("Sorting", self.sorting_input)
        layout.addLayout(form)

        self.table = ReorderableTableWidget()
        self.table.setColumnCount(len(COLUMNS))
        self.table.setHorizontalHeaderLabels([name for name, _ in COLUMNS])
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.table.verticalHeader().setVisible(False)
        layout.addWidget(self.table, 1)

        self.empty_label = QLabel(EMPTY_TEXT)
        self.empty_label.setObjectName("text-empty")
        self.empty_label.setStyleSheet(MUTED_STYLE)
        layout.addWidget(self.empty_label)

        self.unsaved_label = QLabel(UNSAVED_TEXT)
        self.unsaved_label.setObjectName("text-unsaved-changes")
        self.unsaved_label.setStyleSheet(MUTED_STYLE)
        layout.addWidget(self.unsaved_label)

        self._refresh_state()

    def _setup_connections(self):
        self.add_button.clicked.connect(self.add_row)
        self.save_button.clicked.connect(self.save)
        self.title_input.textEdited.connect(self._on_title_edited)
        self.sorting_input.connect_change_signal(self._on_sorting_selected)
        self.table.horizontalHeader().sectionClicked.connect(self._on_header_clicked)
        self.table.rows_reordered.connect(self.move_row)

    # --- loading ------------------------------------------------------------

    def load(self) -> None:
        """Fetch the document and reset the editor to it."""
        self._show_status(LOADING_TEXT, MUTED_STYLE)
        self._task_manager.run(
            target=self.accessor.fetch,
            args=(self.source_path,),
            on_success=self._on_loaded,
            on_error=self._on_load_failed,
        )

    def _on_loaded(self, query: MetadataQuery) -> None:
        if not query.is_loaded:
            self._on_load_failed(query.error or RuntimeError(LOAD_FAILED_TEXT))
            return
        self._clear_status()
        self.session.load(query.data)
        self._populate()

    def _on_load_failed(self, error: Exception) -> None:
        message = getattr(error, "message", None) or str(error) or LOAD_FAILED_TEXT
        logger.error(f"Loading value set '{self.source_path}' failed: {message}")
        self._show_status(message, ERROR_STYLE)
        self.error_occurred.emit(message)
        self._refresh_state()

    # --- editing ------------------------------------------------------------

    def add_row(self) -> str:
        temp_id = self.session.add_row()
        self._clear_status()
        self._populate_rows()
        return temp_id

    def delete_row(self, temp_id: str) -> None:
        self.session.delete_row(temp_id)
        self._populate_rows()

    def move_row(self, from_row: int, to_row: int) -> None:
        if self._sort_direction is not SortDirection.NONE:
            logger.debug("Ignoring row move while a header sort is active")
            return
        self.session.move_row(from_row, to_row)
        self._populate_rows()

    def _on_cell_edited(self, temp_id: str, field_name: str, text: str) -> None:
        self.session.edit_cell(temp_id, field_name, text)
        self._refresh_state()

    def _on_default_toggled(self, temp_id: str, checked: bool) -> None:
        self.session.set_default(temp_id, checked)
        self._refresh_state()

    def _on_title_edited(self, text: str) -> None:
        self.session.set_title(text)
        self._refresh_state()

    def _on_sorting_selected(self, value: Any) -> None:
        if value is not None:
            self.session.set_sorting(value)
            self._refresh_state()

    def _on_header_clicked(self, section: int) -> None:
        field_name = COLUMNS[section][1]
        if field_name is None or field_name == "default":
            return
        self._sort_column, self._sort_direction = next_sort_state(
            self._sort_column, self._sort_direction, field_name
        )
        logger.debug(f"Display sort: {self._sort_column} {self._sort_direction.value}")
        self._populate_rows()

    # --- saving -------------------------------------------------------------

    @property
    def is_saving(self) -> bool:
        return self._task_manager.is_pending

    def save(self) -> bool:
        """
        Persist the working state.

        Returns:
            True if a save was started; False when clean or already saving
        """
        if not self.session.is_dirty or self.is_saving:
            return False
        self._clear_status()
        document = self.session.build_document()
        started = self._task_manager.run(
            target=self.accessor.save,
            args=(self.source_path, document),
            on_success=lambda saved: self._on_saved(document, saved),
            on_error=self._on_save_failed,
            button=self.save_button,
            button_loading_text=SAVING_TEXT,
        )
        self._refresh_state()
        return started

    def _on_saved(self, submitted: Dict[str, Any], saved: Dict[str, Any]) -> None:
        # Rows edited while the request was in flight stay as typed
        self.session.mark_saved(submitted)
        self._refresh_state()
        self._show_status(SAVE_SUCCESS_TEXT, SUCCESS_STYLE)
        self.saved.emit(saved)

    def _on_save_failed(self, error: Exception) -> None:
        message = getattr(error, "message", None) or str(error) or SAVE_FAILED_TEXT
        self._show_status(message, ERROR_STYLE)
        self._refresh_state()
        self.error_occurred.emit(message)

    # --- rendering ----------------------------------------------------------

    def _populate(self) -> None:
        self.title_input.setText(self.session.title)
        self.sorting_input.set_value(self.session.sorting)
        self._populate_rows()

    def _populate_rows(self) -> None:
        rows = self.session.sorted_view(self._sort_column, self._sort_direction)
        self.table.setRowCount(0)
        self.table.setRowCount(len(rows))
        for row_index, row in enumerate(rows):
            temp_id = row[TEMP_ID_KEY]
            for column, (_header, field_name) in enumerate(COLUMNS):
                if field_name is None:
                    widget = self._make_delete_button(temp_id)
                elif field_name == "default":
                    widget = self._make_default_checkbox(temp_id, first_value(row, "default") == "true")
                else:
                    widget = self._make_cell_editor(temp_id, field_name, first_value(row, field_name))
                self.table.setCellWidget(row_index, column, widget)

        header = self.table.horizontalHeader()
        if self._sort_column is None:
            header.setSortIndicatorShown(False)
        else:
            column = next(i for i, (_h, f) in enumerate(COLUMNS) if f == self._sort_column)
            header.setSortIndicatorShown(True)
            header.setSortIndicator(column, _qt_sort_order(self._sort_direction))
        self.table.set_reorder_enabled(self._sort_direction is SortDirection.NONE)
        self._refresh_state()

    def _make_cell_editor(self, temp_id: str, field_name: str, text: str) -> QLineEdit:
        editor = QLineEdit(text)
        editor.setObjectName(f"input-{field_name.lower()}-{temp_id}")
        editor.textEdited.connect(lambda value: self._on_cell_edited(temp_id, field_name, value))
        return editor

    def _make_default_checkbox(self, temp_id: str, checked: bool) -> QWidget:
        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        checkbox = QCheckBox()
        checkbox.setObjectName(f"checkbox-default-{temp_id}")
        checkbox.setChecked(checked)
        checkbox.clicked.connect(lambda value: self._on_default_toggled(temp_id, value))
        layout.addStretch()
        layout.addWidget(checkbox)
        layout.addStretch()
        return container

    def _make_delete_button(self, temp_id: str) -> QPushButton:
        button = QPushButton("Delete")
        button.setObjectName(f"button-delete-{temp_id}")
        button.clicked.connect(lambda: self.delete_row(temp_id))
        return button

    def _refresh_state(self) -> None:
        loaded = self.session.is_loaded
        dirty = self.session.is_dirty
        saving = self._task_manager.is_pending
        self.add_button.setEnabled(loaded)
        self.title_input.setEnabled(loaded)
        self.sorting_input.setEnabled(loaded)
        self.save_button.setEnabled(loaded and dirty and not saving)
        self.save_button.setText(SAVING_TEXT if saving else SAVE_TEXT)
        self.unsaved_label.setVisible(dirty)
        self.empty_label.setVisible(loaded and not self.session.rows)

    def _show_status(self, message: str, style: str) -> None:
        self.status_label.setText(message)
        self.status_label.setStyleSheet(style)
        self.status_label.setVisible(True)

    def _clear_status(self) -> None:
        self.status_label.clear()
        self.status_label.setVisible(False)

    def closeEvent(self, event):
        self._task_manager.cleanup()
        super().closeEvent(event)


def _qt_sort_order(direction: SortDirection) -> Qt.SortOrder:
    if direction is SortDirection.DESC:
        return Qt.SortOrder.DescendingOrder
    return Qt.SortOrder.AscendingOrder
