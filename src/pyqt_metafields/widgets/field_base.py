"""
Base widget for metadata-driven fields.

A field renders one value in one of three modes (edit, view, table). Its
props come from explicit constructor arguments merged over the descriptor
resolved for (object_code, field_code). Resolution runs in the background;
the field renders immediately from explicit props and re-renders once the
descriptor arrives.
"""

import logging
from typing import Any, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget

from pyqt_metafields.core.background_task import BackgroundTaskManager
from pyqt_metafields.forms.field_props import FieldMode, FieldProps, TestIdTemplates, merge_field_props
from pyqt_metafields.services.field_definition_service import FieldDefinitionResolver, FieldDescriptor

logger = logging.getLogger(__name__)

EMPTY_DISPLAY = "-"
ERROR_STYLE = "color: #c0392b;"
MUTED_STYLE = "color: #888888;"


class MetaFieldWidget(QWidget):
    """
    Common mode handling, prop merging and error display for field widgets.

    Subclasses implement _build_edit() and display_text(). The widget that
    carries the field's test id (Qt objectName) is whatever
    _build_edit()/_build_display() return.
    """

    value_changed = pyqtSignal(object)

    test_id_templates = TestIdTemplates()

    def __init__(self, mode: FieldMode = FieldMode.EDIT, value: Any = None,
                 object_code: Optional[str] = None, field_code: Optional[str] = None,
                 resolver: Optional[FieldDefinitionResolver] = None,
                 task_manager=None, parent=None, **explicit):
        super().__init__(parent)
        self.mode = FieldMode(mode)
        self.object_code = object_code
        self.field_code = field_code
        self.descriptor: Optional[FieldDescriptor] = None
        self._explicit = explicit
        self._value = value
        self._task_manager = task_manager or BackgroundTaskManager()
        self.props = self._merge()

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(2)

        self.label_widget = QLabel()
        self.label_widget.setStyleSheet(MUTED_STYLE)
        self.help_widget = QLabel()
        self.help_widget.setStyleSheet(MUTED_STYLE)
        self.help_widget.setWordWrap(True)
        self.error_label = QLabel()
        self.error_label.setStyleSheet(ERROR_STYLE)
        self.error_label.setVisible(False)
        self.content: Optional[QWidget] = None

        self._layout.addWidget(self.label_widget)
        self._layout.addWidget(self.help_widget)
        self._layout.addWidget(self.error_label)
        self._resolver = resolver

    def _initialize(self) -> None:
        """Render from explicit props and start descriptor resolution.

        Subclasses call this at the end of their __init__.
        """
        self.render()
        if self._resolver is not None and self.object_code and self.field_code:
            self._task_manager.run(
                target=self._resolver.resolve,
                args=(self.object_code, self.field_code),
                on_success=self.apply_descriptor,
                on_error=self._on_descriptor_error,
            )

    # --- value --------------------------------------------------------------

    def get_value(self) -> Any:
        return self._value

    def set_value(self, value: Any) -> None:
        """Set the value programmatically (does not emit value_changed)."""
        self._value = value
        self.render()

    def _commit(self, value: Any) -> None:
        self._value = value
        self.value_changed.emit(value)

    # --- errors -------------------------------------------------------------

    def show_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.setVisible(True)

    def clear_error(self) -> None:
        self.error_label.clear()
        self.error_label.setVisible(False)

    # --- rendering ----------------------------------------------------------

    def render(self) -> None:
        """Rebuild the mode-specific content from the current props and value."""
        self.clear_error()
        if self.content is not None:
            self._layout.removeWidget(self.content)
            self.content.deleteLater()

        if self.mode is FieldMode.EDIT:
            self.content = self._build_edit()
        else:
            self.content = self._build_display()

        if self.props.test_id:
            self.content.setObjectName(self.props.test_id)
        self._layout.insertWidget(1, self.content)

        show_label = self.mode is not FieldMode.TABLE and bool(self.props.label)
        self.label_widget.setText(self.props.label)
        self.label_widget.setVisible(show_label)
        show_help = self.mode is FieldMode.EDIT and bool(self.props.help_text)
        self.help_widget.setText(self.props.help_text)
        self.help_widget.setVisible(show_help)

    def _build_edit(self) -> QWidget:
        raise NotImplementedError

    def _build_display(self) -> QWidget:
        return QLabel(self.display_text())

    def display_text(self) -> str:
        """Text shown in view and table modes."""
        raise NotImplementedError

    # --- descriptor ---------------------------------------------------------

    def _merge(self) -> FieldProps:
        return merge_field_props(self.descriptor, self.mode, self.field_code,
                                 self.test_id_templates, **self._explicit)

    def apply_descriptor(self, descriptor: Optional[FieldDescriptor]) -> None:
        self.descriptor = descriptor
        self.props = self._merge()
        logger.debug(f"Applied descriptor for {self.object_code}.{self.field_code}: {descriptor is not None}")
        self.render()

    def _on_descriptor_error(self, error: Exception) -> None:
        # Explicit props still render; only the descriptor defaults are missing
        logger.warning(f"Field definition for {self.object_code}.{self.field_code} unavailable: {error}")

    def closeEvent(self, event):
        self._task_manager.cleanup()
        super().closeEvent(event)
