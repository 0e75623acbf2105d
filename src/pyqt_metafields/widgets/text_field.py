"""
Text field.

Edit mode uses a single-line edit, or a multi-line edit when
``visible_lines_in_edit`` is set. View mode can offer a copy button. Table
mode truncates long values when ``truncate`` is set.
"""

from PyQt6.QtWidgets import QApplication, QHBoxLayout, QLabel, QPushButton, QWidget

from pyqt_metafields.forms.field_props import FieldMode
from pyqt_metafields.protocols import LineEditAdapter, PlainTextEditAdapter
from pyqt_metafields.widgets.field_base import EMPTY_DISPLAY, MetaFieldWidget

TRUNCATE_AT = 30
LINE_HEIGHT_PX = 20


class TextField(MetaFieldWidget):

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._initialize()

    @property
    def text(self) -> str:
        return "" if self._value is None else str(self._value)

    def display_text(self) -> str:
        text = self.text
        if not text:
            return EMPTY_DISPLAY
        if self.mode is FieldMode.TABLE and self.props.truncate and len(text) > TRUNCATE_AT:
            return f"{text[:TRUNCATE_AT]}..."
        return text

    def _build_edit(self) -> QWidget:
        if self.props.visible_lines_in_edit:
            editor = PlainTextEditAdapter()
            editor.setFixedHeight(self.props.visible_lines_in_edit * LINE_HEIGHT_PX + 8)
        else:
            editor = LineEditAdapter()
            if self.props.max_length:
                editor.setMaxLength(self.props.max_length)
        editor.set_placeholder(self.props.placeholder)
        editor.set_value(self.text)
        editor.connect_change_signal(self._commit)
        return editor

    def _build_display(self) -> QWidget:
        label = QLabel(self.display_text())
        if self.mode is FieldMode.TABLE:
            if self.props.truncate and len(self.text) > TRUNCATE_AT:
                label.setToolTip(self.text)
            return label

        if self.props.visible_lines_in_view:
            label.setWordWrap(True)
            label.setMaximumHeight(self.props.visible_lines_in_view * LINE_HEIGHT_PX)
        if not (self.props.copyable and self.text):
            return label

        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(label, 1)
        copy_button = QPushButton("Copy")
        if self.props.test_id:
            copy_button.setObjectName(f"{self.props.test_id}-copy")
        copy_button.clicked.connect(lambda: QApplication.clipboard().setText(self.text))
        layout.addWidget(copy_button)
        self.copy_button = copy_button
        return container
