"""
Widget adapters that wrap Qt widgets to implement the field ABCs.

Normalizes Qt's inconsistent APIs:
- QLineEdit.text() vs QComboBox.currentData() vs QDateEdit.date()
- QLineEdit.setText() vs QComboBox.setCurrentIndex() vs QDateEdit.setDate()
- QLineEdit.setPlaceholderText() vs QDateEdit.setSpecialValueText()

All adapters implement consistent interface via ABCs:
- get_value() / set_value() for all widgets
- set_placeholder() where Qt can show one
- connect_change_signal() for user-driven edits only
"""

from datetime import date
from typing import Any, Callable, Optional
from abc import ABCMeta

from PyQt6.QtWidgets import QLineEdit, QComboBox, QCheckBox, QDateEdit, QPlainTextEdit
from PyQt6.QtCore import QDate, QObject

from .widget_protocols import (
    ValueGettable, ValueSettable, PlaceholderCapable, ChangeSignalEmitter
)

# PyQt-specific metaclass that combines ABCMeta with Qt's metaclass
_QtMetaclass = type(QObject)


class PyQtWidgetMeta(_QtMetaclass, ABCMeta):
    """Metaclass for PyQt widgets that need ABC support."""
    pass


class LineEditAdapter(QLineEdit, ValueGettable, ValueSettable, PlaceholderCapable,
                      ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    Adapter for QLineEdit implementing the field ABCs.

    Values are the raw text: partial entries such as "-" must survive a
    get/set round trip, so nothing is stripped.
    """

    _widget_id = "line_edit"

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        return self.text()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        self.setText("" if value is None else str(value))

    def set_placeholder(self, text: str) -> None:
        """Implement PlaceholderCapable ABC."""
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC (user edits only, not setText)."""
        self.textEdited.connect(lambda _text: callback(self.get_value()))


class PlainTextEditAdapter(QPlainTextEdit, ValueGettable, ValueSettable, PlaceholderCapable,
                           ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """Adapter for multi-line text entry."""

    _widget_id = "plain_text_edit"

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setting_value = False

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        return self.toPlainText()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        self._setting_value = True
        try:
            self.setPlainText("" if value is None else str(value))
        finally:
            self._setting_value = False

    def set_placeholder(self, text: str) -> None:
        """Implement PlaceholderCapable ABC."""
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC."""
        def on_changed():
            if not self._setting_value:
                callback(self.get_value())
        self.textChanged.connect(on_changed)


class ComboBoxAdapter(QComboBox, ValueGettable, ValueSettable, PlaceholderCapable,
                      ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    Adapter for QComboBox implementing the field ABCs.

    Stores actual option values in itemData, not just display text.
    """

    _widget_id = "combo_box"

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        if self.currentIndex() < 0:
            return None
        return self.itemData(self.currentIndex())

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        for i in range(self.count()):
            if self.itemData(i) == value:
                self.setCurrentIndex(i)
                return
        # Value not found - clear selection
        self.setCurrentIndex(-1)

    def set_placeholder(self, text: str) -> None:
        """Implement PlaceholderCapable ABC."""
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC (user selections only)."""
        self.activated.connect(lambda _index: callback(self.get_value()))


class CheckBoxAdapter(QCheckBox, ValueGettable, ValueSettable,
                      ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    Adapter for QCheckBox implementing the field ABCs.

    Returns bool values, treats None as False.
    """

    _widget_id = "check_box"

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        return self.isChecked()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        self.setChecked(bool(value) if value is not None else False)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC (clicks only, not setChecked)."""
        self.clicked.connect(lambda _checked: callback(self.get_value()))


class DateEditAdapter(QDateEdit, ValueGettable, ValueSettable, PlaceholderCapable,
                      ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    Adapter for QDateEdit with calendar popup.

    Handles None values using the special value text mechanism: the minimum
    date stands for "no value" and displays the placeholder.
    """

    _widget_id = "date_edit"

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setting_value = False
        self.setCalendarPopup(True)
        self.setSpecialValueText(" ")  # Empty special value = None
        self.setDate(self.minimumDate())

    def get_value(self) -> Optional[date]:
        """Implement ValueGettable ABC."""
        if self.date() == self.minimumDate() and self.specialValueText():
            return None
        return self.date().toPyDate()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        self._setting_value = True
        try:
            if value is None:
                self.setDate(self.minimumDate())
            else:
                self.setDate(QDate(value.year, value.month, value.day))
        finally:
            self._setting_value = False

    def set_placeholder(self, text: str) -> None:
        """Implement PlaceholderCapable ABC."""
        self.setSpecialValueText(text or " ")

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC (user edits only)."""
        def on_changed(_qdate):
            if not self._setting_value:
                callback(self.get_value())
        self.dateChanged.connect(on_changed)
