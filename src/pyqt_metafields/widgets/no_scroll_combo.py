"""
No-scroll combo box for PyQt6.

Prevents accidental value changes from mouse wheel events in scrollable
forms and tables.
"""

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QWheelEvent
from PyQt6.QtWidgets import QComboBox, QCompleter

from pyqt_metafields.protocols import ComboBoxAdapter


class NoScrollComboBox(ComboBoxAdapter):
    """ComboBox that ignores wheel events to prevent accidental value changes.

    Inherits from ComboBoxAdapter which already implements ValueGettable/ValueSettable ABCs.
    Shows the placeholder text while currentIndex == -1 (None value).
    """

    def __init__(self, parent=None, placeholder: str = ""):
        super().__init__(parent)
        if placeholder:
            self.set_placeholder(placeholder)

    def wheelEvent(self, event: QWheelEvent):
        """Ignore wheel events to prevent accidental value changes."""
        event.ignore()

    def enable_search(self) -> None:
        """Make the combo editable with a case-insensitive contains-match completer."""
        self.setEditable(True)
        self.setInsertPolicy(QComboBox.InsertPolicy.NoInsert)
        completer = QCompleter(self.model(), self)
        completer.setFilterMode(Qt.MatchFlag.MatchContains)
        completer.setCaseSensitivity(Qt.CaseSensitivity.CaseInsensitive)
        completer.setCompletionMode(QCompleter.CompletionMode.PopupCompletion)
        self.setCompleter(completer)
        if self.placeholderText():
            self.lineEdit().setPlaceholderText(self.placeholderText())
