"""
QTableWidget with drag-and-drop row reordering.

The table does not move its own cells; it reports (from_row, to_row) so the
owner can reorder its data model and repopulate.
"""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QAbstractItemView, QTableWidget


class ReorderableTableWidget(QTableWidget):
    """Table whose rows can be dragged to a new position.

    Emits rows_reordered when a row is dropped at a different position.
    """

    rows_reordered = pyqtSignal(int, int)  # from_row, to_row

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setDragDropMode(QAbstractItemView.DragDropMode.InternalMove)
        self.setDefaultDropAction(Qt.DropAction.MoveAction)
        self.setDragDropOverwriteMode(False)

    def set_reorder_enabled(self, enabled: bool) -> None:
        self.setDragEnabled(enabled)
        self.setAcceptDrops(enabled)
        self.viewport().setAcceptDrops(enabled)

    def dropEvent(self, event):
        """Report the move instead of letting Qt shuffle cells."""
        source_row = self.currentRow()
        target_row = self.rowAt(int(event.position().y()))
        if target_row == -1:
            target_row = self.rowCount() - 1

        # CopyAction keeps the view from removing the dragged source row
        event.setDropAction(Qt.DropAction.CopyAction)
        event.accept()

        if source_row != -1 and source_row != target_row:
            self.rows_reordered.emit(source_row, target_row)
