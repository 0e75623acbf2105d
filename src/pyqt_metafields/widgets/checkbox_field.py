"""Checkbox field: interactive in edit, disabled in view, Yes/No in tables."""

from PyQt6.QtWidgets import QLabel, QWidget

from pyqt_metafields.forms.field_props import CHECKBOX_TEST_IDS, FieldMode
from pyqt_metafields.protocols import CheckBoxAdapter
from pyqt_metafields.widgets.field_base import MetaFieldWidget


class CheckboxField(MetaFieldWidget):

    test_id_templates = CHECKBOX_TEST_IDS

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._initialize()

    def display_text(self) -> str:
        return "Yes" if _is_checked(self._value) else "No"

    def _build_edit(self) -> QWidget:
        checkbox = CheckBoxAdapter()
        checkbox.set_value(_is_checked(self._value))
        checkbox.connect_change_signal(self._commit)
        return checkbox

    def _build_display(self) -> QWidget:
        if self.mode is FieldMode.TABLE:
            return QLabel(self.display_text())
        checkbox = CheckBoxAdapter()
        checkbox.set_value(_is_checked(self._value))
        checkbox.setEnabled(False)
        return checkbox


def _is_checked(value) -> bool:
    if isinstance(value, str):
        return value == "true"
    return bool(value)
