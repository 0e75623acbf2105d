"""Number field with culture-aware formatting and partial-input handling."""

import logging
from typing import Optional

from PyQt6.QtWidgets import QWidget

from pyqt_metafields.core.culture import CultureFormat, DEFAULT_CULTURE
from pyqt_metafields.core.number_format import (
    DEFAULT_DECIMAL_PLACES, commit_value, constrain_number_input, format_for_edit, format_number,
    validate_number_input,
)
from pyqt_metafields.protocols import LineEditAdapter
from pyqt_metafields.widgets.field_base import MetaFieldWidget

logger = logging.getLogger(__name__)


class NumberField(MetaFieldWidget):
    """
    Number field in edit, view or table mode.

    In edit mode the line edit keeps exactly what the user typed after
    constraint ("-", "12."), and value_changed fires only with None (cleared)
    or a complete number in storage form ("1234.5").
    """

    def __init__(self, culture: Optional[CultureFormat] = None, **kwargs):
        super().__init__(**kwargs)
        self.culture = culture or DEFAULT_CULTURE
        self.line_edit: Optional[LineEditAdapter] = None
        self._initialize()

    @property
    def decimal_places(self) -> int:
        if self.props.decimal_places is None:
            return DEFAULT_DECIMAL_PLACES
        return self.props.decimal_places

    def display_text(self) -> str:
        return format_number(self._value, self.decimal_places, self.props.format, self.culture)

    def _build_edit(self) -> QWidget:
        self.line_edit = LineEditAdapter()
        self.line_edit.set_placeholder(self.props.placeholder)
        self.line_edit.set_value(format_for_edit(self._value, self.decimal_places, self.culture))
        self.line_edit.connect_change_signal(self._on_text_edited)
        return self.line_edit

    def _on_text_edited(self, text: str) -> None:
        if validate_number_input(text, self.decimal_places, self.culture):
            constrained = text
        else:
            constrained = constrain_number_input(text, self.decimal_places, self.culture)
            logger.debug(f"Constrained number input '{text}' to '{constrained}'")
        if constrained != text:
            cursor = self.line_edit.cursorPosition()
            self.line_edit.set_value(constrained)
            self.line_edit.setCursorPosition(min(cursor, len(constrained)))

        should_commit, value = commit_value(constrained, self.culture)
        if should_commit:
            self._commit(value)
        else:
            logger.debug(f"Holding partial number input '{constrained}'")
