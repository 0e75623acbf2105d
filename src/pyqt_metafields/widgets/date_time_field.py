"""
Date, Time and DateTime fields.

Values are stored as UTC strings. Date fields keep the calendar day; Time and
DateTime fields are edited and shown in the display timezone. A stored value
that cannot be interpreted shows "Invalid date" instead of raising.
"""

import logging
from datetime import datetime, time
from typing import Optional

from PyQt6.QtCore import QRegularExpression
from PyQt6.QtGui import QRegularExpressionValidator
from PyQt6.QtWidgets import QHBoxLayout, QWidget

from pyqt_metafields.core.culture import CultureFormat, DEFAULT_CULTURE
from pyqt_metafields.core.datetime_normalization import (
    FieldKind, InvalidDateValue, INVALID_DATE_TEXT,
    combine_date, combine_time, format_stored_value, normalize_stored_value,
    resolve_timezone, to_storage_string, utc_to_user_zoned,
)
from pyqt_metafields.protocols import DateEditAdapter, LineEditAdapter, get_config
from pyqt_metafields.widgets.field_base import MetaFieldWidget

logger = logging.getLogger(__name__)

TIME_INPUT_FORMAT = "HH:mm"
_TIME_RE = QRegularExpression(r"^([01]?\d|2[0-3]):[0-5]\d$")

PLACEHOLDERS = {
    FieldKind.DATE: "Select date...",
    FieldKind.TIME: "Select time...",
    FieldKind.DATE_TIME: "Select date and time...",
}


class DateTimeField(MetaFieldWidget):
    """
    Date/time field in edit, view or table mode.

    Usage:
        field = DateTimeField(kind=FieldKind.DATE_TIME, value="2024-03-10T14:30:00Z",
                              mode=FieldMode.EDIT, label="Due")
        field.value_changed.connect(lambda v: print(v))  # "2024-03-10T15:00:00.000Z"
    """

    def __init__(self, kind: FieldKind = FieldKind.DATE, culture: Optional[CultureFormat] = None,
                 display_timezone: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.kind = FieldKind(kind)
        self.culture = culture or DEFAULT_CULTURE
        self.user_tz = resolve_timezone(display_timezone or get_config().display_timezone)
        self.date_edit: Optional[DateEditAdapter] = None
        self.time_edit: Optional[LineEditAdapter] = None
        self._initialize()

    def display_text(self) -> str:
        return format_stored_value(self._value, self.kind, self.user_tz, self.culture)

    def _current_instant(self) -> Optional[datetime]:
        try:
            return normalize_stored_value(self._value)
        except InvalidDateValue:
            return None

    def _build_edit(self) -> QWidget:
        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        placeholder = self.props.placeholder or PLACEHOLDERS[self.kind]

        try:
            instant = normalize_stored_value(self._value)
        except InvalidDateValue as e:
            logger.error(f"Cannot edit date value: {e}")
            self.show_error(INVALID_DATE_TEXT)
            instant = None
        wall = utc_to_user_zoned(instant, self.user_tz, self.kind) if instant else None

        self.date_edit = None
        self.time_edit = None

        if self.kind in (FieldKind.DATE, FieldKind.DATE_TIME):
            self.date_edit = DateEditAdapter()
            self.date_edit.setDisplayFormat(self.culture.date_format)
            self.date_edit.set_placeholder(placeholder)
            self.date_edit.set_value(wall.date() if wall else None)
            self.date_edit.connect_change_signal(self._on_date_picked)
            layout.addWidget(self.date_edit, 1)

        if self.kind in (FieldKind.TIME, FieldKind.DATE_TIME):
            self.time_edit = LineEditAdapter()
            self.time_edit.setValidator(QRegularExpressionValidator(_TIME_RE, self.time_edit))
            self.time_edit.set_placeholder(TIME_INPUT_FORMAT if self.date_edit else placeholder)
            self.time_edit.set_value(wall.strftime("%H:%M") if wall else "")
            self.time_edit.editingFinished.connect(self._on_time_entered)
            layout.addWidget(self.time_edit)

        return container

    def _on_date_picked(self, picked) -> None:
        if picked is None:
            self._commit(None)
            return
        instant = combine_date(picked, self.user_tz, self.kind, existing=self._current_instant())
        self.clear_error()
        self._commit(to_storage_string(instant))

    def _on_time_entered(self) -> None:
        text = self.time_edit.get_value()
        if text == "":
            if self.kind is FieldKind.TIME:
                self._commit(None)
            return
        if not self.time_edit.hasAcceptableInput():
            logger.warning(f"Ignoring incomplete time '{text}'")
            return
        hours, minutes = (int(part) for part in text.split(":"))
        instant = combine_time(time(hours, minutes), self.user_tz, self.kind,
                               existing=self._current_instant())
        stored = to_storage_string(instant)
        if stored != self._value:
            self.clear_error()
            self._commit(stored)
