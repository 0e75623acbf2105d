"""
Metadata-driven field dispatch.

create_field() picks the field widget for a resolved descriptor's ``type``;
MetadataField resolves the descriptor itself and then builds the field, so a
form only needs (object_code, field_code).
"""

import logging
from dataclasses import fields
from typing import Any, Dict, Optional, Tuple, Type

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget

from pyqt_metafields.core.background_task import BackgroundTaskManager
from pyqt_metafields.core.datetime_normalization import FieldKind
from pyqt_metafields.forms.field_props import FieldMode, FieldProps
from pyqt_metafields.services.field_definition_service import FieldDefinitionResolver, FieldDescriptor
from pyqt_metafields.widgets.checkbox_field import CheckboxField
from pyqt_metafields.widgets.date_time_field import DateTimeField
from pyqt_metafields.widgets.dropdown_list_field import DropDownListField
from pyqt_metafields.widgets.field_base import EMPTY_DISPLAY, MUTED_STYLE, MetaFieldWidget
from pyqt_metafields.widgets.number_field import NumberField
from pyqt_metafields.widgets.text_field import TextField

logger = logging.getLogger(__name__)

# Descriptor type -> field widget; unknown types render as text
FIELD_TYPE_REGISTRY: Dict[str, Type[MetaFieldWidget]] = {
    "TextField": TextField,
    "NumberField": NumberField,
    "DateTimeField": DateTimeField,
    "DropDownListField": DropDownListField,
    "PicklistField": DropDownListField,
    "CheckboxField": CheckboxField,
}

# Constructor options each widget class accepts besides its props
WIDGET_OPTIONS: Dict[Type[MetaFieldWidget], Tuple[str, ...]] = {
    NumberField: ("culture",),
    DateTimeField: ("culture", "display_timezone"),
    DropDownListField: ("accessor", "root_key", "item_key", "get_value",
                        "get_display_value", "options_task_manager"),
}

LOADING_TEXT = "Loading..."
NOT_FOUND_TEXT = 'Field "{code}" not found in metadata'

_PROP_NAMES = frozenset(f.name for f in fields(FieldProps))
_OPTION_NAMES = frozenset(name for names in WIDGET_OPTIONS.values() for name in names)


def register_field_type(type_name: str, widget_class: Type[MetaFieldWidget]) -> None:
    """Register or replace the widget used for a descriptor type."""
    if type_name in FIELD_TYPE_REGISTRY:
        logger.debug(f"Overriding widget for field type '{type_name}' with {widget_class.__name__}")
    FIELD_TYPE_REGISTRY[type_name] = widget_class


def widget_class_for(descriptor: Optional[FieldDescriptor]) -> Type[MetaFieldWidget]:
    type_name = descriptor.type if descriptor else None
    widget_class = FIELD_TYPE_REGISTRY.get(type_name)
    if widget_class is None:
        logger.debug(f"No widget registered for field type {type_name!r}; using TextField")
        return TextField
    return widget_class


def date_time_kind(descriptor: Optional[FieldDescriptor]) -> FieldKind:
    """Date/Time/DateTime flavour from the descriptor subtype (default DateTime)."""
    try:
        return FieldKind(descriptor.subtype if descriptor else None)
    except ValueError:
        return FieldKind.DATE_TIME


def create_field(descriptor: Optional[FieldDescriptor], mode: FieldMode = FieldMode.EDIT,
                 value: Any = None, object_code: Optional[str] = None,
                 field_code: Optional[str] = None, parent=None, **kwargs) -> MetaFieldWidget:
    """
    Build the field widget for a descriptor.

    Args:
        descriptor: Resolved descriptor; None renders a text field
        mode: Render mode
        value: Stored value
        object_code: Business object code
        field_code: Field code (test id fallback)
        **kwargs: Explicit FieldProps, plus widget options (accessor, culture,
            display_timezone, root_key, ...). Options the chosen widget does
            not take are ignored.

    Raises:
        TypeError: If a keyword is neither a prop nor a known widget option
    """
    unknown = set(kwargs) - _PROP_NAMES - _OPTION_NAMES
    if unknown:
        raise TypeError(f"Unknown field arguments: {sorted(unknown)}")

    widget_class = widget_class_for(descriptor)
    accepted = WIDGET_OPTIONS.get(widget_class, ())
    options = {name: kwargs[name] for name in accepted if name in kwargs}
    props = {name: kwargs[name] for name in kwargs if name in _PROP_NAMES}
    if widget_class is DateTimeField:
        options["kind"] = date_time_kind(descriptor)

    field = widget_class(mode=mode, value=value, object_code=object_code,
                         field_code=field_code, parent=parent, **options, **props)
    field.apply_descriptor(descriptor)
    return field


class MetadataField(QWidget):
    """
    Field whose widget is chosen by its resolved descriptor.

    Shows a loading placeholder until the descriptor arrives, then the typed
    field, or a "not found" notice when the field has no definition.

    Usage:
        field = MetadataField("deals", "amount", resolver, mode=FieldMode.VIEW,
                              value=record["amount"], accessor=accessor)
        field.value_changed.connect(on_change)
    """

    value_changed = pyqtSignal(object)

    def __init__(self, object_code: str, field_code: str, resolver: FieldDefinitionResolver,
                 mode: FieldMode = FieldMode.EDIT, value: Any = None,
                 task_manager=None, parent=None, **kwargs):
        super().__init__(parent)
        self.object_code = object_code
        self.field_code = field_code
        self.mode = FieldMode(mode)
        self.field: Optional[MetaFieldWidget] = None
        self._value = value
        self._kwargs = kwargs
        self._task_manager = task_manager or BackgroundTaskManager()

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self.status_label = QLabel(LOADING_TEXT)
        self.status_label.setStyleSheet(MUTED_STYLE)
        self._layout.addWidget(self.status_label)

        self._task_manager.run(
            target=resolver.resolve,
            args=(object_code, field_code),
            on_success=self._on_resolved,
            on_error=self._on_failed,
        )

    def get_value(self) -> Any:
        return self.field.get_value() if self.field is not None else self._value

    def set_value(self, value: Any) -> None:
        self._value = value
        if self.field is not None:
            self.field.set_value(value)

    def _on_resolved(self, descriptor: Optional[FieldDescriptor]) -> None:
        if descriptor is None:
            self._show_missing()
            return
        self.field = create_field(descriptor, self.mode, self._value, self.object_code,
                                  self.field_code, parent=self, **self._kwargs)
        self.field.value_changed.connect(self._on_field_changed)
        self.status_label.setVisible(False)
        self._layout.addWidget(self.field)

    def _on_failed(self, error: Exception) -> None:
        logger.warning(f"Field definition for {self.object_code}.{self.field_code} unavailable: {error}")
        self._show_missing()

    def _show_missing(self) -> None:
        if self.mode is FieldMode.TABLE:
            self.status_label.setText(EMPTY_DISPLAY)
        else:
            self.status_label.setText(NOT_FOUND_TEXT.format(code=self.field_code))

    def _on_field_changed(self, value: Any) -> None:
        self._value = value
        self.value_changed.emit(value)

    def closeEvent(self, event):
        self._task_manager.cleanup()
        super().closeEvent(event)
