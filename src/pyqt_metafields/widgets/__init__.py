"""
Field widgets and the value-set editor.

Qt widgets built on the protocol adapters. Each field renders in edit, view
or table mode.
"""

from .field_base import MetaFieldWidget
from .date_time_field import DateTimeField
from .number_field import NumberField
from .dropdown_list_field import DropDownListField
from .checkbox_field import CheckboxField
from .text_field import TextField
from .no_scroll_combo import NoScrollComboBox
from .reorderable_table import ReorderableTableWidget
from .dropdown_list_editor import DropDownListFieldTypeEditor
from .field_factory import FIELD_TYPE_REGISTRY, MetadataField, create_field, register_field_type

__all__ = [
    "MetaFieldWidget",
    "DateTimeField",
    "NumberField",
    "DropDownListField",
    "CheckboxField",
    "TextField",
    "NoScrollComboBox",
    "ReorderableTableWidget",
    "DropDownListFieldTypeEditor",
    "FIELD_TYPE_REGISTRY",
    "MetadataField",
    "create_field",
    "register_field_type",
]
