"""
Form-level models.

Render modes, descriptor/prop merging, and the value-set editing session.
"""

from .field_props import FieldMode, FieldProps, TestIdTemplates, CHECKBOX_TEST_IDS, merge_field_props
from .value_set_session import ValueSetSession, EditorState, SORTING_OPTIONS

__all__ = [
    "FieldMode",
    "FieldProps",
    "TestIdTemplates",
    "CHECKBOX_TEST_IDS",
    "merge_field_props",
    "ValueSetSession",
    "EditorState",
    "SORTING_OPTIONS",
]
