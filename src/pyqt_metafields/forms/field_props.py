"""
Render modes and descriptor/prop merging for field widgets.

A field widget can be configured entirely from its descriptor (pass
object_code/field_code only), entirely explicitly (no network), or any mix.
Explicit values always win over descriptor values, which win over defaults.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional

from pyqt_metafields.services.field_definition_service import FieldDescriptor


class FieldMode(Enum):
    """Mutually exclusive render modes."""
    EDIT = "edit"
    VIEW = "view"
    TABLE = "table"


@dataclass(frozen=True)
class TestIdTemplates:
    """Fallback object-name templates per mode; ``{code}`` is the field code."""
    edit: str = "input-{code}"
    view: str = "text-{code}"
    table: str = "text-{code}"

    def for_mode(self, mode: FieldMode, field_code: Optional[str]) -> Optional[str]:
        if not field_code:
            return None
        template = {FieldMode.EDIT: self.edit, FieldMode.VIEW: self.view, FieldMode.TABLE: self.table}[mode]
        return template.format(code=field_code)


CHECKBOX_TEST_IDS = TestIdTemplates(edit="checkbox-{code}", view="checkbox-{code}-disabled", table="text-{code}")


@dataclass(frozen=True)
class FieldProps:
    """Effective configuration of one rendered field."""
    label: str = ""
    placeholder: str = ""
    help_text: str = ""
    format: str = "number"
    decimal_places: Optional[int] = None
    allow_search: bool = False
    source_path: str = ""
    max_length: Optional[int] = None
    copyable: bool = False
    truncate: bool = False
    visible_lines_in_view: Optional[int] = None
    visible_lines_in_edit: Optional[int] = None
    test_id: Optional[str] = None


def merge_field_props(descriptor: Optional[FieldDescriptor], mode: FieldMode,
                      field_code: Optional[str] = None,
                      test_ids: TestIdTemplates = TestIdTemplates(),
                      **explicit: Any) -> FieldProps:
    """
    Merge explicit props over a resolved descriptor.

    Args:
        descriptor: Resolved descriptor, or None while loading/absent
        mode: Render mode (selects the per-mode test id)
        field_code: Field code used for fallback test ids
        test_ids: Fallback test id templates
        **explicit: FieldProps values given by the caller; None means "not given"

    Returns:
        FieldProps with explicit > descriptor > default precedence

    Raises:
        TypeError: If an explicit key is not a FieldProps field
    """
    known = {f.name for f in fields(FieldProps)}
    unknown = set(explicit) - known
    if unknown:
        raise TypeError(f"Unknown field props: {sorted(unknown)}")

    d = descriptor or FieldDescriptor()
    from_descriptor = {
        "label": d.label,
        "placeholder": d.placeholder,
        "help_text": d.help_text,
        "format": d.format,
        "decimal_places": d.decimal_places,
        "allow_search": d.allow_search,
        "source_path": d.metadata_source or d.source_path,
        "max_length": d.max_length,
        "copyable": d.copyable,
        "truncate": d.truncate,
        "visible_lines_in_view": d.visible_lines_in_view,
        "visible_lines_in_edit": d.visible_lines_in_edit,
        "test_id": {
            FieldMode.EDIT: d.test_id_edit,
            FieldMode.VIEW: d.test_id_view,
            FieldMode.TABLE: d.test_id_table,
        }[mode] or test_ids.for_mode(mode, field_code),
    }

    merged = {}
    for name in known:
        value = explicit.get(name)
        if value is None:
            value = from_descriptor.get(name)
        if value is not None:
            merged[name] = value
    return FieldProps(**merged)
