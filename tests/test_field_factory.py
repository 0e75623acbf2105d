"""Tests for descriptor-type field dispatch."""

import pytest

from conftest import FakeTransport
from pyqt_metafields.core.datetime_normalization import FieldKind
from pyqt_metafields.forms import FieldMode
from pyqt_metafields.io.exceptions import ApiRequestError
from pyqt_metafields.services import FieldDefinitionResolver, FieldDescriptor, MetadataSourceAccessor
from pyqt_metafields.widgets import (
    FIELD_TYPE_REGISTRY, CheckboxField, DateTimeField, DropDownListField, MetadataField,
    NumberField, TextField, create_field, register_field_type,
)

CURRENCIES_PATH = "/api/metadata/lists/currencies"
CURRENCIES = {"root": {"item": [
    {"code": ["USD"], "name": ["US Dollar"]},
    {"code": ["EUR"], "name": ["Euro"]},
]}}


def _descriptor(**payload):
    return FieldDescriptor.from_json(payload)


def test_text_field_type(qapp):
    field = create_field(_descriptor(type="TextField", label="Name"), FieldMode.VIEW, "ACME",
                         field_code="name")
    assert isinstance(field, TextField)
    assert field.content.text() == "ACME"
    assert field.label_widget.text() == "Name"


def test_number_field_type_uses_descriptor_props(qapp):
    field = create_field(_descriptor(type="NumberField", decimalPlaces="0"), FieldMode.TABLE, "1234.5")
    assert isinstance(field, NumberField)
    assert field.content.text() == "1,235"


@pytest.mark.parametrize("subtype, kind", [
    ("Date", FieldKind.DATE),
    ("Time", FieldKind.TIME),
    ("DateTime", FieldKind.DATE_TIME),
    (None, FieldKind.DATE_TIME),
])
def test_date_time_field_kind_from_subtype(qapp, subtype, kind):
    field = create_field(_descriptor(type="DateTimeField", subtype=subtype), FieldMode.EDIT)
    assert isinstance(field, DateTimeField)
    assert field.kind is kind


def test_date_field_view(qapp):
    field = create_field(_descriptor(type="DateTimeField", subtype="Date"), FieldMode.VIEW, "2024-03-10")
    assert field.content.text() == "03-10-2024"


@pytest.mark.parametrize("type_name", ["DropDownListField", "PicklistField"])
def test_dropdown_field_types(qapp, immediate_tasks, type_name):
    accessor = MetadataSourceAccessor(FakeTransport({CURRENCIES_PATH: CURRENCIES}))
    field = create_field(_descriptor(type=type_name, metadataSource="lists/currencies"),
                         FieldMode.EDIT, "EUR", accessor=accessor,
                         options_task_manager=immediate_tasks)
    assert isinstance(field, DropDownListField)
    assert field.combo.count() == 2
    assert field.combo.get_value() == "EUR"


def test_checkbox_field_type(qapp):
    field = create_field(_descriptor(type="CheckboxField"), FieldMode.TABLE, "true", field_code="active")
    assert isinstance(field, CheckboxField)
    assert field.content.text() == "Yes"


def test_unknown_type_renders_text(qapp):
    field = create_field(_descriptor(type="AddressField"), FieldMode.VIEW, "Main St")
    assert isinstance(field, TextField)
    assert field.content.text() == "Main St"


def test_options_for_other_widgets_are_ignored(qapp):
    field = create_field(_descriptor(type="TextField"), FieldMode.VIEW, "x",
                         accessor=object(), culture=None, label="Code")
    assert isinstance(field, TextField)
    assert field.label_widget.text() == "Code"


def test_unknown_argument_raises(qapp):
    with pytest.raises(TypeError, match="colour"):
        create_field(_descriptor(type="TextField"), colour="red")


def test_registered_type_is_used(qapp, monkeypatch):
    monkeypatch.setitem(FIELD_TYPE_REGISTRY, "RatingField", TextField)
    register_field_type("RatingField", NumberField)
    field = create_field(_descriptor(type="RatingField"), FieldMode.VIEW, "4")
    assert isinstance(field, NumberField)


# --- MetadataField --------------------------------------------------------------

AMOUNT_PATH = "/api/object-fields/deals/amount"


def test_metadata_field_builds_typed_widget(qapp, immediate_tasks):
    transport = FakeTransport({AMOUNT_PATH: {"type": "NumberField", "label": "Amount"}})
    field = MetadataField("deals", "amount", FieldDefinitionResolver(transport),
                          mode=FieldMode.EDIT, value="5", task_manager=immediate_tasks)
    seen = []
    field.value_changed.connect(seen.append)

    assert isinstance(field.field, NumberField)
    assert field.status_label.isHidden()
    assert field.field.line_edit.objectName() == "input-amount"

    field.field.line_edit.setText("7")
    field.field.line_edit.textEdited.emit("7")
    assert seen == ["7"]
    assert field.get_value() == "7"


def test_metadata_field_shows_loading_until_resolved(qapp, deferred_tasks):
    transport = FakeTransport({AMOUNT_PATH: {"type": "NumberField"}})
    field = MetadataField("deals", "amount", FieldDefinitionResolver(transport),
                          task_manager=deferred_tasks)
    assert field.status_label.text() == "Loading..."
    assert field.field is None
    deferred_tasks.complete()
    assert isinstance(field.field, NumberField)


def test_metadata_field_not_found(qapp, immediate_tasks):
    resolver = FieldDefinitionResolver(FakeTransport())
    edit = MetadataField("deals", "ghost", resolver, task_manager=immediate_tasks)
    assert edit.field is None
    assert edit.status_label.text() == 'Field "ghost" not found in metadata'

    table = MetadataField("deals", "ghost", resolver, mode=FieldMode.TABLE, task_manager=immediate_tasks)
    assert table.status_label.text() == "-"


def test_metadata_field_lookup_failure(qapp, immediate_tasks):
    transport = FakeTransport(errors={AMOUNT_PATH: ApiRequestError("down", 500)})
    field = MetadataField("deals", "amount", FieldDefinitionResolver(transport),
                          value="5", task_manager=immediate_tasks)
    assert field.field is None
    assert field.status_label.text() == 'Field "amount" not found in metadata'
    assert field.get_value() == "5"
