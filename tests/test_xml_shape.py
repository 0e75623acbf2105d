"""Tests for XML-shaped JSON helpers."""

import pytest

from pyqt_metafields.core.xml_shape import (
    as_list, first_value, flatten_xml_metadata, get_collection, strip_keys, wrap_value,
)


@pytest.mark.parametrize("value, expected", [
    (None, []),
    ([], []),
    ([{"a": ["1"]}], [{"a": ["1"]}]),
    ({"a": ["1"]}, [{"a": ["1"]}]),
    ("x", ["x"]),
])
def test_as_list(value, expected):
    assert as_list(value) == expected


def test_first_value_reads_wrapped_and_bare_leaves():
    node = {"label": ["Gold"], "code": "G", "empty": [], "none": [None]}
    assert first_value(node, "label") == "Gold"
    assert first_value(node, "code") == "G"
    assert first_value(node, "empty") == ""
    assert first_value(node, "none", default="?") == "?"
    assert first_value(node, "missing", default="false") == "false"
    assert first_value(None, "label") == ""


def test_wrap_value():
    assert wrap_value("Gold") == ["Gold"]
    assert wrap_value(3) == ["3"]
    assert wrap_value(None) == [""]


def test_get_collection_normalizes_lone_item():
    lone = {"GlobalValueSet": {"customValue": {"label": ["Only"]}}}
    items = get_collection(lone, "GlobalValueSet", "customValue")
    assert items == [{"label": ["Only"]}]


def test_get_collection_missing_parts():
    assert get_collection(None, "root", "item") == []
    assert get_collection({}, "root", "item") == []
    assert get_collection({"root": ["not a mapping"]}, "root", "item") == []
    assert get_collection({"root": {}}, "root", "item") == []


def test_flatten_xml_metadata_types_values():
    field_def = {
        "type": ["NumberField"],
        "label": ["Amount"],
        "decimalPlaces": ["2"],
        "required": ["true"],
        "copyAble": ["nope"],
        "defaultValue": ["1.5"],
        "helpText": [""],
    }
    flat = flatten_xml_metadata(field_def)
    assert flat == {
        "type": "NumberField",
        "label": "Amount",
        "decimalPlaces": 2.0,
        "required": True,
        "defaultValue": 1.5,
    }


def test_flatten_xml_metadata_checkbox_default_uses_known_type():
    flat = flatten_xml_metadata({"defaultValue": ["false"]}, known_field_type="CheckboxField")
    assert flat == {"defaultValue": False}


def test_strip_keys_copies_rows():
    rows = [{"label": ["A"], "_tempId": "existing-0"}]
    stripped = strip_keys(rows, "_tempId")
    assert stripped == [{"label": ["A"]}]
    assert "_tempId" in rows[0]
