"""Tests for descriptor/prop merging."""

import pytest

from pyqt_metafields.forms import CHECKBOX_TEST_IDS, FieldMode, merge_field_props
from pyqt_metafields.services import FieldDescriptor

DESCRIPTOR = FieldDescriptor(
    label="Amount",
    placeholder="Enter amount",
    decimal_places=3,
    metadata_source="lists/currencies",
    test_id_view="amount-view",
)


def test_defaults_without_descriptor():
    props = merge_field_props(None, FieldMode.EDIT)
    assert props.label == ""
    assert props.format == "number"
    assert props.decimal_places is None
    assert props.test_id is None


def test_descriptor_values_fill_props():
    props = merge_field_props(DESCRIPTOR, FieldMode.EDIT, "amount")
    assert props.label == "Amount"
    assert props.placeholder == "Enter amount"
    assert props.decimal_places == 3
    assert props.source_path == "lists/currencies"


def test_explicit_props_win():
    props = merge_field_props(DESCRIPTOR, FieldMode.EDIT, "amount", label="Total", decimal_places=0)
    assert props.label == "Total"
    assert props.decimal_places == 0
    assert props.placeholder == "Enter amount"


def test_explicit_none_means_not_given():
    props = merge_field_props(DESCRIPTOR, FieldMode.EDIT, "amount", label=None)
    assert props.label == "Amount"


@pytest.mark.parametrize("mode, expected", [
    (FieldMode.EDIT, "input-amount"),
    (FieldMode.VIEW, "amount-view"),
    (FieldMode.TABLE, "text-amount"),
])
def test_per_mode_test_ids(mode, expected):
    assert merge_field_props(DESCRIPTOR, mode, "amount").test_id == expected


def test_explicit_test_id_wins():
    assert merge_field_props(DESCRIPTOR, FieldMode.VIEW, "amount", test_id="custom").test_id == "custom"


def test_checkbox_test_ids():
    assert merge_field_props(None, FieldMode.EDIT, "active", CHECKBOX_TEST_IDS).test_id == "checkbox-active"
    assert merge_field_props(None, FieldMode.VIEW, "active", CHECKBOX_TEST_IDS).test_id == "checkbox-active-disabled"


def test_unknown_prop_is_rejected():
    with pytest.raises(TypeError):
        merge_field_props(None, FieldMode.EDIT, colour="red")
