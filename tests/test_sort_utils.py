"""Tests for display sorting."""

from pyqt_metafields.core.sort_utils import SortDirection, natural_key, next_sort_state, sorted_rows


def test_header_click_cycle():
    column, direction = next_sort_state(None, SortDirection.NONE, "label")
    assert (column, direction) == ("label", SortDirection.ASC)
    column, direction = next_sort_state(column, direction, "label")
    assert (column, direction) == ("label", SortDirection.DESC)
    column, direction = next_sort_state(column, direction, "label")
    assert (column, direction) == (None, SortDirection.NONE)


def test_switching_column_starts_ascending():
    assert next_sort_state("label", SortDirection.DESC, "code") == ("code", SortDirection.ASC)


def test_natural_key_orders_numbers_numerically():
    values = ["Item 10", "item 2", "Item 1"]
    assert sorted(values, key=natural_key) == ["Item 1", "item 2", "Item 10"]


def test_sorted_rows_returns_copy():
    rows = [{"label": ["b"]}, {"label": ["a"]}, {"label": ["c"]}]
    ascending = sorted_rows(rows, "label", SortDirection.ASC)
    descending = sorted_rows(rows, "label", SortDirection.DESC)
    assert [r["label"][0] for r in ascending] == ["a", "b", "c"]
    assert [r["label"][0] for r in descending] == ["c", "b", "a"]
    assert [r["label"][0] for r in rows] == ["b", "a", "c"]
    assert sorted_rows(rows, None, SortDirection.NONE) == rows
