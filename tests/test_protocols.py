"""Tests for widget protocols and adapters."""

from datetime import date


def test_line_edit_adapter_keeps_raw_text(qapp):
    """LineEditAdapter implements the ABCs and keeps partial input verbatim."""
    from pyqt_metafields.protocols import LineEditAdapter, ValueGettable, ValueSettable

    adapter = LineEditAdapter()
    assert isinstance(adapter, ValueGettable)
    assert isinstance(adapter, ValueSettable)

    adapter.set_value(" -")
    assert adapter.get_value() == " -"
    adapter.set_value(None)
    assert adapter.get_value() == ""


def test_line_edit_change_signal_ignores_programmatic_set(qapp):
    from pyqt_metafields.protocols import LineEditAdapter

    seen = []
    adapter = LineEditAdapter()
    adapter.connect_change_signal(seen.append)
    adapter.set_value("12")
    assert seen == []
    adapter.textEdited.emit("12")
    assert seen == ["12"]


def test_combo_box_adapter_uses_item_data(qapp):
    from pyqt_metafields.protocols import ComboBoxAdapter

    combo = ComboBoxAdapter()
    combo.addItem("Gold", "gold")
    combo.addItem("Silver", "silver")
    combo.set_value("silver")
    assert combo.currentText() == "Silver"
    assert combo.get_value() == "silver"
    combo.set_value("unknown")
    assert combo.get_value() is None


def test_check_box_adapter(qapp):
    from pyqt_metafields.protocols import CheckBoxAdapter

    checkbox = CheckBoxAdapter()
    checkbox.set_value(None)
    assert checkbox.get_value() is False
    checkbox.set_value(True)
    assert checkbox.get_value() is True


def test_date_edit_adapter_none_round_trip(qapp):
    from pyqt_metafields.protocols import DateEditAdapter

    seen = []
    adapter = DateEditAdapter()
    adapter.connect_change_signal(seen.append)
    assert adapter.get_value() is None

    adapter.set_value(date(2024, 3, 10))
    assert adapter.get_value() == date(2024, 3, 10)
    adapter.set_value(None)
    assert adapter.get_value() is None
    assert seen == []


def test_plain_text_adapter_guards_programmatic_set(qapp):
    from pyqt_metafields.protocols import PlainTextEditAdapter

    seen = []
    adapter = PlainTextEditAdapter()
    adapter.connect_change_signal(seen.append)
    adapter.set_value("line one\nline two")
    assert adapter.get_value() == "line one\nline two"
    assert seen == []
