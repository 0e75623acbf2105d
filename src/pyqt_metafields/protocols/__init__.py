"""
Widget protocol definitions, adapters and configuration.

ABC-based widget contracts that replace duck typing with explicit,
fail-loud inheritance-based architecture.
"""

from .widget_protocols import (
    ValueGettable,
    ValueSettable,
    PlaceholderCapable,
    ChangeSignalEmitter,
)
from .widget_adapters import (
    LineEditAdapter,
    PlainTextEditAdapter,
    ComboBoxAdapter,
    CheckBoxAdapter,
    DateEditAdapter,
    PyQtWidgetMeta,
)
from .form_config import MetaFieldsConfig, set_config, get_config

__all__ = [
    "ValueGettable",
    "ValueSettable",
    "PlaceholderCapable",
    "ChangeSignalEmitter",
    "LineEditAdapter",
    "PlainTextEditAdapter",
    "ComboBoxAdapter",
    "CheckBoxAdapter",
    "DateEditAdapter",
    "PyQtWidgetMeta",
    "MetaFieldsConfig",
    "set_config",
    "get_config",
]
