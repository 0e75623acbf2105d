"""
Helpers for XML-shaped JSON.

Metadata documents arrive as the output of an XML-to-object conversion in
which every leaf is wrapped in a one-element list:

    {"GlobalValueSet": {"title": ["Tiers"], "customValue": [{"label": ["Gold"]}]}}

A repeated element is a list of mappings, but a lone element may arrive
unwrapped. These helpers normalize reads and keep writes in the wrapped form
the backend expects.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

# Descriptor keys that flatten to numbers / booleans
NUMERIC_FIELDS = frozenset({
    'maxLength', 'minValue', 'maxValue', 'precision', 'scale',
    'decimalPlaces', 'visibleLinesInEdit', 'visibleLinesInView',
    'minDigits', 'maxDigits',
})

BOOLEAN_FIELDS = frozenset({
    'required', 'copyAble', 'truncate', 'percentageDisplay', 'allowSearch',
    'allowNegativeNumbers', 'onlyPositive', 'displayThousandsSeparator',
})


def as_list(value: Any) -> List[Any]:
    """
    Normalize a possibly-single XML element into a list.

    Args:
        value: A list, a single element, or None

    Returns:
        The list itself, a one-element list, or an empty list for None
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def first_value(node: Optional[Mapping[str, Any]], key: str, default: str = "") -> str:
    """Return the first string under ``key`` of an XML-shaped mapping."""
    if not node:
        return default
    raw = node.get(key)
    if isinstance(raw, list):
        if not raw or raw[0] is None:
            return default
        return raw[0]
    if raw is None:
        return default
    return raw


def wrap_value(value: Any) -> List[str]:
    """Wrap a scalar in the one-element list convention."""
    return ["" if value is None else str(value)]


def get_collection(document: Optional[Mapping[str, Any]], root_key: str, item_key: str) -> List[Any]:
    """
    Extract the item collection of a document as a list.

    A lone item is returned as a one-element list, a missing collection as
    an empty list.
    """
    if not document:
        return []
    root = document.get(root_key)
    if not isinstance(root, Mapping):
        return []
    items = as_list(root.get(item_key))
    logger.debug(f"Collected {len(items)} '{item_key}' item(s) under '{root_key}'")
    return items


def flatten_xml_metadata(field_def: Mapping[str, Any], known_field_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Flatten an XML-shaped field definition into plain typed values.

    Numeric keys become floats, boolean keys become bools, and ``defaultValue``
    is cast according to the field type. Empty values are dropped.

    Args:
        field_def: Mapping whose values are one-element lists
        known_field_type: Field type that overrides the document's own ``type``

    Returns:
        Flat dict of typed values
    """
    flattened: Dict[str, Any] = {}
    field_type = known_field_type or first_value(field_def, 'type') or None

    for key in field_def:
        value = first_value(field_def, key, default="")
        if value == "":
            continue

        if key in NUMERIC_FIELDS:
            number = _parse_float(value)
            if number is not None:
                flattened[key] = number
        elif key in BOOLEAN_FIELDS:
            if value in ("true", "false"):
                flattened[key] = value == "true"
        elif key == 'defaultValue':
            if field_type == 'NumberField':
                number = _parse_float(value)
                if number is not None:
                    flattened[key] = number
            elif field_type == 'CheckboxField':
                if value in ("true", "false"):
                    flattened[key] = value == "true"
            else:
                flattened[key] = value
        else:
            flattened[key] = value

    return flattened


def strip_keys(rows: Iterable[Mapping[str, Any]], *keys: str) -> List[Dict[str, Any]]:
    """Return copies of ``rows`` without the given keys."""
    return [{k: v for k, v in row.items() if k not in keys} for row in rows]


def _parse_float(value: str) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
