"""
Field Definition Resolver.

Looks up the declarative descriptor of a form field by (objectCode,
fieldCode) from ``/api/object-fields/{objectCode}/{fieldCode}``. Descriptors
are read-only; field widgets merge them with explicitly passed props.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import quote

from pyqt_metafields.core.xml_shape import flatten_xml_metadata
from pyqt_metafields.io.base import JsonTransport
from pyqt_metafields.io.exceptions import ApiRequestError, FieldDefinitionError
from pyqt_metafields.protocols import get_config

logger = logging.getLogger(__name__)

FIELD_DEFINITION_API_PREFIX = "/api/object-fields"


@dataclass(frozen=True)
class FieldDescriptor:
    """Declarative description of one field of one business object."""
    type: Optional[str] = None
    api_code: Optional[str] = None
    label: Optional[str] = None
    subtype: Optional[str] = None
    help_text: Optional[str] = None
    placeholder: Optional[str] = None
    format: Optional[str] = None
    decimal_places: Optional[int] = None
    allow_search: Optional[bool] = None
    max_length: Optional[int] = None
    copyable: Optional[bool] = None
    truncate: Optional[bool] = None
    visible_lines_in_view: Optional[int] = None
    visible_lines_in_edit: Optional[int] = None
    metadata_source: Optional[str] = None
    source_path: Optional[str] = None
    source_type: Optional[str] = None
    sorting_direction: Optional[str] = None
    test_id_edit: Optional[str] = None
    test_id_view: Optional[str] = None
    test_id_table: Optional[str] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> 'FieldDescriptor':
        """Build from the backend's camelCase payload.

        Numeric fields arrive as strings ("2"); unparseable ones become None.
        XML-shaped payloads (every value a one-element list) are flattened first.
        """
        if any(isinstance(value, list) for value in data.values()):
            data = flatten_xml_metadata(data)
        return cls(
            type=data.get("type"),
            api_code=data.get("apiCode"),
            label=data.get("label"),
            subtype=data.get("subtype"),
            help_text=data.get("helpText"),
            placeholder=data.get("placeHolder"),
            format=data.get("format"),
            decimal_places=_as_int(data.get("decimalPlaces")),
            allow_search=_as_bool(data.get("allowSearch")),
            max_length=_as_int(data.get("maxLength")),
            copyable=_as_bool(data.get("copyAble")),
            truncate=_as_bool(data.get("truncate")),
            visible_lines_in_view=_as_int(data.get("visibleLinesInView")),
            visible_lines_in_edit=_as_int(data.get("visibleLinesInEdit")),
            metadata_source=data.get("metadataSource"),
            source_path=data.get("sourcePath"),
            source_type=data.get("sourceType"),
            sorting_direction=data.get("sortingDirection"),
            test_id_edit=data.get("testIdEdit"),
            test_id_view=data.get("testIdView"),
            test_id_table=data.get("testIdTable"),
        )


class FieldDefinitionResolver:
    """
    Resolves field descriptors with a short-lived cache.

    Absence (404 or empty codes) resolves to None and is cached like a hit.
    Other failures raise FieldDefinitionError once; there is no retry.
    """

    def __init__(self, transport: JsonTransport, ttl_seconds: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        self._transport = transport
        self._ttl = ttl_seconds if ttl_seconds is not None else get_config().field_definition_ttl_seconds
        self._clock = clock
        self._cache: Dict[Tuple[str, str], Tuple[float, Optional[FieldDescriptor]]] = {}

    @staticmethod
    def api_path(object_code: str, field_code: str) -> str:
        return f"{FIELD_DEFINITION_API_PREFIX}/{quote(object_code, safe='')}/{quote(field_code, safe='')}"

    def resolve(self, object_code: Optional[str], field_code: Optional[str]) -> Optional[FieldDescriptor]:
        """
        Return the descriptor for a field, or None when absent.

        Raises:
            FieldDefinitionError: If the lookup fails for a reason other than 404
        """
        if not object_code or not field_code:
            return None

        key = (object_code, field_code)
        cached = self._cache.get(key)
        if cached is not None and self._clock() - cached[0] < self._ttl:
            logger.debug(f"Field definition cache hit for {object_code}.{field_code}")
            return cached[1]

        try:
            payload = self._transport.get_json(self.api_path(object_code, field_code), allow_missing=True)
        except ApiRequestError as e:
            raise FieldDefinitionError(
                f"Failed to fetch field definition {object_code}.{field_code}: {e.message}",
                e.status_code,
            ) from e

        descriptor = FieldDescriptor.from_json(payload) if isinstance(payload, Mapping) else None
        if descriptor is None:
            logger.debug(f"No field definition for {object_code}.{field_code}")
        self._cache[key] = (self._clock(), descriptor)
        return descriptor

    def clear(self) -> None:
        self._cache.clear()


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric descriptor value {value!r}")
        return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, str) and value in ("true", "false"):
        return value == "true"
    return None
