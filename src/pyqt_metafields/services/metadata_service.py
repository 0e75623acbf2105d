"""
Metadata Source Accessor.

Fetches named metadata documents from ``/api/metadata/{path}`` and caches
them per accessor instance. The accessor is the only I/O dependency of the
dropdown field and the value-set editor; each editing session owns one, so
there is no process-wide cache.
"""

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pyqt_metafields.core.xml_shape import get_collection
from pyqt_metafields.io.base import JsonTransport
from pyqt_metafields.io.exceptions import ApiRequestError, MetadataFetchError, MetadataSaveError

logger = logging.getLogger(__name__)

METADATA_API_PREFIX = "/api/metadata"


class QueryStatus(Enum):
    IDLE = "idle"        # disabled: empty path or enabled=False
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class MetadataQuery:
    """Outcome of a metadata fetch.

    ``data`` is a private copy; mutating it never touches the accessor cache.
    """
    path: str
    status: QueryStatus
    data: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None
    from_cache: bool = False

    @property
    def is_loaded(self) -> bool:
        return self.status is QueryStatus.SUCCESS


class MetadataSourceAccessor:
    """
    Cached access to XML-shaped metadata documents.

    Usage:
        accessor = MetadataSourceAccessor(ApiClient())
        query = accessor.fetch("value-sets/tiers")
        if query.is_loaded:
            rows = accessor.get_items(query.data, "GlobalValueSet", "customValue")
    """

    def __init__(self, transport: JsonTransport):
        self._transport = transport
        self._cache: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def api_path(path: str) -> str:
        return f"{METADATA_API_PREFIX}/{quote(path.strip('/'), safe='/')}"

    def fetch(self, path: str, enabled: bool = True) -> MetadataQuery:
        """
        Load a metadata document, from cache when available.

        Args:
            path: Source path of the document
            enabled: False disables the fetch entirely

        Returns:
            MetadataQuery with status IDLE (disabled), SUCCESS or ERROR.
            Errors are reported, not raised, and are not cached.
        """
        if not path or not enabled:
            return MetadataQuery(path=path, status=QueryStatus.IDLE)

        if path in self._cache:
            logger.debug(f"Metadata cache hit for '{path}'")
            return MetadataQuery(path=path, status=QueryStatus.SUCCESS,
                                 data=copy.deepcopy(self._cache[path]), from_cache=True)

        try:
            document = self._transport.get_json(self.api_path(path))
        except ApiRequestError as e:
            error = MetadataFetchError(f"Failed to load metadata '{path}': {e.message}", e.status_code)
            logger.error(str(error))
            return MetadataQuery(path=path, status=QueryStatus.ERROR, error=error)

        if not isinstance(document, dict):
            error = MetadataFetchError(f"Metadata '{path}' is not a JSON object")
            logger.error(str(error))
            return MetadataQuery(path=path, status=QueryStatus.ERROR, error=error)

        self._cache[path] = copy.deepcopy(document)
        logger.debug(f"Cached metadata '{path}' ({', '.join(document.keys())})")
        return MetadataQuery(path=path, status=QueryStatus.SUCCESS, data=document)

    def save(self, path: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace a metadata document wholesale.

        On success the cache entry is replaced by the echoed document when it
        has the same root element as the submitted one, and by the submitted
        document otherwise (e.g. an {"ok": true} acknowledgement).

        Raises:
            MetadataSaveError: With the backend's ``message`` on rejection
        """
        if not path:
            raise MetadataSaveError("Cannot save metadata without a source path")

        try:
            echoed = self._transport.put_json(self.api_path(path), document)
        except ApiRequestError as e:
            message = e.message or "Failed to update metadata"
            logger.error(f"Saving metadata '{path}' failed: {message}")
            raise MetadataSaveError(message, e.status_code) from e

        saved = echoed if _is_echo_of(echoed, document) else document
        self._cache[path] = copy.deepcopy(saved)
        logger.info(f"Saved metadata '{path}'")
        return saved

    def invalidate(self, path: str) -> None:
        """Drop the cached document for ``path``."""
        if self._cache.pop(path, None) is not None:
            logger.debug(f"Invalidated metadata cache for '{path}'")

    def is_cached(self, path: str) -> bool:
        return path in self._cache

    @staticmethod
    def get_items(document: Optional[Dict[str, Any]], root_key: str, item_key: str) -> List[Any]:
        """
        Return the item collection of a document, always as a list.

        XML-derived documents leave a lone item unwrapped; it is normalized
        here, once, so consumers never see the single-item shape.
        """
        return get_collection(document, root_key, item_key)


def _is_echo_of(response: Any, document: Dict[str, Any]) -> bool:
    return isinstance(response, dict) and bool(response) and response.keys() == document.keys()
