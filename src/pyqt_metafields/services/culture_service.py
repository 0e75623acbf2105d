"""Culture resolution from ``/api/universal/culture-codes``."""

import logging
from typing import Any, List, Mapping, Optional

from pyqt_metafields.core.culture import CultureFormat, DEFAULT_CULTURE, DEFAULT_CULTURE_CODE
from pyqt_metafields.io.base import JsonTransport
from pyqt_metafields.io.exceptions import ApiRequestError, CultureFetchError
from pyqt_metafields.protocols import get_config

logger = logging.getLogger(__name__)

CULTURE_CODES_API_PATH = "/api/universal/culture-codes"


class CultureService:
    """
    Picks the active culture from the backend's culture list.

    The preferred code wins, then en-US, then the built-in default. The list
    is fetched once per service instance.
    """

    def __init__(self, transport: JsonTransport):
        self._transport = transport
        self._records: Optional[List[Mapping[str, Any]]] = None

    def load(self) -> List[Mapping[str, Any]]:
        """
        Fetch culture records (cached after the first success).

        Raises:
            CultureFetchError: If the request fails
        """
        if self._records is None:
            try:
                payload = self._transport.get_json(CULTURE_CODES_API_PATH)
            except ApiRequestError as e:
                raise CultureFetchError(f"Failed to load culture codes: {e.message}", e.status_code) from e
            self._records = [r for r in (payload or []) if isinstance(r, Mapping)]
            logger.debug(f"Loaded {len(self._records)} culture record(s)")
        return self._records

    def resolve(self, culture_code: Optional[str] = None) -> CultureFormat:
        """
        Return the culture for ``culture_code`` (default: configured code).

        Falls back to the built-in default when culture codes cannot be loaded.
        """
        code = culture_code or get_config().culture_code
        try:
            records = self.load()
        except CultureFetchError as e:
            logger.warning(f"{e}; using built-in {DEFAULT_CULTURE_CODE} formats")
            return DEFAULT_CULTURE

        for wanted in (code, DEFAULT_CULTURE_CODE):
            for record in records:
                if record.get("cultureCode") == wanted:
                    return CultureFormat.from_record(record)

        logger.debug(f"Culture '{code}' not found; using built-in defaults")
        return DEFAULT_CULTURE
