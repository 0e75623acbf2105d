"""
JSON transport over requests.

One attempt per call: no retry and no backoff. A timeout applies only when
configured.
"""

import logging
from typing import Any, Optional

import requests

from pyqt_metafields.io.exceptions import ApiRequestError
from pyqt_metafields.protocols import get_config

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Minimal JSON client for the CRM backend.

    Usage:
        client = ApiClient(base_url="https://crm.example.com")
        doc = client.get_json("/api/metadata/value-sets/tiers")
        client.put_json("/api/metadata/value-sets/tiers", doc)
    """

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None, verify: Optional[bool] = None):
        config = get_config()
        self.base_url = (base_url if base_url is not None else config.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.request_timeout
        self.verify = verify if verify is not None else config.verify_ssl
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get_json(self, path: str, allow_missing: bool = False) -> Any:
        """
        GET ``path`` and decode the JSON body.

        Args:
            path: API path relative to base_url
            allow_missing: Return None instead of raising on 404

        Raises:
            ApiRequestError: On network failure or non-success status
        """
        response = self._send("GET", path)
        if allow_missing and response.status_code == 404:
            logger.debug(f"GET {path} -> 404 (treated as absent)")
            return None
        return self._decode(response, "GET", path)

    def put_json(self, path: str, body: Any) -> Any:
        """
        PUT ``body`` as JSON to ``path`` and decode the response.

        Raises:
            ApiRequestError: On network failure or non-success status; the
                message comes from the error payload's ``message`` field
        """
        response = self._send("PUT", path, json=body)
        return self._decode(response, "PUT", path)

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self.url_for(path)
        try:
            return self.session.request(method, url, timeout=self.timeout, verify=self.verify, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ApiRequestError(f"Request failed: {e}") from e

    def _decode(self, response: requests.Response, method: str, path: str) -> Any:
        if not response.ok:
            message = _error_message(response)
            logger.error(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiRequestError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned a non-JSON body")
            raise ApiRequestError(f"Invalid JSON response from {path}", status_code=response.status_code) from e


def _error_message(response: requests.Response) -> str:
    """Extract ``message`` from an error payload, falling back to the HTTP reason."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason or f"HTTP {response.status_code}"
