"""Tests for the requests-based JSON transport."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from pyqt_metafields.io import ApiClient, ApiRequestError
from pyqt_metafields.protocols import MetaFieldsConfig, set_config


def _response(status, payload=None, reason="", raw=None):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    if raw is not None:
        response._content = raw
    elif payload is not None:
        response._content = json.dumps(payload).encode()
    else:
        response._content = b""
    return response


def _client(*responses, **kwargs):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.request.side_effect = list(responses)
    return ApiClient(base_url="https://crm.example.com/", session=session, **kwargs), session


def test_get_json_decodes_body():
    client, session = _client(_response(200, {"root": {"item": []}}))
    assert client.get_json("/api/metadata/lists") == {"root": {"item": []}}
    session.request.assert_called_once_with(
        "GET", "https://crm.example.com/api/metadata/lists", timeout=None, verify=True
    )


def test_config_supplies_defaults():
    set_config(MetaFieldsConfig(base_url="https://other.example.com", request_timeout=5.0, verify_ssl=False))
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.request.return_value = _response(200, [])
    client = ApiClient(session=session)
    client.get_json("api/universal/culture-codes")
    session.request.assert_called_once_with(
        "GET", "https://other.example.com/api/universal/culture-codes", timeout=5.0, verify=False
    )


def test_missing_resource():
    client, _ = _client(_response(404, reason="Not Found"), _response(404, reason="Not Found"))
    assert client.get_json("/api/object-fields/a/b", allow_missing=True) is None
    with pytest.raises(ApiRequestError) as excinfo:
        client.get_json("/api/object-fields/a/b")
    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Not Found"


def test_put_json_error_uses_payload_message():
    client, _ = _client(_response(400, {"message": "Duplicate code 'gold'"}, reason="Bad Request"))
    with pytest.raises(ApiRequestError) as excinfo:
        client.put_json("/api/metadata/lists", {"root": {}})
    assert excinfo.value.message == "Duplicate code 'gold'"
    assert excinfo.value.status_code == 400


def test_put_json_sends_body_and_handles_empty_response():
    client, session = _client(_response(204))
    assert client.put_json("/api/metadata/lists", {"root": {}}) is None
    _, kwargs = session.request.call_args
    assert kwargs["json"] == {"root": {}}


def test_network_failure_is_wrapped():
    client, _ = _client(requests.ConnectionError("refused"))
    with pytest.raises(ApiRequestError) as excinfo:
        client.get_json("/api/metadata/lists")
    assert excinfo.value.status_code is None


def test_invalid_json_body():
    client, _ = _client(_response(200, raw=b"<html>"))
    with pytest.raises(ApiRequestError):
        client.get_json("/api/metadata/lists")
