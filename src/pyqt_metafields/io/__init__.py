"""Backend transport and IO errors."""

from .base import JsonTransport
from .http_client import ApiClient
from .exceptions import (
    MetaFieldsError,
    ApiRequestError,
    MetadataFetchError,
    MetadataSaveError,
    FieldDefinitionError,
    CultureFetchError,
)

__all__ = [
    "JsonTransport",
    "ApiClient",
    "MetaFieldsError",
    "ApiRequestError",
    "MetadataFetchError",
    "MetadataSaveError",
    "FieldDefinitionError",
    "CultureFetchError",
]
