"""IO exceptions."""

from typing import Optional


class MetaFieldsError(Exception):
    """Base class for errors raised by pyqt-metafields."""


class ApiRequestError(MetaFieldsError):
    """Raised when a backend request fails or returns a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MetadataFetchError(ApiRequestError):
    """Raised when a metadata document cannot be loaded."""


class MetadataSaveError(ApiRequestError):
    """Raised when the backend rejects a metadata document replacement."""


class FieldDefinitionError(ApiRequestError):
    """Raised when a field descriptor lookup fails for a reason other than absence."""


class CultureFetchError(ApiRequestError):
    """Raised when culture codes cannot be loaded."""
