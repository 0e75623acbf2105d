"""Base configuration for metadata-driven fields.

Provides hooks for applications to point the library at their backend and
choose display conventions.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class MetaFieldsConfig:
    """Configuration for metadata access and field rendering.

    Applications can subclass this to provide custom configuration.

    Attributes:
        base_url: Backend origin that API paths are appended to
        request_timeout: Seconds before a request gives up; None waits indefinitely
        verify_ssl: Whether HTTPS certificates are verified
        display_timezone: IANA zone for Time/DateTime display; None uses system local time
        culture_code: Preferred culture for number and date formatting
        field_definition_ttl_seconds: How long resolved field descriptors stay fresh
        default_root_key: Root tag of value-set documents
        default_item_key: Item tag of value-set rows
    """

    base_url: str = ""
    request_timeout: Optional[float] = None
    verify_ssl: bool = True
    display_timezone: Optional[str] = None
    culture_code: str = "en-US"
    field_definition_ttl_seconds: float = 300.0
    default_root_key: str = "GlobalValueSet"
    default_item_key: str = "customValue"


# Global config instance (set by application)
_config: Optional[MetaFieldsConfig] = None


def set_config(config: MetaFieldsConfig) -> None:
    """Set the global configuration.

    Args:
        config: MetaFieldsConfig instance
    """
    global _config
    _config = config


def get_config() -> MetaFieldsConfig:
    """Get the current configuration.

    Returns:
        Current MetaFieldsConfig or default if not set
    """
    if _config is None:
        return MetaFieldsConfig()
    return _config
