"""
Service layer.

Network-backed lookups (metadata documents, field descriptors, cultures)
and the tenant component registry.
"""

from .metadata_service import MetadataSourceAccessor, MetadataQuery, QueryStatus
from .field_definition_service import FieldDefinitionResolver, FieldDescriptor
from .culture_service import CultureService
from .component_registry import ComponentRegistry, DEFAULT_TENANT

__all__ = [
    "MetadataSourceAccessor",
    "MetadataQuery",
    "QueryStatus",
    "FieldDefinitionResolver",
    "FieldDescriptor",
    "CultureService",
    "ComponentRegistry",
    "DEFAULT_TENANT",
]
