"""
pyqt-metafields: metadata-driven form fields and value-set editing for PyQt6.

Renders CRM fields from backend field descriptors and edits XML-shaped
metadata documents with snapshot-based change tracking.

Architecture:
- Tier 1 (Core): Pure helpers for XML-shaped JSON, dates, numbers and diffs
- Tier 2 (Protocols): Widget ABCs, adapters and global configuration
- Tier 3 (IO/Services): requests transport, metadata, descriptors, cultures
- Tier 4 (Forms/Widgets): Field widgets and the value-set editor

Key Features:
- Explicit props merged over resolved field descriptors
- UTC storage with timezone-aware display for date/time fields
- Culture-aware number entry that never commits partial input
- Dirty tracking against immutable snapshots
- Tenant component registry with default fallback
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
