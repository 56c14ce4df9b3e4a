"""
DDD Catalog - Core

Fault hierarchy shared by all catalog components.
"""
from ddd_catalog.core.errors import (
    CatalogError,
    CatalogConfigError,
    DuplicateIdentifierError,
    ErrorSeverity,
    MalformedOccurrenceError,
    RecordOwnershipError,
    ResolutionOrderError,
)

__all__ = [
    "CatalogError",
    "CatalogConfigError",
    "DuplicateIdentifierError",
    "ErrorSeverity",
    "MalformedOccurrenceError",
    "RecordOwnershipError",
    "ResolutionOrderError",
]
