"""
DDD Catalog

Builds a queryable model of a codebase's Domain-Driven Design architecture
from extracted pattern markers.
"""
__version__ = "1.0.0"

from ddd_catalog.domain import (  # noqa: E402
    Catalog,
    CatalogBuilder,
    CatalogResult,
    Diagnostic,
    ElementRecord,
    PatternKind,
    RawOccurrence,
    ReferenceLink,
    Severity,
    build_catalog,
)

__all__ = [
    "__version__",
    "Catalog",
    "CatalogBuilder",
    "CatalogResult",
    "Diagnostic",
    "ElementRecord",
    "PatternKind",
    "RawOccurrence",
    "ReferenceLink",
    "Severity",
    "build_catalog",
]
