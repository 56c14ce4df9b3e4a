"""
DDD Catalog - Domain

Marker schema, records, and the build pipeline:
normalizer -> catalog -> resolver -> validator.
"""
from ddd_catalog.domain.builder import CatalogBuilder, CatalogResult, build_catalog
from ddd_catalog.domain.catalog import Catalog, KindView
from ddd_catalog.domain.normalizer import Normalized, normalize, resolve_alias
from ddd_catalog.domain.records import (
    AggregateRootDetails,
    Attribute,
    ContainerDetails,
    Diagnostic,
    DiagnosticCode,
    DomainEventDetails,
    ElementRecord,
    EntityDetails,
    FactoryDetails,
    RawOccurrence,
    ReferenceLink,
    ServiceDetails,
    Severity,
)
from ddd_catalog.domain.resolver import CrossReferenceResolver, Resolution
from ddd_catalog.domain.schema import (
    MARKERS,
    ElementTarget,
    MarkerSpec,
    PatternKind,
    ReferenceRule,
    RelationKind,
    marker_for,
)
from ddd_catalog.domain.validator import Validator

__all__ = [
    # Schema
    "MARKERS",
    "ElementTarget",
    "MarkerSpec",
    "PatternKind",
    "ReferenceRule",
    "RelationKind",
    "marker_for",
    # Records
    "AggregateRootDetails",
    "Attribute",
    "ContainerDetails",
    "Diagnostic",
    "DiagnosticCode",
    "DomainEventDetails",
    "ElementRecord",
    "EntityDetails",
    "FactoryDetails",
    "RawOccurrence",
    "ReferenceLink",
    "ServiceDetails",
    "Severity",
    # Pipeline
    "Normalized",
    "normalize",
    "resolve_alias",
    "Catalog",
    "KindView",
    "CrossReferenceResolver",
    "Resolution",
    "Validator",
    "CatalogBuilder",
    "CatalogResult",
    "build_catalog",
]
