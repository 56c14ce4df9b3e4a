"""
DDD Catalog - Catalog Builder

Runs one analysis pass over a finite set of raw marker occurrences:

    normalize -> add to catalog -> resolve references -> validate

Data-quality problems never abort a run; they are collected as diagnostics
on the returned CatalogResult. Usage faults (duplicate ids within a kind,
malformed kinds) propagate and no partial result is produced.

Usage:
    from ddd_catalog import build_catalog

    result = build_catalog([
        {"elementRef": "shop.order.Order", "kind": "AggregateRoot",
         "fields": {"id": "agg1", "name": "Order", "members": ["OrderLine"]}},
        {"elementRef": "shop.order.OrderLine", "kind": "Entity",
         "fields": {"id": "e1", "name": "OrderLine", "aggregate": "Order"}},
    ])
    assert not result.diagnostics
"""
from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ddd_catalog.config import get_config
from ddd_catalog.domain.catalog import Catalog
from ddd_catalog.domain.normalizer import normalize
from ddd_catalog.domain.records import (
    Diagnostic,
    DiagnosticCode,
    RawOccurrence,
    ReferenceLink,
    Severity,
)
from ddd_catalog.domain.resolver import CrossReferenceResolver
from ddd_catalog.domain.validator import Validator
from ddd_catalog.observability.logging import LogContext, get_logger
from ddd_catalog.observability.tracing import create_span

logger = get_logger(__name__)

OccurrenceInput = Union[RawOccurrence, Mapping[str, Any]]


@dataclass(frozen=True)
class CatalogResult:
    """Everything one analysis run produces."""
    catalog: Catalog
    links: Tuple[ReferenceLink, ...]
    diagnostics: Tuple[Diagnostic, ...]

    @property
    def has_errors(self) -> bool:
        return any(diagnostic.is_error for diagnostic in self.diagnostics)

    def count(self, severity: Severity) -> int:
        return sum(1 for diagnostic in self.diagnostics if diagnostic.severity is severity)

    def by_code(self, code: DiagnosticCode) -> List[Diagnostic]:
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.code is code]

    def summary(self) -> Dict[str, Any]:
        """Counts per kind, relation and severity."""
        relations = Counter(link.relation.value for link in self.links)
        return {
            "records": len(self.catalog),
            "kinds": {kind.value: count for kind, count in self.catalog.kinds().items()},
            "links": len(self.links),
            "relations": dict(relations),
            "errors": self.count(Severity.ERROR),
            "warnings": self.count(Severity.WARNING),
        }

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible view; record, link and diagnostic order is preserved."""
        return {
            "records": [record.to_dict() for record in self.catalog],
            "links": [link.to_dict() for link in self.links],
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
            "summary": self.summary(),
        }


class CatalogBuilder:
    """
    Builds a fresh Catalog per run.

    Independent builders share no state, so separate runs may execute
    concurrently.
    """

    def __init__(self, check_membership: Optional[bool] = None):
        if check_membership is None:
            check_membership = get_config().build.check_membership
        self.check_membership = check_membership

    def build(self, occurrences: Iterable[OccurrenceInput]) -> CatalogResult:
        raw = [_as_occurrence(occurrence) for occurrence in occurrences]
        run_id = uuid.uuid4().hex

        with LogContext(run_id=run_id), create_span(
            "catalog.build", attributes={"catalog.occurrences": len(raw)}
        ) as span:
            logger.info("builder.started", occurrences=len(raw))

            catalog = Catalog()
            diagnostics: List[Diagnostic] = []
            with create_span("catalog.normalize"):
                for occurrence in raw:
                    normalized = normalize(occurrence)
                    catalog.add(normalized.record)
                    diagnostics.extend(normalized.diagnostics)

            with create_span("catalog.resolve"):
                resolution = CrossReferenceResolver(
                    catalog, check_membership=self.check_membership
                ).resolve()
            diagnostics.extend(resolution.diagnostics)

            with create_span("catalog.validate"):
                diagnostics.extend(Validator(catalog, resolution).validate())

            result = CatalogResult(
                catalog=catalog,
                links=resolution.links,
                diagnostics=tuple(diagnostics),
            )
            span.set_attribute("catalog.records", len(catalog))
            span.set_attribute("catalog.links", len(result.links))
            span.set_attribute("catalog.errors", result.count(Severity.ERROR))
            logger.info("builder.completed", **result.summary())
            return result


def build_catalog(
    occurrences: Iterable[OccurrenceInput],
    check_membership: Optional[bool] = None,
) -> CatalogResult:
    """Build a catalog from raw occurrences or their JSON dictionaries."""
    return CatalogBuilder(check_membership=check_membership).build(occurrences)


def _as_occurrence(occurrence: OccurrenceInput) -> RawOccurrence:
    if isinstance(occurrence, RawOccurrence):
        return occurrence
    return RawOccurrence.from_dict(occurrence)
