"""
DDD Catalog - Cross-Reference Resolver

Resolves the names a marker uses to point at other markers (an Entity's
aggregate, an Aggregate Root's members, a Domain Event's emitter, a
Factory's managed object, a Service's involved objects) into directed
ReferenceLinks.

Resolution rule, per referenced name, among records of the expected kinds:
    - no match       -> error "unresolved-reference", no link
    - one match      -> link
    - several        -> warning "ambiguous-reference", no link (never guess)

Aggregate membership can be declared from both ends; links from both ends
collapse into one, and disagreements between the ends are reported once per
(aggregate, entity) pair as "membership-mismatch".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from ddd_catalog.domain.catalog import Catalog
from ddd_catalog.domain.records import (
    AggregateRootDetails,
    Diagnostic,
    DiagnosticCode,
    ElementRecord,
    EntityDetails,
    ReferenceLink,
)
from ddd_catalog.domain.schema import (
    PatternKind,
    ReferenceRule,
    RelationKind,
    marker_for,
)
from ddd_catalog.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Links and diagnostics produced by one resolver pass."""
    links: Tuple[ReferenceLink, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()

    def links_from(self, record: ElementRecord) -> List[ReferenceLink]:
        return [link for link in self.links if link.source is record]

    def links_to(self, record: ElementRecord) -> List[ReferenceLink]:
        return [link for link in self.links if link.target is record]


def unresolved_reference(record: ElementRecord, rule: ReferenceRule, name: str) -> Diagnostic:
    return Diagnostic.error(
        DiagnosticCode.UNRESOLVED_REFERENCE,
        f"{record} references {rule.target_names} {name!r} via {rule.field}, "
        f"but no such element exists",
        record,
    )


def ambiguous_reference(
    record: ElementRecord,
    rule: ReferenceRule,
    name: str,
    candidates: List[ElementRecord],
) -> Diagnostic:
    listed = ", ".join(candidate.element_ref for candidate in candidates)
    return Diagnostic.warning(
        DiagnosticCode.AMBIGUOUS_REFERENCE,
        f"{record} references {name!r} via {rule.field}, which matches "
        f"{len(candidates)} elements: {listed}",
        record,
        *candidates,
    )


class CrossReferenceResolver:
    """
    Resolves named references between the records of one catalog.

    The resolver never mutates the catalog; ``resolve()`` can be called any
    number of times and always yields the same result for the same catalog.
    """

    def __init__(self, catalog: Catalog, check_membership: bool = True):
        self.catalog = catalog
        self.check_membership = check_membership

    def candidates(self, rule: ReferenceRule, name: str) -> List[ElementRecord]:
        """Records a reference name could point at under ``rule``."""
        return self.catalog.find_by_name(name, kinds=rule.targets)

    def resolve(self) -> Resolution:
        links: List[ReferenceLink] = []
        seen: Set[ReferenceLink] = set()
        diagnostics: List[Diagnostic] = []

        for record in self.catalog:
            for rule in marker_for(record.kind).references:
                for name in record.reference_values(rule.field):
                    if _is_self_membership(record, rule, name):
                        continue
                    link, diagnostic = self._resolve_one(record, rule, name)
                    if diagnostic is not None:
                        diagnostics.append(diagnostic)
                    elif link is not None and link not in seen:
                        seen.add(link)
                        links.append(link)

        if self.check_membership:
            diagnostics.extend(self._membership_mismatches())

        logger.info(
            "resolver.completed",
            records=len(self.catalog),
            links=len(links),
            diagnostics=len(diagnostics),
        )
        return Resolution(links=tuple(links), diagnostics=tuple(diagnostics))

    def _resolve_one(
        self,
        record: ElementRecord,
        rule: ReferenceRule,
        name: str,
    ) -> Tuple[Optional[ReferenceLink], Optional[Diagnostic]]:
        matches = self.candidates(rule, name)
        if not matches:
            logger.debug("resolver.unresolved", source=record.element_ref, name=name, field=rule.field)
            return None, unresolved_reference(record, rule, name)
        if len(matches) > 1:
            logger.debug("resolver.ambiguous", source=record.element_ref, name=name, candidates=len(matches))
            return None, ambiguous_reference(record, rule, name, matches)

        target = matches[0]
        if rule.reversed:
            return ReferenceLink(source=target, target=record, relation=rule.relation), None
        return ReferenceLink(source=record, target=target, relation=rule.relation), None

    def _membership_mismatches(self) -> List[Diagnostic]:
        """Compare membership declared by roots with the owner declared by entities."""
        diagnostics: List[Diagnostic] = []
        reported: Set[Tuple[int, int]] = set()

        def report(root: ElementRecord, entity: ElementRecord, message: str) -> None:
            key = (id(root), id(entity))
            if key in reported:
                return
            reported.add(key)
            diagnostics.append(Diagnostic.warning(
                DiagnosticCode.MEMBERSHIP_MISMATCH, message, root, entity,
            ))

        for root in self.catalog.find_by_kind(PatternKind.AGGREGATE_ROOT):
            for member in root.reference_values("members"):
                if member == root.name:
                    continue
                entity = self._unique(member, PatternKind.ENTITY)
                if entity is None:
                    continue
                owner = _owner_of(entity)
                if owner != root.name:
                    declared = f"declares aggregate {owner!r}" if owner else "declares no aggregate"
                    report(root, entity, f"{root} lists {entity} as member, but {entity} {declared}")

        for entity in self.catalog.find_by_kind(PatternKind.ENTITY):
            owner = _owner_of(entity)
            if not owner:
                continue
            root = self._unique(owner, PatternKind.AGGREGATE_ROOT)
            if root is None:
                continue
            members = _members_of(root)
            if members and entity.name not in members:
                report(root, entity, f"{entity} declares aggregate {root}, which does not list it as member")

        return diagnostics

    def _unique(self, name: str, kind: PatternKind) -> Optional[ElementRecord]:
        matches = self.catalog.find_by_name(name, kinds=(kind,))
        return matches[0] if len(matches) == 1 else None


def _is_self_membership(record: ElementRecord, rule: ReferenceRule, name: str) -> bool:
    return (
        record.kind is PatternKind.AGGREGATE_ROOT
        and rule.relation is RelationKind.AGGREGATE_MEMBERSHIP
        and bool(record.name)
        and name == record.name
    )


def _owner_of(entity: ElementRecord) -> Optional[str]:
    details = entity.details
    return details.aggregate if isinstance(details, EntityDetails) else None


def _members_of(root: ElementRecord) -> frozenset:
    details = root.details
    return details.members if isinstance(details, AggregateRootDetails) else frozenset()
