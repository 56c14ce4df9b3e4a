"""
DDD Catalog - Marker Schema

Reference data describing the fixed set of Domain-Driven Design pattern
markers: their display names, the annotation each one mirrors, the kind of
source element they may tag, the raw fields they recognize, and the named
references they carry to other markers.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from ddd_catalog.core.errors import MalformedOccurrenceError


class ElementTarget(str, Enum):
    """Kind of source element a marker may be attached to."""
    PACKAGE = "package"
    TYPE = "type"


class RelationKind(str, Enum):
    """Kinds of directed edges between catalog records."""
    AGGREGATE_MEMBERSHIP = "aggregateMembership"
    EMITS = "emits"
    MANAGES = "manages"
    INVOLVES = "involves"


class PatternKind(str, Enum):
    """DDD pattern roles. Fixed, closed set."""
    BOUNDED_CONTEXT = "BoundedContext"
    MODULE = "Module"
    AGGREGATE_ROOT = "AggregateRoot"
    ENTITY = "Entity"
    DOMAIN_EVENT = "DomainEvent"
    DOMAIN_SERVICE = "DomainService"
    APPLICATION_SERVICE = "ApplicationService"
    INFRASTRUCTURE_SERVICE = "InfrastructureService"
    FACTORY = "Factory"

    @property
    def display_name(self) -> str:
        """Pattern name as used in the DDD ubiquitous language."""
        return MARKERS[self].display_name

    @property
    def annotation(self) -> str:
        return MARKERS[self].annotation

    @property
    def target(self) -> ElementTarget:
        return MARKERS[self].target

    @property
    def is_container(self) -> bool:
        return self.target is ElementTarget.PACKAGE

    @property
    def is_service(self) -> bool:
        return self in SERVICE_KINDS

    @classmethod
    def parse(cls, raw: object) -> "PatternKind":
        """
        Parse a raw kind value.

        Accepts the enum value (``AggregateRoot``), the annotation name
        (``DddAggregateRoot``) or the display name (``Aggregate Root``),
        ignoring case, spaces, hyphens and underscores.

        Raises:
            MalformedOccurrenceError: if the value names no known kind
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            raise MalformedOccurrenceError(
                f"Pattern kind must be a non-empty string, got {raw!r}",
                field_name="kind",
                actual_value=raw,
            )
        key = _squash(raw)
        if key.startswith("ddd") and key[3:] in _KIND_LOOKUP:
            key = key[3:]
        try:
            return _KIND_LOOKUP[key]
        except KeyError:
            raise MalformedOccurrenceError(
                f"Unknown pattern kind: {raw!r}",
                field_name="kind",
                actual_value=raw,
                suggestions=[kind.value for kind in cls],
            ) from None


def _squash(text: str) -> str:
    return re.sub(r"[\s_\-]+", "", text).lower()


# Fields every marker recognizes
COMMON_FIELDS: FrozenSet[str] = frozenset({"id", "name", "value", "description", "attributes"})


@dataclass(frozen=True)
class ReferenceRule:
    """A named reference from one marker field to records of other kinds."""
    field: str
    targets: Tuple[PatternKind, ...]
    relation: RelationKind
    multi_valued: bool = False
    # Link points from the referenced record to the referencing one
    reversed: bool = False

    @property
    def target_names(self) -> str:
        return " or ".join(kind.display_name for kind in self.targets)


@dataclass(frozen=True)
class MarkerSpec:
    """Schema entry for one pattern kind."""
    kind: PatternKind
    display_name: str
    annotation: str
    target: ElementTarget
    fields: FrozenSet[str]
    references: Tuple[ReferenceRule, ...] = ()

    def recognizes(self, field_name: str) -> bool:
        return field_name in COMMON_FIELDS or field_name in self.fields

    def reference(self, field_name: str) -> Optional[ReferenceRule]:
        for rule in self.references:
            if rule.field == field_name:
                return rule
        return None


SERVICE_KINDS: FrozenSet[PatternKind] = frozenset({
    PatternKind.DOMAIN_SERVICE,
    PatternKind.APPLICATION_SERVICE,
    PatternKind.INFRASTRUCTURE_SERVICE,
})

_DOMAIN_OBJECTS = (PatternKind.AGGREGATE_ROOT, PatternKind.ENTITY)

_EMITTERS = (
    PatternKind.AGGREGATE_ROOT,
    PatternKind.ENTITY,
    PatternKind.DOMAIN_SERVICE,
    PatternKind.APPLICATION_SERVICE,
    PatternKind.INFRASTRUCTURE_SERVICE,
)

_INVOLVES = ReferenceRule(
    field="involvedObjects",
    targets=_DOMAIN_OBJECTS,
    relation=RelationKind.INVOLVES,
    multi_valued=True,
)


def _service(kind: PatternKind, display_name: str) -> MarkerSpec:
    return MarkerSpec(
        kind=kind,
        display_name=display_name,
        annotation=f"Ddd{kind.value}",
        target=ElementTarget.TYPE,
        fields=frozenset({"involvedObjects"}),
        references=(_INVOLVES,),
    )


MARKERS: Dict[PatternKind, MarkerSpec] = {
    PatternKind.BOUNDED_CONTEXT: MarkerSpec(
        kind=PatternKind.BOUNDED_CONTEXT,
        display_name="Bounded Context",
        annotation="DddBoundedContext",
        target=ElementTarget.PACKAGE,
        fields=frozenset(),
    ),
    PatternKind.MODULE: MarkerSpec(
        kind=PatternKind.MODULE,
        display_name="Module",
        annotation="DddModule",
        target=ElementTarget.PACKAGE,
        fields=frozenset(),
    ),
    PatternKind.AGGREGATE_ROOT: MarkerSpec(
        kind=PatternKind.AGGREGATE_ROOT,
        display_name="Aggregate Root",
        annotation="DddAggregateRoot",
        target=ElementTarget.TYPE,
        fields=frozenset({"members", "memberNames"}),
        references=(
            ReferenceRule(
                field="members",
                targets=(PatternKind.ENTITY,),
                relation=RelationKind.AGGREGATE_MEMBERSHIP,
                multi_valued=True,
            ),
        ),
    ),
    PatternKind.ENTITY: MarkerSpec(
        kind=PatternKind.ENTITY,
        display_name="Entity",
        annotation="DddEntity",
        target=ElementTarget.TYPE,
        fields=frozenset({"aggregate"}),
        references=(
            ReferenceRule(
                field="aggregate",
                targets=(PatternKind.AGGREGATE_ROOT,),
                relation=RelationKind.AGGREGATE_MEMBERSHIP,
                reversed=True,
            ),
        ),
    ),
    PatternKind.DOMAIN_EVENT: MarkerSpec(
        kind=PatternKind.DOMAIN_EVENT,
        display_name="Domain Event",
        annotation="DddDomainEvent",
        target=ElementTarget.TYPE,
        fields=frozenset({"emitter"}),
        references=(
            ReferenceRule(
                field="emitter",
                targets=_EMITTERS,
                relation=RelationKind.EMITS,
                reversed=True,
            ),
        ),
    ),
    PatternKind.DOMAIN_SERVICE: _service(PatternKind.DOMAIN_SERVICE, "Domain Service"),
    PatternKind.APPLICATION_SERVICE: _service(PatternKind.APPLICATION_SERVICE, "Application Service"),
    PatternKind.INFRASTRUCTURE_SERVICE: _service(PatternKind.INFRASTRUCTURE_SERVICE, "Infrastructure Service"),
    PatternKind.FACTORY: MarkerSpec(
        kind=PatternKind.FACTORY,
        display_name="Factory",
        annotation="DddFactory",
        target=ElementTarget.TYPE,
        fields=frozenset({"managedObject"}),
        references=(
            ReferenceRule(
                field="managedObject",
                targets=_DOMAIN_OBJECTS,
                relation=RelationKind.MANAGES,
            ),
        ),
    ),
}

_KIND_LOOKUP: Dict[str, PatternKind] = {}
for _kind, _spec in MARKERS.items():
    _KIND_LOOKUP[_squash(_kind.value)] = _kind
    _KIND_LOOKUP[_squash(_spec.display_name)] = _kind


def marker_for(kind: PatternKind) -> MarkerSpec:
    """Get the schema entry for a pattern kind."""
    return MARKERS[kind]
