"""
DDD Catalog - Records

Value objects flowing through a catalog build: raw marker occurrences as
supplied by a source scanner, the normalized element records, the resolved
reference links between them, and the diagnostics describing data-quality
problems.

Design Principles:
    - Everything here is immutable once constructed
    - Kind-specific data lives in an explicit per-kind details struct
    - Attributes are an ordered multimap: keys may repeat
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from ddd_catalog.core.errors import MalformedOccurrenceError
from ddd_catalog.domain.schema import ElementTarget, PatternKind, RelationKind


# =============================================================================
# RAW INPUT
# =============================================================================


@dataclass(frozen=True)
class RawOccurrence:
    """
    One marker found on one source element, before normalization.

    ``fields`` mirrors the annotation attributes as extracted: string values,
    lists of strings, and for ``attributes`` a list of key/val pairs.
    """
    element_ref: str
    kind: Union[PatternKind, str]
    fields: Mapping[str, Any] = field(default_factory=dict)
    package: Optional[str] = None
    target: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawOccurrence":
        """
        Create from the scanner's JSON shape.

        Example:
            {"elementRef": "shop.order.Order", "kind": "AggregateRoot",
             "fields": {"name": "Order", "members": ["OrderLine"]}}
        """
        if not isinstance(data, Mapping):
            raise MalformedOccurrenceError(
                f"Occurrence must be an object, got {type(data).__name__}",
                actual_value=data,
            )
        element_ref = data.get("elementRef", data.get("element_ref"))
        if not isinstance(element_ref, str) or not element_ref:
            raise MalformedOccurrenceError(
                "Occurrence is missing its elementRef",
                field_name="elementRef",
                actual_value=element_ref,
            )
        fields = data.get("fields") or {}
        if not isinstance(fields, Mapping):
            raise MalformedOccurrenceError(
                f"Fields of {element_ref} must be an object",
                field_name="fields",
                actual_value=fields,
            )
        location = {}
        for key in ("package", "target"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise MalformedOccurrenceError(
                    f"{key.capitalize()} of {element_ref} must be a string, got {type(value).__name__}",
                    field_name=key,
                    actual_value=value,
                )
            location[key] = value
        return cls(
            element_ref=element_ref,
            kind=data.get("kind", ""),
            fields=dict(fields),
            **location,
        )


# =============================================================================
# ELEMENT RECORDS
# =============================================================================


@dataclass(frozen=True)
class Attribute:
    """Key-value extension metadata attached to a marker."""
    key: str
    val: str

    def to_dict(self) -> Dict[str, str]:
        return {"key": self.key, "val": self.val}


@dataclass(frozen=True)
class ContainerDetails:
    """Bounded Context and Module carry no references."""

    def to_dict(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class AggregateRootDetails:
    # Order is irrelevant; ``members`` and ``memberNames`` are merged
    members: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        return {"members": sorted(self.members)}


@dataclass(frozen=True)
class EntityDetails:
    aggregate: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"aggregate": self.aggregate}


@dataclass(frozen=True)
class DomainEventDetails:
    emitter: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"emitter": self.emitter}


@dataclass(frozen=True)
class ServiceDetails:
    involved_objects: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        return {"involvedObjects": sorted(self.involved_objects)}


@dataclass(frozen=True)
class FactoryDetails:
    managed_object: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"managedObject": self.managed_object}


PatternDetails = Union[
    ContainerDetails,
    AggregateRootDetails,
    EntityDetails,
    DomainEventDetails,
    ServiceDetails,
    FactoryDetails,
]


@dataclass(frozen=True)
class ElementRecord:
    """
    Normalized marker data for one annotated source element.

    ``name`` is the resolved display name; ``raw_name`` and ``raw_value`` keep
    the two alias fields as declared so that alias conflicts stay traceable.
    """
    element_ref: str
    kind: PatternKind
    details: PatternDetails
    id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    attributes: Tuple[Attribute, ...] = ()
    package: str = ""
    target: ElementTarget = ElementTarget.TYPE
    raw_name: str = ""
    raw_value: str = ""

    def __str__(self) -> str:
        label = self.name or self.element_ref
        return f"{self.kind.display_name} '{label}'"

    def reference_values(self, field_name: str) -> Tuple[str, ...]:
        """
        Names referenced through a kind-specific field, sorted for
        deterministic resolution order.
        """
        details = self.details
        if field_name == "aggregate" and isinstance(details, EntityDetails):
            return (details.aggregate,) if details.aggregate else ()
        if field_name == "members" and isinstance(details, AggregateRootDetails):
            return tuple(sorted(details.members))
        if field_name == "emitter" and isinstance(details, DomainEventDetails):
            return (details.emitter,) if details.emitter else ()
        if field_name == "involvedObjects" and isinstance(details, ServiceDetails):
            return tuple(sorted(details.involved_objects))
        if field_name == "managedObject" and isinstance(details, FactoryDetails):
            return (details.managed_object,) if details.managed_object else ()
        return ()

    def attribute_values(self, key: str) -> List[str]:
        """All values declared for a (possibly repeated) attribute key."""
        return [attribute.val for attribute in self.attributes if attribute.key == key]

    @property
    def attribute_keys(self) -> List[str]:
        """Distinct attribute keys in first-declaration order."""
        return list(dict.fromkeys(attribute.key for attribute in self.attributes))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return {
            "elementRef": self.element_ref,
            "kind": self.kind.value,
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "package": self.package,
            "attributes": [attribute.to_dict() for attribute in self.attributes],
            **self.details.to_dict(),
        }


# =============================================================================
# LINKS AND DIAGNOSTICS
# =============================================================================


@dataclass(frozen=True)
class ReferenceLink:
    """A resolved, directed edge between two records."""
    source: ElementRecord
    target: ElementRecord
    relation: RelationKind

    def __str__(self) -> str:
        return f"{self.source} -[{self.relation.value}]-> {self.target}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source.element_ref,
            "target": self.target.element_ref,
            "relation": self.relation.value,
        }


class Severity(str, Enum):
    """Diagnostic severity."""
    WARNING = "warning"
    ERROR = "error"


class DiagnosticCode(str, Enum):
    """Stable identifiers for data-quality problems."""
    AMBIGUOUS_ALIAS = "ambiguous-alias"
    UNRESOLVED_REFERENCE = "unresolved-reference"
    AMBIGUOUS_REFERENCE = "ambiguous-reference"
    MEMBERSHIP_MISMATCH = "membership-mismatch"
    SELF_MEMBERSHIP = "self-membership"
    EMPTY_ATTRIBUTE = "empty-attribute"
    INVALID_TARGET = "invalid-target"


@dataclass(frozen=True)
class Diagnostic:
    """A data-quality problem found during a build."""
    severity: Severity
    code: DiagnosticCode
    message: str
    offending: Tuple[str, ...] = ()

    @classmethod
    def warning(cls, code: DiagnosticCode, message: str, *records: ElementRecord) -> "Diagnostic":
        return cls(Severity.WARNING, code, message, tuple(r.element_ref for r in records))

    @classmethod
    def error(cls, code: DiagnosticCode, message: str, *records: ElementRecord) -> "Diagnostic":
        return cls(Severity.ERROR, code, message, tuple(r.element_ref for r in records))

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        return f"{self.severity.value}[{self.code.value}]: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "code": self.code.value,
            "message": self.message,
            "offending": list(self.offending),
        }
