"""
DDD Catalog - Record Normalizer

Turns one raw marker occurrence into one canonical ElementRecord.

Normalization is a pure function of its input: no catalog lookups, no
logging side effects that influence the result. Problems with the declared
data (alias conflicts, empty attribute keys, markers on the wrong element
kind) become diagnostics next to the record; only input that cannot be
interpreted at all raises.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ddd_catalog.core.errors import MalformedOccurrenceError
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
    PatternDetails,
    RawOccurrence,
    ServiceDetails,
    Severity,
)
from ddd_catalog.domain.schema import ElementTarget, MarkerSpec, PatternKind, marker_for


@dataclass(frozen=True)
class Normalized:
    """A normalized record together with the diagnostics raised for it."""
    record: ElementRecord
    diagnostics: Tuple[Diagnostic, ...] = ()


def normalize(raw: RawOccurrence) -> Normalized:
    """
    Normalize a raw marker occurrence.

    Raises:
        MalformedOccurrenceError: if the kind is unknown or a field has a
            shape that cannot be read
    """
    kind = PatternKind.parse(raw.kind)
    spec = marker_for(kind)
    fields = {key: value for key, value in raw.fields.items() if spec.recognizes(key)}
    ref = raw.element_ref

    raw_name = _text(fields.get("name"), ref, "name")
    raw_value = _text(fields.get("value"), ref, "value")
    name, alias_conflict = resolve_alias(raw_name, raw_value)

    record = ElementRecord(
        element_ref=ref,
        kind=kind,
        details=_details(kind, fields, ref),
        id=_text(fields.get("id"), ref, "id") or None,
        name=name,
        description=_text(fields.get("description"), ref, "description") or None,
        attributes=_attributes(fields.get("attributes"), ref),
        package=_package(raw, spec),
        target=spec.target,
        raw_name=raw_name,
        raw_value=raw_value,
    )

    diagnostics: List[Diagnostic] = []
    if alias_conflict:
        diagnostics.append(Diagnostic.warning(
            DiagnosticCode.AMBIGUOUS_ALIAS,
            f"{record} declares both name={raw_name!r} and value={raw_value!r}; using name",
            record,
        ))
    for attribute in record.attributes:
        if not attribute.key or not attribute.val:
            diagnostics.append(Diagnostic.warning(
                DiagnosticCode.EMPTY_ATTRIBUTE,
                f"{record} declares an attribute with an empty key or value "
                f"(key={attribute.key!r}, val={attribute.val!r})",
                record,
            ))
    declared_target = _declared_target(raw.target, ref)
    if declared_target is not None and declared_target is not spec.target:
        diagnostics.append(Diagnostic(
            Severity.WARNING,
            DiagnosticCode.INVALID_TARGET,
            f"{kind.display_name} applies to a {spec.target.value}, "
            f"but {ref} is a {declared_target.value}",
            (ref,),
        ))

    return Normalized(record=record, diagnostics=tuple(diagnostics))


def resolve_alias(name: str, value: str) -> Tuple[str, bool]:
    """
    Resolve the ``name``/``value`` alias pair.

    Returns the display name and whether the pair was ambiguous (both set
    and different). ``name`` wins a conflict.
    """
    if name and value:
        return name, name != value
    return name or value, False


def _text(value: Any, ref: str, field_name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise MalformedOccurrenceError(
        f"Field {field_name!r} of {ref} must be a string, got {type(value).__name__}",
        field_name=field_name,
        actual_value=value,
    )


def _names(value: Any, ref: str, field_name: str) -> List[str]:
    """Read a list field given as a list of names or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise MalformedOccurrenceError(
            f"Field {field_name!r} of {ref} must be a list of names",
            field_name=field_name,
            actual_value=value,
        )
    return [name for name in (_text(item, ref, field_name) for item in items) if name]


def _name_set(fields: Mapping[str, Any], ref: str, *field_names: str) -> FrozenSet[str]:
    names: List[str] = []
    for field_name in field_names:
        names.extend(_names(fields.get(field_name), ref, field_name))
    return frozenset(names)


def _details(kind: PatternKind, fields: Mapping[str, Any], ref: str) -> PatternDetails:
    if kind is PatternKind.AGGREGATE_ROOT:
        return AggregateRootDetails(members=_name_set(fields, ref, "members", "memberNames"))
    if kind is PatternKind.ENTITY:
        return EntityDetails(aggregate=_text(fields.get("aggregate"), ref, "aggregate") or None)
    if kind is PatternKind.DOMAIN_EVENT:
        return DomainEventDetails(emitter=_text(fields.get("emitter"), ref, "emitter") or None)
    if kind is PatternKind.FACTORY:
        return FactoryDetails(
            managed_object=_text(fields.get("managedObject"), ref, "managedObject") or None
        )
    if kind.is_service:
        return ServiceDetails(involved_objects=_name_set(fields, ref, "involvedObjects"))
    return ContainerDetails()


def _attributes(value: Any, ref: str) -> Tuple[Attribute, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise MalformedOccurrenceError(
            f"Attributes of {ref} must be a list",
            field_name="attributes",
            actual_value=value,
        )
    attributes = []
    for item in value:
        if isinstance(item, Mapping):
            key, val = item.get("key"), item.get("val")
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            key, val = item
        else:
            raise MalformedOccurrenceError(
                f"Attribute of {ref} must be a key/val pair, got {item!r}",
                field_name="attributes",
                actual_value=item,
            )
        # Values are kept verbatim, without stripping
        attributes.append(Attribute(
            key=_verbatim(key, ref),
            val=_verbatim(val, ref),
        ))
    return tuple(attributes)


def _verbatim(value: Any, ref: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise MalformedOccurrenceError(
        f"Attribute keys and values of {ref} must be strings, got {value!r}",
        field_name="attributes",
        actual_value=value,
    )


def _package(raw: RawOccurrence, spec: MarkerSpec) -> str:
    package = _text(raw.package, raw.element_ref, "package")
    if package:
        return package
    if spec.target is ElementTarget.PACKAGE:
        return raw.element_ref
    head, dot, _ = raw.element_ref.rpartition(".")
    return head if dot else ""


def _declared_target(value: Optional[str], ref: str) -> Optional[ElementTarget]:
    text = _text(value, ref, "target").lower()
    if not text:
        return None
    try:
        return ElementTarget(text)
    except ValueError:
        raise MalformedOccurrenceError(
            f"Target of {ref} must be 'package' or 'type', got {value!r}",
            field_name="target",
            actual_value=value,
        ) from None
