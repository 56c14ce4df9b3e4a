"""
DDD Catalog - Catalog

In-memory, queryable collection of normalized element records for one
analysis run, indexed by identifier, by pattern kind, by resolved name and
by containing Bounded Context or Module.

Usage:
    catalog = Catalog()
    catalog.add(record)

    catalog.find_by_id(PatternKind.ENTITY, "e1")
    for root in catalog.find_by_kind(PatternKind.AGGREGATE_ROOT):
        ...
    catalog.find_by_name("Order", kinds=[PatternKind.AGGREGATE_ROOT])
"""
from __future__ import annotations

from collections import Counter, defaultdict
from typing import (
    Collection,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
)

from ddd_catalog.core.errors import DuplicateIdentifierError, RecordOwnershipError
from ddd_catalog.domain.records import ElementRecord
from ddd_catalog.domain.schema import PatternKind
from ddd_catalog.observability.logging import get_logger

logger = get_logger(__name__)

_OWNER_ATTR = "_catalog_owner"


class KindView:
    """
    Lazy view over the records of one kind, in insertion order.

    Each iteration starts from the beginning and reflects the catalog's
    current content.
    """

    def __init__(self, catalog: "Catalog", kind: PatternKind):
        self._catalog = catalog
        self._kind = kind

    def __iter__(self) -> Iterator[ElementRecord]:
        return (record for record in self._catalog._records if record.kind is self._kind)

    def __len__(self) -> int:
        return self._catalog._kind_counts[self._kind]

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        return f"KindView({self._kind.value}, size={len(self)})"


class Catalog:
    """
    Owner of all element records of one analysis run.

    A record belongs to exactly one catalog; adding a record owned by another
    catalog is a usage fault.
    """

    def __init__(self, records: Iterable[ElementRecord] = ()):
        self._records: List[ElementRecord] = []
        self._by_id: Dict[Tuple[PatternKind, str], ElementRecord] = {}
        self._by_name: Dict[str, List[ElementRecord]] = defaultdict(list)
        self._kind_counts: Counter = Counter()
        for record in records:
            self.add(record)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, record: ElementRecord) -> ElementRecord:
        """
        Add a record.

        Raises:
            DuplicateIdentifierError: a record of the same kind with the same
                non-empty id is already present, the record itself included
            RecordOwnershipError: the record already belongs to a catalog
        """
        if record.id:
            key = (record.kind, record.id)
            existing = self._by_id.get(key)
            if existing is not None:
                raise DuplicateIdentifierError(
                    f"Duplicate {record.kind.display_name} id {record.id!r}: "
                    f"{record.element_ref} conflicts with {existing.element_ref}",
                    kind=record.kind.value,
                    identifier=record.id,
                    existing_ref=existing.element_ref,
                    rejected_ref=record.element_ref,
                )

        owner = getattr(record, _OWNER_ATTR, None)
        if owner is not None:
            raise RecordOwnershipError(
                f"{record} ({record.element_ref}) already belongs to "
                f"{'this' if owner is self else 'another'} catalog",
                element_ref=record.element_ref,
            )

        if record.id:
            self._by_id[(record.kind, record.id)] = record

        # Frozen record: ownership is tracked outside the dataclass fields
        object.__setattr__(record, _OWNER_ATTR, self)
        self._records.append(record)
        self._by_name[record.name].append(record)
        self._kind_counts[record.kind] += 1

        logger.debug(
            "catalog.record_added",
            kind=record.kind.value,
            element_ref=record.element_ref,
            name=record.name,
        )
        return record

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_id(self, kind: PatternKind, identifier: str) -> Optional[ElementRecord]:
        """Find a record by kind and id; ``None`` when not found."""
        if not identifier:
            return None
        return self._by_id.get((kind, identifier))

    def find_by_kind(self, kind: PatternKind) -> KindView:
        """All records of a kind, in insertion order."""
        return KindView(self, kind)

    def find_by_name(
        self,
        name: str,
        kinds: Optional[Collection[PatternKind]] = None,
    ) -> List[ElementRecord]:
        """
        All records whose resolved name equals ``name``.

        Names are not unique; collisions are returned in insertion order.
        """
        matches = self._by_name.get(name, [])
        if kinds is None:
            return list(matches)
        return [record for record in matches if record.kind in kinds]

    def owns(self, record: ElementRecord) -> bool:
        return getattr(record, _OWNER_ATTR, None) is self

    # ------------------------------------------------------------------
    # Containment
    # ------------------------------------------------------------------

    def bounded_context_of(self, record: ElementRecord) -> Optional[ElementRecord]:
        """Nearest enclosing Bounded Context of a record."""
        return self._container_of(record, PatternKind.BOUNDED_CONTEXT)

    def module_of(self, record: ElementRecord) -> Optional[ElementRecord]:
        """Nearest enclosing Module of a record."""
        return self._container_of(record, PatternKind.MODULE)

    def contents_of(self, container: ElementRecord) -> List[ElementRecord]:
        """Records located inside a Bounded Context or Module package."""
        if not container.kind.is_container:
            return []
        return [
            record for record in self._records
            if record is not container and _within(record.package, container.package)
        ]

    def _container_of(
        self,
        record: ElementRecord,
        kind: PatternKind,
    ) -> Optional[ElementRecord]:
        best: Optional[ElementRecord] = None
        for candidate in self.find_by_kind(kind):
            if candidate is record or not _within(record.package, candidate.package):
                continue
            if best is None or len(candidate.package) > len(best.package):
                best = candidate
        return best

    # ------------------------------------------------------------------
    # Collection protocol
    # ------------------------------------------------------------------

    def kinds(self) -> Dict[PatternKind, int]:
        """Record counts per kind, in schema order."""
        return {kind: self._kind_counts[kind] for kind in PatternKind if self._kind_counts[kind]}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ElementRecord]:
        return iter(list(self._records))

    def __contains__(self, record: object) -> bool:
        return isinstance(record, ElementRecord) and self.owns(record)

    def __repr__(self) -> str:
        return f"Catalog(size={len(self)})"


def _within(package: str, container: str) -> bool:
    if not container:
        return False
    return package == container or package.startswith(container + ".")
