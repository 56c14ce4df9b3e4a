"""
DDD Catalog - Validator

Checks catalog-wide invariants once references have been resolved.
"""
from __future__ import annotations

from typing import List, Optional

from ddd_catalog.core.errors import ResolutionOrderError
from ddd_catalog.domain.catalog import Catalog
from ddd_catalog.domain.records import Diagnostic, DiagnosticCode
from ddd_catalog.domain.resolver import CrossReferenceResolver, Resolution, unresolved_reference
from ddd_catalog.domain.schema import PatternKind, RelationKind, marker_for
from ddd_catalog.observability.logging import get_logger

logger = get_logger(__name__)

# References that must point at something; membership has its own checks
_REQUIRED_RELATIONS = (RelationKind.EMITS, RelationKind.MANAGES, RelationKind.INVOLVES)


class Validator:
    """
    Runs the global invariant checks over a resolved catalog.

    Returns only diagnostics not already reported by the resolution it is
    given, so the two lists can be concatenated without duplicates.
    """

    def __init__(self, catalog: Catalog, resolution: Optional[Resolution] = None):
        self.catalog = catalog
        self.resolution = resolution

    def validate(self) -> List[Diagnostic]:
        """
        Raises:
            ResolutionOrderError: if no resolution has been supplied
        """
        if self.resolution is None:
            raise ResolutionOrderError(
                "Validator requires a resolution; run CrossReferenceResolver.resolve() first",
                phase_name="validate",
                required_phase="resolve",
            )

        known = set(self.resolution.diagnostics)
        diagnostics: List[Diagnostic] = []
        for diagnostic in (
            *self._unresolved_references(),
            *self._self_memberships(),
        ):
            if diagnostic not in known:
                known.add(diagnostic)
                diagnostics.append(diagnostic)

        logger.info("validator.completed", records=len(self.catalog), diagnostics=len(diagnostics))
        return diagnostics

    def _unresolved_references(self) -> List[Diagnostic]:
        resolver = CrossReferenceResolver(self.catalog, check_membership=False)
        diagnostics = []
        for record in self.catalog:
            for rule in marker_for(record.kind).references:
                if rule.relation not in _REQUIRED_RELATIONS:
                    continue
                for name in record.reference_values(rule.field):
                    if not resolver.candidates(rule, name):
                        diagnostics.append(unresolved_reference(record, rule, name))
        return diagnostics

    def _self_memberships(self) -> List[Diagnostic]:
        diagnostics = []
        for root in self.catalog.find_by_kind(PatternKind.AGGREGATE_ROOT):
            if root.name and root.name in root.reference_values("members"):
                diagnostics.append(Diagnostic.error(
                    DiagnosticCode.SELF_MEMBERSHIP,
                    f"{root} lists itself as its own member",
                    root,
                ))
        return diagnostics
