"""
Tests for domain/validator.py - Validator.
"""
import pytest

from ddd_catalog.core.errors import ResolutionOrderError
from ddd_catalog.domain.catalog import Catalog
from ddd_catalog.domain.normalizer import normalize
from ddd_catalog.domain.records import DiagnosticCode, Severity
from ddd_catalog.domain.resolver import CrossReferenceResolver, Resolution
from ddd_catalog.domain.validator import Validator


@pytest.fixture
def catalog_of(occurrence):
    def make(*specs):
        return Catalog(
            normalize(occurrence(ref, kind, **fields)).record for ref, kind, fields in specs
        )

    return make


def validate(catalog):
    resolution = CrossReferenceResolver(catalog).resolve()
    return Validator(catalog, resolution).validate()


class TestOrdering:
    """Validation depends on a prior resolution."""

    def test_validate_before_resolve_raises(self, catalog_of):
        catalog = catalog_of(("shop.Order", "AggregateRoot", {"name": "Order"}))

        with pytest.raises(ResolutionOrderError) as exc_info:
            Validator(catalog).validate()

        assert exc_info.value.required_phase == "resolve"

    def test_empty_catalog(self):
        assert validate(Catalog()) == []


class TestSelfMembership:
    """Tests for aggregates listing themselves."""

    def test_self_membership_is_an_error(self, catalog_of):
        catalog = catalog_of(
            ("shop.Order", "AggregateRoot", {"name": "Order", "members": ["Order", "OrderLine"]}),
            ("shop.OrderLine", "Entity", {"name": "OrderLine", "aggregate": "Order"}),
        )

        diagnostics = validate(catalog)

        assert len(diagnostics) == 1
        assert diagnostics[0].code is DiagnosticCode.SELF_MEMBERSHIP
        assert diagnostics[0].severity is Severity.ERROR
        assert diagnostics[0].offending == ("shop.Order",)

    def test_unnamed_root_is_not_self_member(self, catalog_of):
        catalog = catalog_of(("shop.Order", "AggregateRoot", {"members": [""]}))
        assert validate(catalog) == []


class TestReferences:
    """Tests for required reference checks."""

    def test_unresolved_emitter_not_repeated(self, catalog_of):
        catalog = catalog_of(
            ("shop.Ghosted", "DomainEvent", {"name": "Ghosted", "emitter": "Ghost"}),
        )
        resolution = CrossReferenceResolver(catalog).resolve()

        assert [d.code for d in resolution.diagnostics] == [DiagnosticCode.UNRESOLVED_REFERENCE]
        assert Validator(catalog, resolution).validate() == []

    def test_unresolved_references_found_without_resolver_diagnostics(self, catalog_of):
        catalog = catalog_of(
            ("shop.Ghosted", "DomainEvent", {"name": "Ghosted", "emitter": "Ghost"}),
            ("shop.GhostFactory", "Factory", {"name": "GhostFactory", "managedObject": "Ghost"}),
            ("shop.Svc", "InfrastructureService", {"name": "Svc", "involvedObjects": ["Ghost"]}),
        )

        diagnostics = Validator(catalog, Resolution()).validate()

        assert [d.offending for d in diagnostics] == [
            ("shop.Ghosted",),
            ("shop.GhostFactory",),
            ("shop.Svc",),
        ]
        assert all(d.code is DiagnosticCode.UNRESOLVED_REFERENCE for d in diagnostics)

    def test_ambiguous_reference_is_not_unresolved(self, catalog_of):
        catalog = catalog_of(
            ("shop.Cart", "AggregateRoot", {"name": "Cart"}),
            ("legacy.Cart", "AggregateRoot", {"name": "Cart"}),
            ("shop.CartFactory", "Factory", {"name": "CartFactory", "managedObject": "Cart"}),
        )
        assert validate(catalog) == []


class TestIdentifiers:
    """Tests for id uniqueness."""

    def test_cross_kind_duplicates_not_flagged(self, catalog_of):
        catalog = catalog_of(
            ("shop.Order", "AggregateRoot", {"id": "x", "name": "Order"}),
            ("shop.OrderLine", "Entity", {"id": "x", "name": "OrderLine"}),
        )
        assert validate(catalog) == []

