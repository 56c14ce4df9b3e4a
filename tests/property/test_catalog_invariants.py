"""
Property-Based Tests for Catalog Invariants

Tests the alias law, normalizer purity, catalog growth and resolution
determinism over generated marker batches.
"""
from hypothesis import given, settings

from ddd_catalog.domain.builder import build_catalog
from ddd_catalog.domain.catalog import Catalog
from ddd_catalog.domain.normalizer import normalize, resolve_alias
from ddd_catalog.domain.records import DiagnosticCode, Severity
from ddd_catalog.domain.resolver import CrossReferenceResolver
from tests.property.strategies import (
    element_name_strategy,
    occurrence_batch_strategy,
    raw_occurrence_strategy,
)


class TestAliasInvariants:
    """Property-based tests for name/value alias resolution."""

    @given(element_name_strategy(), element_name_strategy())
    @settings(max_examples=200)
    def test_alias_law(self, name, value):
        """Resolved name is name, else value; conflict only when both differ."""
        resolved, conflict = resolve_alias(name, value)

        assert resolved == (name or value)
        assert conflict == bool(name and value and name != value)

    @given(raw_occurrence_strategy())
    @settings(max_examples=200)
    def test_alias_diagnostic_matches_conflict(self, raw):
        result = normalize(raw)
        name = raw.fields["name"]
        value = raw.fields["value"]

        alias_warnings = [
            d for d in result.diagnostics if d.code is DiagnosticCode.AMBIGUOUS_ALIAS
        ]
        assert len(alias_warnings) == int(bool(name and value and name != value))


class TestNormalizerInvariants:
    """normalize is pure and keeps attributes verbatim."""

    @given(raw_occurrence_strategy())
    @settings(max_examples=200)
    def test_pure(self, raw):
        assert normalize(raw) == normalize(raw)

    @given(raw_occurrence_strategy())
    @settings(max_examples=200)
    def test_attributes_preserved(self, raw):
        record = normalize(raw).record
        declared = [(a["key"], a["val"]) for a in raw.fields["attributes"]]
        assert [(a.key, a.val) for a in record.attributes] == declared


class TestCatalogInvariants:
    """Catalog growth and query consistency."""

    @given(occurrence_batch_strategy())
    @settings(max_examples=100)
    def test_size_grows_by_one_per_add(self, batch):
        catalog = Catalog()
        for expected, raw in enumerate(batch, start=1):
            catalog.add(normalize(raw).record)
            assert len(catalog) == expected

    @given(occurrence_batch_strategy())
    @settings(max_examples=100)
    def test_kind_views_partition_catalog(self, batch):
        catalog = Catalog(normalize(raw).record for raw in batch)

        assert sum(catalog.kinds().values()) == len(catalog)
        for kind, count in catalog.kinds().items():
            assert len(list(catalog.find_by_kind(kind))) == count


class TestResolutionInvariants:
    """Resolution is deterministic and links only what it can resolve uniquely."""

    @given(occurrence_batch_strategy())
    @settings(max_examples=100)
    def test_deterministic(self, batch):
        catalog = Catalog(normalize(raw).record for raw in batch)
        resolver = CrossReferenceResolver(catalog)

        assert resolver.resolve() == resolver.resolve()

    @given(occurrence_batch_strategy())
    @settings(max_examples=100)
    def test_links_are_unique_and_internal(self, batch):
        result = build_catalog(batch, check_membership=True)

        assert len(set(result.links)) == len(result.links)
        for link in result.links:
            assert link.source in result.catalog
            assert link.target in result.catalog

    @given(occurrence_batch_strategy())
    @settings(max_examples=100)
    def test_membership_check_only_adds_warnings(self, batch):
        with_check = build_catalog(batch, check_membership=True)
        without = build_catalog(batch, check_membership=False)

        extra = [d for d in with_check.diagnostics if d not in without.diagnostics]
        assert all(d.code is DiagnosticCode.MEMBERSHIP_MISMATCH for d in extra)
        assert all(d.severity is Severity.WARNING for d in extra)
        assert len(with_check.links) == len(without.links)
