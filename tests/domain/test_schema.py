"""
Tests for domain/schema.py - Marker Schema.
"""
import pytest

from ddd_catalog.core.errors import MalformedOccurrenceError
from ddd_catalog.domain.schema import (
    MARKERS,
    ElementTarget,
    PatternKind,
    RelationKind,
    marker_for,
)


class TestPatternKind:
    """Tests for PatternKind parsing and metadata."""

    def test_closed_set(self):
        assert len(PatternKind) == 9
        assert set(MARKERS) == set(PatternKind)

    @pytest.mark.parametrize("raw", [
        "AggregateRoot",
        "aggregateroot",
        "DddAggregateRoot",
        "Aggregate Root",
        "aggregate_root",
        PatternKind.AGGREGATE_ROOT,
    ])
    def test_parse_accepts_spellings(self, raw):
        assert PatternKind.parse(raw) is PatternKind.AGGREGATE_ROOT

    @pytest.mark.parametrize("raw", ["", "   ", "ValueObject", "Ddd", None, 3])
    def test_parse_rejects(self, raw):
        with pytest.raises(MalformedOccurrenceError):
            PatternKind.parse(raw)

    def test_unknown_kind_suggests_known_kinds(self):
        with pytest.raises(MalformedOccurrenceError) as exc_info:
            PatternKind.parse("Repository")
        assert "Entity" in exc_info.value.suggestions

    def test_display_names(self):
        assert PatternKind.BOUNDED_CONTEXT.display_name == "Bounded Context"
        assert PatternKind.DOMAIN_EVENT.display_name == "Domain Event"
        assert PatternKind.INFRASTRUCTURE_SERVICE.annotation == "DddInfrastructureService"

    def test_targets(self):
        containers = {kind for kind in PatternKind if kind.target is ElementTarget.PACKAGE}
        assert containers == {PatternKind.BOUNDED_CONTEXT, PatternKind.MODULE}
        assert all(kind.is_container for kind in containers)

    def test_services(self):
        assert PatternKind.APPLICATION_SERVICE.is_service
        assert not PatternKind.FACTORY.is_service


class TestReferenceRules:
    """Tests for the reference rule table."""

    def test_entity_aggregate_points_at_roots(self):
        rule = marker_for(PatternKind.ENTITY).reference("aggregate")
        assert rule.targets == (PatternKind.AGGREGATE_ROOT,)
        assert rule.relation is RelationKind.AGGREGATE_MEMBERSHIP
        assert rule.reversed

    def test_emitter_accepts_objects_and_services(self):
        rule = marker_for(PatternKind.DOMAIN_EVENT).reference("emitter")
        assert PatternKind.ENTITY in rule.targets
        assert PatternKind.DOMAIN_SERVICE in rule.targets
        assert PatternKind.DOMAIN_EVENT not in rule.targets

    def test_containers_have_no_references(self):
        assert marker_for(PatternKind.MODULE).references == ()
        assert marker_for(PatternKind.MODULE).reference("aggregate") is None

    def test_recognized_fields(self):
        spec = marker_for(PatternKind.AGGREGATE_ROOT)
        assert spec.recognizes("memberNames")
        assert spec.recognizes("attributes")
        assert not spec.recognizes("emitter")
