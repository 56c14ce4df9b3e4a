"""
DDD Catalog - Test Configuration

Pytest fixtures and configuration for all tests.
"""
import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from ddd_catalog.config import reset_config
from ddd_catalog.domain.records import RawOccurrence


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate tests from a developer's DDD_CATALOG_* environment."""
    for name in (
        "DDD_CATALOG_LOG_LEVEL",
        "DDD_CATALOG_LOG_FORMAT",
        "DDD_CATALOG_SERVICE_NAME",
        "DDD_CATALOG_STRICT",
        "DDD_CATALOG_CHECK_MEMBERSHIP",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def occurrence() -> Callable[..., RawOccurrence]:
    """Factory for raw occurrences: ``occurrence("shop.Order", "AggregateRoot", name="Order")``."""

    def make(element_ref: str, kind: str, **fields: Any) -> RawOccurrence:
        return RawOccurrence(element_ref=element_ref, kind=kind, fields=fields)

    return make


@pytest.fixture
def order_occurrences() -> List[Dict[str, Any]]:
    """A consistent order aggregate with its surroundings, in scanner JSON shape."""
    return [
        {
            "elementRef": "shop.sales",
            "kind": "BoundedContext",
            "fields": {"id": "bc-sales", "name": "Sales", "description": "Selling things"},
        },
        {
            "elementRef": "shop.sales.order",
            "kind": "Module",
            "fields": {"value": "Ordering"},
        },
        {
            "elementRef": "shop.sales.order.Order",
            "kind": "AggregateRoot",
            "fields": {"id": "agg1", "name": "Order", "members": ["OrderLine"]},
        },
        {
            "elementRef": "shop.sales.order.OrderLine",
            "kind": "Entity",
            "fields": {"id": "e1", "name": "OrderLine", "aggregate": "Order"},
        },
        {
            "elementRef": "shop.sales.order.OrderPlaced",
            "kind": "DomainEvent",
            "fields": {"name": "OrderPlaced", "emitter": "Order"},
        },
        {
            "elementRef": "shop.sales.order.OrderFactory",
            "kind": "Factory",
            "fields": {"name": "OrderFactory", "managedObject": "Order"},
        },
        {
            "elementRef": "shop.sales.order.PricingService",
            "kind": "DomainService",
            "fields": {
                "name": "Pricing",
                "involvedObjects": ["Order", "OrderLine"],
                "attributes": [
                    {"key": "owner", "val": "team-a"},
                    {"key": "tag", "val": "core"},
                    {"key": "tag", "val": "pricing"},
                ],
            },
        },
    ]


@pytest.fixture
def occurrences_file(tmp_path: Path) -> Callable[[Any], Path]:
    """Write occurrence JSON to a temporary file and return its path."""

    def write(data: Any, name: str = "occurrences.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return write
