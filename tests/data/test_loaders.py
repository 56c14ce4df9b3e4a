"""
Tests for data/loaders.py - occurrence JSON input and result output.
"""
import json

import pytest

from ddd_catalog import build_catalog
from ddd_catalog.core.errors import MalformedOccurrenceError
from ddd_catalog.data.loaders import load_occurrences, parse_occurrences, save_result


class TestParseOccurrences:
    """Tests for decoded-JSON conversion."""

    def test_list_shape(self, order_occurrences):
        raw = parse_occurrences(order_occurrences)
        assert [r.element_ref for r in raw] == [o["elementRef"] for o in order_occurrences]

    def test_wrapped_shape(self, order_occurrences):
        raw = parse_occurrences({"occurrences": order_occurrences})
        assert len(raw) == 7

    def test_snake_case_ref_and_location(self):
        (raw,) = parse_occurrences([
            {"element_ref": "shop.sales", "kind": "Module", "package": "shop.sales", "target": "package"}
        ])
        assert raw.element_ref == "shop.sales"
        assert raw.package == "shop.sales"
        assert raw.target == "package"

    @pytest.mark.parametrize("data", [
        "not a list",
        {"records": []},
        [42],
        [{"elementRef": "shop.A", "kind": "Entity", "fields": ["x"]}],
        [{"elementRef": "shop.A", "kind": "Entity", "target": 5}],
        [{"elementRef": "shop.A", "kind": "Entity", "package": ["shop"]}],
    ])
    def test_rejects_bad_shapes(self, data):
        with pytest.raises(MalformedOccurrenceError):
            parse_occurrences(data)


class TestLoadOccurrences:
    """Tests for reading occurrence files."""

    def test_load(self, occurrences_file, order_occurrences):
        path = occurrences_file(order_occurrences)
        assert len(load_occurrences(path)) == 7

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(MalformedOccurrenceError) as exc_info:
            load_occurrences(path)

        assert isinstance(exc_info.value.cause, json.JSONDecodeError)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"elementRef": "shop.\xe9", "kind": "Entity"}]')

        with pytest.raises(MalformedOccurrenceError) as exc_info:
            load_occurrences(path)

        assert isinstance(exc_info.value.cause, UnicodeDecodeError)

    def test_directory(self, tmp_path):
        with pytest.raises(MalformedOccurrenceError) as exc_info:
            load_occurrences(tmp_path)

        assert isinstance(exc_info.value.cause, OSError)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_occurrences(tmp_path / "missing.json")


class TestSaveResult:
    """Tests for writing build results."""

    def test_writes_json(self, tmp_path, order_occurrences):
        result = build_catalog(order_occurrences)

        path = save_result(result, tmp_path / "out" / "catalog.json")

        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved == result.to_dict()
        assert saved["summary"]["links"] == 5
