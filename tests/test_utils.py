"""Unit tests for utility functions (atlas.utils).

Tests cover:
- load_json / load_json_list / save_json (use tmp_path)
- Rich output helpers (print_summary_table, print_success, etc.)
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from atlas.utils import (
    load_json,
    load_json_list,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


class TestLoadJson:
    @pytest.mark.unit
    def test_object(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text('{"key": "value"}', encoding="utf-8")
        assert load_json(path) == {"key": "value"}

    @pytest.mark.unit
    def test_array_returned_as_is(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_json(path) == [1, 2]

    @pytest.mark.unit
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "missing.json")

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_json(path)


class TestLoadJsonList:
    @pytest.mark.unit
    def test_array(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text('[{"a": 1}, {"b": 2}]', encoding="utf-8")
        assert load_json_list(path) == [{"a": 1}, {"b": 2}]

    @pytest.mark.unit
    def test_missing_file_returns_empty(self, tmp_path: Path):
        assert load_json_list(tmp_path / "missing.json") == []

    @pytest.mark.unit
    def test_object_rejected(self, tmp_path: Path):
        path = tmp_path / "one.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        with pytest.raises(ValueError, match="Expected a JSON array"):
            load_json_list(path)


class TestSaveJson:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_writes_pretty_json(self, tmp_path: Path):
        path = tmp_path / "nested" / "out.json"
        await save_json({"name": "Ünïcode"}, path)
        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == {"name": "Ünïcode"}
        assert "Ünïcode" in text
        assert "\n  " in text

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_writes_list(self, tmp_path: Path):
        path = tmp_path / "list.json"
        await save_json([1, 2, 3], path)
        assert load_json_list(path) == [1, 2, 3]


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestRichHelpers:
    @pytest.mark.unit
    def test_print_summary_table(self):
        # Should not raise
        print_summary_table({"Projects": "3", "Failures": "0"}, title="Test Summary")

    @pytest.mark.unit
    def test_print_success(self):
        print_success("All projects parsed")

    @pytest.mark.unit
    def test_print_error(self):
        print_error("Something failed")

    @pytest.mark.unit
    def test_print_warning(self):
        print_warning("Careful")
