"""
Tests for JSON persistence of configs and layouts.
"""

import json

import pytest

from sheet_toolkit.builder.layout import generate_layout
from sheet_toolkit.core.models import CellKind
from sheet_toolkit.core.schemas import LAYOUT_SCHEMA_VERSION, ValidationError
from sheet_toolkit.core.utils import (
    deserialize_config,
    deserialize_layout,
    load_config_json,
    load_layout_json,
    save_config_json,
    save_layout_json,
    serialize_config,
    serialize_layout,
)



@pytest.fixture
def mixed_layout(mixed_config):
    return generate_layout(mixed_config, layout_id="mixed")


class TestConfigSerialization:
    """Tests for LayoutConfig JSON form."""

    def test_serialize_when_config_then_camel_case_keys(self, simple_config):
        data = serialize_config(simple_config)
        assert data["paperSize"] == "A4"
        assert data["gapBetweenQuestions"] == 2
        assert data["sections"][0]["questions"][0]["widthRatio"] == 10
        assert "headerElements" not in data

    def test_deserialize_when_serialized_then_equal(self, mixed_config):
        config = mixed_config
        assert deserialize_config(serialize_config(config)) == config

    def test_deserialize_when_strict_then_serialized_output_passes(self, mixed_config):
        data = serialize_config(mixed_config)
        deserialize_config(data, strict=True)

    def test_deserialize_when_missing_name_then_raises_validation_error(self):
        with pytest.raises(ValidationError, match="Missing required fields"):
            deserialize_config({"paperSize": "A4", "sections": []})

    def test_deserialize_when_bad_numbering_style_then_raises_validation_error(self):
        data = {"name": "t", "paperSize": "A4", "sections": [
            {"id": "s", "title": "S", "numberingStyle": "#", "questions": []},
        ]}
        with pytest.raises(ValidationError, match="Cannot parse layout config"):
            deserialize_config(data)

    def test_save_load_when_japanese_text_then_written_unescaped(self, tmp_path, config_factory, question_factory):
        config = config_factory([question_factory()], name="小テスト")
        path = tmp_path / "config.json"
        save_config_json(config, path)
        assert "小テスト" in path.read_text(encoding="utf-8")
        assert load_config_json(path) == config


class TestLayoutSerialization:
    """Tests for SheetLayout JSON form."""

    def test_serialize_when_layout_then_versioned_and_null_for_covered(self, mixed_layout):
        data = serialize_layout(mixed_layout)
        assert data["schemaVersion"] == LAYOUT_SCHEMA_VERSION
        assert data["rows"] == mixed_layout.rows
        assert len(data["cells"][0]) == mixed_layout.cols
        # Title spans the first row, so its neighbour is covered
        assert data["cells"][0][1] is None
        assert data["config"]["name"] == "Mixed"

    def test_serialize_when_english_grid_then_typed_cell(self, mixed_layout):
        data = serialize_layout(mixed_layout)
        grid_cells = [c for row in data["cells"] for c in row if c and c.get("type") == "english-grid"]
        assert len(grid_cells) == 3
        assert {c["metadata"]["wordCount"] for c in grid_cells} == {12, 3, 20}

    def test_deserialize_when_serialized_then_equal(self, mixed_layout, mixed_config):
        restored = deserialize_layout(serialize_layout(mixed_layout))
        assert restored == mixed_layout
        assert restored.config == mixed_config

    def test_deserialize_when_strict_then_serialized_output_passes(self, mixed_layout):
        deserialize_layout(serialize_layout(mixed_layout), strict=True)

    def test_deserialize_when_unversioned_then_accepted(self, mixed_layout):
        data = serialize_layout(mixed_layout)
        del data["schemaVersion"]
        assert deserialize_layout(data).id == "mixed"

    def test_deserialize_when_newer_version_then_raises_validation_error(self, mixed_layout):
        data = serialize_layout(mixed_layout)
        data["schemaVersion"] = LAYOUT_SCHEMA_VERSION + 1
        with pytest.raises(ValidationError, match="Unsupported layout schema version") as exc:
            deserialize_layout(data)
        assert exc.value.path == "schemaVersion"

    def test_deserialize_when_ragged_rows_then_raises_validation_error(self, mixed_layout):
        data = serialize_layout(mixed_layout)
        data["cells"][0].pop()
        with pytest.raises(ValidationError, match="Row 0"):
            deserialize_layout(data)

    def test_deserialize_when_legacy_text_type_then_plain_cell(self):
        data = {
            "id": "old",
            "name": "Old",
            "rows": 1,
            "cols": 1,
            "rowHeights": [10],
            "colWidths": [20],
            "cells": [[{"text": "a", "rowSpan": 1, "colSpan": 1, "type": "text"}]],
        }
        layout = deserialize_layout(data, strict=True)
        assert layout.cell(0, 0).kind is CellKind.PLAIN
        assert layout.config is None


class TestFileUtilities:
    """Tests for load/save helpers."""

    def test_save_load_when_round_tripped_then_equal(self, tmp_path, mixed_layout):
        path = tmp_path / "nested" / "layout.json"
        save_layout_json(mixed_layout, path)
        assert load_layout_json(path) == mixed_layout

    def test_load_when_missing_file_then_raises_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_layout_json(tmp_path / "missing.json")

    def test_load_when_invalid_json_then_raises_validation_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValidationError, match="Invalid JSON"):
            load_config_json(path)

    def test_save_when_written_then_indented_json(self, tmp_path, simple_config):
        path = tmp_path / "config.json"
        save_config_json(simple_config, path)
        text = path.read_text(encoding="utf-8")
        assert text.startswith("{\n  ")
        assert json.loads(text)["name"] == "Quiz 1"
