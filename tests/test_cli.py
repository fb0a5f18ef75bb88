"""
Tests for the sheet-toolkit command line.
"""

import json

import pytest

from sheet_toolkit.builder.layout import generate_layout
from sheet_toolkit.cli import main
from sheet_toolkit.core.models import LayoutConfig
from sheet_toolkit.core.utils import load_layout_json, save_config_json, save_layout_json


@pytest.fixture
def config_path(tmp_path, simple_config):
    path = tmp_path / "quiz.json"
    save_config_json(simple_config, path)
    return path


@pytest.fixture
def layout_path(tmp_path, simple_config):
    path = tmp_path / "quiz.layout.json"
    save_layout_json(generate_layout(simple_config, layout_id="quiz"), path)
    return path


class TestGenerateCommand:
    """Tests for ``sheet-toolkit generate``."""

    def test_generate_when_valid_config_then_writes_layout(self, tmp_path, config_path, capsys):
        output = tmp_path / "out" / "layout.json"
        assert main(["generate", str(config_path), "-o", str(output), "--id", "cli"]) == 0

        layout = load_layout_json(output)
        assert layout.id == "cli"
        assert layout.cols == 80
        assert "Wrote" in capsys.readouterr().out

    def test_generate_when_strict_then_writes_layout(self, tmp_path, config_path):
        output = tmp_path / "layout.json"
        assert main(["generate", str(config_path), "-o", str(output), "--strict"]) == 0
        assert output.exists()

    def test_generate_when_no_questions_then_returns_error(self, tmp_path, capsys):
        path = tmp_path / "empty.json"
        save_config_json(LayoutConfig(name="empty"), path)
        output = tmp_path / "layout.json"

        assert main(["generate", str(path), "-o", str(output)]) == 1
        assert not output.exists()
        assert "error:" in capsys.readouterr().err

    def test_generate_when_missing_file_then_returns_error(self, tmp_path, capsys):
        assert main(["generate", str(tmp_path / "nope.json"), "-o", str(tmp_path / "o.json")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_generate_when_invalid_json_then_returns_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"name": "x"}), encoding="utf-8")
        assert main(["generate", str(path), "-o", str(tmp_path / "o.json")]) == 1


class TestRenderCommand:
    """Tests for ``sheet-toolkit render``."""

    def test_render_when_all_outputs_then_files_written(self, tmp_path, layout_path):
        pdf = tmp_path / "quiz.pdf"
        png = tmp_path / "quiz.png"
        xlsx = tmp_path / "quiz.xlsx"
        argv = ["render", str(layout_path), "--pdf", str(pdf), "--png", str(png),
                "--xlsx", str(xlsx), "--scale", "1"]

        assert main(argv) == 0
        assert pdf.read_bytes().startswith(b"%PDF")
        assert png.read_bytes().startswith(b"\x89PNG")
        assert xlsx.stat().st_size > 0

    def test_render_when_no_outputs_then_returns_error(self, layout_path, capsys):
        assert main(["render", str(layout_path)]) == 1
        assert "Nothing to render" in capsys.readouterr().err

    def test_render_when_bad_scale_then_returns_error(self, tmp_path, layout_path):
        assert main(["render", str(layout_path), "--png", str(tmp_path / "x.png"), "--scale", "0"]) == 1


class TestParser:
    """Tests for argument parsing."""

    def test_main_when_no_command_then_exits_with_usage(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2
