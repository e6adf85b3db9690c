"""Tests for the command-line interface."""

import json
import sys
from unittest.mock import patch

import pytest

from feedsmith.cli import main, run_apply
from feedsmith.sheets import load_grid


@pytest.fixture
def grid_file(tmp_path):
    path = tmp_path / "grid.json"
    path.write_text(
        json.dumps([[{"value": "SKU"}, {"value": "Price"}], [{"value": "km-100"}, {"value": 250}]]),
        encoding="utf-8",
    )
    return path


class TestApplyCommand:
    """Tests for applying an operation file offline."""

    def test_apply_to_output_file(self, tmp_path, grid_file, capsys):
        ops_file = tmp_path / "ops.json"
        ops_file.write_text(
            json.dumps(
                [
                    {"type": "SET_CELL", "row": 1, "col": 1, "value": 199},
                    {"type": "FORMAT_CELL", "row": 0, "col": 0, "style": {"bold": True}},
                    {"type": "DELETE_ROW", "row": 9},
                ]
            ),
            encoding="utf-8",
        )
        out_file = tmp_path / "out.json"

        assert run_apply(grid_file, ops_file, out_file) == 0

        grid = load_grid(out_file.read_text(encoding="utf-8"))
        assert grid[1][1].value == 199
        assert grid[0][0].style.bold is True
        assert "Applied 2 operations, skipped 1" in capsys.readouterr().err

    def test_apply_ai_response_object_to_stdout(self, tmp_path, grid_file, capsys):
        """Test that an object with an 'operations' key is accepted."""
        ops_file = tmp_path / "reply.json"
        ops_file.write_text(
            json.dumps({"message": "ok", "operations": [{"type": "ADD_ROW", "data": [["hg-200", 899]]}]}),
            encoding="utf-8",
        )

        assert run_apply(grid_file, ops_file) == 0

        grid = load_grid(capsys.readouterr().out)
        assert [c.value for c in grid[2]] == ["hg-200", 899]

    def test_apply_missing_file(self, tmp_path, grid_file, capsys):
        assert run_apply(grid_file, tmp_path / "missing.json") == 1
        assert "Error" in capsys.readouterr().err

    def test_apply_invalid_json(self, tmp_path, grid_file):
        ops_file = tmp_path / "ops.json"
        ops_file.write_text("not json", encoding="utf-8")
        assert run_apply(grid_file, ops_file) == 1


class TestMain:
    """Tests for argument dispatch."""

    def test_serve(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["feedsmith", "serve", "--port", "9001"])
        with patch("feedsmith.cli.uvicorn.run") as mock_run:
            main()

        args, kwargs = mock_run.call_args
        assert args == ("feedsmith.api:create_app",)
        assert kwargs["port"] == 9001
        assert kwargs["factory"] is True

    def test_apply_exit_code(self, monkeypatch, tmp_path, grid_file):
        ops_file = tmp_path / "ops.json"
        ops_file.write_text("[]", encoding="utf-8")
        monkeypatch.setattr(
            sys, "argv", ["feedsmith", "apply", str(grid_file), str(ops_file), "-o", str(tmp_path / "o.json")]
        )
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 0

    def test_no_command(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["feedsmith"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
