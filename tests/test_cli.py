"""
Tests for the py-imperia command line.
"""

import json

import pytest

from py_imperia.cli import main


class TestGenerateCommand:
    """Test the generate subcommand."""

    def test_json_summary(self, capsys):
        exit_code = main(["generate", "--width", "6", "--height", "4", "--octaves", "1",
                          "--chunk-size", "4", "4", "--json"])

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["placed_tiles"] == 24
        assert summary["chunk_grid_size"] == [2, 1]
        assert summary["land_tiles"] + summary["ocean_tiles"] == 24

    def test_text_summary(self, capsys):
        exit_code = main(["generate", "--width", "3", "--height", "3", "--octaves", "1"])

        assert exit_code == 0
        assert "placed_tiles: 9" in capsys.readouterr().out

    def test_writes_images(self, tmp_path):
        heightmap_path = tmp_path / "height.png"
        terrain_path = tmp_path / "terrain.png"

        exit_code = main(["generate", "--width", "8", "--height", "4", "--octaves", "1",
                          "--image", str(heightmap_path), "--terrain-image", str(terrain_path)])

        assert exit_code == 0
        assert heightmap_path.stat().st_size > 0
        assert terrain_path.stat().st_size > 0

    def test_invalid_parameters_exit_code(self, capsys):
        exit_code = main(["generate", "--width", "4", "--height", "4", "--persistence", "-1"])

        assert exit_code == 2
        assert "persistence" in capsys.readouterr().err

    def test_unknown_layout_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            main(["generate", "--layout", "diagonal"])
