"""
Tests for settings and the objects built from them.
"""

import pytest

from py_imperia.config import (
    HEX_LAYOUTS,
    Settings,
    chunk_config_from_settings,
    get_layout,
    noise_params_from_settings,
    palette_from_settings,
)
from py_imperia.core.errors import InvalidParameter
from py_imperia.core.hex_coords import HexLayout
from py_imperia.core.terrain import TerrainType
from py_imperia.utils.log_setup import configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults_match_prototype(self):
        settings = Settings()
        config = chunk_config_from_settings(settings)

        assert config.chunk_tile_size == (10, 10)
        assert config.tile_pixel_size == (32, 32)
        assert config.layout == HexLayout.column_even()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("IMPERIA_NOISE_SEED", "99")
        monkeypatch.setenv("IMPERIA_CHUNK_WIDTH", "16")
        monkeypatch.setenv("IMPERIA_HEX_LAYOUT", "row_odd")
        settings = Settings()

        assert noise_params_from_settings(settings).seed == 99
        config = chunk_config_from_settings(settings)
        assert config.chunk_tile_size[0] == 16
        assert config.layout == HexLayout.row_odd()

    def test_seed_override(self):
        assert noise_params_from_settings(Settings(), seed=5).seed == 5

    def test_palette_from_settings(self, monkeypatch):
        monkeypatch.setenv("IMPERIA_OCEAN_VISUAL_INDEX", "2")
        palette = palette_from_settings(Settings())

        assert palette.index_of(TerrainType.OCEAN) == 2
        assert palette.index_of(TerrainType.LAND) == 1

    def test_conflicting_palette_rejected(self, monkeypatch):
        monkeypatch.setenv("IMPERIA_OCEAN_VISUAL_INDEX", "1")

        with pytest.raises(InvalidParameter):
            palette_from_settings(Settings())


class TestLayouts:
    """Test named layout lookup."""

    def test_all_named_layouts(self):
        assert set(HEX_LAYOUTS) == {"column_even", "column_odd", "row_even", "row_odd"}
        assert get_layout("column_odd") == HexLayout.column_odd()

    def test_unknown_layout(self):
        with pytest.raises(InvalidParameter):
            get_layout("hexagonal")


class TestLogging:
    """Test logging configuration."""

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            configure_logging("LOUD")

    def test_invalid_format(self):
        with pytest.raises(ValueError):
            configure_logging("INFO", "xml")
