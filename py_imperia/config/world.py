"""
Builds core generation objects from application settings.
"""

from typing import Callable, Dict, Optional

from ..core.errors import InvalidParameter
from ..core.heightmap_generator import NoiseParams
from ..core.hex_coords import HexLayout
from ..core.map_builder import ChunkConfig
from ..core.terrain import TerrainPalette, TerrainType
from .config import Settings

HEX_LAYOUTS: Dict[str, Callable[[], HexLayout]] = {
    "column_even": HexLayout.column_even,
    "column_odd": HexLayout.column_odd,
    "row_even": HexLayout.row_even,
    "row_odd": HexLayout.row_odd,
}


def get_layout(name: str) -> HexLayout:
    """Look up a named hex layout."""
    try:
        return HEX_LAYOUTS[name]()
    except KeyError:
        raise InvalidParameter("hex_layout", name, f"expected one of {sorted(HEX_LAYOUTS)}") from None


def noise_params_from_settings(settings: Settings, seed: Optional[int] = None) -> NoiseParams:
    return NoiseParams(
        seed=settings.noise_seed if seed is None else seed,
        persistence=settings.noise_persistence,
        frequency=settings.noise_frequency,
        lacunarity=settings.noise_lacunarity,
        octaves=settings.noise_octaves,
    )


def chunk_config_from_settings(settings: Settings) -> ChunkConfig:
    return ChunkConfig(
        chunk_tile_size=(settings.chunk_width, settings.chunk_height),
        tile_pixel_size=(settings.tile_pixel_width, settings.tile_pixel_height),
        atlas_pixel_size=(settings.atlas_pixel_width, settings.atlas_pixel_height),
        layout=get_layout(settings.hex_layout),
    )


def palette_from_settings(settings: Settings) -> TerrainPalette:
    return TerrainPalette({
        TerrainType.OCEAN: settings.ocean_visual_index,
        TerrainType.LAND: settings.land_visual_index,
    })
