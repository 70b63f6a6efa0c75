"""
Core world generation functionality.
"""

from .errors import (
    ImperiaError, InvalidParameter, GridError, DuplicateCoordinate,
    MismatchedCoordinateSystem, TileMapError, OutOfBounds, TileAlreadyPlaced,
    GenerationTimeout,
)
from .heightmap_generator import GeoBounds, NoiseParams, HeightmapGenerator, generate_heightmap
from .terrain import TerrainType, TerrainPalette, TerrainClassifier, classify, DEFAULT_THRESHOLD
from .hex_coords import HexCoordinate, HexLayout, HexTilt, HexParity, CoordSystem
from .hex_grid import HexGrid, HexTile
from .tilemap import ChunkedTileMap, Chunk, TileRecord, MapHandle, ChunkRenderer
from .map_builder import ChunkConfig, MapBuilder, WorldMap, build_world_map

__all__ = ['ImperiaError', 'InvalidParameter', 'GridError', 'DuplicateCoordinate',
           'MismatchedCoordinateSystem', 'TileMapError', 'OutOfBounds', 'TileAlreadyPlaced',
           'GenerationTimeout',
           'GeoBounds', 'NoiseParams', 'HeightmapGenerator', 'generate_heightmap',
           'TerrainType', 'TerrainPalette', 'TerrainClassifier', 'classify', 'DEFAULT_THRESHOLD',
           'HexCoordinate', 'HexLayout', 'HexTilt', 'HexParity', 'CoordSystem',
           'HexGrid', 'HexTile',
           'ChunkedTileMap', 'Chunk', 'TileRecord', 'MapHandle', 'ChunkRenderer',
           'ChunkConfig', 'MapBuilder', 'WorldMap', 'build_world_map']
