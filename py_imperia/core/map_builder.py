"""
World map building pipeline.

    heightmap -> terrain classification -> HexGrid -> ChunkedTileMap

The build is a single synchronous batch. Every error aborts the whole build;
no partially populated map is returned. The only opt-in leniency is
``skip_out_of_bounds``, which logs and skips tiles that fall outside the tile
map instead of aborting.
"""

import math
import time
import numpy as np
import structlog
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import GenerationTimeout, InvalidParameter, OutOfBounds
from .heightmap_generator import (
    HeightmapGenerator,
    HeightmapStatistics,
    NoiseParams,
    summarize_heightmap,
    validate_heightmap,
)
from .hex_coords import HexCoordinate, HexLayout, convert
from .hex_grid import HexGrid, HexTile
from .terrain import DEFAULT_THRESHOLD, TerrainClassifier, TerrainPalette, TerrainType
from .tilemap import ChunkedTileMap, ChunkRenderer, TileRecord

logger = structlog.get_logger()


@dataclass(frozen=True)
class ChunkConfig:
    """Chunk and sprite geometry for the tile map."""

    chunk_tile_size: Tuple[int, int] = (10, 10)
    tile_pixel_size: Tuple[int, int] = (32, 32)
    atlas_pixel_size: Tuple[int, int] = (96, 32)
    layout: HexLayout = field(default_factory=HexLayout.column_even)
    initial_chunk_count: int = 0

    def chunk_grid_for(self, width: int, height: int) -> Tuple[int, int]:
        """Smallest chunk grid covering a width x height tile map."""
        cw, ch = self.chunk_tile_size
        if cw <= 0 or ch <= 0:
            raise InvalidParameter("chunk_tile_size", self.chunk_tile_size, "must be positive")
        return math.ceil(width / cw), math.ceil(height / ch)


@dataclass
class WorldMap:
    """Result of a world build."""

    width: int
    height: int
    tile_map: ChunkedTileMap
    hex_grid: HexGrid
    statistics: HeightmapStatistics
    noise_params: NoiseParams
    threshold: float
    palette: TerrainPalette
    generation_time_seconds: float
    skipped_tiles: int = 0
    heightmap: Optional[np.ndarray] = None

    @property
    def land_tiles(self) -> int:
        return self.hex_grid.count_by_terrain()[TerrainType.LAND]

    @property
    def ocean_tiles(self) -> int:
        return self.hex_grid.count_by_terrain()[TerrainType.OCEAN]

    def terrain_at(self, x: int, y: int) -> Optional[TerrainType]:
        """Terrain of the hex at offset (column, row) x, y."""
        layout = self.hex_grid.layout
        coordinate = convert(HexCoordinate.offset(x, y), layout, layout.system)
        tile = self.hex_grid.get(coordinate)
        return tile.terrain if tile is not None else None


class MapBuilder:
    """
    Drives the world generation pipeline.

    Args:
        noise_params: heightmap noise parameters
        classify_threshold: land/ocean threshold
        chunk_config: tile map geometry
        palette: terrain to visual index table
        skip_out_of_bounds: log and skip OutOfBounds placements instead of aborting
        deadline_seconds: abort with GenerationTimeout once exceeded
    """

    def __init__(
        self,
        noise_params: Optional[NoiseParams] = None,
        classify_threshold: float = DEFAULT_THRESHOLD,
        chunk_config: Optional[ChunkConfig] = None,
        palette: Optional[TerrainPalette] = None,
        skip_out_of_bounds: bool = False,
        deadline_seconds: Optional[float] = None,
    ):
        self.noise_params = noise_params or NoiseParams()
        self.chunk_config = chunk_config or ChunkConfig()
        self.classifier = TerrainClassifier(classify_threshold, palette)
        self.skip_out_of_bounds = skip_out_of_bounds

        if deadline_seconds is not None and (
            not isinstance(deadline_seconds, (int, float)) or deadline_seconds < 0
        ):
            raise InvalidParameter("deadline_seconds", deadline_seconds, "must be >= 0")
        self.deadline_seconds = deadline_seconds
        self._started_at: Optional[float] = None

    def _check_deadline(self, stage: str) -> None:
        if self.deadline_seconds is None or self._started_at is None:
            return
        elapsed = time.monotonic() - self._started_at
        if elapsed >= self.deadline_seconds:
            logger.error("World generation timed out", stage=stage, elapsed=round(elapsed, 3))
            raise GenerationTimeout(self.deadline_seconds, elapsed, stage)

    def _check_palette_fits_atlas(self, tile_map: ChunkedTileMap) -> None:
        if self.classifier.palette.max_index >= tile_map.atlas_capacity:
            raise InvalidParameter(
                "palette",
                self.classifier.palette.as_dict(),
                f"atlas of {tile_map.atlas_pixel_size} only holds {tile_map.atlas_capacity} tiles",
            )

    def generate_heightmap(self, width: int, height: int) -> np.ndarray:
        """
        Step 1: sample the full width x height domain.

        The deadline is checked before every row. Called outside build(), the
        clock starts here.
        """
        standalone = self._started_at is None
        if standalone:
            self._started_at = time.monotonic()
        try:
            return HeightmapGenerator(self.noise_params).generate(
                width, height, check=self._check_deadline
            )
        finally:
            if standalone:
                self._started_at = None

    def populate_grid(self, samples: np.ndarray) -> HexGrid:
        """Step 2: classify every sample row-major and insert into a HexGrid."""
        layout = self.chunk_config.layout
        grid = HexGrid.from_layout(layout)
        height, width = samples.shape

        for y in range(height):
            self._check_deadline("classification")
            for x in range(width):
                coordinate = convert(HexCoordinate.offset(x, y), layout, layout.system)
                terrain = self.classifier.classify(samples[y, x])
                grid.add(coordinate, HexTile(coordinate=coordinate, terrain=terrain))

        logger.info("Hex grid populated", tiles=len(grid), system=layout.system.value)
        return grid

    def create_tile_map(self, width: int, height: int) -> ChunkedTileMap:
        """Step 3: empty tile map sized to hold width x height tiles."""
        config = self.chunk_config
        tile_map = ChunkedTileMap(
            chunk_grid_size=config.chunk_grid_for(width, height),
            chunk_tile_size=config.chunk_tile_size,
            tile_pixel_size=config.tile_pixel_size,
            atlas_pixel_size=config.atlas_pixel_size,
            initial_chunk_count=config.initial_chunk_count,
            layout=config.layout,
            map_size=(width, height),
        )
        self._check_palette_fits_atlas(tile_map)
        return tile_map

    def place_tiles(self, grid: HexGrid, tile_map: ChunkedTileMap, width: int, height: int) -> int:
        """
        Step 4: copy each hex's visual index into the tile map.

        Returns:
            Number of tiles skipped as out of bounds (only with skip_out_of_bounds)
        """
        layout = grid.layout
        skipped = 0
        for y in range(height):
            self._check_deadline("placement")
            for x in range(width):
                coordinate = convert(HexCoordinate.offset(x, y), layout, layout.system)
                hex_tile = grid.get(coordinate)
                record = TileRecord(visual_index=self.classifier.visual_index(hex_tile.terrain))
                try:
                    tile_map.add_tile((x, y), record)
                except OutOfBounds as e:
                    if not self.skip_out_of_bounds:
                        raise
                    skipped += 1
                    logger.warning("Skipping out-of-bounds tile", x=x, y=y, error=str(e))
        return skipped

    def build(
        self,
        width: int,
        height: int,
        heightmap: Optional[np.ndarray] = None,
        renderer: Optional[ChunkRenderer] = None,
        map_id: Optional[str] = None,
    ) -> WorldMap:
        """
        Run the full pipeline.

        Args:
            width: Map width in tiles
            height: Map height in tiles
            heightmap: Optional precomputed samples of shape (height, width)
            renderer: Optional host renderer passed to ChunkedTileMap.build()
            map_id: Optional id for the built map handle

        Returns:
            WorldMap holding the tile map, the hex grid and heightmap statistics
        """
        self._started_at = time.monotonic()
        logger.info(
            "Building world map",
            width=width,
            height=height,
            seed=self.noise_params.seed,
            threshold=self.classifier.threshold,
        )

        try:
            if heightmap is None:
                samples = self.generate_heightmap(width, height)
            else:
                samples = validate_heightmap(heightmap, width, height)
            self._check_deadline("heightmap")

            grid = self.populate_grid(samples)
            tile_map = self.create_tile_map(width, height)
            tile_map.build(renderer=renderer, map_id=map_id)
            skipped = self.place_tiles(grid, tile_map, width, height)

            statistics = summarize_heightmap(samples, self.classifier.threshold)
            elapsed = time.monotonic() - self._started_at

            logger.info(
                "World map built",
                tiles=tile_map.placed_count,
                chunks=tile_map.allocated_chunk_count,
                land_fraction=round(statistics.land_fraction, 3),
                skipped=skipped,
                seconds=round(elapsed, 3),
            )

            return WorldMap(
                width=width,
                height=height,
                tile_map=tile_map,
                hex_grid=grid,
                statistics=statistics,
                noise_params=self.noise_params,
                threshold=self.classifier.threshold,
                palette=self.classifier.palette,
                generation_time_seconds=elapsed,
                skipped_tiles=skipped,
                heightmap=samples,
            )
        finally:
            self._started_at = None


def build_world_map(
    width: int,
    height: int,
    noise_params: Optional[NoiseParams] = None,
    classify_threshold: float = DEFAULT_THRESHOLD,
    chunk_config: Optional[ChunkConfig] = None,
    **kwargs,
) -> ChunkedTileMap:
    """
    Build a world and return its chunked tile map.

    Extra keyword arguments (palette, heightmap, renderer, skip_out_of_bounds,
    deadline_seconds) are forwarded to MapBuilder / MapBuilder.build().
    """
    build_kwargs = {key: kwargs.pop(key) for key in ("heightmap", "renderer", "map_id") if key in kwargs}
    builder = MapBuilder(noise_params, classify_threshold, chunk_config, **kwargs)
    return builder.build(width, height, **build_kwargs).tile_map
