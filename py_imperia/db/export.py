"""
Export pipeline from an in-memory WorldMap to the database.
"""

import json
import uuid
from dataclasses import asdict
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from ..core.map_builder import WorldMap
from .models import ChunkRecord, WorldMapRecord

logger = structlog.get_logger()


def _layout_name(world_map: WorldMap) -> str:
    layout = world_map.tile_map.layout
    axis = "column" if layout.tilt.value == "flat" else "row"
    return f"{axis}_{layout.parity.value}"


def export_world_map(session: Session, world_map: WorldMap, name: Optional[str] = None) -> WorldMapRecord:
    """
    Persist a built world map and all of its chunks.

    Args:
        session: Open SQLAlchemy session (committed by the caller)
        world_map: Result of MapBuilder.build()
        name: Display name; defaults to "World <seed>"

    Returns:
        The flushed WorldMapRecord
    """
    tile_map = world_map.tile_map
    params = world_map.noise_params
    stats = world_map.statistics

    record = WorldMapRecord(
        id=tile_map.handle.map_id if tile_map.handle else str(uuid.uuid4()),
        name=name or f"World {params.seed}",
        seed=params.seed,
        width=world_map.width,
        height=world_map.height,
        generation_time_seconds=world_map.generation_time_seconds,
        chunk_cols=tile_map.chunk_grid_size[0],
        chunk_rows=tile_map.chunk_grid_size[1],
        chunk_width=tile_map.chunk_tile_size[0],
        chunk_height=tile_map.chunk_tile_size[1],
        hex_layout=_layout_name(world_map),
        threshold=world_map.threshold,
        land_tiles=world_map.land_tiles,
        ocean_tiles=world_map.ocean_tiles,
        min_height=stats.min_height,
        max_height=stats.max_height,
        mean_height=stats.mean_height,
        config_json=json.dumps({
            "noise": asdict(params),
            "palette": world_map.palette.as_dict(),
            "tile_pixel_size": list(tile_map.tile_pixel_size),
            "atlas_pixel_size": list(tile_map.atlas_pixel_size),
        }),
    )
    session.add(record)
    session.flush()

    for chunk in tile_map.chunks():
        cx, cy = chunk.coordinate
        session.add(ChunkRecord(
            map_id=record.id,
            chunk_x=cx,
            chunk_y=cy,
            width=chunk.size[0],
            height=chunk.size[1],
            placed_tiles=chunk.placed_count,
            visual_indices=json.dumps(chunk.visual_indices.tolist()),
        ))
    session.flush()

    logger.info("World map exported", map_id=record.id, chunks=len(tile_map.chunks()))
    return record
