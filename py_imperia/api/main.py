"""FastAPI main application."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from sqlalchemy import text
from typing import List, Optional, Tuple
import json
import structlog
import uuid
from datetime import datetime

from ..config import (
    settings,
    get_layout,
    chunk_config_from_settings,
    palette_from_settings,
)
from ..core.errors import GenerationTimeout, InvalidParameter
from ..core.heightmap_generator import GeoBounds, NoiseParams
from ..core.hex_coords import HexCoordinate, hex_to_pixel
from ..core.map_builder import ChunkConfig, MapBuilder
from ..core.terrain import TerrainPalette
from ..db.connection import db
from ..db.export import export_world_map
from ..db.models import WorldMapRecord
from ..db.queries import WorldMapQueries
from ..utils.log_setup import configure_logging

# Configure logging
configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Imperia World Map API",
    description="Procedural hex-grid world generation for ImperiaNova",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class MapGenerationRequest(BaseModel):
    """Request to generate a new world map."""

    seed: Optional[int] = Field(None, description="Noise seed; random when omitted")
    width: int = Field(settings.default_map_width, ge=1, le=settings.max_map_width, description="Map width in tiles")
    height: int = Field(settings.default_map_height, ge=1, le=settings.max_map_height, description="Map height in tiles")
    persistence: float = Field(settings.noise_persistence, gt=0, description="Amplitude falloff per octave")
    frequency: float = Field(settings.noise_frequency, gt=0, description="Base noise frequency")
    lacunarity: float = Field(settings.noise_lacunarity, gt=0, description="Frequency growth per octave")
    octaves: int = Field(settings.noise_octaves, ge=1, le=16, description="Number of fBm octaves")
    lat_min: float = Field(-90.0, ge=-90, le=90, description="Southern latitude bound")
    lat_max: float = Field(90.0, ge=-90, le=90, description="Northern latitude bound")
    lon_min: float = Field(-180.0, ge=-180, le=180, description="Western longitude bound")
    lon_max: float = Field(180.0, ge=-180, le=180, description="Eastern longitude bound")
    threshold: float = Field(settings.terrain_threshold, description="Heights at or above this are land")
    hex_layout: str = Field(settings.hex_layout, description="column_even, column_odd, row_even or row_odd")
    map_name: Optional[str] = Field(None, description="Custom map name")


class MapSummary(BaseModel):
    """Summary information about a generated map."""

    id: str
    name: str
    seed: int
    width: int
    height: int
    chunk_grid_size: Tuple[int, int]
    chunk_tile_size: Tuple[int, int]
    hex_layout: str
    threshold: float
    land_tiles: int
    ocean_tiles: int
    height_range: Tuple[float, float]
    created_at: datetime
    generation_time_seconds: Optional[float]


class ChunkData(BaseModel):
    """Visual indices of one chunk, row-major."""

    map_id: str
    chunk_x: int
    chunk_y: int
    width: int
    height: int
    placed_tiles: int
    visual_indices: List[List[int]]


class HexData(BaseModel):
    """One hex of a stored map."""

    map_id: str
    x: int
    y: int
    visual_index: int
    terrain: str
    pixel_center: Tuple[float, float]


class TerrainInfo(BaseModel):
    """Current terrain classification configuration."""

    threshold: float
    palette: dict


def _summary(record: WorldMapRecord) -> MapSummary:
    return MapSummary(
        id=record.id,
        name=record.name,
        seed=record.seed,
        width=record.width,
        height=record.height,
        chunk_grid_size=(record.chunk_cols, record.chunk_rows),
        chunk_tile_size=(record.chunk_width, record.chunk_height),
        hex_layout=record.hex_layout,
        threshold=record.threshold,
        land_tiles=record.land_tiles,
        ocean_tiles=record.ocean_tiles,
        height_range=(record.min_height, record.max_height),
        created_at=record.created_at,
        generation_time_seconds=record.generation_time_seconds,
    )


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    logger.info("Starting Imperia World Map API")
    if not db.is_initialized:
        db.initialize()
    logger.info("API startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down Imperia World Map API")
    db.dispose()


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Imperia World Map API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    try:
        # Test database connection
        with db.get_session() as session:
            session.execute(text("SELECT 1"))

        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error("Health check failed", error=str(e))
        raise HTTPException(status_code=503, detail="Service unhealthy")


@app.get("/terrain", response_model=TerrainInfo)
async def terrain_info():
    """Terrain threshold and visual index palette."""
    return TerrainInfo(
        threshold=settings.terrain_threshold,
        palette=palette_from_settings(settings).as_dict(),
    )


@app.post("/maps/generate", response_model=MapSummary)
def generate_map(request: MapGenerationRequest):
    """
    Generate a world map synchronously and store it.

    Invalid generation parameters return 422, a generation that runs past the
    configured timeout returns 504.
    """
    logger.info("Map generation requested", request=request.model_dump())

    seed = request.seed if request.seed is not None else uuid.uuid4().int % 2**31

    try:
        noise_params = NoiseParams(
            seed=seed,
            persistence=request.persistence,
            frequency=request.frequency,
            lacunarity=request.lacunarity,
            octaves=request.octaves,
            bounds=GeoBounds(request.lat_min, request.lat_max, request.lon_min, request.lon_max),
        )
        base_config = chunk_config_from_settings(settings)
        chunk_config = ChunkConfig(
            chunk_tile_size=base_config.chunk_tile_size,
            tile_pixel_size=base_config.tile_pixel_size,
            atlas_pixel_size=base_config.atlas_pixel_size,
            layout=get_layout(request.hex_layout),
        )
        builder = MapBuilder(
            noise_params=noise_params,
            classify_threshold=request.threshold,
            chunk_config=chunk_config,
            palette=palette_from_settings(settings),
            deadline_seconds=settings.generation_timeout,
        )
        world_map = builder.build(request.width, request.height)
    except InvalidParameter as e:
        logger.warning("Map generation rejected", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except GenerationTimeout as e:
        logger.error("Map generation timed out", error=str(e))
        raise HTTPException(status_code=504, detail=str(e))

    with db.get_session() as session:
        record = export_world_map(session, world_map, name=request.map_name)
        summary = _summary(record)

    logger.info("Map generation completed", map_id=summary.id)
    return summary


@app.get("/maps", response_model=List[MapSummary])
def list_maps():
    """List all generated maps."""
    with db.get_session() as session:
        return [_summary(record) for record in WorldMapQueries(session).list_maps()]


@app.get("/maps/{map_id}", response_model=MapSummary)
def get_map(map_id: str):
    """Get map details."""
    with db.get_session() as session:
        record = WorldMapQueries(session).get_map_by_id(map_id)

        if not record:
            raise HTTPException(status_code=404, detail="Map not found")

        return _summary(record)


@app.get("/maps/{map_id}/chunks/{chunk_x}/{chunk_y}", response_model=ChunkData)
def get_chunk(map_id: str, chunk_x: int, chunk_y: int):
    """Get the visual indices of one chunk."""
    with db.get_session() as session:
        chunk = WorldMapQueries(session).get_chunk(map_id, chunk_x, chunk_y)

        if not chunk:
            raise HTTPException(status_code=404, detail="Chunk not found")

        return ChunkData(
            map_id=chunk.map_id,
            chunk_x=chunk.chunk_x,
            chunk_y=chunk.chunk_y,
            width=chunk.width,
            height=chunk.height,
            placed_tiles=chunk.placed_tiles,
            visual_indices=json.loads(chunk.visual_indices),
        )


@app.get("/maps/{map_id}/hexes/{x}/{y}", response_model=HexData)
def get_hex(map_id: str, x: int, y: int):
    """Get terrain and pixel placement of the hex at offset (column, row)."""
    with db.get_session() as session:
        queries = WorldMapQueries(session)
        record = queries.get_map_by_id(map_id)

        if not record:
            raise HTTPException(status_code=404, detail="Map not found")

        visual_index = queries.get_visual_index(record, x, y)
        if visual_index is None or visual_index < 0:
            raise HTTPException(status_code=404, detail="Hex not found")

        config = json.loads(record.config_json)
        palette = TerrainPalette.from_names(config["palette"])
        layout = get_layout(record.hex_layout)
        center = hex_to_pixel(HexCoordinate.offset(x, y), layout, tuple(config["tile_pixel_size"]))

        return HexData(
            map_id=record.id,
            x=x,
            y=y,
            visual_index=visual_index,
            terrain=palette.terrain_for(visual_index).value,
            pixel_center=center,
        )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
