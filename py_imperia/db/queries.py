"""
Query helpers for stored world maps.
"""

import json
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from .models import ChunkRecord, WorldMapRecord

logger = structlog.get_logger()


class WorldMapQueries:
    """Read-side queries used by the API."""

    def __init__(self, session: Session):
        """Initialize with database session."""
        self.session = session

    def get_map_by_id(self, map_id: str) -> Optional[WorldMapRecord]:
        """Get map record by ID."""
        return self.session.query(WorldMapRecord).filter(WorldMapRecord.id == map_id).first()

    def list_maps(self, limit: int = 50) -> List[WorldMapRecord]:
        """List all maps with metadata, newest first."""
        return (
            self.session.query(WorldMapRecord)
            .order_by(WorldMapRecord.created_at.desc())
            .limit(limit)
            .all()
        )

    def get_chunk(self, map_id: str, chunk_x: int, chunk_y: int) -> Optional[ChunkRecord]:
        return (
            self.session.query(ChunkRecord)
            .filter(
                ChunkRecord.map_id == map_id,
                ChunkRecord.chunk_x == chunk_x,
                ChunkRecord.chunk_y == chunk_y,
            )
            .first()
        )

    def get_visual_index(self, map_record: WorldMapRecord, x: int, y: int) -> Optional[int]:
        """
        Visual index of logical tile (x, y), or None when outside the map.

        Resolves the chunk with the same divmod rule the tile map uses.
        """
        if not (0 <= x < map_record.width and 0 <= y < map_record.height):
            return None
        cx, lx = divmod(x, map_record.chunk_width)
        cy, ly = divmod(y, map_record.chunk_height)
        chunk = self.get_chunk(map_record.id, cx, cy)
        if chunk is None:
            logger.warning("Chunk missing for stored map", map_id=map_record.id, chunk=(cx, cy))
            return None
        return json.loads(chunk.visual_indices)[ly][lx]
