"""Database models for generated world maps."""

from sqlalchemy import Column, Integer, BigInteger, String, Float, Text, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
import uuid
from datetime import datetime

Base = declarative_base()


class WorldMapRecord(Base):
    """Main map table storing generation metadata."""

    __tablename__ = "maps"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    seed = Column(BigInteger, nullable=False)
    width = Column(Integer, nullable=False)
    height = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    generation_time_seconds = Column(Float)

    # Tile map geometry
    chunk_cols = Column(Integer, nullable=False)
    chunk_rows = Column(Integer, nullable=False)
    chunk_width = Column(Integer, nullable=False)
    chunk_height = Column(Integer, nullable=False)
    hex_layout = Column(String(20), nullable=False)

    # Terrain summary
    threshold = Column(Float, nullable=False)
    land_tiles = Column(Integer, nullable=False)
    ocean_tiles = Column(Integer, nullable=False)
    min_height = Column(Float)
    max_height = Column(Float)
    mean_height = Column(Float)

    # Generation parameters
    config_json = Column(Text)  # JSON blob of noise params and palette

    chunks = relationship("ChunkRecord", back_populates="map", cascade="all, delete-orphan")


class ChunkRecord(Base):
    """Visual indices of one chunk, stored row-major as JSON."""

    __tablename__ = "chunks"
    __table_args__ = (UniqueConstraint("map_id", "chunk_x", "chunk_y", name="uq_chunk_position"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    map_id = Column(String(36), ForeignKey("maps.id"), nullable=False)
    chunk_x = Column(Integer, nullable=False)
    chunk_y = Column(Integer, nullable=False)
    width = Column(Integer, nullable=False)
    height = Column(Integer, nullable=False)
    placed_tiles = Column(Integer, nullable=False)
    visual_indices = Column(Text, nullable=False)

    map = relationship("WorldMapRecord", back_populates="chunks")
