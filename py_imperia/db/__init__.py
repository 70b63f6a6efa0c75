"""
Database utilities and models.

This package provides:
- SQLAlchemy models for stored world maps and their chunks
- Database connection management
- Export of built world maps
- Read-side queries for the API
"""

from .connection import Database, db
from .export import export_world_map
from .queries import WorldMapQueries
from .models import Base, WorldMapRecord, ChunkRecord

__all__ = [
    # Connection management
    'Database', 'db',

    # Export functionality
    'export_world_map',

    # Query functionality
    'WorldMapQueries',

    # Models
    'Base', 'WorldMapRecord', 'ChunkRecord',
]
