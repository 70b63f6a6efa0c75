"""
Tests for exporting built world maps to the database.
"""

import json

import numpy as np
import pytest

from py_imperia.core.map_builder import MapBuilder
from py_imperia.db.connection import Database
from py_imperia.db.export import export_world_map
from py_imperia.db.models import ChunkRecord
from py_imperia.db.queries import WorldMapQueries


@pytest.fixture
def database():
    database = Database()
    database.initialize("sqlite://")
    return database


@pytest.fixture
def world(small_chunks):
    heightmap = np.linspace(-1.0, 1.0, 15).reshape(3, 5)
    return MapBuilder(chunk_config=small_chunks).build(5, 3, heightmap=heightmap, map_id="map-1")


class TestExport:
    """Test persisting and reading back a world map."""

    def test_export_creates_map_and_chunks(self, database, world):
        with database.get_session() as session:
            record = export_world_map(session, world, name="Ragged")

            assert record.id == "map-1"
            assert record.name == "Ragged"
            assert (record.chunk_cols, record.chunk_rows) == (3, 2)
            assert session.query(ChunkRecord).filter_by(map_id="map-1").count() == 6
            assert record.land_tiles == world.land_tiles

    def test_default_name_uses_seed(self, database, world):
        with database.get_session() as session:
            record = export_world_map(session, world)

            assert record.name == "World 0"

    def test_config_json(self, database, world):
        with database.get_session() as session:
            config = json.loads(export_world_map(session, world).config_json)

        assert config["palette"] == {"ocean": 0, "land": 1}
        assert config["noise"]["octaves"] == 6
        assert config["tile_pixel_size"] == [32, 32]

    def test_visual_index_lookup(self, database, world):
        with database.get_session() as session:
            export_world_map(session, world)

        with database.get_session() as session:
            queries = WorldMapQueries(session)
            record = queries.get_map_by_id("map-1")

            for x in range(5):
                for y in range(3):
                    expected = world.tile_map.get_tile((x, y)).visual_index
                    assert queries.get_visual_index(record, x, y) == expected
            assert queries.get_visual_index(record, 5, 0) is None

    def test_uninitialized_database(self):
        with pytest.raises(RuntimeError):
            with Database().get_session():
                pass


class TestDatabase:
    """Test connection lifecycle."""

    def test_dispose_resets_state(self, database):
        assert database.is_initialized

        database.dispose()

        assert not database.is_initialized
        with pytest.raises(RuntimeError):
            with database.get_session():
                pass

    def test_chunks_require_existing_map(self, database):
        from sqlalchemy.exc import IntegrityError

        with pytest.raises(IntegrityError):
            with database.get_session() as session:
                session.add(ChunkRecord(map_id="missing", chunk_x=0, chunk_y=0, width=1,
                                        height=1, placed_tiles=0, visual_indices="[[-1]]"))
