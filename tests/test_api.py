"""
Integration tests for the world map API against an in-memory database.
"""

import pytest
from fastapi.testclient import TestClient

from py_imperia.api.main import app
from py_imperia.db.connection import db


@pytest.fixture
def client():
    db.initialize("sqlite://")
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def generated_map(client):
    response = client.post(
        "/maps/generate",
        json={"seed": 7, "width": 12, "height": 8, "octaves": 2, "map_name": "Test World"},
    )
    assert response.status_code == 200
    return response.json()


class TestMapAPI:
    """Test map generation and retrieval endpoints."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_terrain_info(self, client):
        data = client.get("/terrain").json()

        assert set(data["palette"]) == {"ocean", "land"}

    def test_generate_map(self, generated_map):
        assert generated_map["name"] == "Test World"
        assert generated_map["seed"] == 7
        assert generated_map["width"] == 12
        assert generated_map["height"] == 8
        assert generated_map["chunk_grid_size"] == [2, 1]
        assert generated_map["hex_layout"] == "column_even"
        assert generated_map["land_tiles"] + generated_map["ocean_tiles"] == 96

    def test_list_and_get_map(self, client, generated_map):
        listed = client.get("/maps").json()
        fetched = client.get(f"/maps/{generated_map['id']}")

        assert [m["id"] for m in listed] == [generated_map["id"]]
        assert fetched.status_code == 200
        assert fetched.json()["land_tiles"] == generated_map["land_tiles"]

    def test_get_chunk(self, client, generated_map):
        response = client.get(f"/maps/{generated_map['id']}/chunks/1/0")

        assert response.status_code == 200
        chunk = response.json()
        assert chunk["placed_tiles"] == 16
        assert len(chunk["visual_indices"]) == 10
        # Columns past the map edge stay empty.
        assert chunk["visual_indices"][0][2:] == [-1] * 8

    def test_get_hex(self, client, generated_map):
        response = client.get(f"/maps/{generated_map['id']}/hexes/11/7")

        assert response.status_code == 200
        data = response.json()
        assert data["terrain"] in ("ocean", "land")
        assert data["visual_index"] in (0, 1)

    def test_land_count_matches_chunks(self, client, generated_map):
        land = 0
        for cx in range(2):
            chunk = client.get(f"/maps/{generated_map['id']}/chunks/{cx}/0").json()
            land += sum(row.count(1) for row in chunk["visual_indices"])

        assert land == generated_map["land_tiles"]


class TestMapAPIErrors:
    """Test error status codes."""

    def test_unknown_map(self, client):
        assert client.get("/maps/does-not-exist").status_code == 404

    def test_unknown_chunk(self, client, generated_map):
        assert client.get(f"/maps/{generated_map['id']}/chunks/5/5").status_code == 404

    def test_hex_outside_map(self, client, generated_map):
        assert client.get(f"/maps/{generated_map['id']}/hexes/12/0").status_code == 404

    def test_invalid_dimensions(self, client):
        response = client.post("/maps/generate", json={"width": 0, "height": 4})

        assert response.status_code == 422

    def test_invalid_layout(self, client):
        response = client.post(
            "/maps/generate", json={"width": 4, "height": 4, "octaves": 1, "hex_layout": "diagonal"}
        )

        assert response.status_code == 422
        assert "hex_layout" in response.json()["detail"]

    def test_inverted_bounds(self, client):
        response = client.post(
            "/maps/generate",
            json={"width": 4, "height": 4, "octaves": 1, "lat_min": 40, "lat_max": 10},
        )

        assert response.status_code == 422
