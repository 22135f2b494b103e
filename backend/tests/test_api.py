"""Test Geotrace API endpoints."""

import struct

import pytest
from fastapi.testclient import TestClient

from geotrace.database import SessionLocal
from geotrace.main import app
from geotrace.models import Track


TRACK_WKT = "LINESTRINGZM (0 0 0 0, 1 0 0 10, 2 0.5 0 20, 3 0 0 30, 4 0 0 40)"


@pytest.fixture
def client():
    """Create test client with a clean tracks table."""
    with TestClient(app) as test_client:
        yield test_client

    db = SessionLocal()
    try:
        db.query(Track).delete()
        db.commit()
    finally:
        db.close()


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestLineStrings:
    """Stateless LineString endpoints."""

    def test_parse_wkt(self, client):
        response = client.post("/api/linestrings/parse", json={"kind": "XYM", "wkt": "LINESTRINGM (0 0 0, 10 0 10)"})
        assert response.status_code == 200
        data = response.json()
        assert data["kind"] == "XYM"
        assert data["vertex_count"] == 2
        assert data["coordinates"] == [[0, 0, 0], [10, 0, 10]]
        assert data["wkt"] == "LINESTRINGM (0.0 0.0 0.0, 10.0 0.0 10.0)"

    def test_parse_wkb_round_trip(self, client):
        first = client.post("/api/linestrings/parse", json={"kind": "ZM", "wkt": TRACK_WKT}).json()
        second = client.post("/api/linestrings/parse", json={"wkb": first["wkb"]})
        assert second.status_code == 200
        assert second.json()["wkt"] == first["wkt"]

    def test_parse_kind_mismatch(self, client):
        response = client.post("/api/linestrings/parse", json={"kind": "XY", "wkt": TRACK_WKT})
        assert response.status_code == 422

    def test_parse_requires_geometry(self, client):
        assert client.post("/api/linestrings/parse", json={"kind": "XY"}).status_code == 400

    def test_parse_requires_kind_with_wkt(self, client):
        assert client.post("/api/linestrings/parse", json={"wkt": TRACK_WKT}).status_code == 400

    def test_parse_unknown_kind(self, client):
        assert client.post("/api/linestrings/parse", json={"kind": "XYQ", "wkt": TRACK_WKT}).status_code == 400

    def test_parse_bad_hex(self, client):
        assert client.post("/api/linestrings/parse", json={"wkb": "zz"}).status_code == 400

    def test_parse_rejects_non_finite_wkt(self, client):
        response = client.post("/api/linestrings/parse", json={"kind": "XY", "wkt": "LINESTRING (1e400 0, 1 1)"})
        assert response.status_code == 422

    def test_parse_rejects_non_finite_wkb(self, client):
        data = struct.pack("<BII4d", 1, 2, 2, 0.0, 0.0, float("nan"), 1.0)
        response = client.post("/api/linestrings/parse", json={"wkb": data.hex()})
        assert response.status_code == 422

    def test_simplify(self, client):
        response = client.post("/api/linestrings/simplify", json={"kind": "XYZM", "wkt": TRACK_WKT, "tolerance": 0.3})
        assert response.status_code == 200
        data = response.json()
        assert data["original_vertex_count"] == 5
        assert data["vertex_count"] == 3
        assert data["coordinates"] == [[0, 0, 0, 0], [2, 0.5, 0, 20], [4, 0, 0, 40]]

    def test_simplify_negative_tolerance(self, client):
        response = client.post("/api/linestrings/simplify", json={"kind": "XYZM", "wkt": TRACK_WKT, "tolerance": -1})
        assert response.status_code == 422

    def test_locate(self, client):
        response = client.post("/api/linestrings/locate", json={"kind": "XYZM", "wkt": TRACK_WKT, "t": 25})
        assert response.status_code == 200
        assert response.json() == {"found": True, "coordinate": [2.5, 0.25, 0.0, 25.0]}

    def test_locate_out_of_range(self, client):
        response = client.post("/api/linestrings/locate", json={"kind": "XYZM", "wkt": TRACK_WKT, "t": 99})
        assert response.json() == {"found": False, "coordinate": None}

    def test_locate_without_time(self, client):
        response = client.post("/api/linestrings/locate", json={"kind": "XY", "wkt": "LINESTRING (0 0, 1 1)", "t": 0})
        assert response.status_code == 422


class TestTracks:
    """Stored track endpoints."""

    def _create(self, client, name="Morning ride", kind="XYZM", wkt=TRACK_WKT):
        response = client.post("/api/tracks", json={"name": name, "kind": kind, "wkt": wkt})
        assert response.status_code == 200
        return response.json()

    def test_create_and_get(self, client):
        created = self._create(client)
        assert created["kind"] == "XYZM"
        assert created["vertex_count"] == 5
        assert created["start_time"] == 0
        assert created["end_time"] == 40

        response = client.get(f"/api/tracks/{created['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Morning ride"
        assert data["wkt"] == created["wkt"]
        assert data["wkb"] == created["wkb"]

    def test_create_from_wkb(self, client):
        created = self._create(client)
        response = client.post("/api/tracks", json={"name": "copy", "wkb": created["wkb"]})
        assert response.status_code == 200
        assert response.json()["coordinates"] == created["coordinates"]

    def test_create_rejects_mismatch(self, client):
        response = client.post("/api/tracks", json={"name": "bad", "kind": "XYZ", "wkt": TRACK_WKT})
        assert response.status_code == 422

    def test_create_rejects_non_finite_without_storing(self, client):
        response = client.post("/api/tracks", json={"name": "bad", "kind": "XY", "wkt": "LINESTRING (0 0, 1e400 1)"})
        assert response.status_code == 422

        data = struct.pack(">BII4d", 0, 2, 2, 0.0, 0.0, float("inf"), 1.0)
        response = client.post("/api/tracks", json={"name": "bad", "wkb": data.hex()})
        assert response.status_code == 422

        assert client.get("/api/tracks").json()["count"] == 0

    def test_list_and_filter(self, client):
        self._create(client, name="a")
        self._create(client, name="b", kind="XY", wkt="LINESTRING (0 0, 1 1)")

        data = client.get("/api/tracks").json()
        assert data["count"] == 2
        assert "wkt" not in data["tracks"][0]

        data = client.get("/api/tracks", params={"kind": "XY"}).json()
        assert data["count"] == 1
        assert data["tracks"][0]["name"] == "b"

    def test_get_missing(self, client):
        assert client.get("/api/tracks/999999").status_code == 404

    def test_position(self, client):
        created = self._create(client)
        response = client.get(f"/api/tracks/{created['id']}/position", params={"t": 10})
        assert response.status_code == 200
        assert response.json()["coordinate"] == [1, 0, 0, 10]

    def test_position_out_of_range(self, client):
        created = self._create(client)
        response = client.get(f"/api/tracks/{created['id']}/position", params={"t": -5})
        assert response.status_code == 404

    def test_position_without_time(self, client):
        created = self._create(client, kind="XY", wkt="LINESTRING (0 0, 1 1)")
        response = client.get(f"/api/tracks/{created['id']}/position", params={"t": 0})
        assert response.status_code == 422

    def test_position_rejects_non_finite_time(self, client):
        created = self._create(client)
        response = client.get(f"/api/tracks/{created['id']}/position", params={"t": "inf"})
        assert response.status_code == 422

    def test_simplify_and_save(self, client):
        created = self._create(client)
        response = client.post(
            f"/api/tracks/{created['id']}/simplify",
            params={"tolerance": 0.3, "save": True},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["vertex_count"] == 3

        saved = client.get(f"/api/tracks/{data['saved_track_id']}").json()
        assert saved["name"] == "Morning ride (simplified)"
        assert saved["vertex_count"] == 3

    def test_delete(self, client):
        created = self._create(client)
        response = client.delete(f"/api/tracks/{created['id']}")
        assert response.status_code == 200
        assert client.get(f"/api/tracks/{created['id']}").status_code == 404
