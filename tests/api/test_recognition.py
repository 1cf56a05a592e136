"""Tests for the recognition and statistics endpoints."""
from tests.api.conftest import API
from tests.factories import make_embedding, offset_embedding


def test_recognize_registered_face(client):
    ada = client.post(f"{API}/users", json={"name": "Ada", "face_descriptor": make_embedding(1)}).json()

    response = client.post(
        f"{API}/recognize",
        json={"face_descriptor": offset_embedding(make_embedding(1), 0.2)},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["id"] == ada["id"]
    assert 0 < body["confidence"] <= 95


def test_recognize_unknown_face_is_generic(client):
    client.post(f"{API}/users", json={"name": "Ada", "face_descriptor": make_embedding(1)})

    response = client.post(f"{API}/recognize", json={"face_descriptor": make_embedding(2)})

    assert response.status_code == 200
    assert response.json() == {"success": False, "user": None, "confidence": 0.0}


def test_recognize_rejects_invalid_descriptor(client):
    assert client.post(f"{API}/recognize", json={"face_descriptor": [0.1] * 5}).status_code == 422
    assert client.post(f"{API}/recognize", json={"face_descriptor": "abc"}).status_code == 422
    assert client.post(f"{API}/recognize", json={}).status_code == 422


def test_stats(client):
    client.post(f"{API}/users", json={"name": "Ada", "face_descriptor": make_embedding(1)})
    client.post(f"{API}/recognize", json={"face_descriptor": make_embedding(1)})
    client.post(f"{API}/recognize", json={"face_descriptor": make_embedding(3)})

    response = client.get(f"{API}/stats")

    assert response.status_code == 200
    body = response.json()
    assert body["total_scans"] == 2
    assert body["success_rate"] == 50.0
    assert body["active_today"] == 2
    assert body["total_users"] == 1
    assert body["daily_stats"][0]["scans"] == 2
