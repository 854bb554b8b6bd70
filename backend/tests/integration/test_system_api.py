"""
Integration tests for the diagnostic endpoint.
"""

from datetime import datetime

from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_connectivity_test():
    response = client.get("/api/test?origen=frontend")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["message"]
    assert data["method"] == "GET"
    assert data["url"].endswith("/api/test?origen=frontend")
    assert datetime.fromisoformat(data["timestamp"]).utcoffset() is not None


def test_connectivity_test_needs_no_token():
    response = client.get("/api/test", headers={"Authorization": "Bearer invalido"})

    assert response.status_code == 200
