"""Test health check endpoint and router mounting."""

from fastapi.testclient import TestClient

from app.main import app


def test_health_check():
    """Test that /health returns 200 with status ok."""
    with TestClient(app) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_api_routes_are_mounted_under_api():
    """Test that every endpoint except /health lives under /api."""
    with TestClient(app) as client:
        paths = set(client.get("/openapi.json").json()["paths"])

    assert "/api/use-cases/generate" in paths
    assert "/api/export-docx" in paths
    assert "/api/extract-text" in paths
    assert not any(p.startswith("/v1") for p in paths)
