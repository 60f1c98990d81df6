"""Tests for FastAPI application."""

from fastapi.testclient import TestClient

from music_tagger.core.config import TaggerConfig
from web.backend.main import create_app


def test_health_endpoint(client):
    """Test health check endpoint returns 200."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_config_is_attached_to_app(client, config):
    assert client.app.state.config is config


def test_cors_headers(config: TaggerConfig):
    """Test CORS headers are present when origins are configured."""
    config.allowed_origins = ("http://localhost:5173",)
    client = TestClient(create_app(config))
    response = client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_no_cors_by_default(client):
    response = client.get("/health", headers={"Origin": "http://evil.test"})
    assert "access-control-allow-origin" not in response.headers


def test_unknown_root_is_400(client):
    response = client.get("/api/tags/trash/song.mp3")
    assert response.status_code == 400
    assert "error" in response.json()
