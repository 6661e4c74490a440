"""Tests for health, readiness and rate limiting."""

from __future__ import annotations

from bestof_shared.config import settings


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_ready_reports_missing_configuration(client, monkeypatch):
    monkeypatch.setattr(settings, "supabase_service_key", "")
    monkeypatch.setattr(settings, "firebase_project_id", "bestofgoa")
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["missing"] == ["SUPABASE_SERVICE_KEY"]


def test_ready_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "supabase_service_key", "service-key")
    monkeypatch.setattr(settings, "firebase_project_id", "bestofgoa")
    assert client.get("/ready").status_code == 200


def test_rate_limit_headers(client):
    response = client.get("/v1/search", params={"q": "x"})
    assert response.headers["X-RateLimit-Limit"] == str(settings.rate_limit_public)


def test_rate_limit_exceeded_returns_429(client, monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_public", 2)
    for _ in range(2):
        assert client.get("/v1/search", params={"q": "x"}).status_code == 200
    response = client.get("/v1/search", params={"q": "x"})
    assert response.status_code == 429
    assert response.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"
    assert "Retry-After" in response.headers


def test_request_id_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert client.get("/health").headers["X-Request-ID"]
