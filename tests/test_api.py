from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from hirely import assistant
from hirely.api import create_app
from hirely.models import Job
from hirely.sources import AdzunaSource, SerpApiSource


def _resp(data=None, status=200, text=""):
    r = MagicMock()
    r.ok = 200 <= status < 300
    r.status_code = status
    r.text = text
    r.json.return_value = data or {}
    return r


def _client(store, serp_key="", adzuna=("", "")):
    app = create_app(store, sources=(SerpApiSource(serp_key), AdzunaSource(*adzuna)))
    app.testing = True
    return app.test_client()


@pytest.fixture
def client(store):
    return _client(store)


def test_health(client):
    body = client.get("/api/health").get_json()
    assert body["status"] == "ok"
    assert body["serpApiConfigured"] is False
    assert body["adzunaConfigured"] is False
    assert body["aiConfigured"] is False
    assert body["remoteStore"] == "http://store.test"
    assert "timestamp" in body


def test_cors_header(client):
    r = client.get("/api/health", headers={"Origin": "http://localhost:5173"})
    assert r.headers.get("Access-Control-Allow-Origin") in ("*", "http://localhost:5173")


def test_search_without_key_is_500(client):
    r = client.get("/api/jobs/search?q=react")
    assert r.status_code == 500
    body = r.get_json()
    assert body["success"] is False
    assert body["error"] == "Failed to fetch jobs"


@patch("hirely.sources.serpapi.requests.get")
def test_search_returns_normalized_jobs(mock_get, store):
    mock_get.return_value = _resp({"jobs_results": [{"title": "React Developer", "company_name": "Acme"}]})
    r = _client(store, serp_key="k").get("/api/jobs/search?q=react&location=Pune&pages=x")
    assert r.status_code == 200
    body = r.get_json()
    assert body["count"] == 1
    assert body["location"] == "Pune"
    assert body["jobs"][0]["externalSource"] == "Google Jobs"


def test_adzuna_without_credentials_is_500(client):
    r = client.get("/api/jobs/adzuna?q=python")
    assert r.status_code == 500
    assert r.get_json()["error"] == "Adzuna API credentials not configured"


@patch("hirely.sources.adzuna.requests.get")
def test_adzuna_passes_provider_status(mock_get, store):
    mock_get.return_value = _resp(status=401, text="bad key")
    r = _client(store, adzuna=("id", "key")).get("/api/jobs/adzuna?q=python")
    assert r.status_code == 401
    assert r.get_json()["success"] is False


def test_aggregated_jobs_served_from_cache(store, session, client):
    store.cache.write_all("jobs", [Job(id="job_1", title="Chef", company="Taj", location="Goa").to_dict()])
    session.down = True
    body = client.get("/api/jobs?category=All").get_json()
    assert body["success"] is True
    assert [j["id"] for j in body["jobs"]] == ["job_1"]


def test_chat_requires_message(client):
    r = client.post("/api/chat", json={})
    assert r.status_code == 400
    assert r.get_json() == {"error": "Message is required"}


def test_chat_setup_mode(client):
    r = client.post("/api/chat", json={"message": "hello"})
    assert r.get_json() == {"reply": assistant.SETUP_REPLY}


def test_chat_failure_is_500(client, monkeypatch):
    def boom(message):
        raise RuntimeError("groq down")

    monkeypatch.setattr(assistant, "chat_reply", boom)
    r = client.post("/api/chat", json={"message": "hello"})
    assert r.status_code == 500
    assert r.get_json() == {"error": "Failed to process chat message"}


def test_voice_chat_not_configured(client):
    r = client.post("/api/voice-chat", json={"message": "ready", "mode": "hr", "history": []})
    assert r.get_json() == {"reply": "Voice AI is not configured."}


def test_headhunter(client, session):
    session.down = True
    assert client.post("/api/headhunter", json={}).status_code == 400
    r = client.post("/api/headhunter", json={"prompt": "Go engineer"})
    assert r.get_json() == {"results": []}
