from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from hirely.config import Settings
from hirely.store import Store


class FakeResponse:
    def __init__(self, status: int = 200, body: Any = None, raw: str | None = None) -> None:
        self.status_code = status
        if raw is not None:
            self.content = raw.encode()
        elif body is None:
            self.content = b""
        else:
            self.content = json.dumps(body).encode()

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode()

    def json(self) -> Any:
        return json.loads(self.content)


class FakeSession:
    """Stands in for requests.Session against the hosted ``/api/db`` routes.

    Unrouted GETs answer 404, other unrouted calls answer ``{"success": true}``.
    Setting ``down`` makes every call raise ConnectionError.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, str, Any, float | None]] = []
        self.down = False
        self.closed = False

    def route(self, method: str, path: str, body: Any = None, status: int = 200, raw: str | None = None) -> None:
        self.routes[(method, path)] = FakeResponse(status, body, raw)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method, path)] = exc

    def request(self, method: str, url: str, json: Any = None, timeout: float | None = None) -> FakeResponse:
        path = url.split("/api/db/", 1)[1]
        self.calls.append((method, path, json, timeout))
        if self.down:
            raise requests.ConnectionError("store unreachable")
        handler = self.routes.get((method, path))
        if isinstance(handler, Exception):
            raise handler
        if handler is not None:
            return handler
        if method == "GET":
            return FakeResponse(404, {"error": "not found"})
        return FakeResponse(200, {"success": True})

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        store_url="http://store.test",
        store_timeout=8.0,
        cache_dir=tmp_path / "cache",
        shuffle_external=False,
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def store(settings, session) -> Store:
    s = Store(settings, session=session)
    yield s
    s.close()


@pytest.fixture(autouse=True)
def _no_ai_key(monkeypatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
