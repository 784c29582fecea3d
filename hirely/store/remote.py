"""HTTP client for the hosted database-backed API (``/api/db/*``)."""
from __future__ import annotations

from typing import Any

import requests

from hirely.errors import RemoteUnavailable
from hirely.log import get_logger

log = get_logger(__name__)

DEFAULT_TIMEOUT = 8.0


class RemoteStoreClient:
    """CRUD over the hosted store. Every call is bounded by ``timeout`` and never retried.

    Transport errors, timeouts and non-2xx answers all surface as
    ``RemoteUnavailable``; callers decide whether to fall back.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def request(self, method: str, path: str, payload: Any = None) -> Any:
        url = f"{self.base_url}/api/db/{path}"
        try:
            r = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.Timeout:
            raise RemoteUnavailable(method, path, f"timed out after {self.timeout:g}s") from None
        except requests.RequestException as exc:
            raise RemoteUnavailable(method, path, type(exc).__name__) from None

        if r.status_code == 404 and method == "GET":
            return None
        if not 200 <= r.status_code < 300:
            raise RemoteUnavailable(method, path, f"HTTP {r.status_code}", status=r.status_code)
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError:
            raise RemoteUnavailable(method, path, "response is not JSON", status=r.status_code) from None

    def entity(self, name: str) -> EntityClient:
        return EntityClient(self, name)

    # Chat messages are kept per application under their own route.

    def list_messages(self, app_id: str) -> list[dict[str, Any]]:
        data = self.request("GET", f"messages/{app_id}")
        return data if isinstance(data, list) else []

    def append_message(self, app_id: str, message: dict[str, Any]) -> None:
        self.request("POST", f"messages/{app_id}", message)

    def update_message(self, app_id: str, message_id: str, message: dict[str, Any]) -> None:
        self.request("PUT", f"messages/{app_id}/{message_id}", message)


class EntityClient:
    def __init__(self, client: RemoteStoreClient, name: str) -> None:
        self.client = client
        self.name = name

    def list(self) -> list[dict[str, Any]]:
        data = self.client.request("GET", self.name)
        if not isinstance(data, list):
            raise RemoteUnavailable("GET", self.name, "expected a JSON list")
        return [r for r in data if isinstance(r, dict)]

    def get(self, key: str) -> dict[str, Any] | None:
        data = self.client.request("GET", f"{self.name}/{key}")
        return data if isinstance(data, dict) else None

    def create(self, record: dict[str, Any]) -> None:
        self.client.request("POST", self.name, record)
        log.debug("Remote %s created", self.name)

    def update(self, key: str, partial: dict[str, Any]) -> None:
        self.client.request("PUT", f"{self.name}/{key}", partial)

    def delete(self, key: str) -> None:
        self.client.request("DELETE", f"{self.name}/{key}")
