"""Combined read/write policy between the hosted store and the local cache.

Reads prefer the remote list and keep local-only records; writes land in the
cache first and are then attempted remotely, with the outcome returned as a
``WriteResult`` instead of being raised.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from hirely.errors import RemoteUnavailable
from hirely.log import get_logger
from hirely.store.local import LocalCacheStore
from hirely.store.remote import EntityClient

log = get_logger(__name__)


class Record(Protocol):
    KEY: str

    def to_dict(self) -> dict[str, Any]: ...


T = TypeVar("T", bound=Record)


@dataclass
class WriteResult:
    key: str
    cached: bool
    remote_ok: bool
    error: str | None = None

    @property
    def synced(self) -> bool:
        return self.cached and self.remote_ok


def merge_records(
    remote: list[dict[str, Any]], local: list[dict[str, Any]], key: str = "id"
) -> list[dict[str, Any]]:
    """Remote records in remote order, then local-only records; remote wins on key collision."""
    remote_keys = {r.get(key) for r in remote}
    seen: set[Any] = set()
    extra: list[dict[str, Any]] = []
    for r in local:
        k = r.get(key)
        if k in remote_keys or k in seen:
            continue
        seen.add(k)
        extra.append(r)
    return list(remote) + extra


class CachedRepository(Generic[T]):
    def __init__(self, remote: EntityClient, cache: LocalCacheStore, model: type[T]) -> None:
        self.remote = remote
        self.cache = cache
        self.model = model
        self.entity = remote.name
        self.key = model.KEY

    # ── reads ────────────────────────────────────────────────────────────

    def read_records(self) -> list[dict[str, Any]]:
        try:
            remote = self.remote.list()
        except RemoteUnavailable as exc:
            local = self.cache.read(self.entity)
            log.info("Store unavailable for %s (%s), serving %d cached", self.entity, exc, len(local))
            return local

        merged: list[dict[str, Any]] | None = None
        try:
            with self.cache.locked(self.entity):
                merged = merge_records(remote, self.cache.read(self.entity), self.key)
                self.cache.write_all(self.entity, merged)
        except OSError as exc:
            log.warning("Could not refresh %s cache: %s", self.entity, exc)
            if merged is None:
                merged = merge_records(remote, self.cache.read(self.entity), self.key)
        log.debug(
            "%s: %d remote + %d local-only",
            self.entity, len(remote), len(merged) - len(remote),
        )
        return merged

    def list(self) -> list[T]:
        return [self.model.from_dict(r) for r in self.read_records()]  # type: ignore[attr-defined]

    def _fetch_remote(self, key: str) -> dict[str, Any] | None:
        try:
            return self.remote.get(key)
        except RemoteUnavailable as exc:
            log.info("Store unavailable for %s/%s (%s), checking cache", self.entity, key, exc)
            return None

    def _cached(self, key: str) -> dict[str, Any] | None:
        return next((r for r in self.cache.read(self.entity) if r.get(self.key) == key), None)

    def get(self, key: str) -> T | None:
        record = self._fetch_remote(key) or self._cached(key)
        return self.model.from_dict(record) if record else None  # type: ignore[attr-defined]

    # ── writes ───────────────────────────────────────────────────────────

    def _remote_call(self, key: str, op: str, fn, *args) -> WriteResult:
        try:
            fn(*args)
        except RemoteUnavailable as exc:
            log.warning("Remote %s of %s/%s failed, kept locally: %s", op, self.entity, key, exc)
            return WriteResult(key=key, cached=True, remote_ok=False, error=str(exc))
        return WriteResult(key=key, cached=True, remote_ok=True)

    def create(self, item: T) -> WriteResult:
        record = item.to_dict()
        key = record[self.key]
        with self.cache.locked(self.entity):
            records = [r for r in self.cache.read(self.entity) if r.get(self.key) != key]
            self.cache.write_all(self.entity, [record] + records)
        return self._remote_call(key, "create", self.remote.create, record)

    def update(self, key: str, partial: dict[str, Any]) -> WriteResult:
        """Patch the cached copy, seeding it from the store (or the bare key) on a miss."""
        base = None if self._cached(key) else self._fetch_remote(key)
        with self.cache.locked(self.entity):
            records = self.cache.read(self.entity)
            hit = False
            for r in records:
                if r.get(self.key) == key:
                    r.update(partial)
                    hit = True
            if not hit:
                log.debug("%s/%s not in cache, seeding it", self.entity, key)
                records.insert(0, {**(base or {self.key: key}), **partial})
            self.cache.write_all(self.entity, records)
        return self._remote_call(key, "update", self.remote.update, key, partial)

    def delete(self, key: str) -> WriteResult:
        with self.cache.locked(self.entity):
            records = self.cache.read(self.entity)
            kept = [r for r in records if r.get(self.key) != key]
            if len(kept) != len(records):
                self.cache.write_all(self.entity, kept)
        return self._remote_call(key, "delete", self.remote.delete, key)
