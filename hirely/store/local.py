"""Local fallback cache: one JSON file per entity with advisory file locking."""
from __future__ import annotations

import fcntl
import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from hirely.log import get_logger

log = get_logger(__name__)

ENTITIES: tuple[str, ...] = ("jobs", "applications", "profiles")


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class LocalCacheStore:
    """Best-effort shadow copy of the hosted store; no TTL, no eviction."""

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir)

    def path(self, entity: str) -> Path:
        return self.cache_dir / f"{entity}.json"

    def read(self, entity: str) -> list[dict[str, Any]]:
        """Cached records in stored order; missing or corrupt data reads as empty."""
        path = self.path(entity)
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                try:
                    data = json.load(f)
                finally:
                    _unlock(f)
        except (OSError, ValueError) as exc:
            log.warning("Cache %s unreadable (%s), treating as empty", path.name, exc)
            return []
        if not isinstance(data, list):
            log.warning("Cache %s is not a list, treating as empty", path.name)
            return []
        return [r for r in data if isinstance(r, dict)]

    def write_all(self, entity: str, records: list[dict[str, Any]]) -> None:
        """Replace the table atomically; each call writes through its own temp file."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.cache_dir,
            prefix=f".{entity}.", suffix=".tmp", delete=False,
        )
        try:
            with tmp as f:
                json.dump(records, f, ensure_ascii=False)
                f.flush()
            os.replace(tmp.name, self.path(entity))
        except BaseException:
            Path(tmp.name).unlink(missing_ok=True)
            raise
        log.debug("Cached %d %s record(s) → %s", len(records), entity, self.path(entity).name)

    @contextmanager
    def locked(self, entity: str) -> Iterator[None]:
        """Exclusive lock on ``<entity>.lock`` for a read-modify-write of that table."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        with open(self.cache_dir / f"{entity}.lock", "a", encoding="utf-8") as f:
            _lock(f)
            try:
                yield
            finally:
                _unlock(f)

    def clear(self) -> None:
        for entity in ENTITIES:
            self.path(entity).unlink(missing_ok=True)
