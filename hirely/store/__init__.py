from __future__ import annotations

import requests

from hirely.config import Settings, ensure_dirs, load_settings
from hirely.log import get_logger
from hirely.models import Application, Job, Profile
from hirely.store.local import LocalCacheStore
from hirely.store.remote import RemoteStoreClient
from hirely.store.repository import CachedRepository, WriteResult, merge_records

log = get_logger(__name__)

__all__ = [
    "Store", "open_store", "CachedRepository", "WriteResult", "merge_records",
    "LocalCacheStore", "RemoteStoreClient",
]


class Store:
    """Process-wide store handle: one HTTP session, one cache directory.

    Build it once at startup and hand it to the services; ``close()`` releases
    the session.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: requests.Session | None = None,
        cache: LocalCacheStore | None = None,
    ) -> None:
        self.settings = settings
        self.remote = RemoteStoreClient(
            settings.store_url, timeout=settings.store_timeout, session=session
        )
        self.cache = cache or LocalCacheStore(settings.cache_dir)
        self.jobs: CachedRepository[Job] = CachedRepository(
            self.remote.entity("jobs"), self.cache, Job
        )
        self.applications: CachedRepository[Application] = CachedRepository(
            self.remote.entity("applications"), self.cache, Application
        )
        self.profiles: CachedRepository[Profile] = CachedRepository(
            self.remote.entity("profiles"), self.cache, Profile
        )
        self._closed = False

    def close(self) -> None:
        if not self._closed:
            self.remote.close()
            self._closed = True
            log.debug("Store closed")

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_store(settings: Settings | None = None) -> Store:
    settings = settings or load_settings()
    ensure_dirs(settings)
    log.info("Store → %s (timeout %gs, cache %s)", settings.store_url, settings.store_timeout, settings.cache_dir)
    return Store(settings)
