"""
Listing aggregation for the job board.

Runs: local jobs (store, cache fallback) ‖ SerpAPI ‖ Adzuna → concatenate → category filter.
"""
from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from hirely.log import get_logger
from hirely.models import Job
from hirely.sources.base import JobSearchBase
from hirely.store import Store

log = get_logger(__name__)

ALL = "All"
FILLER_QUERY = "software developer"
CATEGORIES: list[str] = [ALL, "Engineering", "Design", "Marketing", "Sales", "Product", "Other"]


def build_query(search_term: str, category_filter: str) -> str:
    parts = [(search_term or "").strip()]
    if category_filter and category_filter != ALL:
        parts.append(category_filter.strip())
    query = " ".join(p for p in parts if p)
    return query or FILLER_QUERY


def filter_by_category(jobs: list[Job], category_filter: str) -> list[Job]:
    if not category_filter or category_filter == ALL:
        return jobs
    return [j for j in jobs if j.category == category_filter]


def filter_jobs(jobs: list[Job], search: str) -> list[Job]:
    """Case-insensitive text narrowing over title, company, description and location."""
    needle = (search or "").strip().lower()
    if not needle:
        return jobs
    return [
        j for j in jobs
        if needle in j.title.lower()
        or needle in j.company.lower()
        or needle in j.description.lower()
        or needle in j.location.lower()
    ]


def _run_source(name: str, fn: Callable[[], list[Job]]) -> list[Job]:
    """Resolve one source on its own; a failure contributes nothing."""
    try:
        results = fn()
        log.info("[%s] returned %d jobs", name, len(results))
        return results
    except Exception as exc:
        log.error("[%s] FAILED: %s", name, exc)
        return []


class Aggregator:
    def __init__(
        self,
        store: Store,
        sources: tuple[JobSearchBase, ...] | list[JobSearchBase],
        *,
        page_budget: int = 1,
        location_hint: str | None = None,
        shuffle: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.sources = list(sources)
        self.page_budget = page_budget
        self.location_hint = location_hint
        self.shuffle = shuffle
        self.rng = rng or random.Random()

    @classmethod
    def from_store(cls, store: Store, sources, **kwargs) -> Aggregator:
        s = store.settings
        kwargs.setdefault("page_budget", s.page_budget)
        kwargs.setdefault("location_hint", s.default_location)
        kwargs.setdefault("shuffle", s.shuffle_external)
        return cls(store, sources, **kwargs)

    def get_jobs_for_display(self, search_term: str = "", category_filter: str = ALL) -> list[Job]:
        query = build_query(search_term, category_filter)
        log.info("Aggregating jobs for %r across store + %d source(s)", query, len(self.sources))

        with ThreadPoolExecutor(max_workers=1 + len(self.sources)) as pool:
            local_future = pool.submit(_run_source, "store", self.store.jobs.list)
            external_futures = [
                pool.submit(
                    _run_source,
                    src.name,
                    lambda src=src: src.search(query, self.location_hint, self.page_budget),
                )
                for src in self.sources
            ]
            local_jobs = local_future.result()
            external: list[Job] = []
            for future in external_futures:
                external.extend(future.result())

        if self.shuffle:
            self.rng.shuffle(external)

        jobs = filter_by_category(local_jobs + external, category_filter)
        log.info(
            "Aggregated %d job(s): %d local, %d external before filter",
            len(jobs), len(local_jobs), len(external),
        )
        return jobs
