"""SerpAPI Google Jobs search (primary source, paginated)."""
from __future__ import annotations

from typing import Any

import requests

from hirely.errors import ProviderError
from hirely.log import get_logger
from hirely.models import Job
from hirely.sources.base import JobSearchBase
from hirely.sources.normalize import (
    avatar_logo,
    detect_category,
    detect_job_type,
    extract_salary,
    now_ms,
    per_fetch_id,
    stable_id,
)

log = get_logger(__name__)

API_URL = "https://serpapi.com/search.json"
MAX_PAGES = 3
DEFAULT_QUERY = "Software Developer"


def _best_apply_link(hit: dict) -> str:
    opts = hit.get("apply_options")
    if opts and isinstance(opts, list):
        link = (opts[0] or {}).get("link", "")
        if link:
            return link
    return hit.get("share_link", "") or ""


def _source_label(hit: dict) -> str:
    via = hit.get("via") or ""
    if via:
        return via.replace("via ", "", 1).strip() or "Google Jobs"
    return "Google Jobs"


class SerpApiSource(JobSearchBase):
    name = "serpapi"

    def __init__(self, api_key: str, *, default_location: str = "India", stable_ids: bool = False) -> None:
        self.api_key = api_key
        self.default_location = default_location
        self.stable_ids = stable_ids

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _job_id(self, hit: dict) -> str:
        if self.stable_ids:
            key = hit.get("job_id") or (
                hit.get("title", "") + hit.get("company_name", "") + hit.get("location", "")
            )
            return stable_id("serp", key)
        return per_fetch_id("serp", now_ms(), 7)

    def to_job(self, hit: dict, location: str) -> Job:
        ext = hit.get("detected_extensions") or {}
        title = hit.get("title") or "Untitled"
        company = hit.get("company_name") or "Unknown Company"
        description = hit.get("description") or "No description available."
        return Job(
            id=self._job_id(hit),
            title=title,
            company=company,
            location=hit.get("location") or location,
            type=detect_job_type(title, hit.get("description") or "", ext.get("schedule_type")),
            salary=extract_salary(hit.get("description") or "", ext.get("salary")),
            category=detect_category(title),
            posted_at=ext.get("posted_at") or "Recently",
            description=description,
            logo=hit.get("thumbnail") or avatar_logo(hit.get("company_name") or ""),
            is_external=True,
            external_url=_best_apply_link(hit),
            external_source=_source_label(hit),
        )

    def _fetch_page(self, query: str, location: str, token: str | None) -> requests.Response:
        params: dict[str, Any] = {
            "engine": "google_jobs",
            "q": query,
            "location": location,
            "hl": "en",
            "tbs": "qdr:w",
            "api_key": self.api_key,
        }
        if token:
            params["next_page_token"] = token
        return requests.get(API_URL, params=params, timeout=20)

    def collect(self, query: str, location: str, pages: int) -> list[Job]:
        """Follow continuation tokens for up to ``pages`` pages (capped at 3).

        A non-success page ends pagination and keeps what was collected;
        transport errors and malformed bodies raise ProviderError.
        """
        if not self.api_key:
            raise ProviderError(self.name, "SERPAPI_KEY is not configured")
        max_pages = max(1, min(pages, MAX_PAGES))

        jobs: list[Job] = []
        seen: set[str] = set()
        token: str | None = None
        for page in range(max_pages):
            try:
                r = self._fetch_page(query, location, token)
            except requests.RequestException as exc:
                raise ProviderError(self.name, str(exc)) from exc
            if not r.ok:
                log.warning("SerpAPI page %d returned HTTP %d, keeping %d job(s)", page + 1, r.status_code, len(jobs))
                break
            try:
                data = r.json()
            except ValueError as exc:
                raise ProviderError(self.name, "malformed JSON response") from exc

            for hit in data.get("jobs_results") or []:
                job = self.to_job(hit, location)
                # Stable ids repeat when a listing recurs across pages
                if job.id in seen:
                    log.debug("SerpAPI: skipping repeated listing %s", job.id)
                    continue
                seen.add(job.id)
                jobs.append(job)

            token = (data.get("serpapi_pagination") or {}).get("next_page_token")
            if not token:
                break

        log.info("SerpAPI: %d job(s) for %r in %r", len(jobs), query, location)
        return jobs

    def fetch(self, query: str = "", location: str = "", pages: int = 1) -> dict[str, Any]:
        """Payload for ``GET /api/jobs/search``."""
        query = query or DEFAULT_QUERY
        location = location or self.default_location
        jobs = self.collect(query, location, pages)
        return {
            "success": True,
            "count": len(jobs),
            "query": query,
            "location": location,
            "jobs": [j.to_dict() for j in jobs],
        }

    def search(self, query: str, location_hint: str | None = None, page_budget: int = 1) -> list[Job]:
        try:
            return self.collect(query or DEFAULT_QUERY, location_hint or self.default_location, page_budget)
        except ProviderError as exc:
            log.warning("SerpAPI search %r failed: %s", query, exc)
            return []
