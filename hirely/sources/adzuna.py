"""Adzuna job search, India endpoint, one page per call.

Free tier: 250 requests/day.  Sign up at https://developer.adzuna.com/
"""
from __future__ import annotations

from typing import Any

import requests

from hirely.errors import ProviderError
from hirely.log import get_logger
from hirely.models import Job
from hirely.sources.base import JobSearchBase
from hirely.sources.normalize import (
    avatar_logo,
    detect_job_type_from_title,
    display_date,
    map_provider_category,
    now_ms,
    per_fetch_id,
    salary_range,
    stable_id,
)

log = get_logger(__name__)

COUNTRY = "in"
BASE_URL = f"https://api.adzuna.com/v1/api/jobs/{COUNTRY}/search"
DEFAULT_QUERY = "software developer"


class AdzunaSource(JobSearchBase):
    name = "adzuna"

    def __init__(
        self,
        app_id: str,
        app_key: str,
        *,
        results_per_page: int = 20,
        stable_ids: bool = False,
    ) -> None:
        self.app_id = app_id
        self.app_key = app_key
        self.results_per_page = results_per_page
        self.stable_ids = stable_ids

    @property
    def configured(self) -> bool:
        return bool(self.app_id and self.app_key)

    def _job_id(self, hit: dict) -> str:
        raw_id = hit.get("id")
        if self.stable_ids and raw_id:
            return stable_id("adzuna", str(raw_id))
        return per_fetch_id("adzuna", raw_id or now_ms(), 5)

    def to_job(self, hit: dict) -> Job:
        title = hit.get("title") or "Untitled"
        company = (hit.get("company") or {}).get("display_name") or ""
        label = (hit.get("category") or {}).get("label") or ""
        return Job(
            id=self._job_id(hit),
            title=title,
            company=company or "Unknown Company",
            location=(hit.get("location") or {}).get("display_name") or "India",
            type=detect_job_type_from_title(title),
            salary=salary_range(hit.get("salary_min"), hit.get("salary_max")),
            category=map_provider_category(label, title),
            posted_at=display_date(hit.get("created")),
            description=hit.get("description") or "No description available.",
            logo=avatar_logo(company),
            is_external=True,
            external_url=hit.get("redirect_url") or "",
            external_source="Adzuna",
        )

    def collect(
        self, query: str, location: str = "", page: int = 1, per_page: int | None = None
    ) -> tuple[list[Job], int]:
        """One page of results plus the provider's total hit count."""
        if not self.configured:
            raise ProviderError(self.name, "Adzuna API credentials not configured")
        params: dict[str, Any] = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "results_per_page": per_page or self.results_per_page,
            "what": query,
            "sort_by": "date",
        }
        if location:
            params["where"] = location

        log.debug("Adzuna: fetching %r page %d", query, page)
        try:
            r = requests.get(f"{BASE_URL}/{page}", params=params, timeout=15)
        except requests.RequestException as exc:
            raise ProviderError(self.name, str(exc)) from exc
        if not r.ok:
            raise ProviderError(self.name, f"Adzuna API request failed: {r.text[:200]}", status=r.status_code)
        try:
            data = r.json()
        except ValueError as exc:
            raise ProviderError(self.name, "malformed JSON response") from exc

        jobs = [self.to_job(hit) for hit in data.get("results") or []]
        log.info("Adzuna: %d job(s) for %r", len(jobs), query)
        return jobs, int(data.get("count") or 0)

    def fetch(
        self, query: str = "", location: str = "", page: int = 1, per_page: int | None = None
    ) -> dict[str, Any]:
        """Payload for ``GET /api/jobs/adzuna``."""
        query = query or DEFAULT_QUERY
        jobs, total = self.collect(query, location, page, per_page)
        return {
            "success": True,
            "count": len(jobs),
            "total": total,
            "query": query,
            "jobs": [j.to_dict() for j in jobs],
        }

    def search(self, query: str, location_hint: str | None = None, page_budget: int = 1) -> list[Job]:
        # Single page regardless of budget
        try:
            jobs, _ = self.collect(query or DEFAULT_QUERY, location_hint or "")
        except ProviderError as exc:
            log.warning("Adzuna search %r failed: %s", query, exc)
            return []
        return jobs
