from .base import JobSearchBase
from .serpapi import SerpApiSource
from .adzuna import AdzunaSource

from hirely.config import Settings
from hirely.log import get_logger

log = get_logger(__name__)

__all__ = ["JobSearchBase", "SerpApiSource", "AdzunaSource", "get_sources"]


def get_sources(settings: Settings, env_getter) -> tuple[SerpApiSource, AdzunaSource]:
    """Both adapters, always; an unconfigured one simply returns no jobs."""
    serp = SerpApiSource(
        env_getter("SERPAPI_KEY"),
        default_location=settings.default_location,
        stable_ids=settings.stable_ids,
    )
    adzuna = AdzunaSource(
        env_getter("ADZUNA_APP_ID"),
        env_getter("ADZUNA_APP_KEY"),
        results_per_page=settings.adzuna_results_per_page,
        stable_ids=settings.stable_ids,
    )
    for src in (serp, adzuna):
        if src.configured:
            log.info("Registered source: %s", src.name)
        else:
            log.info("Source %s has no credentials, it will return no jobs", src.name)
    return serp, adzuna
