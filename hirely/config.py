"""Load settings.yaml and env configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from hirely.log import get_logger

load_dotenv()

log = get_logger(__name__)

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = ROOT_DIR / "data"

DEFAULT_STORE_URL = "http://localhost:3001"


@dataclass
class Settings:
    store_url: str = DEFAULT_STORE_URL
    store_timeout: float = 8.0
    cache_dir: Path = DATA_DIR / "cache"
    default_location: str = "India"
    page_budget: int = 1
    adzuna_results_per_page: int = 20
    shuffle_external: bool = True
    stable_ids: bool = False


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        log.warning("settings: %r should be a mapping, ignoring", name)
        return {}
    return value


def load_settings(path: Path | None = None) -> Settings:
    """Read settings.yaml (all keys optional); HIRELY_STORE_URL wins over the file."""
    path = path or SETTINGS_PATH
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        log.debug("No settings file at %s, using defaults", path)

    store = _section(data, "store")
    search = _section(data, "search")
    cache = _section(data, "cache")
    defaults = Settings()

    cache_dir = Path(cache.get("dir") or defaults.cache_dir)
    if not cache_dir.is_absolute():
        cache_dir = ROOT_DIR / cache_dir

    return Settings(
        store_url=(
            get_env("HIRELY_STORE_URL")
            or store.get("base_url")
            or defaults.store_url
        ).rstrip("/"),
        store_timeout=float(store.get("timeout_seconds", defaults.store_timeout)),
        cache_dir=cache_dir,
        default_location=search.get("default_location", defaults.default_location),
        page_budget=int(search.get("page_budget", defaults.page_budget)),
        adzuna_results_per_page=int(
            search.get("adzuna_results_per_page", defaults.adzuna_results_per_page)
        ),
        shuffle_external=bool(search.get("shuffle_external", defaults.shuffle_external)),
        stable_ids=bool(search.get("stable_ids", defaults.stable_ids)),
    )


def ensure_dirs(settings: Settings) -> None:
    settings.cache_dir.mkdir(parents=True, exist_ok=True)
