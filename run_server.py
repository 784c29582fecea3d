#!/usr/bin/env python3
"""Entry point to run the Hirely HTTP API."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from hirely.config import get_env
from hirely.log import get_logger

log = get_logger(__name__)


def _check_setup() -> bool:
    """Return True if search keys are missing entirely."""
    if not (get_env("SERPAPI_KEY") or (get_env("ADZUNA_APP_ID") and get_env("ADZUNA_APP_KEY"))):
        log.warning("No SERPAPI_KEY or Adzuna keys set, external search will return no jobs.")
        log.warning("Copy .env.example to .env and fill in at least one source.")
        return True
    return False


if __name__ == "__main__":
    _check_setup()

    from hirely.api import main

    main()
