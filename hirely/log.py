"""Logging setup shared by the API server and the Streamlit app.

Everything goes through the root logger: stdout at ``LOG_LEVEL`` and a
per-day file under ``logs/`` (or ``HIRELY_LOG_DIR``) at DEBUG.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"
QUIET_LOGGERS = ("urllib3", "httpx", "openai", "werkzeug")

_done = False


def _log_dir() -> Path:
    default = Path(__file__).resolve().parent.parent / "logs"
    return Path(os.environ.get("HIRELY_LOG_DIR") or default)


def _file_handler(formatter: logging.Formatter) -> logging.Handler | None:
    path = _log_dir() / f"hirely_{date.today().isoformat()}.log"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def configure(level: str | None = None) -> None:
    """Install handlers on the root logger once; later calls only adjust the level."""
    global _done
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    numeric = getattr(logging, name, logging.INFO)
    root = logging.getLogger()
    if _done or root.handlers:
        root.setLevel(numeric)
        _done = True
        return
    _done = True

    # Root passes DEBUG through; each handler filters at its own level
    root.setLevel(logging.DEBUG)
    formatter = logging.Formatter(FORMAT, datefmt=DATE_FMT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(numeric)
    console.setFormatter(formatter)
    root.addHandler(console)

    fh = _file_handler(formatter)
    if fh is not None:
        root.addHandler(fh)

    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    if not _done:
        configure()
    return logging.getLogger(name)
