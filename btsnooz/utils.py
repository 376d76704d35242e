"""
Utility helpers: logging config and timestamp formatting.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import DecoderConfig

# btsnoop timestamps count microseconds from 0000-01-01; this is 1970-01-01 in that scale.
BTSNOOP_UNIX_DELTA_US = 0x00DCDDB30F2F8000

_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def ensure_dirs(*paths: Path) -> None:
    """Ensure each directory exists."""
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)


def init_logging(config: DecoderConfig) -> logging.Logger:
    """Configure a console logger + optional rotating file handler."""
    log_level = getattr(logging, config.log_level, logging.WARNING)
    logger = logging.getLogger("btsnooz")
    logger.setLevel(log_level)
    logger.propagate = False  # avoid duplicate logs if root has handlers

    # Re-running in one process (tests, notebooks) must not stack handlers
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(ch)

    # File (rotating)
    if config.log_file:
        log_file = Path(config.log_file)
        ensure_dirs(log_file.parent)
        fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
        fh.setLevel(log_level)
        fh.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(fh)

    return logger


def snoop_ts_to_iso(timestamp_us: int) -> str:
    """Render a btsnoop timestamp as an ISO-8601 UTC string (for log lines)."""
    unix_us = timestamp_us - BTSNOOP_UNIX_DELTA_US
    try:
        dt = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(microseconds=unix_us)
    except OverflowError:
        # outside datetime's range; still worth showing the raw value
        return f"{timestamp_us}us"
    return dt.isoformat(timespec="microseconds").replace("+00:00", "Z")
