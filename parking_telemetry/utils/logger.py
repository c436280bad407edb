# parking_telemetry/utils/logger.py
"""
Centralised logging configuration for the entire application.
Logs to console and to a rotating file in /logs/.

LOG_LEVEL sets the root level; LOG_LEVEL_OVERRIDES tunes single loggers,
e.g. "sqlalchemy.engine=INFO,parking_telemetry.services.live_status=DEBUG".
Handlers carry no level of their own so an override can go below the root level.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from parking_telemetry.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")

_configured = False


def parse_level_overrides(raw: str) -> dict:
    """'a.b=debug, c=WARNING' → {'a.b': 'DEBUG', 'c': 'WARNING'}. Unknown levels raise ValueError."""
    overrides = {}
    for item in (raw or "").split(","):
        if not item.strip():
            continue
        name, sep, level = item.partition("=")
        level = level.strip().upper()
        if not sep or not name.strip() or not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid LOG_LEVEL_OVERRIDES entry '{item.strip()}'")
        overrides[name.strip()] = level
    return overrides


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True
    os.makedirs(LOG_DIR, exist_ok=True)

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setFormatter(fmt)

    # Rotating file handler — keeps last 10 × 5MB log files
    file_handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, "telemetry.log"),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    root.addHandler(file_handler)

    for name, level in parse_level_overrides(settings.LOG_LEVEL_OVERRIDES).items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
