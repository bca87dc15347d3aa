# parkwatch/utils/logger.py
"""
Centralised logging configuration for ParkWatch.
Logs to console and to a rotating parkwatch.log in LOG_DIR (default: <repo>/logs).
Service modules tag their lines ([PASS], [VERIFY], [TICKET], [PAYMENT], [AUTH])
so one grep pulls out a single flow.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from parkwatch.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = settings.LOG_DIR or os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
LOG_FILE = os.path.join(LOG_DIR, "parkwatch.log")

# Per-statement SQL and per-request access lines drown out the tagged service logs
QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "multipart")

_configured = False


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

    # Console: what uvicorn shows in the terminal
    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(fmt)

    # Rotating file handler: keeps last 10 × 5MB log files
    file_handler = RotatingFileHandler(
        filename=LOG_FILE,
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(LOG_LEVEL)
    file_handler.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    root.addHandler(file_handler)

    if LOG_LEVEL != "DEBUG":
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
