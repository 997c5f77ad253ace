"""
Logging setup for the screen alerts runtime.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

_LOG_INITIALISED = False
if sys.platform == "darwin":
    LOG_DIR = Path.home() / "Library" / "Logs" / "Screen Alerts"
else:
    LOG_DIR = Path.home() / ".local" / "state" / "screen-alerts"
DEFAULT_LOG_PATH = LOG_DIR / "alerts.log"


def configure(log_path: Optional[Path] = None, *, console_level: str = "INFO", force: bool = False) -> None:
    """
    Configure loguru for the application.

    Runs once per process unless ``force`` is set, so library modules can
    call :func:`get_logger` freely at import time.
    """
    global _LOG_INITIALISED
    if _LOG_INITIALISED and not force:
        return
    target = log_path or DEFAULT_LOG_PATH

    # Keep console output and add a persistent file sink.
    _logger.remove()
    if sys.stderr is not None:
        _logger.add(sys.stderr, level=console_level, enqueue=True)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        _logger.warning("Log directory {} is not writable ({}); file logging disabled.", target.parent, exc)
    else:
        _logger.add(
            target,
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )
    _LOG_INITIALISED = True


def get_logger():
    """Return the shared logger instance."""
    configure()
    return _logger
