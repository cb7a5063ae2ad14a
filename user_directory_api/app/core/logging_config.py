"""
Logging configuration for the application.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger exactly once.  Application modules log
through ``logging.getLogger(__name__)``; third‑party loggers that are
chatty at INFO are capped so the service's own messages stay readable.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers capped at WARNING regardless of the configured level.
NOISY_LOGGERS = ("passlib", "multipart")


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    noisy_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``).  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        Extra destination for log records.  The file is appended to.
    noisy_loggers : Iterable[str]
        Logger names to cap at WARNING.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured (test runner, or a second create_app call).
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
