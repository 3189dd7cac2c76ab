"""
Logging configuration for the Trip Catalog API.

``setup_logging`` attaches the service's own console handler and, when
``LOG_FILE`` is set, a file handler to the root logger.  The handlers
are named, so repeated calls (one per ``create_app``) neither stack
duplicates nor skip configuration because some other handler, e.g.
uvicorn's or pytest's, was installed first.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER_NAME = "trip_catalog.console"
FILE_HANDLER_NAME = "trip_catalog.file"


def _has_handler(logger: logging.Logger, name: str) -> bool:
    return any(handler.get_name() == name for handler in logger.handlers)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """Configure the root logger and return it.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file to append log records to.  Missing parent
        directories are created.  If omitted, only the console
        handler is installed.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if not _has_handler(root, CONSOLE_HANDLER_NAME):
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if logfile and not _has_handler(root, FILE_HANDLER_NAME):
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root
