"""Logging setup for the storefront.

All module loggers are children of the ``storefront`` logger and carry no
handlers of their own; the parent is configured once from LOG_LEVEL and
LOG_FILE (or explicitly via ``configure_logging``).
"""

import logging
import os
import sys
from typing import Optional, Union

ROOT_NAME = "storefront"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _resolve_level(value: Union[str, int, None]) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName((value or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Union[str, int, None] = None, log_file: Optional[str] = None) -> logging.Logger:
    """(Re)configure the ``storefront`` parent logger and return it.

    Explicit arguments win over LOG_LEVEL / LOG_FILE. Handlers from a
    previous call are replaced.
    """
    global _configured
    root = logging.getLogger(ROOT_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(_resolve_level(level if level is not None else os.environ.get("LOG_LEVEL")))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    root.addHandler(stream)

    path = log_file or os.environ.get("LOG_FILE")
    if path:
        try:
            fh = logging.FileHandler(path, encoding="utf-8")
        except OSError:
            root.warning("LOG_FILE %s could not be opened; logging to stderr only", path)
        else:
            fh.setFormatter(formatter)
            root.addHandler(fh)

    # uvicorn configures the root logger; stop at ours
    root.propagate = False
    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """Return ``storefront.<name>``, configuring the parent on first use."""
    if not _configured:
        configure_logging()
    return logging.getLogger(f"{ROOT_NAME}.{name}")
