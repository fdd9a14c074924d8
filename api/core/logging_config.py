"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once per process.

    Uvicorn installs its own handlers on its `uvicorn.*` loggers; application
    modules log through `logging.getLogger(__name__)` and end up here.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Reloads re-run startup; avoid stacking handlers.
    if root.handlers:
        root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    logging.getLogger(__name__).info("logging_configured level=%s", logging.getLevelName(root.level))
