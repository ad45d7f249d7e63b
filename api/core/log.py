"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)` with `event key=value`
messages; this only decides where those records go.
"""

from __future__ import annotations

import logging
import sys

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """
    Attach a stderr handler to the root logger once per process.

    Calling it again only updates the level.
    """
    global _configured
    root = logging.getLogger()
    root.setLevel(level or settings.log_level())
    if _configured:
        return None

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True
