"""Process-wide logging setup for the API."""

import logging
import sys

from frigorifico_core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the ``frigorifico_core`` logger.

    Safe to call more than once; later calls only adjust the level.
    """
    global _configured

    root = logging.getLogger("frigorifico_core")
    root.setLevel((level or LOG_LEVEL).upper())

    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    _configured = True
