"""Logging setup shared by the desktop client and the API server."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level: str = "INFO"):
    """Send log records to stdout. Safe to call more than once."""
    global _configured
    if _configured:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    # urllib3 / httpx are chatty at INFO and would echo request URLs.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
