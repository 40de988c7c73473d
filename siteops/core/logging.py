import logging
import sys

from siteops.core.config import settings

_configured = False


def setup_logging(level: str = None) -> None:
    """Configure the root logger once for the whole process."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"siteops.{name}")
