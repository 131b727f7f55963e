import logging
from typing import Optional

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def configure_logging(level_str: str, *, fmt: Optional[str] = None) -> None:
    """Configure root logging to stderr; unknown levels fall back to WARNING"""
    level = LEVEL_MAP.get((level_str or "WARNING").upper(), logging.WARNING)

    # basicConfig is a no-op while the root logger has handlers
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    logging.basicConfig(
        level=level,
        format=fmt or "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).debug("Logging configured to %s", logging.getLevelName(level))
