import logging
import os


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger configured with basicConfig.

    The root level is read from ``GRIMODDS_LOG_LEVEL`` (default ``INFO``).
    """
    level = getattr(logging, os.getenv("GRIMODDS_LOG_LEVEL", "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")
    return logging.getLogger(name)
