import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname).1s | %(name)-30.30s | %(message)s"


def setup_logging(level: int | str | None = None):
    """Configures root logging for the workers.

    Without an explicit level, `LOG_LEVEL` (e.g. `DEBUG`) is used, defaulting to INFO.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    logger = logging.getLogger()
    logger.setLevel(level)

    while logger.hasHandlers():
        logger.removeHandler(logger.handlers[0])

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    # urllib3 logs request lines at DEBUG
    logging.getLogger("urllib3").setLevel(max(logger.level, logging.INFO))

    return logger
