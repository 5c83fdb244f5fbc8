"""Process-wide logging setup for the CLI and the API server."""

import logging
import sys
from typing import Optional

from aggregator.config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("web3", "httpx", "httpcore", "urllib3", "asyncio")


def setup_logging(config: Optional[Config] = None, log_level: Optional[str] = None) -> None:
    """Configure root logging once at process start.

    ``log_level`` wins over ``config.log_level``; unknown names fall back
    to INFO.
    """
    name = (log_level or (config.log_level if config else "INFO")).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, stream=sys.stdout)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
