from __future__ import annotations

import logging

from config.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Chatty third-party loggers that drown out sync_step lines at INFO.
_QUIET_LOGGERS = ("urllib3", "requests", "httpx")


def setup_logging(level: str | None = None) -> None:
    resolved = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    logging.getLogger().setLevel(resolved)
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
