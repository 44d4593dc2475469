"""Logging configuration.

Configures the root logger once at application start. Modules obtain their
own logger with ``logging.getLogger(__name__)``.
"""

import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ("sqlalchemy.engine", "multipart")


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure application logging.

    Args:
        level: Root log level name, e.g. "INFO" or "DEBUG".
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
