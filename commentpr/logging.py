"""Logging setup for the comment service.

What each level shows:
- ERROR: failed publications (git host errors, unhandled exceptions)
- WARNING: sentiment score unavailable
- INFO: one line per accepted or rejected comment, server start
- DEBUG: request lines and remote calls, including urllib3 connection logs

Set logging.level / logging.format in config.yaml or LOGGING_LEVEL /
LOGGING_FORMAT in the environment.
"""

import logging

from commentpr.config import LoggingConfig

PACKAGE_LOGGER = "commentpr"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers of the HTTP client stack, too chatty below DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def _resolve_level(level: str) -> int:
    """Level constant for a name; unknown names mean INFO."""
    return LEVELS.get(level.upper().strip(), logging.INFO)


class CommentLogging:
    """Applies LoggingConfig to the root logger and the HTTP client loggers."""

    def __init__(self, config: LoggingConfig) -> None:
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> logging.Logger:
        """Configure logging and return the package logger."""
        logging.basicConfig(level=self._level, format=self._format, force=True)
        client_level = logging.DEBUG if self._level == logging.DEBUG else logging.WARNING
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(client_level)
        return logging.getLogger(PACKAGE_LOGGER)
