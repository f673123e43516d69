"""Logging setup for the diaryx-site command line.

Library modules only create loggers with `logging.getLogger(__name__)`.
Handlers are attached once, by the CLI, to the `diaryx_site` logger. Discovery
warnings and build progress go to stderr so that stdout stays clean for
`--json` output.

Set DIARYX_SITE_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR) to change the level,
or pass `--verbose` to the CLI for DEBUG.
"""

import logging
import os
import sys

PACKAGE_LOGGER = "diaryx_site"
LOG_LEVEL_ENV = "DIARYX_SITE_LOG_LEVEL"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Args:
        level: Level name to use. Falls back to DIARYX_SITE_LOG_LEVEL, then INFO.

    Returns:
        The package logger. Once a handler is attached, later calls return it
        unchanged.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_level_from_name(level or os.environ.get(LOG_LEVEL_ENV, "INFO")))
    logger.propagate = False
    return logger
