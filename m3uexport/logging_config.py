"""Console logging for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "m3uexport"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logging(level: str | int = "INFO", console: Console | None = None) -> logging.Logger:
    """Attach a rich handler to the package logger.

    Calling it again replaces the previous handler instead of stacking another one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
