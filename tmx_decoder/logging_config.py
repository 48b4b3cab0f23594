"""
Logging configuration for the tmx_decoder command line tool.

The library itself only creates module loggers; configuring handlers is
left to the application.
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        formatted = super().format(record)

        # Color only the level name
        if record.levelname in formatted:
            formatted = formatted.replace(
                record.levelname, f"{color}{record.levelname}{reset}", 1
            )

        return formatted


def setup_logging(level: str = "WARNING", stream: Optional[TextIO] = None,
                  use_colors: Optional[bool] = None) -> logging.Handler:
    """
    Attach a console handler to the tmx_decoder logger.

    Parameters:
    -----------
    level : str
        Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    stream : file-like, optional
        Defaults to sys.stderr
    use_colors : bool, optional
        Defaults to True when the stream is a terminal

    Returns:
    --------
    logging.Handler : The installed handler
    """
    stream = stream or sys.stderr
    if use_colors is None:
        use_colors = hasattr(stream, "isatty") and stream.isatty()

    handler = logging.StreamHandler(stream)
    formatter_cls = ColoredFormatter if use_colors else logging.Formatter
    handler.setFormatter(formatter_cls(LOG_FORMAT, DATE_FORMAT))

    package_logger = logging.getLogger("tmx_decoder")
    # Replace a handler from an earlier call instead of stacking them
    for old in list(package_logger.handlers):
        if getattr(old, "_tmx_decoder_console", False):
            package_logger.removeHandler(old)
    handler._tmx_decoder_console = True  # type: ignore[attr-defined]

    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    return handler
