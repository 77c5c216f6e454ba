"""Logging utilities for colorized terminal output.

This module provides a ColoredFormatter and setup function for consistent
logging with visual emphasis on warnings and errors in terminal output.
"""

from __future__ import annotations

import logging
import sys


class ColoredFormatter(logging.Formatter):
    """Formatter that adds ANSI color codes for WARNING and ERROR levels.

    Colors are only applied when output is to an interactive terminal (TTY).
    When redirecting to a file or pipe, plain text is used.

    Attributes
    ----------
    COLORS : dict
        Mapping of log levels to ANSI color codes.
    RESET : str
        ANSI code to reset text formatting.
    """

    COLORS = {
        logging.WARNING: "\033[93m",  # Yellow
        logging.ERROR: "\033[91m",  # Red
        logging.CRITICAL: "\033[91m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with color if appropriate.

        Parameters
        ----------
        record : logging.LogRecord
            The log record to format.

        Returns
        -------
        str
            Formatted message, with ANSI color codes if outputting to TTY.
        """
        message = super().format(record)
        color = self.COLORS.get(record.levelno)
        if color and sys.stderr.isatty():
            return f"{color}{message}{self.RESET}"
        return message


def setup_logging(quiet: bool = False, debug: bool = False) -> None:
    """Set up logging with colored output for warnings and errors.

    Configures the root logger with a ColoredFormatter that highlights
    WARNING and ERROR messages in yellow and red respectively when writing
    to a terminal. Progress and summary messages of a centering run are
    logged at INFO level, so they are shown by default.

    Parameters
    ----------
    quiet : bool, optional
        If True, show only warnings and errors.
    debug : bool, optional
        If True, show DEBUG messages prefixed with level and logger name,
        including MDAnalysis' own INFO messages. Takes precedence over
        ``quiet``.

    Examples
    --------
    >>> from pbccenter.core.logging_utils import setup_logging
    >>> setup_logging()  # INFO and above
    >>> setup_logging(quiet=True)  # WARNING and above
    >>> setup_logging(debug=True)  # everything, with logger names
    """
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s [%(name)s] %(message)s"
    elif quiet:
        level = logging.WARNING
        fmt = "%(message)s"
    else:
        level = logging.INFO
        fmt = "%(message)s"

    # Create handler with colored formatter
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(fmt))

    # Configure root logger
    logging.root.handlers = []
    logging.root.addHandler(handler)
    logging.root.setLevel(level)

    if not debug:
        suppress_mdanalysis_info()


def suppress_mdanalysis_info() -> None:
    """Suppress verbose MDAnalysis INFO-level log messages.

    MDAnalysis emits INFO messages while loading structures and trajectories
    that clutter terminal output without providing actionable information:
    - "Setting segids from chainIDs..."
    - "attribute masses has been guessed successfully"
    - offset-file notices when an XTC trajectory is first indexed

    This function sets the MDAnalysis logger to WARNING level to
    suppress these messages while preserving important warnings.
    """
    logging.getLogger("MDAnalysis").setLevel(logging.WARNING)
