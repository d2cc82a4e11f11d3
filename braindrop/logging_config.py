"""
Logging configuration for Braindrop.
"""

import logging
import sys


def setup_logging(log_level: str = "INFO", stream=None) -> None:
    """
    Configure the root logger with a single console handler.

    Logs go to stderr by default so command output on stdout stays clean.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Clear any existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    root_logger.addHandler(console_handler)

    # Flask's request log is noisy at INFO
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
