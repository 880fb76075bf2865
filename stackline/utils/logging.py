"""Console logging setup for the API process."""

import logging
import sys

verbose_formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s [%(module)s:%(lineno)d] - %(message)s"
)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Safe to call more than once; handlers are only added the first time.
    """
    logger = logging.getLogger("stackline")
    logger.setLevel(level.upper())

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(verbose_formatter)
        logger.addHandler(console_handler)

    return logger
