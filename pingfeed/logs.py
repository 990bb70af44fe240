# pingfeed/logs.py
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(verbosity: int = 0) -> None:
    """Replace loguru's default handler with one stderr handler.

    verbosity 0 logs INFO and above, anything higher adds the per-line DEBUG
    trace of raw fping output and parsed fields.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbosity > 0 else "INFO",
        format=LOG_FORMAT,
        colorize=None,
    )
