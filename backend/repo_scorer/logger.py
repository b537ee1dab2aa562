"""
Logging setup for the service.

Usage:
    from loguru import logger

    setup_logging("DEBUG")
    logger.info("message")
"""
import sys

from loguru import logger

_configured = False


def setup_logging(log_level: str = "INFO") -> None:
    """Replace loguru's default sink with a coloured stderr sink. Runs once per process."""
    global _configured

    if _configured:
        return

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    )
    _configured = True
