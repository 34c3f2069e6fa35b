import sys
from loguru import logger
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

_configured = False


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    serialize: bool = False,
):
    """Configure the shared loguru logger once per process.

    Repeated calls are no-ops unless a log file is requested, so modules can
    call this at import time without stacking sinks.

    Args:
        log_level: Minimum level for the console sink.
        log_file: Optional path for a rotating DEBUG-level file sink.
        serialize: Emit JSON lines on stderr instead of the coloured format
            (used when running behind the HTTP server).
    """
    global _configured

    if _configured and log_file is None:
        return logger

    logger.remove()

    if serialize:
        logger.add(sys.stderr, level=log_level, serialize=True)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level, colorize=True)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            encoding="utf-8",
        )

    _configured = True
    return logger


def reset_logger() -> None:
    """Forget the configured state so the next setup_logger call reconfigures."""
    global _configured
    _configured = False
