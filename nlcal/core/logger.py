"""
Logging configuration for NLCal.

Uses loguru for structured, colorful logging with rotation and filtering.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from loguru import logger

if TYPE_CHECKING:
    from .config import NlcalConfig

# Used when no configuration is given
PROJECT_ROOT = Path(__file__).parent.parent.parent
LOG_DIR = PROJECT_ROOT / "data" / "logs"


def setup_logging(
    config: NlcalConfig | None = None,
    log_dir: Optional[Path] = None,
    file_logging: bool = True,
) -> None:
    """
    Configure logging for NLCal.

    Args:
        config: Optional NLCal configuration. If not provided, uses defaults.
        log_dir: Directory for log files (defaults to <general.data_dir>/logs).
        file_logging: Whether to add the rotating file sinks.
    """
    # Remove default and previously installed handlers
    logger.remove()

    # Determine log level
    log_level = "INFO"
    if config:
        log_level = config.general.log_level
        if config.general.debug:
            log_level = "DEBUG"

    # Console handler with colors
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if not file_logging:
        return

    if log_dir:
        log_dir = Path(log_dir)
    elif config:
        log_dir = config.general.data_path / "logs"
    else:
        log_dir = LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # File handler for all logs
    logger.add(
        log_dir / "nlcal_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        level="DEBUG",
        rotation="00:00",  # Rotate at midnight
        retention="7 days",
        compression="zip",
        backtrace=True,
        diagnose=False,
    )

    # Separate file for errors only
    logger.add(
        log_dir / "nlcal_errors_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        level="ERROR",
        rotation="00:00",
        retention="30 days",
        compression="zip",
        backtrace=True,
        diagnose=False,
    )

    logger.info("NLCal logging initialized")


# Export the main logger
__all__ = ["logger", "setup_logging"]
