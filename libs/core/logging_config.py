"""
Centralized Logging Configuration

Sets up logging for the service. Console output always goes to stdout;
a rotating file under logs/ can be switched on with LOG_TO_FILE=true.

Usage in any module:
    from libs.core.logging_config import setup_logging, get_logger

    # Call once at service startup
    setup_logging(service_name="change_ai")

    # Get a logger for your module
    logger = get_logger(__name__)
    logger.info("My message")
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# =============================================================================
# Configuration
# =============================================================================

LOG_DIR = Path("logs")
SYSTEM_LOG_FILE = LOG_DIR / "change_ai.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-30s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-20s | %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"

# Chatty libraries held at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")

# =============================================================================
# Global State
# =============================================================================

_logging_configured = False


def setup_logging(
    level: Optional[str] = None,
    log_to_console: bool = True,
    log_to_file: bool = False,
    service_name: str = "change_ai",
) -> None:
    """
    Configure logging for the service.

    Safe to call more than once; only the first call installs handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO.
        log_to_console: Whether to log to stdout
        log_to_file: Whether to also log to logs/change_ai.log
        service_name: Logger name used for the startup marker
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers (prevents duplicates)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            SYSTEM_LOG_FILE,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root_logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATE_FORMAT))
        root_logger.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True

    logger = logging.getLogger(service_name)
    logger.info(f"Logging initialized - {service_name} (level={level.upper()})")
    if log_to_file:
        logger.info(f"Log file: {SYSTEM_LOG_FILE.absolute()}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module (usually called with __name__)."""
    return logging.getLogger(name)


def reset_logging() -> None:
    """Forget the configured state so setup_logging() runs again. Used by tests."""
    global _logging_configured
    _logging_configured = False
