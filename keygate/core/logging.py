"""
Logger Configuration
Provides centralized logging setup with file and console output
"""
import logging
import logging.config
from pathlib import Path
from typing import Optional

from keygate.core.config import LogConfig

class LogManager:
    """Centralized logging configuration management"""

    def __init__(self):
        self.config = LogConfig()

    def setup_logging(self, level: str = "INFO", log_file: Optional[Path] = None):
        """
        Configure logging with console and optional file handlers

        Args:
            level: Log level applied to every handler
            log_file: Optional path to log file
        """
        self.config.LEVEL = level.upper()
        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self.config.FILE = log_file

        logging.config.dictConfig(self.config.log_config)

        logger = logging.getLogger(__name__)
        logger.info("Logging configured successfully")
        if self.config.FILE:
            logger.info(f"Log file: {self.config.FILE}")

# Global logging manager instance
log_manager = LogManager()

# Global logger instance for importing in other modules
logger = logging.getLogger("keygate")

def setup_logging(level: str = "INFO", log_file: Optional[Path] = None):
    """
    Configure application logging

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file

    Returns:
        Logger instance
    """
    logging.basicConfig(level=getattr(logging, level.upper()))
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if log_file:
        log_manager.setup_logging(level, log_file)

    return logger


def mask_key(api_key: Optional[str]) -> str:
    """Hide a secret key, only the last 4 characters stay visible"""
    if not api_key or len(api_key) < 4:
        return "****"
    return ("*" * (len(api_key) - 4)) + api_key[-4:]
