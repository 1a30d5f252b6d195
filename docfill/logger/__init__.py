"""
Logger module for docfill

This module provides a flexible logging interface that allows users to
drop in their own logger implementations.

Usage:
    from docfill.logger import Logger, ConsoleLogger

    logger = ConsoleLogger()
    logger.info("Application started", port=8020)

    # Or implement your own
    class MyCustomLogger(Logger):
        def info(self, message: str, **kwargs):
            # Your custom implementation
            pass
"""

from docfill.config import Config

from .interface import Logger
from .console_logger import ConsoleLogger

# Shared logger instance for modules that just need basic console logging
session_logger: Logger = ConsoleLogger(level=Config.get_log_level())

__all__ = [
    "Logger",
    "ConsoleLogger",
    "session_logger",
]
