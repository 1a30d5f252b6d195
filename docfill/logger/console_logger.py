"""Console logger backed by the standard logging module."""

import logging
import sys
from typing import Any, Union

from .interface import Logger

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ConsoleLogger(Logger):
    """Writes ``message key=value ...`` lines to stderr."""

    def __init__(self, name: str = "docfill", level: Union[int, str] = logging.INFO):
        if isinstance(level, str):
            # unknown names come back as "Level X"
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(_FORMAT))
            self._logger.addHandler(handler)
        self._logger.propagate = False

    @staticmethod
    def _render(message: str, kwargs: dict) -> str:
        if not kwargs:
            return message
        fields = " ".join(f"{key}={value}" for key, value in kwargs.items())
        return f"{message} {fields}"

    def debug(self, message: str, **kwargs: Any) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(self._render(message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._render(message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._render(message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._render(message, kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(self._render(message, kwargs))
