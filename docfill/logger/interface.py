"""Abstract logger interface.

Keyword arguments passed to any level method are structured context fields
(``logger.info("Template stored", template_id=tid, size=42)``).
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Interface every docfill logger implements."""

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None:
        pass
