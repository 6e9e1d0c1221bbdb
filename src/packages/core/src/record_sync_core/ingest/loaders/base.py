"""Base loader interface."""
from abc import ABC, abstractmethod
from typing import Any


class BaseLoader(ABC):
    """Abstract base class for record loaders."""

    name: str = ""
    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def detect(self, head: bytes, suffix: str) -> bool:
        """Detect if this loader can handle the content."""
        pass

    @abstractmethod
    def load(self, content: bytes) -> list[dict[str, Any]]:
        """Load all records, in file order."""
        pass
