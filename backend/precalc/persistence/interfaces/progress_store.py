"""Abstract key/value store for client-side state (lesson progress, last-open view)."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional


class ProgressStore(ABC):

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string for ``key``, or None."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``; last write wins, no merge."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> bool:
        """Delete ``key``. Returns True if something was deleted."""
        ...
