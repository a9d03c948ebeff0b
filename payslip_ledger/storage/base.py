from abc import ABC, abstractmethod
from collections.abc import Iterable


class BaseKeyValueStore(ABC):
    """Contract for all key-value persistence adapters.

    Values are opaque strings. Adapters raise PersistenceError on any
    underlying I/O failure.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the blob stored under key, or None when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous blob."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""

    def multi_remove(self, keys: Iterable[str]) -> None:
        """Remove several keys in one request.

        Adapters that can do this atomically override it.
        """
        for key in keys:
            self.remove(key)

    def close(self) -> None:
        """Release any handles held by the adapter."""
