from collections.abc import Iterable

from payslip_ledger.storage.base import BaseKeyValueStore


class InMemoryKeyValueStore(BaseKeyValueStore):
    """Dict-backed adapter. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def multi_remove(self, keys: Iterable[str]) -> None:
        remaining = dict(self._data)
        for key in keys:
            remaining.pop(key, None)
        self._data = remaining

    def keys(self) -> list[str]:
        return sorted(self._data)
