from pathlib import Path

from payslip_ledger.config.settings import Settings
from payslip_ledger.storage.base import BaseKeyValueStore
from payslip_ledger.storage.file_adapter import JsonFileKeyValueStore
from payslip_ledger.storage.memory_adapter import InMemoryKeyValueStore
from payslip_ledger.storage.sqlite_adapter import SqliteKeyValueStore

_SQLITE_FILE_NAME = "payslip_ledger.db"


class StorageFactory:
    """Creates the key-value adapter selected by settings."""

    ENGINES: tuple[str, ...] = ("memory", "file", "sqlite")

    @classmethod
    def create(cls, settings: Settings) -> BaseKeyValueStore:
        engine = settings.storage_engine.lower()
        if engine == "memory":
            return InMemoryKeyValueStore()
        if engine == "file":
            return JsonFileKeyValueStore(Path(settings.storage_path))
        if engine == "sqlite":
            return SqliteKeyValueStore(Path(settings.storage_path) / _SQLITE_FILE_NAME)
        raise ValueError(
            f"Unknown storage engine '{engine}'. Choose from: {list(cls.ENGINES)}"
        )
