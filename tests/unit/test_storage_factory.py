from pathlib import Path
from unittest.mock import MagicMock

import pytest

from payslip_ledger.storage.factory import StorageFactory
from payslip_ledger.storage.file_adapter import JsonFileKeyValueStore
from payslip_ledger.storage.memory_adapter import InMemoryKeyValueStore
from payslip_ledger.storage.sqlite_adapter import SqliteKeyValueStore


def _make_settings(engine: str, path: Path) -> MagicMock:
    return MagicMock(storage_engine=engine, storage_path=str(path))


class TestStorageFactory:
    def test_creates_memory_adapter(self, tmp_path: Path) -> None:
        assert isinstance(StorageFactory.create(_make_settings("memory", tmp_path)), InMemoryKeyValueStore)

    def test_creates_file_adapter(self, tmp_path: Path) -> None:
        assert isinstance(StorageFactory.create(_make_settings("file", tmp_path)), JsonFileKeyValueStore)

    def test_creates_sqlite_adapter(self, tmp_path: Path) -> None:
        adapter = StorageFactory.create(_make_settings("SQLite", tmp_path))
        assert isinstance(adapter, SqliteKeyValueStore)
        assert adapter.db_path == str(tmp_path / "payslip_ledger.db")

    def test_raises_for_unknown_engine(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown storage engine"):
            StorageFactory.create(_make_settings("redis", tmp_path))
