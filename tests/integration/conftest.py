from collections.abc import Generator
from pathlib import Path

import pytest

from payslip_ledger.records.record_store import RecordStore
from payslip_ledger.storage.file_adapter import JsonFileKeyValueStore
from payslip_ledger.storage.sqlite_adapter import SqliteKeyValueStore


@pytest.fixture()
def file_adapter(tmp_path: Path) -> JsonFileKeyValueStore:
    return JsonFileKeyValueStore(tmp_path / "store")


@pytest.fixture()
def sqlite_adapter(tmp_path: Path) -> Generator[SqliteKeyValueStore, None, None]:
    with SqliteKeyValueStore(tmp_path / "db" / "payslip_ledger.db") as adapter:
        yield adapter


@pytest.fixture()
def file_store(file_adapter: JsonFileKeyValueStore) -> RecordStore:
    return RecordStore(file_adapter)


@pytest.fixture()
def sqlite_store(sqlite_adapter: SqliteKeyValueStore) -> RecordStore:
    return RecordStore(sqlite_adapter)
