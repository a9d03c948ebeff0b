import sqlite3
import threading
from collections.abc import Iterable
from pathlib import Path

from payslip_ledger.storage.base import BaseKeyValueStore
from payslip_ledger.storage.exceptions import PersistenceError

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""


class SqliteKeyValueStore(BaseKeyValueStore):
    """Key-value adapter on a single sqlite table.

    multi_remove runs in one transaction, so clearing several keys is
    all-or-nothing.
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = str(db_path)
        self.conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def connect(self) -> sqlite3.Connection:
        """Open the database and create the table if needed."""
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.execute(_SCHEMA)
            conn.commit()
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"Failed to open sqlite store {self.db_path}: {exc}") from exc
        self.conn = conn
        return conn

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "SqliteKeyValueStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get(self, key: str) -> str | None:
        with self._conn_lock:
            try:
                row = self._connection().execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as exc:
                raise PersistenceError(f"Failed to read key '{key}': {exc}") from exc
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        with self._conn_lock:
            conn = self._connection()
            try:
                with conn:
                    conn.execute(
                        """
                        INSERT INTO kv_store (key, value) VALUES (?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value
                        """,
                        (key, value),
                    )
            except sqlite3.Error as exc:
                raise PersistenceError(f"Failed to write key '{key}': {exc}") from exc

    def remove(self, key: str) -> None:
        self.multi_remove([key])

    def multi_remove(self, keys: Iterable[str]) -> None:
        key_list = list(keys)
        with self._conn_lock:
            conn = self._connection()
            try:
                with conn:
                    conn.executemany(
                        "DELETE FROM kv_store WHERE key = ?",
                        [(key,) for key in key_list],
                    )
            except sqlite3.Error as exc:
                raise PersistenceError(f"Failed to remove keys {key_list}: {exc}") from exc

    def _connection(self) -> sqlite3.Connection:
        return self.conn if self.conn is not None else self.connect()
