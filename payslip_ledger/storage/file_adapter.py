import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from payslip_ledger.storage.base import BaseKeyValueStore
from payslip_ledger.storage.exceptions import PersistenceError


class JsonFileKeyValueStore(BaseKeyValueStore):
    """Stores each key as `<root>/<key>.json`.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so a crash never leaves a half-written blob.
    """

    SUFFIX = ".json"

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"Failed to read key '{key}': {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Failed to write key '{key}': {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Failed to remove key '{key}': {exc}") from exc

    def multi_remove(self, keys: Iterable[str]) -> None:
        failed: list[str] = []
        for key in keys:
            try:
                self.remove(key)
            except PersistenceError:
                failed.append(key)
        if failed:
            raise PersistenceError(f"Failed to remove keys: {failed}")

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise PersistenceError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}{self.SUFFIX}"
