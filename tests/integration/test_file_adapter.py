from pathlib import Path

import pytest

from payslip_ledger.storage.exceptions import PersistenceError
from payslip_ledger.storage.file_adapter import JsonFileKeyValueStore


class TestJsonFileKeyValueStore:
    def test_missing_key_is_none(self, file_adapter: JsonFileKeyValueStore) -> None:
        assert file_adapter.get("payslips") is None

    def test_set_then_get(self, file_adapter: JsonFileKeyValueStore, tmp_path: Path) -> None:
        file_adapter.set("payslips", "[]")
        assert file_adapter.get("payslips") == "[]"
        assert (tmp_path / "store" / "payslips.json").read_text(encoding="utf-8") == "[]"

    def test_overwrite_leaves_no_temp_files(
        self, file_adapter: JsonFileKeyValueStore, tmp_path: Path
    ) -> None:
        file_adapter.set("user_profile", '{"name": "A"}')
        file_adapter.set("user_profile", '{"name": "B"}')
        assert file_adapter.get("user_profile") == '{"name": "B"}'
        assert [p.name for p in (tmp_path / "store").iterdir()] == ["user_profile.json"]

    def test_values_survive_a_new_adapter(self, tmp_path: Path) -> None:
        JsonFileKeyValueStore(tmp_path / "store").set("payslips", "[1]")
        assert JsonFileKeyValueStore(tmp_path / "store").get("payslips") == "[1]"

    def test_remove_is_idempotent(self, file_adapter: JsonFileKeyValueStore) -> None:
        file_adapter.set("payslips", "[]")
        file_adapter.remove("payslips")
        file_adapter.remove("payslips")
        assert file_adapter.get("payslips") is None

    def test_multi_remove(self, file_adapter: JsonFileKeyValueStore) -> None:
        file_adapter.set("payslips", "[]")
        file_adapter.set("user_profile", "{}")
        file_adapter.set("user_settings", "{}")
        file_adapter.multi_remove(["payslips", "user_profile"])
        assert file_adapter.get("payslips") is None
        assert file_adapter.get("user_profile") is None
        assert file_adapter.get("user_settings") == "{}"

    @pytest.mark.parametrize("key", ["", "../escape", ".hidden", "a\\b"])
    def test_rejects_invalid_keys(self, file_adapter: JsonFileKeyValueStore, key: str) -> None:
        with pytest.raises(PersistenceError, match="Invalid storage key"):
            file_adapter.set(key, "x")
