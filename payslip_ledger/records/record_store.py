import json
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import timezone
from typing import Any, TypeVar

from payslip_ledger.logging.logger import Log
from payslip_ledger.records.exceptions import RecordFormatError
from payslip_ledger.records.models import (
    PayslipRecord,
    PayslipStatus,
    SalaryDetails,
    UserProfile,
)
from payslip_ledger.records.serializer import (
    profile_from_dict,
    profile_to_dict,
    record_from_dict,
    record_to_dict,
)
from payslip_ledger.records.totals import recompute_totals
from payslip_ledger.storage.base import BaseKeyValueStore
from payslip_ledger.storage.exceptions import PersistenceError
from payslip_ledger.storage.locks import KeyLockRegistry

PAYSLIPS_KEY = "payslips"
USER_PROFILE_KEY = "user_profile"
USER_SETTINGS_KEY = "user_settings"

ALL_KEYS: tuple[str, ...] = (PAYSLIPS_KEY, USER_PROFILE_KEY, USER_SETTINGS_KEY)

T = TypeVar("T")


def sort_newest_first(records: list[PayslipRecord]) -> list[PayslipRecord]:
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


class RecordStore:
    """Owns the payslip collection, the user profile and the settings blob.

    Every mutation reads the whole collection, applies the change and writes
    the whole collection back while holding the lock for that storage key.
    Missing ids on delete/update are no-ops.
    """

    def __init__(
        self,
        adapter: BaseKeyValueStore,
        *,
        recompute_totals: bool = True,
        locks: KeyLockRegistry | None = None,
    ) -> None:
        self._adapter = adapter
        self._recompute_totals = recompute_totals
        self._locks = locks or KeyLockRegistry()

    # -- payslips ---------------------------------------------------------

    def upsert_payslip(self, record: PayslipRecord) -> None:
        """Replace the record with the same id, or prepend it when new."""
        record = self._prepare(record)
        with self._locks.hold(PAYSLIPS_KEY):
            payslips = self._read_payslips()
            self._upsert_into(payslips, record)
            self._write_payslips(payslips)
        Log.debug(f"Upserted payslip {record.id} ({record.status.value})")

    def list_payslips(self) -> list[PayslipRecord]:
        """All records, newest first."""
        with self._locks.hold(PAYSLIPS_KEY):
            return sort_newest_first(self._read_payslips())

    def get_payslip(self, payslip_id: str) -> PayslipRecord | None:
        return next((p for p in self.list_payslips() if p.id == payslip_id), None)

    def delete_payslip(self, payslip_id: str) -> None:
        with self._locks.hold(PAYSLIPS_KEY):
            payslips = self._read_payslips()
            remaining = [p for p in payslips if p.id != payslip_id]
            if len(remaining) == len(payslips):
                Log.debug(f"Payslip {payslip_id} not found, nothing to delete")
                return
            self._write_payslips(remaining)
        Log.info(f"Deleted payslip {payslip_id}")

    def update_salary_details(self, payslip_id: str, details: SalaryDetails) -> None:
        """Replace only the salary details of a record."""
        self._update_one(
            payslip_id,
            lambda p: replace(p, salary_details=details),
        )

    def update_payslip_status(
        self,
        payslip_id: str,
        status: PayslipStatus,
        details: SalaryDetails | None = None,
    ) -> None:
        """Replace the status and, when given, the salary details."""
        status = PayslipStatus(status)

        def apply(p: PayslipRecord) -> PayslipRecord:
            if details is None:
                return replace(p, status=status)
            return replace(p, status=status, salary_details=details)

        self._update_one(payslip_id, apply)

    # -- profile and settings -------------------------------------------

    def save_profile(self, profile: UserProfile) -> None:
        with self._locks.hold(USER_PROFILE_KEY):
            self._set(USER_PROFILE_KEY, json.dumps(profile_to_dict(profile)))

    def get_profile(self) -> UserProfile | None:
        with self._locks.hold(USER_PROFILE_KEY):
            raw = self._get(USER_PROFILE_KEY)
        if raw is None:
            return None
        return self._decode(USER_PROFILE_KEY, raw, profile_from_dict)

    def save_settings(self, settings: Any) -> None:
        """Store an opaque JSON-serializable settings blob."""
        with self._locks.hold(USER_SETTINGS_KEY):
            self._set(USER_SETTINGS_KEY, json.dumps(settings))

    def get_settings(self) -> Any:
        with self._locks.hold(USER_SETTINGS_KEY):
            raw = self._get(USER_SETTINGS_KEY)
        if raw is None:
            return None
        return self._decode(USER_SETTINGS_KEY, raw, lambda data: data)

    def get_all_data(self) -> dict[str, Any]:
        return {
            "payslips": self.list_payslips(),
            "profile": self.get_profile(),
            "settings": self.get_settings(),
        }

    def clear_all(self) -> None:
        """Remove payslips, profile and settings in a single adapter request."""
        with self._locks.hold(*ALL_KEYS):
            try:
                self._adapter.multi_remove(list(ALL_KEYS))
            except PersistenceError as exc:
                Log.error(f"Failed to clear stored data: {exc}")
                raise
            except Exception as exc:
                Log.error(f"Failed to clear stored data: {exc}")
                raise PersistenceError(f"Failed to clear stored data: {exc}") from exc
        Log.info("Cleared all payslips, profile and settings")

    def merge(
        self,
        payslips: Iterable[PayslipRecord],
        profile: UserProfile | None = None,
    ) -> None:
        """Upsert many records by id, in order, and optionally replace the profile.

        The merge is staged in memory: the collection is read once and written
        once, then the profile is written. If the profile write fails, the
        payslips blob read on entry is written back. Either way the first
        error is the one raised.
        """
        with self._locks.hold(PAYSLIPS_KEY, USER_PROFILE_KEY):
            previous = self._get(PAYSLIPS_KEY)
            merged = self._read_payslips()
            count = 0
            for record in payslips:
                self._upsert_into(merged, self._prepare(record))
                count += 1
            self._write_payslips(merged)
            if profile is None:
                Log.info(f"Merged {count} payslips")
                return
            try:
                self._set(USER_PROFILE_KEY, json.dumps(profile_to_dict(profile)))
            except PersistenceError:
                self._restore_blob(PAYSLIPS_KEY, previous)
                raise
        Log.info(f"Merged {count} payslips and the profile")

    # -- internals --------------------------------------------------------

    def _prepare(self, record: PayslipRecord) -> PayslipRecord:
        if record.timestamp.tzinfo is None:
            record = replace(record, timestamp=record.timestamp.replace(tzinfo=timezone.utc))
        if self._recompute_totals and record.salary_details is not None:
            record = replace(record, salary_details=recompute_totals(record.salary_details))
        return record

    @staticmethod
    def _upsert_into(payslips: list[PayslipRecord], record: PayslipRecord) -> None:
        index = next((i for i, p in enumerate(payslips) if p.id == record.id), None)
        if index is None:
            payslips.insert(0, record)
        else:
            payslips[index] = record

    def _update_one(
        self,
        payslip_id: str,
        change: Callable[[PayslipRecord], PayslipRecord],
    ) -> None:
        with self._locks.hold(PAYSLIPS_KEY):
            payslips = self._read_payslips()
            for i, payslip in enumerate(payslips):
                if payslip.id == payslip_id:
                    payslips[i] = self._prepare(change(payslip))
                    break
            else:
                Log.debug(f"Payslip {payslip_id} not found, nothing to update")
                return
            self._write_payslips(payslips)

    def _read_payslips(self) -> list[PayslipRecord]:
        raw = self._get(PAYSLIPS_KEY)
        if raw is None:
            return []

        def build(data: Any) -> list[PayslipRecord]:
            if not isinstance(data, list):
                raise RecordFormatError(PAYSLIPS_KEY, "must be a JSON array")
            return [record_from_dict(item, f"payslips[{i}]") for i, item in enumerate(data)]

        return self._decode(PAYSLIPS_KEY, raw, build)

    def _write_payslips(self, payslips: list[PayslipRecord]) -> None:
        ordered = sort_newest_first(payslips)
        self._set(PAYSLIPS_KEY, json.dumps([record_to_dict(p) for p in ordered]))

    @staticmethod
    def _decode(key: str, raw: str, build: Callable[[Any], T]) -> T:
        try:
            return build(json.loads(raw))
        except (json.JSONDecodeError, RecordFormatError) as exc:
            Log.error(f"Stored data under '{key}' is corrupt: {exc}")
            raise PersistenceError(f"Stored data under '{key}' is corrupt: {exc}") from exc

    def _restore_blob(self, key: str, raw: str | None) -> None:
        """Best-effort write-back of a blob; failures are logged, not raised."""
        Log.warning(f"Rolling back '{key}' to its previous state")
        try:
            if raw is None:
                self._remove(key)
            else:
                self._set(key, raw)
        except PersistenceError as exc:
            Log.error(f"Rollback of '{key}' failed, stored data may be partly merged: {exc}")

    def _get(self, key: str) -> str | None:
        return self._call_adapter(f"read key '{key}'", lambda: self._adapter.get(key))

    def _set(self, key: str, value: str) -> None:
        self._call_adapter(f"write key '{key}'", lambda: self._adapter.set(key, value))

    def _remove(self, key: str) -> None:
        self._call_adapter(f"remove key '{key}'", lambda: self._adapter.remove(key))

    @staticmethod
    def _call_adapter(action: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except PersistenceError as exc:
            Log.error(f"Failed to {action}: {exc}")
            raise
        except Exception as exc:
            Log.error(f"Failed to {action}: {exc}")
            raise PersistenceError(f"Failed to {action}: {exc}") from exc
