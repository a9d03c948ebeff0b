import json
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from payslip_ledger.backup.exceptions import BackupError, SnapshotValidationError
from payslip_ledger.backup.models import BACKUP_FILE_EXTENSION, SNAPSHOT_VERSION, BackupSnapshot
from payslip_ledger.backup.validator import validate_and_build
from payslip_ledger.logging.logger import Log
from payslip_ledger.records.record_store import RecordStore
from payslip_ledger.records.serializer import format_timestamp, profile_to_dict, record_to_dict

BACKUP_FILE_PREFIX = "TaxCalculator_Backup"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def backup_file_name(now: datetime) -> str:
    """e.g. TaxCalculator_Backup_3-15-2024.rbs, dated in local time."""
    local = now.astimezone()
    return f"{BACKUP_FILE_PREFIX}_{local.month}-{local.day}-{local.year}{BACKUP_FILE_EXTENSION}"


class SnapshotCodec:
    """Exports the store as a versioned snapshot and merges snapshots back in."""

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    def export_snapshot(self) -> BackupSnapshot:
        return BackupSnapshot(
            version=SNAPSHOT_VERSION,
            timestamp=self._clock(),
            payslips=self._store.list_payslips(),
            profile=self._store.get_profile(),
        )

    @staticmethod
    def validate_snapshot(candidate: Any) -> BackupSnapshot:
        """Structural check of a decoded document; raises SnapshotValidationError."""
        return validate_and_build(candidate)

    def apply_snapshot(self, snapshot: BackupSnapshot) -> None:
        """Merge the snapshot into the store, record by record, in array order.

        Records whose ids are not in the snapshot are kept. The merge is
        staged in memory and written at the end, so a failed write leaves the
        store as it was before the restore began.
        """
        Log.info(
            f"Restoring {len(snapshot.payslips)} payslips from backup "
            f"taken at {format_timestamp(snapshot.timestamp)}"
        )
        self._store.merge(snapshot.payslips, snapshot.profile)
        Log.info("Backup restored")

    @staticmethod
    def to_dict(snapshot: BackupSnapshot) -> dict[str, Any]:
        return {
            "version": snapshot.version,
            "timestamp": format_timestamp(snapshot.timestamp),
            "payslips": [record_to_dict(p) for p in snapshot.payslips],
            "profile": profile_to_dict(snapshot.profile) if snapshot.profile else None,
        }

    def dumps(self, snapshot: BackupSnapshot) -> str:
        return json.dumps(self.to_dict(snapshot), ensure_ascii=False)

    def loads(self, text: str) -> BackupSnapshot:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SnapshotValidationError("<document>", f"not valid JSON: {exc}") from exc
        return self.validate_snapshot(data)

    def restore(self, text: str) -> BackupSnapshot:
        """Validate a backup document, then apply it."""
        snapshot = self.loads(text)
        self.apply_snapshot(snapshot)
        return snapshot

    def write_backup(self, directory: Path) -> Path:
        """Export the store to a new backup file inside directory."""
        snapshot = self.export_snapshot()
        path = Path(directory) / backup_file_name(snapshot.timestamp)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.dumps(snapshot), encoding="utf-8")
        except OSError as exc:
            raise BackupError(f"Failed to write backup {path}: {exc}") from exc
        Log.info(f"Backup written to {path} ({len(snapshot.payslips)} payslips)")
        return path

    def read_backup(self, path: Path) -> BackupSnapshot:
        path = Path(path)
        if path.suffix.lower() != BACKUP_FILE_EXTENSION:
            raise BackupError(f"Please select a valid {BACKUP_FILE_EXTENSION} backup file")
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise BackupError(f"Failed to read backup {path}: {exc}") from exc
        return self.loads(text)
