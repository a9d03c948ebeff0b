"""Builds a BackupSnapshot from a decoded backup document."""

from typing import Any

from payslip_ledger.backup.exceptions import SnapshotValidationError
from payslip_ledger.backup.models import BackupSnapshot
from payslip_ledger.records.exceptions import RecordFormatError
from payslip_ledger.records.models import PayslipRecord, UserProfile
from payslip_ledger.records.serializer import (
    parse_timestamp,
    profile_from_dict,
    record_from_dict,
)


def validate_and_build(data: Any) -> BackupSnapshot:
    """Validate a decoded backup document and build the snapshot.

    Requires `version`, `timestamp` and a `payslips` list; `profile` may be
    absent or null. Each payslip must also decode into a record so that a
    bad entry is caught before anything is written. This is stricter than a
    shape check: a backup holding, say, a record without `name` or with an
    unknown status such as "pending" is rejected as a whole.

    Raises:
        SnapshotValidationError: on the first missing or invalid field.
    """
    if not isinstance(data, dict):
        raise SnapshotValidationError("<document>", "must be a JSON object")
    version = _build_version(data.get("version"))
    timestamp = data.get("timestamp")
    if not timestamp:
        raise SnapshotValidationError("timestamp", "is required")
    try:
        parsed_timestamp = parse_timestamp(timestamp)
    except RecordFormatError as exc:
        raise SnapshotValidationError(exc.field, str(exc)) from exc
    payslips = _build_payslips(data.get("payslips"))
    profile = _build_profile(data.get("profile"))
    return BackupSnapshot(
        version=version,
        timestamp=parsed_timestamp,
        payslips=payslips,
        profile=profile,
    )


def _build_version(raw: Any) -> str:
    if raw is None or raw == "":
        raise SnapshotValidationError("version", "is required")
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        raise SnapshotValidationError("version", "must be a string")
    return str(raw)


def _build_payslips(raw: Any) -> list[PayslipRecord]:
    if raw is None:
        raise SnapshotValidationError("payslips", "is required")
    if not isinstance(raw, list):
        raise SnapshotValidationError("payslips", "must be a list")
    payslips: list[PayslipRecord] = []
    for i, item in enumerate(raw):
        try:
            payslips.append(record_from_dict(item, f"payslips[{i}]"))
        except RecordFormatError as exc:
            raise SnapshotValidationError(exc.field, str(exc)) from exc
    return payslips


def _build_profile(raw: Any) -> UserProfile | None:
    if raw is None:
        return None
    try:
        return profile_from_dict(raw)
    except RecordFormatError as exc:
        raise SnapshotValidationError(exc.field, str(exc)) from exc
