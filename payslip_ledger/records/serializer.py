"""Conversion between domain records and their JSON wire form.

The wire form uses camelCase keys so that existing `.rbs` backups and
stored blobs load unchanged.
"""

from datetime import datetime, timezone
from typing import Any

from payslip_ledger.records.exceptions import RecordFormatError
from payslip_ledger.records.models import (
    PayslipRecord,
    PayslipStatus,
    SalaryDetails,
    UserProfile,
)

SALARY_WIRE_KEYS: dict[str, str] = {
    "month": "month",
    "year": "year",
    "basic_pay": "basicPay",
    "dearness_allowance": "dearnessAllowance",
    "house_rent_allowance": "houseRentAllowance",
    "medical_allowance": "medicalAllowance",
    "travel_allowance": "travelAllowance",
    "gross_salary": "grossSalary",
    "provident_fund": "providentFund",
    "professional_tax": "professionalTax",
    "income_tax": "incomeTax",
    "total_deductions": "totalDeductions",
    "net_salary": "netSalary",
}

_VALID_STATUSES = frozenset(s.value for s in PayslipStatus)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a 'Z' suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    iso = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z")


def parse_timestamp(raw: Any, field: str = "timestamp") -> datetime:
    """Accept ISO-8601 strings, epoch milliseconds or datetimes.

    Naive values are taken to be UTC.
    """
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            parsed = datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise RecordFormatError(field, f"epoch value out of range: {raw}") from exc
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise RecordFormatError(field, f"not an ISO-8601 timestamp: {raw!r}") from exc
    else:
        raise RecordFormatError(field, "must be an ISO-8601 string or epoch milliseconds")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def salary_details_to_dict(details: SalaryDetails) -> dict[str, Any]:
    """Only known figures are written; absent ones are omitted."""
    payload: dict[str, Any] = {}
    for attr, key in SALARY_WIRE_KEYS.items():
        value = getattr(details, attr)
        if value is not None:
            payload[key] = value
    return payload


def salary_details_from_dict(raw: Any, field: str = "salaryDetails") -> SalaryDetails:
    if not isinstance(raw, dict):
        raise RecordFormatError(field, "must be an object")
    values: dict[str, Any] = {}
    for attr, key in SALARY_WIRE_KEYS.items():
        value = raw.get(key)
        if value is None:
            continue
        if attr == "month":
            if not isinstance(value, str):
                raise RecordFormatError(f"{field}.{key}", "must be a string")
        elif attr == "year":
            value = _coerce_year(value, f"{field}.{key}")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise RecordFormatError(f"{field}.{key}", "must be a number")
        values[attr] = value
    return SalaryDetails(**values)


def record_to_dict(record: PayslipRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": record.id,
        "name": record.name,
        "status": record.status.value,
        "timestamp": format_timestamp(record.timestamp),
    }
    if record.size is not None:
        payload["size"] = record.size
    if record.page_count is not None:
        payload["pages"] = record.page_count
    if record.salary_details is not None:
        payload["salaryDetails"] = salary_details_to_dict(record.salary_details)
    return payload


def record_from_dict(raw: Any, field: str = "payslip") -> PayslipRecord:
    """Build a PayslipRecord from its wire form.

    Raises:
        RecordFormatError: naming the first missing or invalid field.
    """
    if not isinstance(raw, dict):
        raise RecordFormatError(field, "must be an object")

    record_id = raw.get("id")
    if not isinstance(record_id, str) or not record_id:
        raise RecordFormatError(f"{field}.id", "must be a non-empty string")

    name = raw.get("name")
    if not isinstance(name, str):
        raise RecordFormatError(f"{field}.name", "must be a string")

    status = raw.get("status")
    if status not in _VALID_STATUSES:
        raise RecordFormatError(
            f"{field}.status", f"must be one of {sorted(_VALID_STATUSES)}, got {status!r}"
        )

    if "timestamp" not in raw:
        raise RecordFormatError(f"{field}.timestamp", "is required")
    timestamp = parse_timestamp(raw["timestamp"], f"{field}.timestamp")

    size = raw.get("size")
    if size is not None and not isinstance(size, str):
        if isinstance(size, bool) or not isinstance(size, (int, float)):
            raise RecordFormatError(f"{field}.size", "must be a string or number")
        size = str(size)

    page_count = raw.get("pages", raw.get("pageCount"))
    if page_count is not None and (isinstance(page_count, bool) or not isinstance(page_count, int)):
        raise RecordFormatError(f"{field}.pages", "must be an integer")

    details_raw = raw.get("salaryDetails")
    details = (
        salary_details_from_dict(details_raw, f"{field}.salaryDetails")
        if details_raw is not None
        else None
    )

    return PayslipRecord(
        id=record_id,
        name=name,
        status=PayslipStatus(status),
        timestamp=timestamp,
        size=size,
        page_count=page_count,
        salary_details=details,
    )


def profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    return {"name": profile.name}


def profile_from_dict(raw: Any, field: str = "profile") -> UserProfile:
    if not isinstance(raw, dict):
        raise RecordFormatError(field, "must be an object")
    name = raw.get("name")
    if not isinstance(name, str):
        raise RecordFormatError(f"{field}.name", "must be a string")
    return UserProfile(name=name)


def _coerce_year(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise RecordFormatError(field, "must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise RecordFormatError(field, "must be an integer")
