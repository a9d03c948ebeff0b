"""Validates the AI response and builds SalaryDetails."""

from typing import Any

from payslip_ledger.aggregation.financial_year import canonical_month
from payslip_ledger.extraction.exceptions import ExtractionValidationError
from payslip_ledger.records.exceptions import RecordFormatError
from payslip_ledger.records.models import SalaryDetails
from payslip_ledger.records.serializer import SALARY_WIRE_KEYS, salary_details_from_dict

_MIN_YEAR = 1900
_MAX_YEAR = 2200


def validate_and_build(data: dict[str, Any]) -> SalaryDetails:
    """Build SalaryDetails from the parsed AI response.

    Raises:
        ExtractionValidationError: on any validation failure.
    """
    unknown = sorted(set(data) - set(SALARY_WIRE_KEYS.values()))
    if unknown:
        raise ExtractionValidationError(f"Unexpected fields in response: {unknown}")
    try:
        details = salary_details_from_dict(data, "response")
    except RecordFormatError as exc:
        raise ExtractionValidationError(str(exc)) from exc

    if details.month is not None and canonical_month(details.month) is None:
        raise ExtractionValidationError(f"'month' is not a month name: {details.month!r}")
    if details.year is not None and not _MIN_YEAR <= details.year <= _MAX_YEAR:
        raise ExtractionValidationError(f"'year' out of range: {details.year}")
    for attr, value in details.figures().items():
        if value is not None and value < 0:
            raise ExtractionValidationError(f"'{SALARY_WIRE_KEYS[attr]}' must not be negative")

    month = canonical_month(details.month)
    if month is not None and month != details.month:
        details = SalaryDetails(**{**_as_kwargs(details), "month": month})
    return details


def _as_kwargs(details: SalaryDetails) -> dict[str, Any]:
    return {"month": details.month, "year": details.year, **details.figures()}
