from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum


class PayslipStatus(str, Enum):
    """Processing state of an uploaded payslip."""

    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


EARNING_FIELDS: tuple[str, ...] = (
    "basic_pay",
    "dearness_allowance",
    "house_rent_allowance",
    "medical_allowance",
    "travel_allowance",
)

DEDUCTION_FIELDS: tuple[str, ...] = (
    "provident_fund",
    "professional_tax",
    "income_tax",
)


@dataclass(frozen=True)
class SalaryDetails:
    """Figures extracted from (or entered for) one payslip.

    Every figure is optional; None means "not known yet".
    """

    month: str | None = None
    year: int | None = None
    basic_pay: float | None = None
    dearness_allowance: float | None = None
    house_rent_allowance: float | None = None
    medical_allowance: float | None = None
    travel_allowance: float | None = None
    gross_salary: float | None = None
    provident_fund: float | None = None
    professional_tax: float | None = None
    income_tax: float | None = None
    total_deductions: float | None = None
    net_salary: float | None = None

    @property
    def earnings(self) -> float:
        """Sum of the earning components, absent ones counted as 0."""
        return sum(getattr(self, name) or 0 for name in EARNING_FIELDS)

    @property
    def deductions(self) -> float:
        """Sum of the deduction components, absent ones counted as 0."""
        return sum(getattr(self, name) or 0 for name in DEDUCTION_FIELDS)

    def figures(self) -> dict[str, float | None]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in ("month", "year")
        }


@dataclass(frozen=True)
class PayslipRecord:
    """One uploaded payslip document."""

    id: str
    name: str
    status: PayslipStatus
    timestamp: datetime
    size: str | None = None
    page_count: int | None = None
    salary_details: SalaryDetails | None = None


@dataclass(frozen=True)
class UserProfile:
    name: str
