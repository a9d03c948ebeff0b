from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from payslip_ledger.records.serializer import format_timestamp


@dataclass(frozen=True)
class MonthlySummary:
    """Earnings of every payslip sharing one month and year."""

    month_key: str
    total: float
    reference_timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month_key,
            "total": self.total,
            "timestamp": format_timestamp(self.reference_timestamp),
        }


@dataclass(frozen=True)
class MonthlyBreakdownRow:
    month: str | None
    year: int | None
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

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "year": self.year,
            "grossSalary": self.gross_salary,
            "basicPay": self.basic_pay,
            "dearnessAllowance": self.dearness_allowance,
            "houseRentAllowance": self.house_rent_allowance,
            "medicalAllowance": self.medical_allowance,
            "travelAllowance": self.travel_allowance,
            "providentFund": self.provident_fund,
            "professionalTax": self.professional_tax,
            "incomeTax": self.income_tax,
            "totalDeductions": self.total_deductions,
            "netSalary": self.net_salary,
        }


@dataclass(frozen=True)
class AnnualReport:
    """Everything the tax-report renderer needs for one financial year."""

    financial_year: str
    employee_name: str
    total_earnings: float
    total_deductions: float
    total_tax_deducted: float
    net_taxable_income: float
    monthly_breakdown: list[MonthlyBreakdownRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "financialYear": self.financial_year,
            "employeeName": self.employee_name,
            "totalEarnings": self.total_earnings,
            "totalDeductions": self.total_deductions,
            "totalTaxDeducted": self.total_tax_deducted,
            "netTaxableIncome": self.net_taxable_income,
            "monthlyBreakdown": [row.to_dict() for row in self.monthly_breakdown],
        }
