"""Simulated extractor for local development and tests.

Month and year come from file names shaped like `Salary_March_2024.pdf`;
the figures follow a fixed salary structure.
"""

import math
import random
from datetime import date

from payslip_ledger.extraction.base import BaseSalaryExtractor
from payslip_ledger.records.models import SalaryDetails
from payslip_ledger.upload.models import SourceDocument

BASE_SALARY = 45000
MAX_JITTER = 5000
DA_RATE = 0.2
HRA_RATE = 0.12
MEDICAL_ALLOWANCE = 2000
TRAVEL_ALLOWANCE = 1500
PF_RATE = 0.12
PROFESSIONAL_TAX = 200
INCOME_TAX_RATE = 0.1


class ExampleSalaryExtractor(BaseSalaryExtractor):
    """No I/O. With a seed, basic pay gets up to 5000 of random jitter."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed) if seed is not None else None

    def extract(self, document: SourceDocument) -> SalaryDetails:
        month, year = parse_period_from_name(document.name)
        basic = BASE_SALARY + (self._random.randrange(MAX_JITTER) if self._random else 0)
        dearness = math.floor(basic * DA_RATE)
        house_rent = math.floor(basic * HRA_RATE)
        gross = basic + dearness + house_rent + MEDICAL_ALLOWANCE + TRAVEL_ALLOWANCE
        provident_fund = math.floor(basic * PF_RATE)
        income_tax = math.floor(gross * INCOME_TAX_RATE)
        total_deductions = provident_fund + PROFESSIONAL_TAX + income_tax
        return SalaryDetails(
            month=month,
            year=year,
            basic_pay=basic,
            dearness_allowance=dearness,
            house_rent_allowance=house_rent,
            medical_allowance=MEDICAL_ALLOWANCE,
            travel_allowance=TRAVEL_ALLOWANCE,
            gross_salary=gross,
            provident_fund=provident_fund,
            professional_tax=PROFESSIONAL_TAX,
            income_tax=income_tax,
            total_deductions=total_deductions,
            net_salary=gross - total_deductions,
        )


def parse_period_from_name(file_name: str) -> tuple[str, int]:
    """'Salary_March_2024.pdf' -> ('March', 2024).

    Missing parts fall back to 'Unknown' and the current year.
    """
    stem = file_name[:-4] if file_name.lower().endswith(".pdf") else file_name
    parts = stem.split("_")
    month = parts[1] if len(parts) > 1 and parts[1] else "Unknown"
    year_part = parts[2].strip() if len(parts) > 2 else ""
    year = int(year_part) if year_part.isdigit() else date.today().year
    return month, year
