from dataclasses import replace

from payslip_ledger.records.models import DEDUCTION_FIELDS, EARNING_FIELDS, SalaryDetails


def recompute_totals(details: SalaryDetails) -> SalaryDetails:
    """Rebuild gross, total deductions and net from their components.

    A total is only recomputed when at least one of its components is known;
    otherwise the stored figure is kept as supplied.
    """
    gross = details.gross_salary
    if any(getattr(details, name) is not None for name in EARNING_FIELDS):
        gross = details.earnings

    total_deductions = details.total_deductions
    if any(getattr(details, name) is not None for name in DEDUCTION_FIELDS):
        total_deductions = details.deductions

    net = details.net_salary
    if gross is not None and total_deductions is not None:
        net = gross - total_deductions

    return replace(
        details,
        gross_salary=gross,
        total_deductions=total_deductions,
        net_salary=net,
    )
