from payslip_ledger.aggregation.financial_year import (
    financial_year_label,
    fy_month_index,
    fy_start_year,
)
from payslip_ledger.aggregation.models import AnnualReport, MonthlyBreakdownRow, MonthlySummary
from payslip_ledger.logging.logger import Log
from payslip_ledger.records.models import PayslipRecord, SalaryDetails
from payslip_ledger.records.record_store import RecordStore

DEFAULT_EMPLOYEE_NAME = "Not Specified"


class AggregationEngine:
    """Derived figures over the store's current contents.

    Nothing is cached: each call re-reads the store.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def total_earnings(self) -> float:
        return sum(
            p.salary_details.earnings
            for p in self._store.list_payslips()
            if p.salary_details is not None
        )

    def monthly_stats(self) -> list[MonthlySummary]:
        """Earnings per "<month> <year>", newest reference timestamp first.

        The reference timestamp of a group is the timestamp of the last
        record processed for it, in list_payslips() order.
        """
        totals: dict[str, float] = {}
        references: dict[str, PayslipRecord] = {}
        for payslip in self._store.list_payslips():
            details = payslip.salary_details
            if details is None or not details.month or not details.year:
                continue
            key = f"{details.month} {details.year}"
            totals[key] = totals.get(key, 0) + details.earnings
            references[key] = payslip

        summaries = [
            MonthlySummary(
                month_key=key,
                total=total,
                reference_timestamp=references[key].timestamp,
            )
            for key, total in totals.items()
        ]
        return sorted(summaries, key=lambda s: s.reference_timestamp, reverse=True)

    def group_by_financial_year(self) -> dict[str, list[PayslipRecord]]:
        """FY label -> records ordered April..March, newest FY first."""
        groups: dict[str, list[PayslipRecord]] = {}
        for payslip in self._store.list_payslips():
            details = payslip.salary_details
            if details is None:
                continue
            if details.year is None:
                Log.debug(f"Payslip {payslip.id} has no year, left out of FY grouping")
                continue
            label = financial_year_label(details.month, details.year)
            groups.setdefault(label, []).append(payslip)

        return {
            label: sorted(
                groups[label],
                key=lambda p: fy_month_index(p.salary_details.month if p.salary_details else None),
            )
            for label in sorted(groups, key=fy_start_year, reverse=True)
        }

    def financial_years(self) -> list[str]:
        return list(self.group_by_financial_year())

    def annual_report_data(self, financial_year: str) -> AnnualReport:
        """Totals and monthly breakdown for one FY.

        A financial year with no payslips yields a report of zeros.
        """
        payslips = self.group_by_financial_year().get(financial_year, [])
        return self._build_report(financial_year, payslips, self._employee_name())

    def annual_reports(self) -> list[AnnualReport]:
        employee_name = self._employee_name()
        return [
            self._build_report(label, payslips, employee_name)
            for label, payslips in self.group_by_financial_year().items()
        ]

    def _employee_name(self) -> str:
        profile = self._store.get_profile()
        return profile.name if profile and profile.name else DEFAULT_EMPLOYEE_NAME

    @staticmethod
    def _build_report(
        financial_year: str,
        payslips: list[PayslipRecord],
        employee_name: str,
    ) -> AnnualReport:
        details = [p.salary_details for p in payslips if p.salary_details is not None]
        total_earnings = sum(d.earnings for d in details)
        total_deductions = sum(d.deductions for d in details)
        return AnnualReport(
            financial_year=financial_year,
            employee_name=employee_name,
            total_earnings=total_earnings,
            total_deductions=total_deductions,
            total_tax_deducted=sum(d.income_tax or 0 for d in details),
            net_taxable_income=total_earnings - total_deductions,
            monthly_breakdown=[_breakdown_row(d) for d in details],
        )


def _breakdown_row(details: SalaryDetails) -> MonthlyBreakdownRow:
    return MonthlyBreakdownRow(month=details.month, year=details.year, **details.figures())
