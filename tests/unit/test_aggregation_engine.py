from datetime import datetime, timedelta, timezone

import pytest

from payslip_ledger.aggregation.engine import AggregationEngine
from payslip_ledger.records.models import PayslipRecord, PayslipStatus, SalaryDetails, UserProfile
from payslip_ledger.records.record_store import RecordStore

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _details(month: str | None, year: int | None, **figures: float) -> SalaryDetails:
    defaults: dict[str, float] = {
        "basic_pay": 45000,
        "dearness_allowance": 9000,
        "house_rent_allowance": 5400,
        "medical_allowance": 2000,
        "travel_allowance": 1500,
        "provident_fund": 5400,
        "professional_tax": 200,
        "income_tax": 6290,
    }
    defaults.update(figures)
    return SalaryDetails(month=month, year=year, **defaults)


def _add(
    store: RecordStore,
    payslip_id: str,
    days: int,
    details: SalaryDetails | None,
) -> PayslipRecord:
    record = PayslipRecord(
        id=payslip_id,
        name=f"{payslip_id}.pdf",
        status=PayslipStatus.COMPLETED if details else PayslipStatus.ERROR,
        timestamp=BASE_TIME + timedelta(days=days),
        salary_details=details,
    )
    store.upsert_payslip(record)
    return record


@pytest.fixture()
def engine(store: RecordStore) -> AggregationEngine:
    return AggregationEngine(store)


class TestTotalEarnings:
    def test_sums_earning_components(self, store: RecordStore, engine: AggregationEngine) -> None:
        _add(store, "p1", 0, _details("March", 2024))
        assert engine.total_earnings() == 62900

    def test_absent_components_count_as_zero(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "p1", 0, SalaryDetails(month="April", year=2024, basic_pay=1000))
        _add(store, "p2", 1, SalaryDetails(month="May", year=2024, travel_allowance=250))
        assert engine.total_earnings() == 1250

    def test_records_without_details_contribute_nothing(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "p1", 0, _details("March", 2024))
        _add(store, "p2", 1, None)
        assert engine.total_earnings() == 62900

    def test_ignores_gross_salary_figure(self, adapter, engine: AggregationEngine) -> None:
        store = RecordStore(adapter, recompute_totals=False)
        _add(store, "p1", 0, SalaryDetails(basic_pay=100, gross_salary=999999))
        assert engine.total_earnings() == 100

    def test_empty_store(self, engine: AggregationEngine) -> None:
        assert engine.total_earnings() == 0


class TestMonthlyStats:
    def test_groups_by_month_and_year(self, store: RecordStore, engine: AggregationEngine) -> None:
        _add(store, "p1", 0, _details("March", 2024))
        _add(store, "p2", 1, _details("March", 2024, basic_pay=0))
        _add(store, "p3", 2, _details("April", 2024))
        stats = {s.month_key: s.total for s in engine.monthly_stats()}
        assert stats == {"March 2024": 62900 + 17900, "April 2024": 62900}

    def test_orders_by_reference_timestamp_descending(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "jan", 10, _details("January", 2024))
        _add(store, "feb", 20, _details("February", 2024))
        _add(store, "dec", 5, _details("December", 2023))
        assert [s.month_key for s in engine.monthly_stats()] == [
            "February 2024",
            "January 2024",
            "December 2023",
        ]

    def test_reference_timestamp_is_last_processed_record(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "newer", 10, _details("March", 2024))
        older = _add(store, "older", 3, _details("March", 2024))
        [summary] = engine.monthly_stats()
        assert summary.reference_timestamp == older.timestamp

    def test_skips_records_without_month_or_year(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "p1", 0, _details(None, 2024))
        _add(store, "p2", 1, _details("March", None))
        _add(store, "p3", 2, None)
        assert engine.monthly_stats() == []

    def test_to_dict(self, store: RecordStore, engine: AggregationEngine) -> None:
        _add(store, "p1", 0, _details("March", 2024))
        assert engine.monthly_stats()[0].to_dict() == {
            "month": "March 2024",
            "total": 62900,
            "timestamp": "2024-01-01T00:00:00.000Z",
        }


class TestGroupByFinancialYear:
    def test_fy_boundary(self, store: RecordStore, engine: AggregationEngine) -> None:
        _add(store, "jan", 0, _details("January", 2024))
        _add(store, "apr", 1, _details("April", 2024))
        groups = engine.group_by_financial_year()
        assert [p.id for p in groups["2023-2024"]] == ["jan"]
        assert [p.id for p in groups["2024-2025"]] == ["apr"]

    def test_orders_records_april_to_march(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        for days, month, year in [
            (0, "March", 2024),
            (1, "April", 2023),
            (2, "January", 2024),
            (3, "December", 2023),
            (4, "June", 2023),
        ]:
            _add(store, month, days, _details(month, year))
        groups = engine.group_by_financial_year()
        assert [p.id for p in groups["2023-2024"]] == [
            "April",
            "June",
            "December",
            "January",
            "March",
        ]

    def test_excludes_records_without_details(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "p1", 0, None)
        assert engine.group_by_financial_year() == {}

    def test_excludes_records_without_year(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "p1", 0, _details("April", None))
        assert engine.group_by_financial_year() == {}

    def test_newest_financial_year_first(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "a", 0, _details("May", 2022))
        _add(store, "b", 1, _details("May", 2024))
        _add(store, "c", 2, _details("May", 2023))
        assert engine.financial_years() == ["2024-2025", "2023-2024", "2022-2023"]


class TestAnnualReportData:
    def test_totals_for_financial_year(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        store.save_profile(UserProfile(name="Asha Rao"))
        _add(store, "apr", 0, _details("April", 2023))
        _add(store, "jan", 1, _details("January", 2024))
        _add(store, "other", 2, _details("April", 2024))

        report = engine.annual_report_data("2023-2024")

        assert report.financial_year == "2023-2024"
        assert report.employee_name == "Asha Rao"
        assert report.total_earnings == 2 * 62900
        assert report.total_deductions == 2 * 11890
        assert report.total_tax_deducted == 2 * 6290
        assert report.net_taxable_income == 2 * (62900 - 11890)
        assert [row.month for row in report.monthly_breakdown] == ["April", "January"]

    def test_breakdown_row_carries_figures(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "apr", 0, _details("April", 2023))
        row = engine.annual_report_data("2023-2024").monthly_breakdown[0]
        assert row.year == 2023
        assert row.basic_pay == 45000
        assert row.gross_salary == 62900
        assert row.net_salary == 51010

    def test_defaults_employee_name(self, store: RecordStore, engine: AggregationEngine) -> None:
        _add(store, "apr", 0, _details("April", 2023))
        assert engine.annual_report_data("2023-2024").employee_name == "Not Specified"

    def test_unknown_financial_year_gives_zero_report(self, engine: AggregationEngine) -> None:
        report = engine.annual_report_data("1999-2000")
        assert report.total_earnings == 0
        assert report.monthly_breakdown == []

    def test_to_dict_uses_renderer_keys(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "apr", 0, _details("April", 2023))
        payload = engine.annual_report_data("2023-2024").to_dict()
        assert set(payload) == {
            "financialYear",
            "employeeName",
            "totalEarnings",
            "totalDeductions",
            "totalTaxDeducted",
            "netTaxableIncome",
            "monthlyBreakdown",
        }
        assert payload["monthlyBreakdown"][0]["houseRentAllowance"] == 5400

    def test_annual_reports_cover_every_year(
        self, store: RecordStore, engine: AggregationEngine
    ) -> None:
        _add(store, "a", 0, _details("April", 2023))
        _add(store, "b", 1, _details("April", 2024))
        assert [r.financial_year for r in engine.annual_reports()] == ["2024-2025", "2023-2024"]
