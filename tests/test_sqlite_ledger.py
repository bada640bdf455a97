"""Tests for the SQLite sales ledger."""

from datetime import date, datetime

import pytest

from seller_tax_documents.domain.documents import FinancialSummary
from seller_tax_documents.domain.periods import annual_period, quarter_periods
from seller_tax_documents.domain.sales import Sale, SaleState
from seller_tax_documents.exceptions import LedgerQueryError
from seller_tax_documents.repositories.sqlite import SQLiteDatabase, SQLiteSalesLedger
from seller_tax_documents.services.aggregation import PeriodAggregator


@pytest.fixture
def db() -> SQLiteDatabase:
    database = SQLiteDatabase(":memory:")
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def sqlite_ledger(db) -> SQLiteSalesLedger:
    return SQLiteSalesLedger(db)


def _sale(day, gross, fees=0, taxes=0, **kwargs) -> Sale:
    return Sale(
        seller_id=kwargs.pop("seller_id", "seller-1"),
        created_at=day,
        total_transaction_cents=gross,
        fee_cents=fees,
        tax_cents=taxes,
        **kwargs,
    )


class TestSQLiteDatabase:
    def test_initialize_is_idempotent(self, db):
        db.initialize()

        tables = {
            row["name"]
            for row in db.get_connection().execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )
        }
        assert {"sales", "form_1099k_eligibility"} <= tables

    def test_file_database_persists(self, tmp_path):
        path = tmp_path / "ledger.db"
        first = SQLiteDatabase(path)
        first.initialize()
        SQLiteSalesLedger(first).add_sale(_sale(date(2024, 2, 1), 100))
        first.close()

        second = SQLiteDatabase(path)
        summary = SQLiteSalesLedger(second).sum_sales(
            "seller-1", date(2024, 1, 1), date(2024, 12, 31)
        )
        second.close()

        assert summary.gross_cents == 100


class TestSumSales:
    def test_sums_successful_non_test_sales(self, sqlite_ledger):
        sqlite_ledger.add_sale(_sale(date(2024, 1, 1), 1000, 100, 10))
        sqlite_ledger.add_sale(_sale(date(2024, 3, 31), 2000, 200, 20))
        sqlite_ledger.add_sale(_sale(date(2024, 2, 1), 500, is_test=True))
        sqlite_ledger.add_sale(_sale(date(2024, 2, 1), 500, state=SaleState.REFUNDED))
        sqlite_ledger.add_sale(_sale(date(2024, 2, 1), 500, seller_id="seller-2"))
        sqlite_ledger.add_sale(_sale(date(2024, 4, 1), 500))

        summary = sqlite_ledger.sum_sales("seller-1", date(2024, 1, 1), date(2024, 3, 31))

        assert summary == FinancialSummary(3000, 300, 30)

    def test_empty_range_is_zero(self, sqlite_ledger):
        summary = sqlite_ledger.sum_sales("seller-1", date(2024, 1, 1), date(2024, 3, 31))

        assert summary.is_zero

    def test_datetime_sale_dates_are_truncated(self, sqlite_ledger):
        sqlite_ledger.add_sale(_sale(datetime(2024, 3, 31, 23, 59), 100))

        summary = sqlite_ledger.sum_sales("seller-1", date(2024, 1, 1), date(2024, 3, 31))

        assert summary.gross_cents == 100

    def test_concurrent_period_queries(self, sqlite_ledger):
        for month in range(1, 13):
            sqlite_ledger.add_sale(_sale(date(2024, month, 15), 100 * month))
        aggregator = PeriodAggregator(sqlite_ledger, timeout=5.0, max_workers=5)

        results = aggregator.aggregate_many(
            "seller-1", [annual_period(2024), *quarter_periods(2024)]
        )

        quarter_total = sum(
            summary.gross_cents
            for label, summary in results.items()
            if label.is_quarter
        )
        assert quarter_total == results[annual_period(2024).label].gross_cents == 7800


class TestSaleYears:
    def test_distinct_sorted_years(self, sqlite_ledger):
        sqlite_ledger.add_sale(_sale(date(2024, 1, 1), 1))
        sqlite_ledger.add_sale(_sale(date(2022, 1, 1), 1))
        sqlite_ledger.add_sale(_sale(date(2024, 5, 1), 1))
        sqlite_ledger.add_sale(_sale(date(2019, 5, 1), 1, is_test=True))

        assert sqlite_ledger.sale_years("seller-1") == [2022, 2024]


class TestEligibility:
    def test_mark_eligible(self, sqlite_ledger):
        sqlite_ledger.mark_eligible("seller-1", 2024)
        sqlite_ledger.mark_eligible("seller-1", 2024)

        assert sqlite_ledger.is_eligible_for_1099k("seller-1", 2024)
        assert not sqlite_ledger.is_eligible_for_1099k("seller-1", 2023)
        assert not sqlite_ledger.is_eligible_for_1099k("seller-2", 2024)


class TestErrors:
    def test_duplicate_sale_id(self, sqlite_ledger):
        sale = _sale(date(2024, 1, 1), 1)
        sqlite_ledger.add_sale(sale)

        with pytest.raises(LedgerQueryError):
            sqlite_ledger.add_sale(sale)

    def test_sqlite_errors_become_ledger_errors(self):
        database = SQLiteDatabase(":memory:")
        ledger = SQLiteSalesLedger(database)

        with pytest.raises(LedgerQueryError) as exc_info:
            ledger.sum_sales("seller-1", date(2024, 1, 1), date(2024, 12, 31))

        assert "no such table" in exc_info.value.message
        assert exc_info.value.context["seller_id"] == "seller-1"
        database.close()
