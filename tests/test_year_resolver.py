"""Tests for reporting year resolution."""

import threading
from datetime import date
from unittest.mock import MagicMock

import pytest

from seller_tax_documents.domain.sales import SaleState
from seller_tax_documents.exceptions import LedgerQueryError, LedgerTimeoutError
from seller_tax_documents.repositories.interfaces import LedgerQuery
from seller_tax_documents.services.eligibility import EligibilityEvaluator
from seller_tax_documents.services.tax_documents import DocumentAssembler
from seller_tax_documents.services.year_resolver import YearResolver


class TestDefaultYear:
    def test_current_year_when_no_sales(self, year_resolver: YearResolver, seller_id):
        assert year_resolver.default_year(seller_id) == 2026

    def test_most_recent_year_with_sales(self, add_sale, year_resolver, seller_id):
        add_sale(date(2022, 5, 1), 100)
        add_sale(date(2024, 2, 1), 100)
        add_sale(date(2023, 7, 1), 100)

        assert year_resolver.default_year(seller_id) == 2024

    def test_ignores_test_and_unsettled_sales(self, add_sale, year_resolver, seller_id):
        add_sale(date(2021, 5, 1), 100)
        add_sale(date(2025, 5, 1), 100, is_test=True)
        add_sale(date(2024, 5, 1), 100, state=SaleState.FAILED)

        assert year_resolver.default_year(seller_id) == 2021


class TestAvailableYears:
    def test_always_contains_current_year(self, year_resolver: YearResolver, seller_id):
        assert year_resolver.available_years(seller_id) == [2026]

    def test_union_sorted_and_deduplicated(self, add_sale, year_resolver, seller_id):
        add_sale(date(2024, 1, 1), 100)
        add_sale(date(2024, 6, 1), 100)
        add_sale(date(2022, 6, 1), 100)
        add_sale(date(2026, 1, 2), 100)

        assert year_resolver.available_years(seller_id) == [2022, 2024, 2026]

    def test_other_sellers_are_ignored(self, add_sale, year_resolver, seller_id):
        add_sale(date(2020, 1, 1), 100, seller="someone-else")

        assert year_resolver.available_years(seller_id) == [2026]


class TestLedgerFailures:
    def test_ledger_errors_are_wrapped(self, clock, seller_id):
        ledger = MagicMock(spec=LedgerQuery)
        ledger.sale_years.side_effect = RuntimeError("connection reset")
        resolver = YearResolver(ledger, clock)

        with pytest.raises(LedgerQueryError, match="connection reset"):
            resolver.available_years(seller_id)

    def test_slow_ledger_times_out(self, clock, seller_id):
        release = threading.Event()
        ledger = MagicMock(spec=LedgerQuery)
        ledger.sale_years.side_effect = lambda *args: release.wait(5) and []
        resolver = YearResolver(ledger, clock, timeout=0.05)
        try:
            with pytest.raises(LedgerTimeoutError) as exc_info:
                resolver.default_year(seller_id)
        finally:
            release.set()

        assert exc_info.value.context["operation"] == "sale_years"
        assert exc_info.value.status_code == 504

    def test_timeout_applies_to_year_fallback(self, ledger, aggregator, clock, seller_id):
        release = threading.Event()
        slow = MagicMock(spec=LedgerQuery)
        slow.sale_years.side_effect = lambda *args: release.wait(5) and []
        assembler = DocumentAssembler(
            YearResolver(slow, clock, timeout=0.05), aggregator, EligibilityEvaluator(ledger)
        )
        try:
            with pytest.raises(LedgerTimeoutError):
                assembler.resolve_year(seller_id, "not-a-year")
        finally:
            release.set()
