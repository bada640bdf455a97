"""In-memory sales ledger, for embedding and tests."""

from __future__ import annotations

import threading
from datetime import date, datetime

from seller_tax_documents.domain.documents import FinancialSummary
from seller_tax_documents.domain.sales import Sale
from seller_tax_documents.repositories.interfaces import (
    EligibilityPolicy,
    LedgerQuery,
)


class InMemorySalesLedger(LedgerQuery, EligibilityPolicy):
    def __init__(self, sales: list[Sale] | None = None) -> None:
        self._sales: list[Sale] = list(sales or [])
        self._eligible: set[tuple[str, int]] = set()
        self._lock = threading.Lock()
        self.query_count = 0

    def add_sale(self, sale: Sale) -> None:
        with self._lock:
            self._sales.append(sale)

    def mark_eligible(self, seller_id: str, year: int) -> None:
        with self._lock:
            self._eligible.add((seller_id, year))

    def sum_sales(
        self, seller_id: str, start_date: date, end_date: date
    ) -> FinancialSummary:
        with self._lock:
            self.query_count += 1
            matching = [
                sale
                for sale in self._sales
                if sale.seller_id == seller_id
                and sale.is_reportable
                and start_date <= _day(sale.created_at) <= end_date
            ]
        return FinancialSummary(
            gross_cents=sum(sale.total_transaction_cents for sale in matching),
            fees_cents=sum(sale.fee_cents for sale in matching),
            taxes_cents=sum(sale.tax_cents for sale in matching),
        )

    def sale_years(self, seller_id: str) -> list[int]:
        with self._lock:
            years = {
                sale.created_at.year
                for sale in self._sales
                if sale.seller_id == seller_id and sale.is_reportable
            }
        return sorted(years)

    def is_eligible_for_1099k(self, seller_id: str, year: int) -> bool:
        return (seller_id, year) in self._eligible


def _day(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
