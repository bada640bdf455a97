"""Reporting year resolution for a seller."""

from seller_tax_documents.repositories.interfaces import Clock, LedgerQuery, SystemClock
from seller_tax_documents.services.ledger_calls import call_ledger


class YearResolver:
    def __init__(
        self,
        ledger: LedgerQuery,
        clock: Clock | None = None,
        timeout: float | None = None,
    ) -> None:
        self._ledger = ledger
        self._clock = clock or SystemClock()
        self._timeout = timeout

    @property
    def current_year(self) -> int:
        return self._clock.today().year

    def default_year(self, seller_id: str) -> int:
        """Most recent year with sales, or the current year if there are none."""
        years = self._sale_years(seller_id)
        if not years:
            return self.current_year
        return max(years)

    def available_years(self, seller_id: str) -> list[int]:
        """Years with sales plus the current year, ascending."""
        years = set(self._sale_years(seller_id))
        years.add(self.current_year)
        return sorted(years)

    def _sale_years(self, seller_id: str) -> list[int]:
        return call_ledger(
            self._ledger.sale_years,
            seller_id,
            seller_id=seller_id,
            operation="sale_years",
            timeout=self._timeout,
        )
