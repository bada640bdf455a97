"""Period aggregation over the sales ledger.

Each period is summed with its own ledger query. Periods cover disjoint date
ranges, so the queries for a year are issued concurrently and joined back by
period label. Every query shares one time budget; when it runs out the
aggregation fails with LedgerTimeoutError and is not retried.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from seller_tax_documents.domain.documents import FinancialSummary
from seller_tax_documents.domain.periods import PeriodDefinition, PeriodLabel
from seller_tax_documents.exceptions import LedgerQueryError
from seller_tax_documents.repositories.interfaces import LedgerQuery
from seller_tax_documents.services.ledger_calls import deadline_after, wait_for_ledger


class PeriodAggregator:
    """Turns period definitions into financial summaries."""

    def __init__(
        self,
        ledger: LedgerQuery,
        timeout: float | None = None,
        max_workers: int = 5,
    ) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._ledger = ledger
        self._timeout = timeout
        self._max_workers = max_workers

    def aggregate(self, seller_id: str, period: PeriodDefinition) -> FinancialSummary:
        return self.aggregate_many(seller_id, [period])[period.label]

    def aggregate_many(
        self, seller_id: str, periods: Iterable[PeriodDefinition]
    ) -> dict[PeriodLabel, FinancialSummary]:
        """Sum every period concurrently, keyed by period label."""
        periods = list(periods)
        labels = [period.label for period in periods]
        if len(set(labels)) != len(labels):
            raise ValueError(f"Duplicate period labels: {[l.value for l in labels]}")
        if not periods:
            return {}

        deadline = deadline_after(self._timeout)
        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(periods)),
            thread_name_prefix="ledger-query",
        )
        try:
            futures = {
                period: executor.submit(
                    self._ledger.sum_sales,
                    seller_id,
                    period.start_date,
                    period.end_date,
                )
                for period in periods
            }
            results: dict[PeriodLabel, FinancialSummary] = {}
            for period, future in futures.items():
                summary = wait_for_ledger(
                    future,
                    seller_id=seller_id,
                    operation=period.label.value,
                    timeout=self._timeout,
                    deadline=deadline,
                )
                if not isinstance(summary, FinancialSummary):
                    raise LedgerQueryError(
                        f"unexpected result for {period.label.value}: {summary!r}",
                        seller_id=seller_id,
                    )
                results[period.label] = summary
            return results
        finally:
            # A query stuck past its deadline must not block the caller
            executor.shutdown(wait=False, cancel_futures=True)
