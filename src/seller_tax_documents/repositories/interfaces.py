from abc import ABC, abstractmethod
from datetime import UTC, date, datetime

from seller_tax_documents.domain.documents import FinancialSummary


class LedgerQuery(ABC):
    """Read-only view over a seller's settled, non-test sales."""

    @abstractmethod
    def sum_sales(
        self, seller_id: str, start_date: date, end_date: date
    ) -> FinancialSummary:
        """Sum gross, fees and taxes of sales dated start_date..end_date inclusive."""

    @abstractmethod
    def sale_years(self, seller_id: str) -> list[int]:
        """Distinct calendar years in which the seller has sales."""


class EligibilityPolicy(ABC):
    @abstractmethod
    def is_eligible_for_1099k(self, seller_id: str, year: int) -> bool:
        pass


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        pass

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock(Clock):
    """Clock pinned to one moment; keeps year defaults and timestamps reproducible."""

    def __init__(self, moment: datetime) -> None:
        self._moment = moment

    def now(self) -> datetime:
        return self._moment
