"""1099-K eligibility gates."""

from seller_tax_documents.domain.documents import FinancialSummary
from seller_tax_documents.repositories.interfaces import EligibilityPolicy
from seller_tax_documents.services.ledger_calls import call_ledger


class EligibilityEvaluator:
    """Decides whether the annual 1099-K form is issued.

    Two independent gates must both pass: the seller-level policy, checked
    before the annual total is queried, and a non-zero gross for the year.
    """

    def __init__(self, policy: EligibilityPolicy, timeout: float | None = None) -> None:
        self._policy = policy
        self._timeout = timeout

    def is_eligible_for_1099k(self, seller_id: str, year: int) -> bool:
        return bool(
            call_ledger(
                self._policy.is_eligible_for_1099k,
                seller_id,
                year,
                seller_id=seller_id,
                operation="1099k_eligibility",
                timeout=self._timeout,
            )
        )

    @staticmethod
    def has_reportable_data(annual_summary: FinancialSummary) -> bool:
        return annual_summary.gross_cents != 0
