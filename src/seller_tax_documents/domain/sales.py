"""Sale records as stored in the seller ledger."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID, uuid4


class SaleState(str, Enum):
    SUCCESSFUL = "successful"
    FAILED = "failed"
    REFUNDED = "refunded"
    IN_PROGRESS = "in_progress"


@dataclass
class Sale:
    """A single sale. Only successful, non-test sales count towards reports."""

    seller_id: str
    created_at: date
    total_transaction_cents: int
    fee_cents: int = 0
    tax_cents: int = 0
    state: SaleState = SaleState.SUCCESSFUL
    is_test: bool = False
    id: UUID = field(default_factory=uuid4)

    @property
    def is_reportable(self) -> bool:
        return self.state == SaleState.SUCCESSFUL and not self.is_test
