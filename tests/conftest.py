from collections.abc import Callable
from datetime import UTC, date, datetime

import pytest

from seller_tax_documents.domain.sales import Sale, SaleState
from seller_tax_documents.repositories.interfaces import FixedClock
from seller_tax_documents.repositories.memory import InMemorySalesLedger
from seller_tax_documents.services.aggregation import PeriodAggregator
from seller_tax_documents.services.archive import ArchiveExporter
from seller_tax_documents.services.eligibility import EligibilityEvaluator
from seller_tax_documents.services.rendering import DocumentRenderer
from seller_tax_documents.services.tax_documents import DocumentAssembler
from seller_tax_documents.services.year_resolver import YearResolver

AddSale = Callable[..., Sale]


@pytest.fixture
def seller_id() -> str:
    return "seller-1"


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 15, 14, 30, tzinfo=UTC))


@pytest.fixture
def ledger() -> InMemorySalesLedger:
    return InMemorySalesLedger()


@pytest.fixture
def add_sale(ledger: InMemorySalesLedger, seller_id: str) -> AddSale:
    def _add(
        day: date,
        gross: int,
        fees: int = 0,
        taxes: int = 0,
        *,
        seller: str | None = None,
        state: SaleState = SaleState.SUCCESSFUL,
        is_test: bool = False,
    ) -> Sale:
        sale = Sale(
            seller_id=seller or seller_id,
            created_at=day,
            total_transaction_cents=gross,
            fee_cents=fees,
            tax_cents=taxes,
            state=state,
            is_test=is_test,
        )
        ledger.add_sale(sale)
        return sale

    return _add


@pytest.fixture
def year_resolver(ledger: InMemorySalesLedger, clock: FixedClock) -> YearResolver:
    return YearResolver(ledger, clock)


@pytest.fixture
def aggregator(ledger: InMemorySalesLedger) -> PeriodAggregator:
    return PeriodAggregator(ledger, timeout=5.0)


@pytest.fixture
def assembler(
    ledger: InMemorySalesLedger,
    year_resolver: YearResolver,
    aggregator: PeriodAggregator,
) -> DocumentAssembler:
    return DocumentAssembler(year_resolver, aggregator, EligibilityEvaluator(ledger))


@pytest.fixture
def renderer(clock: FixedClock) -> DocumentRenderer:
    return DocumentRenderer(platform_name="Gumroad", clock=clock)


@pytest.fixture
def exporter(
    assembler: DocumentAssembler, renderer: DocumentRenderer
) -> ArchiveExporter:
    return ArchiveExporter(assembler, renderer, max_workers=4)


@pytest.fixture
def scenario_ledger(
    ledger: InMemorySalesLedger, add_sale: AddSale, seller_id: str
) -> InMemorySalesLedger:
    """Q1 gross 10000, Q3 gross 5000, Q2 and Q4 empty, eligible for 2024."""
    add_sale(date(2024, 1, 10), 6000, fees=600, taxes=100)
    add_sale(date(2024, 3, 31), 4000, fees=400)
    add_sale(date(2024, 8, 1), 5000, fees=500, taxes=250)
    ledger.mark_eligible(seller_id, 2024)
    return ledger
