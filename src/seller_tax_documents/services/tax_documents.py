"""Tax document assembly: annual 1099-K form and quarterly earning summaries."""

from __future__ import annotations

import re

from seller_tax_documents.domain.documents import (
    FinancialSummary,
    TaxDocument,
    TaxDocumentsData,
)
from seller_tax_documents.domain.periods import (
    QUARTER_LABELS,
    PeriodLabel,
    annual_period,
    quarter_periods,
)
from seller_tax_documents.exceptions import DocumentNotFoundError
from seller_tax_documents.logging_config import get_logger
from seller_tax_documents.services.aggregation import PeriodAggregator
from seller_tax_documents.services.eligibility import EligibilityEvaluator
from seller_tax_documents.services.year_resolver import YearResolver

logger = get_logger(__name__)

ANNUAL_DOCUMENT_TYPE = "1099k"
QUARTERLY_DOCUMENT_TYPE = "quarterly"
DOCUMENT_TYPES = (ANNUAL_DOCUMENT_TYPE, QUARTERLY_DOCUMENT_TYPE)

_YEAR_PATTERN = re.compile(r"\A[0-9]{4}\Z")


class DocumentAssembler:
    """Builds the ordered list of tax documents for a seller and year.

    The annual form comes first when issued, followed by quarterly reports
    in Q1..Q4 order. When every quarter has zero gross no quarterly report
    is produced at all; otherwise only the zero-gross quarters are dropped.
    """

    def __init__(
        self,
        year_resolver: YearResolver,
        aggregator: PeriodAggregator,
        eligibility: EligibilityEvaluator,
    ) -> None:
        self._year_resolver = year_resolver
        self._aggregator = aggregator
        self._eligibility = eligibility

    def build_documents(self, seller_id: str, year: int) -> list[TaxDocument]:
        eligible = self._eligibility.is_eligible_for_1099k(seller_id, year)

        periods = quarter_periods(year)
        if eligible:
            periods.insert(0, annual_period(year))
        summaries = self._aggregator.aggregate_many(seller_id, periods)

        documents: list[TaxDocument] = []
        # the annual total is only queried once the seller-level gate passed
        annual = summaries.get(PeriodLabel.ANNUAL)
        if annual is not None and self._eligibility.has_reportable_data(annual):
            documents.append(TaxDocument.annual_form(year, annual))

        documents.extend(self._quarterly_reports(year, summaries))

        logger.info(
            "tax_documents_built",
            seller_id=seller_id,
            year=year,
            eligible_for_1099k=eligible,
            document_ids=[doc.id for doc in documents],
        )
        return documents

    def build_documents_data(
        self, seller_id: str, year: int | str | None = None
    ) -> TaxDocumentsData:
        selected_year = self.resolve_year(seller_id, year)
        return TaxDocumentsData(
            documents=self.build_documents(seller_id, selected_year),
            selected_year=selected_year,
            available_years=self._year_resolver.available_years(seller_id),
        )

    def resolve_year(self, seller_id: str, year: int | str | None) -> int:
        """Validate a requested year, falling back to the seller's default year.

        Only four-digit values are accepted; anything else is treated as absent.
        """
        if isinstance(year, bool):
            year = None
        elif isinstance(year, int):
            year = str(year)
        if isinstance(year, str) and _YEAR_PATTERN.match(year):
            return int(year)
        return self._year_resolver.default_year(seller_id)

    def find_document(
        self,
        seller_id: str,
        year: int,
        document_type: str,
        identifier: str | None = None,
    ) -> TaxDocument:
        """Resolve a single-document selector against the documents built for year.

        Raises:
            DocumentNotFoundError: The selector is invalid, or names a document
                that is not produced (e.g. a zero-gross quarter).
        """
        wanted_id = _document_id(year, document_type, identifier)
        if wanted_id is not None:
            for document in self.build_documents(seller_id, year):
                if document.id == wanted_id:
                    return document
        raise DocumentNotFoundError(document_type, identifier, year)

    def _quarterly_reports(
        self, year: int, summaries: dict[PeriodLabel, FinancialSummary]
    ) -> list[TaxDocument]:
        quarters = [(label, summaries[label]) for label in QUARTER_LABELS]
        if all(summary.gross_cents == 0 for _, summary in quarters):
            return []
        return [
            TaxDocument.quarterly_report(year, label, summary)
            for label, summary in quarters
            if summary.gross_cents > 0
        ]


def _document_id(year: int, document_type: str, identifier: str | None) -> str | None:
    if document_type == ANNUAL_DOCUMENT_TYPE:
        return f"1099k_{year}"
    if document_type == QUARTERLY_DOCUMENT_TYPE and identifier:
        quarter = identifier.strip().upper()
        if quarter in {label.value for label in QUARTER_LABELS}:
            return f"{quarter.lower()}_{year}"
    return None
