from seller_tax_documents.domain.documents import (
    DocumentKind,
    FinancialSummary,
    TaxDocument,
    TaxDocumentsData,
)
from seller_tax_documents.domain.periods import (
    QUARTER_LABELS,
    PeriodDefinition,
    PeriodLabel,
    annual_period,
    quarter_period,
    quarter_periods,
)

__all__ = [
    "QUARTER_LABELS",
    "DocumentKind",
    "FinancialSummary",
    "PeriodDefinition",
    "PeriodLabel",
    "TaxDocument",
    "TaxDocumentsData",
    "annual_period",
    "quarter_period",
    "quarter_periods",
]
