from seller_tax_documents.domain.documents import (
    DocumentKind,
    FinancialSummary,
    TaxDocument,
    TaxDocumentsData,
)
from seller_tax_documents.domain.periods import PeriodDefinition, PeriodLabel
from seller_tax_documents.exceptions import (
    DocumentNotFoundError,
    LedgerQueryError,
    LedgerTimeoutError,
    NoDocumentsError,
    RenderError,
    TaxDocumentsError,
)

__all__ = [
    "DocumentKind",
    "DocumentNotFoundError",
    "FinancialSummary",
    "LedgerQueryError",
    "LedgerTimeoutError",
    "NoDocumentsError",
    "PeriodDefinition",
    "PeriodLabel",
    "RenderError",
    "TaxDocument",
    "TaxDocumentsData",
    "TaxDocumentsError",
]

__version__ = "0.1.0"
