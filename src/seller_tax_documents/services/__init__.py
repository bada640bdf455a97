from seller_tax_documents.services.aggregation import PeriodAggregator
from seller_tax_documents.services.archive import (
    ArchiveExport,
    ArchiveExporter,
    ExportedFile,
    RenderOutcome,
)
from seller_tax_documents.services.eligibility import EligibilityEvaluator
from seller_tax_documents.services.rendering import DocumentRenderer
from seller_tax_documents.services.tax_documents import DocumentAssembler
from seller_tax_documents.services.year_resolver import YearResolver

__all__ = [
    "ArchiveExport",
    "ArchiveExporter",
    "DocumentAssembler",
    "DocumentRenderer",
    "EligibilityEvaluator",
    "ExportedFile",
    "PeriodAggregator",
    "RenderOutcome",
    "YearResolver",
]
