"""Tax document domain models: period summaries and the documents built on them."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from seller_tax_documents.domain.periods import PeriodLabel

ANNUAL_FORM_NAME = "1099-K"

_WHITESPACE = re.compile(r"\s+")


class DocumentKind(str, Enum):
    """Document variants; values are the labels shown to sellers."""

    ANNUAL_FORM = "IRS form"
    QUARTERLY_REPORT = "Report"


@dataclass(frozen=True, slots=True)
class FinancialSummary:
    """Sales totals for one period, in minor currency units."""

    gross_cents: int = 0
    fees_cents: int = 0
    taxes_cents: int = 0

    def __post_init__(self) -> None:
        for name in ("gross_cents", "fees_cents", "taxes_cents"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")

    @property
    def net_cents(self) -> int:
        return self.gross_cents - self.fees_cents - self.taxes_cents

    @property
    def is_zero(self) -> bool:
        return self.gross_cents == 0

    @classmethod
    def zero(cls) -> "FinancialSummary":
        return cls()


@dataclass(frozen=True, slots=True)
class TaxDocument:
    """An annual 1099-K form or a quarterly earnings report.

    Identity is derived from (year, period) only, so rebuilding a document
    from an unchanged ledger always yields the same id.
    """

    id: str
    name: str
    kind: DocumentKind
    year: int
    period: PeriodLabel
    summary: FinancialSummary
    download_url: str
    is_new: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.kind, DocumentKind):
            object.__setattr__(self, "kind", DocumentKind(self.kind))
        if not isinstance(self.period, PeriodLabel):
            object.__setattr__(self, "period", PeriodLabel(self.period))
        if not self.id or not self.name or not self.download_url:
            raise ValueError("Tax document requires id, name and download_url")
        if not isinstance(self.summary, FinancialSummary):
            raise ValueError(f"Invalid summary for {self.id}: {self.summary!r}")
        if (self.kind is DocumentKind.ANNUAL_FORM) != (
            self.period is PeriodLabel.ANNUAL
        ):
            raise ValueError(
                f"{self.kind.value} cannot cover period {self.period.value}"
            )

    @property
    def net_cents(self) -> int:
        return self.summary.net_cents

    @property
    def filename(self) -> str:
        """Download filename, e.g. ``Q1-Earning-summary-2024.pdf``."""
        return f"{_WHITESPACE.sub('-', self.name)}-{self.year}.pdf"

    @classmethod
    def annual_form(cls, year: int, summary: FinancialSummary) -> "TaxDocument":
        return cls(
            id=f"1099k_{year}",
            name=ANNUAL_FORM_NAME,
            kind=DocumentKind.ANNUAL_FORM,
            year=year,
            period=PeriodLabel.ANNUAL,
            summary=summary,
            download_url=f"/tax-documents/1099k/annual/download?year={year}",
            is_new=True,
        )

    @classmethod
    def quarterly_report(
        cls, year: int, quarter: PeriodLabel | str, summary: FinancialSummary
    ) -> "TaxDocument":
        quarter = PeriodLabel(quarter)
        slug = quarter.value.lower()
        return cls(
            id=f"{slug}_{year}",
            name=f"{quarter.value} Earning summary",
            kind=DocumentKind.QUARTERLY_REPORT,
            year=year,
            period=quarter,
            summary=summary,
            download_url=f"/tax-documents/quarterly/{slug}/download?year={year}",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind.value,
            "gross_cents": self.summary.gross_cents,
            "fees_cents": self.summary.fees_cents,
            "taxes_cents": self.summary.taxes_cents,
            "net_cents": self.net_cents,
            "is_new": self.is_new,
            "download_url": self.download_url,
        }


@dataclass(frozen=True)
class TaxDocumentsData:
    """Response envelope for the tax documents page."""

    documents: list[TaxDocument]
    selected_year: int
    available_years: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "documents": [doc.to_dict() for doc in self.documents],
            "selected_year": self.selected_year,
            "available_years": list(self.available_years),
        }
