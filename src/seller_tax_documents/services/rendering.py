"""PDF rendering of tax documents with the reportlab canvas.

The text layout is fixed and identical in shape for every document:

    <PLATFORM> TAX DOCUMENT
    Document / Year / Type / Generated
    FINANCIAL SUMMARY         (gross, fees, taxes, net)
    QUARTERLY BREAKDOWN  or  IRS FORM 1099-K INFORMATION
    IMPORTANT NOTES           (four fixed disclaimers)

``layout`` returns those lines so callers and tests can inspect content
without parsing PDF bytes; ``render`` draws them onto letter-sized pages.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from io import BytesIO

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from seller_tax_documents.domain.documents import (
    DocumentKind,
    FinancialSummary,
    TaxDocument,
)
from seller_tax_documents.exceptions import RenderError
from seller_tax_documents.repositories.interfaces import Clock, SystemClock

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
BODY_SIZE = 12
HEADING_SIZE = 14
BANNER_SIZE = 18
MARGIN = 36
LEADING = 1.2

TIMESTAMP_FORMAT = "%B %d, %Y at %I:%M %p"
CONSULT_LINE = "Please consult with your tax professional for proper tax filing."


@dataclass(frozen=True, slots=True)
class Line:
    """One line of text and the vertical gap that follows it."""

    text: str
    size: int = BODY_SIZE
    bold: bool = False
    centered: bool = False
    space_after: int = 0

    @property
    def height(self) -> float:
        return self.size * LEADING


def format_currency(cents: int) -> str:
    return f"${round(cents / 100.0, 2):.2f}"


def important_notes(platform_name: str) -> list[str]:
    return [
        "• This document is for informational purposes only",
        "• Please consult with a qualified tax professional",
        "• Keep this document for your tax records",
        f"• {platform_name} is not responsible for tax advice",
    ]


class DocumentRenderer:
    def __init__(
        self,
        platform_name: str = "Gumroad",
        clock: Clock | None = None,
        compress: bool = False,
        pagesize: tuple[float, float] = letter,
    ) -> None:
        self._platform_name = platform_name
        self._clock = clock or SystemClock()
        self._compress = compress
        self._pagesize = pagesize

    def render(self, document: TaxDocument, year: int | None = None) -> bytes:
        """Render ``document`` as PDF bytes.

        Raises:
            RenderError: The document is malformed or the PDF could not be drawn.
        """
        lines = self.layout(document, year)
        try:
            return self._draw(lines, title=f"{document.name} {self._year(document, year)}")
        except Exception as e:
            raise RenderError(
                f"Failed to render {document.id}: {e}", document_id=document.id
            ) from e

    def layout(
        self,
        document: TaxDocument,
        year: int | None = None,
        generated_at: datetime | None = None,
    ) -> list[Line]:
        _validate(document)
        year = self._year(document, year)
        generated_at = generated_at or self._clock.now()
        summary = document.summary

        lines = [
            Line(
                f"{self._platform_name.upper()} TAX DOCUMENT",
                size=BANNER_SIZE,
                bold=True,
                centered=True,
                space_after=20,
            ),
            Line(f"Document: {document.name}"),
            Line(f"Year: {year}"),
            Line(f"Type: {document.kind.value}"),
            Line(f"Generated: {generated_at.strftime(TIMESTAMP_FORMAT)}", space_after=20),
            Line("FINANCIAL SUMMARY", size=HEADING_SIZE, bold=True, space_after=10),
            Line(f"Gross Revenue:     {format_currency(summary.gross_cents)}"),
            Line(f"Fees:              {format_currency(summary.fees_cents)}"),
            Line(f"Taxes:             {format_currency(summary.taxes_cents)}"),
            Line(
                f"Net Earnings:      {format_currency(summary.net_cents)}",
                space_after=20,
            ),
        ]

        if document.kind is DocumentKind.QUARTERLY_REPORT:
            lines += [
                Line("QUARTERLY BREAKDOWN", size=HEADING_SIZE, bold=True, space_after=10),
                Line(f"This document contains your earnings summary for {document.name}."),
                Line(CONSULT_LINE, space_after=10),
            ]
        else:
            lines += [
                Line(
                    "IRS FORM 1099-K INFORMATION",
                    size=HEADING_SIZE,
                    bold=True,
                    space_after=10,
                ),
                Line("This document contains information that may be reported to the IRS."),
                Line(CONSULT_LINE, space_after=10),
            ]

        lines.append(Line("IMPORTANT NOTES", size=HEADING_SIZE, bold=True, space_after=10))
        lines += [Line(note) for note in important_notes(self._platform_name)]
        return lines

    def _draw(self, lines: list[Line], title: str) -> bytes:
        buffer = BytesIO()
        width, height = self._pagesize
        pdf = canvas.Canvas(
            buffer, pagesize=self._pagesize, pageCompression=1 if self._compress else 0
        )
        pdf.setTitle(title)
        pdf.setAuthor(self._platform_name)

        y = height - MARGIN
        for line in lines:
            if y - line.height < MARGIN:
                pdf.showPage()
                y = height - MARGIN
            y -= line.height
            pdf.setFont(BOLD_FONT if line.bold else FONT, line.size)
            if line.centered:
                pdf.drawCentredString(width / 2, y, line.text)
            else:
                pdf.drawString(MARGIN, y, line.text)
            y -= line.space_after

        pdf.save()
        return buffer.getvalue()

    @staticmethod
    def _year(document: TaxDocument, year: int | None) -> int:
        if year is None:
            return document.year
        if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
            raise RenderError(f"Invalid year for {document.id}: {year!r}", document_id=document.id)
        return year


def _validate(document: object) -> None:
    if not isinstance(document, TaxDocument):
        raise RenderError(f"Expected a TaxDocument, got {type(document).__name__}")
    for name in ("id", "name", "kind", "year", "summary"):
        if getattr(document, name, None) in (None, ""):
            raise RenderError(
                f"Tax document is missing {name}",
                document_id=getattr(document, "id", None) or None,
            )
    if not isinstance(document.kind, DocumentKind):
        raise RenderError(f"Unknown document kind: {document.kind!r}", document_id=document.id)
    if not isinstance(document.summary, FinancialSummary):
        raise RenderError(f"Invalid summary: {document.summary!r}", document_id=document.id)
