"""Tests for PDF rendering of tax documents."""

import re
from dataclasses import replace
from datetime import datetime

import pytest

from seller_tax_documents.domain.documents import FinancialSummary, TaxDocument
from seller_tax_documents.exceptions import RenderError
from seller_tax_documents.services.rendering import (
    BANNER_SIZE,
    HEADING_SIZE,
    DocumentRenderer,
    format_currency,
)


@pytest.fixture
def annual() -> TaxDocument:
    return TaxDocument.annual_form(2024, FinancialSummary(1500000, 45075, 12000))


@pytest.fixture
def quarterly() -> TaxDocument:
    return TaxDocument.quarterly_report(2024, "Q1", FinancialSummary(10000, 1000, 100))


class TestFormatCurrency:
    @pytest.mark.parametrize(
        ("cents", "expected"),
        [(0, "$0.00"), (10000, "$100.00"), (12345, "$123.45"), (5, "$0.05"), (-250, "$-2.50")],
    )
    def test_two_decimal_dollars(self, cents, expected):
        assert format_currency(cents) == expected


class TestLayout:
    def test_quarterly_report_layout(self, renderer, quarterly):
        lines = renderer.layout(quarterly, 2024)

        assert [line.text for line in lines] == [
            "GUMROAD TAX DOCUMENT",
            "Document: Q1 Earning summary",
            "Year: 2024",
            "Type: Report",
            "Generated: March 15, 2026 at 02:30 PM",
            "FINANCIAL SUMMARY",
            "Gross Revenue:     $100.00",
            "Fees:              $10.00",
            "Taxes:             $1.00",
            "Net Earnings:      $89.00",
            "QUARTERLY BREAKDOWN",
            "This document contains your earnings summary for Q1 Earning summary.",
            "Please consult with your tax professional for proper tax filing.",
            "IMPORTANT NOTES",
            "• This document is for informational purposes only",
            "• Please consult with a qualified tax professional",
            "• Keep this document for your tax records",
            "• Gumroad is not responsible for tax advice",
        ]

    def test_annual_form_disclosure_block(self, renderer, annual):
        texts = [line.text for line in renderer.layout(annual, 2024)]

        assert "Type: IRS form" in texts
        assert "Gross Revenue:     $15000.00" in texts
        assert "Net Earnings:      $14429.25" in texts
        block = texts.index("IRS FORM 1099-K INFORMATION")
        assert texts[block + 1] == (
            "This document contains information that may be reported to the IRS."
        )
        assert "QUARTERLY BREAKDOWN" not in texts

    def test_important_notes_identical_for_every_document(self, renderer, annual, quarterly):
        def notes(document):
            texts = [line.text for line in renderer.layout(document)]
            return texts[texts.index("IMPORTANT NOTES"):]

        assert notes(annual) == notes(quarterly)
        assert len(notes(annual)) == 5

    def test_heading_styles(self, renderer, annual):
        lines = renderer.layout(annual)

        banner = lines[0]
        assert banner.bold and banner.centered and banner.size == BANNER_SIZE
        headings = [line for line in lines if line.size == HEADING_SIZE]
        assert [line.text for line in headings] == [
            "FINANCIAL SUMMARY",
            "IRS FORM 1099-K INFORMATION",
            "IMPORTANT NOTES",
        ]
        assert all(line.bold for line in headings)

    def test_platform_name_from_configuration(self, clock, quarterly):
        renderer = DocumentRenderer(platform_name="Acme", clock=clock)

        texts = [line.text for line in renderer.layout(quarterly)]

        assert texts[0] == "ACME TAX DOCUMENT"
        assert texts[-1] == "• Acme is not responsible for tax advice"

    def test_explicit_generation_time(self, renderer, quarterly):
        lines = renderer.layout(quarterly, generated_at=datetime(2025, 1, 2, 9, 5))

        assert lines[4].text == "Generated: January 02, 2025 at 09:05 AM"

    def test_negative_net(self, renderer):
        doc = TaxDocument.quarterly_report(2024, "Q2", FinancialSummary(50, 80, 5))

        texts = [line.text for line in renderer.layout(doc)]

        assert "Net Earnings:      $-0.35" in texts


class TestRender:
    def test_produces_pdf_with_content(self, renderer, quarterly):
        pdf = renderer.render(quarterly, 2024)

        assert pdf.startswith(b"%PDF")
        assert b"FINANCIAL SUMMARY" in pdf
        assert b"Net Earnings:      $89.00" in pdf
        assert b"QUARTERLY BREAKDOWN" in pdf

    def test_compressed_output_is_still_pdf(self, clock, annual):
        pdf = DocumentRenderer(clock=clock, compress=True).render(annual)

        assert pdf.startswith(b"%PDF")

    def test_paginates_on_short_pages(self, clock, annual):
        renderer = DocumentRenderer(clock=clock, pagesize=(400, 200))

        pdf = renderer.render(annual)

        pages = re.findall(rb"/Type\s*/Page\b(?!s)", pdf)
        assert len(pages) > 1

    def test_rejects_non_documents(self, renderer):
        with pytest.raises(RenderError, match="Expected a TaxDocument"):
            renderer.render({"id": "1099k_2024", "name": "1099-K"}, 2024)  # type: ignore[arg-type]

    def test_rejects_invalid_year(self, renderer, annual):
        with pytest.raises(RenderError, match="Invalid year"):
            renderer.render(annual, 0)

    def test_rejects_document_missing_fields(self, renderer, annual):
        broken = object.__new__(TaxDocument)
        for name in ("id", "kind", "year", "period", "summary", "download_url", "is_new"):
            object.__setattr__(broken, name, getattr(annual, name))
        object.__setattr__(broken, "name", "")

        with pytest.raises(RenderError, match="missing name") as exc_info:
            renderer.render(broken, 2024)

        assert exc_info.value.context["document_id"] == "1099k_2024"

    def test_drawing_failures_become_render_errors(self, renderer, annual, monkeypatch):
        def explode(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(renderer, "_draw", explode)

        with pytest.raises(RenderError, match="disk full"):
            renderer.render(annual)

    def test_same_document_renders_identically_for_fixed_clock(self, renderer, annual):
        assert renderer.layout(annual) == renderer.layout(replace(annual))
