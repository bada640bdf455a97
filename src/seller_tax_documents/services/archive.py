"""Tax document export: single PDFs and zip archives of a whole year."""

from __future__ import annotations

import contextvars
import tempfile
import threading
import time
import zipfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from seller_tax_documents.domain.documents import TaxDocument
from seller_tax_documents.exceptions import NoDocumentsError, RenderError
from seller_tax_documents.logging_config import LogContext, get_logger
from seller_tax_documents.services.rendering import DocumentRenderer
from seller_tax_documents.services.tax_documents import DocumentAssembler

logger = get_logger(__name__)

ZIP_CONTENT_TYPE = "application/zip"
PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class RenderOutcome:
    """Result of rendering one document: either content or an error."""

    document: TaxDocument
    content: bytes | None = None
    error: RenderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None


@dataclass(frozen=True)
class ExportedFile:
    content: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class ArchiveExport:
    """A packaged archive plus what did not make it in."""

    content: bytes
    filename: str
    entries: list[str]
    failures: list[RenderOutcome] = field(default_factory=list)
    skipped: list[TaxDocument] = field(default_factory=list)
    content_type: str = ZIP_CONTENT_TYPE

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def is_complete(self) -> bool:
        return not self.failures and not self.skipped


def archive_filename(year: int) -> str:
    return f"tax-documents-{year}.zip"


class ArchiveExporter:
    """Renders a seller's documents and packages them for download.

    In a batch export a document that fails to render is logged, recorded
    in ``ArchiveExport.failures`` and left out; the remaining documents are
    still packaged. Ledger errors raised while building the documents abort
    the export.
    """

    def __init__(
        self,
        assembler: DocumentAssembler,
        renderer: DocumentRenderer,
        max_workers: int = 4,
        spool_max_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._assembler = assembler
        self._renderer = renderer
        self._max_workers = max_workers
        self._spool_max_bytes = spool_max_bytes

    def export_all(
        self,
        seller_id: str,
        year: int,
        *,
        deadline: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ArchiveExport:
        """Export every document for ``year`` as one zip archive.

        Args:
            seller_id: Seller whose documents are exported.
            year: Reporting year.
            deadline: ``time.monotonic()`` value after which renders that
                have not started are skipped.
            cancel_event: Once set, renders that have not started are skipped.

        Raises:
            NoDocumentsError: No documents exist for the year, or none rendered.
        """
        with LogContext(seller_id=seller_id, year=year):
            return self._export_all(seller_id, year, deadline, cancel_event)

    def _export_all(
        self,
        seller_id: str,
        year: int,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> ArchiveExport:
        documents = self._assembler.build_documents(seller_id, year)
        if not documents:
            raise NoDocumentsError(seller_id, year)

        outcomes, skipped = self._render_all(documents, year, deadline, cancel_event)
        rendered = [outcome for outcome in outcomes if outcome.ok]
        failures = [outcome for outcome in outcomes if not outcome.ok]

        if skipped:
            logger.warning(
                "archive_render_skipped",
                document_ids=[doc.id for doc in skipped],
            )
        if not rendered:
            raise NoDocumentsError(seller_id, year, failed=len(failures))

        content = self._package(rendered)
        logger.info(
            "archive_export_completed",
            entries=len(rendered),
            failed=len(failures),
            skipped=len(skipped),
            size_bytes=len(content),
        )
        return ArchiveExport(
            content=content,
            filename=archive_filename(year),
            entries=[outcome.document.filename for outcome in rendered],
            failures=failures,
            skipped=skipped,
        )

    def export_one(
        self,
        seller_id: str,
        year: int,
        document_type: str,
        identifier: str | None = None,
    ) -> ExportedFile:
        """Render a single document selected by type and quarter.

        Raises:
            DocumentNotFoundError: The selector matches no produced document.
            RenderError: The document could not be rendered.
        """
        document = self._assembler.find_document(
            seller_id, year, document_type, identifier
        )
        return ExportedFile(
            content=self._renderer.render(document, year),
            filename=document.filename,
            content_type=PDF_CONTENT_TYPE,
        )

    def _render_all(
        self,
        documents: list[TaxDocument],
        year: int,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> tuple[list[RenderOutcome], list[TaxDocument]]:
        def stopped() -> bool:
            if cancel_event is not None and cancel_event.is_set():
                return True
            return deadline is not None and time.monotonic() >= deadline

        def render(document: TaxDocument) -> RenderOutcome | None:
            if stopped():
                return None
            return self._render_one(document, year)

        workers = min(self._max_workers, len(documents))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="render") as pool:
            # each worker runs in a copy of the caller's log context
            futures = [
                pool.submit(contextvars.copy_context().run, render, document)
                for document in documents
            ]
            results = [future.result() for future in futures]

        outcomes: list[RenderOutcome] = []
        skipped: list[TaxDocument] = []
        for document, outcome in zip(documents, results):
            if outcome is None:
                skipped.append(document)
            else:
                outcomes.append(outcome)
        return outcomes, skipped

    def _render_one(self, document: TaxDocument, year: int) -> RenderOutcome:
        try:
            return RenderOutcome(document, content=self._renderer.render(document, year))
        except Exception as e:
            error = e if isinstance(e, RenderError) else RenderError(
                f"Failed to render {document.id}: {e}", document_id=document.id
            )
            logger.error(
                "document_render_failed",
                document_id=document.id,
                error=error.message,
            )
            return RenderOutcome(document, error=error)

    def _package(self, rendered: list[RenderOutcome]) -> bytes:
        with tempfile.SpooledTemporaryFile(
            max_size=self._spool_max_bytes, suffix=".zip"
        ) as spool:
            with zipfile.ZipFile(spool, "w", zipfile.ZIP_DEFLATED) as archive:
                for outcome in rendered:
                    archive.writestr(outcome.document.filename, outcome.content)
            spool.seek(0)
            return spool.read()
