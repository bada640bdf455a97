"""Domain exception hierarchy for Seller Tax Documents.

All domain-specific exceptions inherit from TaxDocumentsError.
This allows catching all application errors with a single base class
while preserving specificity for individual error types.
"""

from typing import Any


class TaxDocumentsError(Exception):
    """Base exception for all Seller Tax Documents errors.

    Includes optional error_code for API responses and extra context.
    """

    error_code: str = "TAX_DOCUMENTS_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Ledger Errors
# =============================================================================


class LedgerError(TaxDocumentsError):
    """Base exception for failures of the underlying sales ledger."""

    error_code = "LEDGER_ERROR"
    status_code = 500


class LedgerQueryError(LedgerError):
    """Raised when the ledger cannot answer an aggregation query."""

    error_code = "LEDGER_QUERY_ERROR"

    def __init__(self, message: str, *, seller_id: str | None = None) -> None:
        context = {}
        if seller_id is not None:
            context["seller_id"] = seller_id
        super().__init__(f"Ledger query failed: {message}", context=context)


class LedgerTimeoutError(LedgerError):
    """Raised when a ledger query exceeds its time budget."""

    error_code = "LEDGER_TIMEOUT"
    status_code = 504

    def __init__(self, seller_id: str, operation: str, timeout: float) -> None:
        super().__init__(
            f"Ledger query for {operation} timed out after {timeout:g}s",
            context={
                "seller_id": seller_id,
                "operation": operation,
                "timeout_seconds": timeout,
            },
        )


# =============================================================================
# Document Errors
# =============================================================================


class RenderError(TaxDocumentsError):
    """Raised when a tax document is malformed or cannot be rendered."""

    error_code = "RENDER_ERROR"
    status_code = 500

    def __init__(self, message: str, *, document_id: str | None = None) -> None:
        context = {}
        if document_id is not None:
            context["document_id"] = document_id
        super().__init__(message, context=context)


class DocumentError(TaxDocumentsError):
    """Base exception for document lookup errors."""

    error_code = "DOCUMENT_ERROR"
    status_code = 404


class NoDocumentsError(DocumentError):
    """Raised when an archive is requested but no document could be produced."""

    error_code = "NO_DOCUMENTS"

    def __init__(self, seller_id: str, year: int, failed: int = 0) -> None:
        message = f"No tax documents available for {year}"
        if failed:
            message = f"{message} ({failed} failed to render)"
        super().__init__(
            message,
            context={"seller_id": seller_id, "year": year, "failed": failed},
        )


class DocumentNotFoundError(DocumentError):
    """Raised when a single-document selector matches nothing."""

    error_code = "DOCUMENT_NOT_FOUND"

    def __init__(
        self, document_type: str, identifier: str | None, year: int
    ) -> None:
        selector = document_type if identifier is None else f"{document_type}/{identifier}"
        super().__init__(
            f"Document not found: {selector} for {year}",
            context={
                "document_type": document_type,
                "identifier": identifier,
                "year": year,
            },
        )
