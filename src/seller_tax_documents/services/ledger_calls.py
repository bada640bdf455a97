"""Bounded calls into the sales ledger and the eligibility policy.

Every ledger read goes through here so failures surface the same way no
matter which service made them: package errors pass through, anything else
becomes LedgerQueryError, and a call that outlives its time budget becomes
LedgerTimeoutError. Nothing is retried.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import TypeVar

from seller_tax_documents.exceptions import (
    LedgerQueryError,
    LedgerTimeoutError,
    TaxDocumentsError,
)
from seller_tax_documents.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def deadline_after(timeout: float | None) -> float | None:
    if timeout is None:
        return None
    return time.monotonic() + timeout


def wait_for_ledger(
    future: Future[T],
    *,
    seller_id: str,
    operation: str,
    timeout: float | None,
    deadline: float | None,
) -> T:
    """Wait for a submitted ledger call until ``deadline``."""
    remaining = None
    if deadline is not None:
        remaining = max(0.0, deadline - time.monotonic())
    try:
        return future.result(timeout=remaining)
    except FuturesTimeoutError:
        logger.warning(
            "ledger_query_timeout",
            seller_id=seller_id,
            operation=operation,
            timeout_seconds=timeout,
        )
        raise LedgerTimeoutError(seller_id, operation, timeout or 0.0) from None
    except TaxDocumentsError:
        raise
    except Exception as e:
        logger.error(
            "ledger_query_failed",
            seller_id=seller_id,
            operation=operation,
            error=str(e),
        )
        raise LedgerQueryError(str(e), seller_id=seller_id) from e


def call_ledger(
    fn: Callable[..., T],
    *args: object,
    seller_id: str,
    operation: str,
    timeout: float | None = None,
) -> T:
    """Run a single ledger call on a worker thread, bounded by ``timeout``."""
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ledger-query")
    try:
        future = executor.submit(fn, *args)
        return wait_for_ledger(
            future,
            seller_id=seller_id,
            operation=operation,
            timeout=timeout,
            deadline=deadline_after(timeout),
        )
    finally:
        # a call stuck past its deadline must not block the caller
        executor.shutdown(wait=False, cancel_futures=True)
