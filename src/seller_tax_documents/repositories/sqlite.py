"""SQLite implementation of the sales ledger."""

from __future__ import annotations

import sqlite3
import threading
from datetime import date, datetime
from pathlib import Path

from seller_tax_documents.domain.documents import FinancialSummary
from seller_tax_documents.domain.sales import Sale, SaleState
from seller_tax_documents.exceptions import LedgerQueryError
from seller_tax_documents.repositories.interfaces import (
    EligibilityPolicy,
    LedgerQuery,
)


class SQLiteDatabase:
    """SQLite database connection manager.

    The connection is shared between threads; every statement runs under
    ``lock`` so per-period queries may be issued concurrently.
    """

    def __init__(self, path: str | Path = ":memory:") -> None:
        self._path = str(path)
        self._connection: sqlite3.Connection | None = None
        self.lock = threading.RLock()

    def get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(self._path, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def initialize(self) -> None:
        """Create all database tables."""
        with self.lock:
            conn = self.get_connection()
            conn.executescript(
                """
                -- Sales table
                CREATE TABLE IF NOT EXISTS sales (
                    id TEXT PRIMARY KEY,
                    seller_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    total_transaction_cents INTEGER NOT NULL,
                    fee_cents INTEGER NOT NULL DEFAULT 0,
                    tax_cents INTEGER NOT NULL DEFAULT 0,
                    state TEXT NOT NULL,
                    is_test INTEGER NOT NULL DEFAULT 0
                );
                CREATE INDEX IF NOT EXISTS idx_sales_seller_date ON sales(seller_id, created_at);

                -- 1099-K eligibility, one row per eligible seller and year
                CREATE TABLE IF NOT EXISTS form_1099k_eligibility (
                    seller_id TEXT NOT NULL,
                    year INTEGER NOT NULL,
                    PRIMARY KEY (seller_id, year)
                );
                """
            )
            conn.commit()

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None


class SQLiteSalesLedger(LedgerQuery, EligibilityPolicy):
    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add_sale(self, sale: Sale) -> None:
        self._execute_write(
            """
            INSERT INTO sales (id, seller_id, created_at, total_transaction_cents,
                               fee_cents, tax_cents, state, is_test)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                str(sale.id),
                sale.seller_id,
                _as_date(sale.created_at).isoformat(),
                sale.total_transaction_cents,
                sale.fee_cents,
                sale.tax_cents,
                SaleState(sale.state).value,
                1 if sale.is_test else 0,
            ),
        )

    def mark_eligible(self, seller_id: str, year: int) -> None:
        self._execute_write(
            "INSERT OR IGNORE INTO form_1099k_eligibility (seller_id, year) VALUES (?, ?)",
            (seller_id, year),
        )

    def sum_sales(
        self, seller_id: str, start_date: date, end_date: date
    ) -> FinancialSummary:
        row = self._fetchone(
            """
            SELECT COALESCE(SUM(total_transaction_cents), 0) AS gross_cents,
                   COALESCE(SUM(fee_cents), 0) AS fees_cents,
                   COALESCE(SUM(tax_cents), 0) AS taxes_cents
            FROM sales
            WHERE seller_id = ? AND state = ? AND is_test = 0
              AND created_at BETWEEN ? AND ?
            """,
            (
                seller_id,
                SaleState.SUCCESSFUL.value,
                start_date.isoformat(),
                end_date.isoformat(),
            ),
            seller_id,
        )
        return FinancialSummary(
            gross_cents=int(row["gross_cents"]),
            fees_cents=int(row["fees_cents"]),
            taxes_cents=int(row["taxes_cents"]),
        )

    def sale_years(self, seller_id: str) -> list[int]:
        rows = self._fetchall(
            """
            SELECT DISTINCT CAST(substr(created_at, 1, 4) AS INTEGER) AS year
            FROM sales
            WHERE seller_id = ? AND state = ? AND is_test = 0
            ORDER BY year
            """,
            (seller_id, SaleState.SUCCESSFUL.value),
            seller_id,
        )
        return [int(row["year"]) for row in rows]

    def is_eligible_for_1099k(self, seller_id: str, year: int) -> bool:
        row = self._fetchone(
            "SELECT 1 FROM form_1099k_eligibility WHERE seller_id = ? AND year = ?",
            (seller_id, year),
            seller_id,
        )
        return row is not None

    def _fetchone(
        self, sql: str, params: tuple, seller_id: str
    ) -> sqlite3.Row | None:
        try:
            with self._db.lock:
                return self._db.get_connection().execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise LedgerQueryError(str(e), seller_id=seller_id) from e

    def _fetchall(
        self, sql: str, params: tuple, seller_id: str
    ) -> list[sqlite3.Row]:
        try:
            with self._db.lock:
                return self._db.get_connection().execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise LedgerQueryError(str(e), seller_id=seller_id) from e

    def _execute_write(self, sql: str, params: tuple) -> None:
        try:
            with self._db.lock:
                conn = self._db.get_connection()
                conn.execute(sql, params)
                conn.commit()
        except sqlite3.Error as e:
            raise LedgerQueryError(str(e)) from e


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
