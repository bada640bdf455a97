from seller_tax_documents.repositories.interfaces import (
    Clock,
    EligibilityPolicy,
    FixedClock,
    LedgerQuery,
    SystemClock,
)
from seller_tax_documents.repositories.memory import InMemorySalesLedger
from seller_tax_documents.repositories.sqlite import SQLiteDatabase, SQLiteSalesLedger

__all__ = [
    "Clock",
    "EligibilityPolicy",
    "FixedClock",
    "InMemorySalesLedger",
    "LedgerQuery",
    "SQLiteDatabase",
    "SQLiteSalesLedger",
    "SystemClock",
]
