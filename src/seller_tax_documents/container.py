"""Dependency injection container for Seller Tax Documents.

Wires the ledger, the document services and the exporter from settings.
Services are created on first access and cached for reuse; they hold no
per-request state.

Usage:
    from seller_tax_documents.container import Container

    with Container() as container:
        data = container.assembler.build_documents_data("seller-1", 2024)
"""

from functools import cached_property

from seller_tax_documents.config import Settings, get_settings
from seller_tax_documents.logging_config import get_logger
from seller_tax_documents.repositories.interfaces import Clock, SystemClock
from seller_tax_documents.repositories.sqlite import SQLiteDatabase, SQLiteSalesLedger
from seller_tax_documents.services.aggregation import PeriodAggregator
from seller_tax_documents.services.archive import ArchiveExporter
from seller_tax_documents.services.eligibility import EligibilityEvaluator
from seller_tax_documents.services.rendering import DocumentRenderer
from seller_tax_documents.services.tax_documents import DocumentAssembler
from seller_tax_documents.services.year_resolver import YearResolver

logger = get_logger(__name__)


class Container:
    """Dependency injection container.

    The container can be configured with custom settings and clock for testing:

        test_settings = Settings(sqlite_path=":memory:")
        container = Container(settings=test_settings, clock=FixedClock(...))
    """

    def __init__(
        self, settings: Settings | None = None, clock: Clock | None = None
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock or SystemClock()
        logger.debug(
            "container_created",
            sqlite_path=str(self._settings.sqlite_path),
            environment=self._settings.environment.value,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def clock(self) -> Clock:
        return self._clock

    @cached_property
    def database(self) -> SQLiteDatabase:
        """The SQLite ledger database, initialized on first access."""
        db_path = str(self._settings.sqlite_path)
        logger.info("initializing_sqlite_database", path=db_path)
        db = SQLiteDatabase(db_path)
        db.initialize()
        return db

    @cached_property
    def ledger(self) -> SQLiteSalesLedger:
        return SQLiteSalesLedger(self.database)

    @cached_property
    def year_resolver(self) -> YearResolver:
        return YearResolver(
            self.ledger, self._clock, timeout=self._settings.ledger_timeout_seconds
        )

    @cached_property
    def aggregator(self) -> PeriodAggregator:
        return PeriodAggregator(
            self.ledger,
            timeout=self._settings.ledger_timeout_seconds,
            max_workers=self._settings.aggregation_workers,
        )

    @cached_property
    def eligibility(self) -> EligibilityEvaluator:
        return EligibilityEvaluator(
            self.ledger, timeout=self._settings.ledger_timeout_seconds
        )

    @cached_property
    def assembler(self) -> DocumentAssembler:
        return DocumentAssembler(self.year_resolver, self.aggregator, self.eligibility)

    @cached_property
    def renderer(self) -> DocumentRenderer:
        return DocumentRenderer(
            platform_name=self._settings.platform_name,
            clock=self._clock,
            compress=self._settings.pdf_compression,
        )

    @cached_property
    def exporter(self) -> ArchiveExporter:
        return ArchiveExporter(
            self.assembler,
            self.renderer,
            max_workers=self._settings.render_workers,
            spool_max_bytes=self._settings.archive_spool_max_bytes,
        )

    def close(self) -> None:
        """Close the database connection if it was opened."""
        if "database" in self.__dict__:
            logger.info("closing_database_connection")
            self.database.close()

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
