"""Command-line interface for Seller Tax Documents."""

import argparse
import json
import sys
import time
from datetime import date
from pathlib import Path

from seller_tax_documents import __version__
from seller_tax_documents.config import get_settings
from seller_tax_documents.container import Container
from seller_tax_documents.domain.sales import Sale, SaleState
from seller_tax_documents.exceptions import TaxDocumentsError
from seller_tax_documents.logging_config import LogContext, configure_logging
from seller_tax_documents.services.tax_documents import DOCUMENT_TYPES


def get_default_db_path() -> Path:
    """Ledger path from STD_SQLITE_PATH, by default one in the user's home directory."""
    return get_settings().sqlite_path


def create_container(db_path: Path | None = None) -> Container:
    """Create a container bound to ``db_path``, or to the configured ledger."""
    settings = get_settings()
    if db_path is not None:
        settings = settings.model_copy(update={"sqlite_path": db_path})
    settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    return Container(settings=settings)


def _db_path(args: argparse.Namespace) -> Path:
    return Path(args.database) if args.database else get_default_db_path()


def _open_existing(args: argparse.Namespace) -> Container | None:
    db_path = _db_path(args)
    if not db_path.exists():
        print(f"Error: Database not found at {db_path}")
        return None
    return create_container(db_path)


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize a new ledger database."""
    db_path = _db_path(args)
    if db_path.exists() and not args.force:
        print(f"Database already exists at {db_path}")
        print("Use --force to reinitialize")
        return 1
    if db_path.exists():
        db_path.unlink()

    with create_container(db_path) as container:
        container.database.initialize()
    print(f"Initialized ledger at {db_path}")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    print(f"seller-tax-documents {__version__}")
    return 0


def cmd_add_sale(args: argparse.Namespace) -> int:
    container = _open_existing(args)
    if container is None:
        return 1
    try:
        sale = Sale(
            seller_id=args.seller_id,
            created_at=date.fromisoformat(args.date),
            total_transaction_cents=args.gross_cents,
            fee_cents=args.fee_cents,
            tax_cents=args.tax_cents,
            state=SaleState(args.state),
            is_test=args.test,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    with container:
        try:
            container.ledger.add_sale(sale)
        except TaxDocumentsError as e:
            print(f"Error: {e.message}")
            return 1
    print(f"Recorded sale {sale.id} for {sale.seller_id} on {sale.created_at}")
    return 0


def cmd_mark_eligible(args: argparse.Namespace) -> int:
    container = _open_existing(args)
    if container is None:
        return 1
    with container:
        try:
            container.ledger.mark_eligible(args.seller_id, args.year)
        except TaxDocumentsError as e:
            print(f"Error: {e.message}")
            return 1
    print(f"Marked {args.seller_id} eligible for 1099-K in {args.year}")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    container = _open_existing(args)
    if container is None:
        return 1
    with container:
        try:
            data = container.assembler.build_documents_data(args.seller_id, args.year)
        except TaxDocumentsError as e:
            print(f"Error: {e.message}")
            return 1
    print(json.dumps(data.to_dict(), indent=2))
    return 0


def cmd_export_all(args: argparse.Namespace) -> int:
    container = _open_existing(args)
    if container is None:
        return 1
    deadline = time.monotonic() + args.timeout if args.timeout is not None else None
    with container:
        try:
            year = container.assembler.resolve_year(args.seller_id, args.year)
            export = container.exporter.export_all(
                args.seller_id, year, deadline=deadline
            )
        except TaxDocumentsError as e:
            print(f"Error: {e.message}")
            return 1

    output = Path(args.output) if args.output else Path(export.filename)
    output.write_bytes(export.content)
    print(f"Exported {len(export.entries)} documents to {output}")
    for entry in export.entries:
        print(f"  {entry}")
    for failure in export.failures:
        print(f"  FAILED {failure.document.id}: {failure.error.message}")
    for document in export.skipped:
        print(f"  SKIPPED {document.id}")
    return 0


def cmd_export_one(args: argparse.Namespace) -> int:
    container = _open_existing(args)
    if container is None:
        return 1
    with container:
        try:
            year = container.assembler.resolve_year(args.seller_id, args.year)
            exported = container.exporter.export_one(
                args.seller_id, year, args.document_type, args.identifier
            )
        except TaxDocumentsError as e:
            print(f"Error: {e.message}")
            return 1

    output = Path(args.output) if args.output else Path(exported.filename)
    output.write_bytes(exported.content)
    print(f"Exported {exported.filename} to {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="std",
        description="Seller Tax Documents - 1099-K forms and quarterly earning summaries",
    )
    parser.add_argument(
        "--database",
        "-d",
        help="Path to SQLite ledger file",
        default=None,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="Initialize a new ledger")
    init_parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Force reinitialization (deletes existing data)",
    )
    init_parser.set_defaults(func=cmd_init)

    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    sale_parser = subparsers.add_parser("add-sale", help="Record a sale")
    sale_parser.add_argument("seller_id")
    sale_parser.add_argument("date", help="Sale date (YYYY-MM-DD)")
    sale_parser.add_argument("gross_cents", type=int)
    sale_parser.add_argument("--fee-cents", type=int, default=0)
    sale_parser.add_argument("--tax-cents", type=int, default=0)
    sale_parser.add_argument(
        "--state",
        choices=[state.value for state in SaleState],
        default=SaleState.SUCCESSFUL.value,
    )
    sale_parser.add_argument("--test", action="store_true", help="Mark as a test sale")
    sale_parser.set_defaults(func=cmd_add_sale)

    eligible_parser = subparsers.add_parser(
        "mark-eligible", help="Mark a seller eligible for 1099-K in a year"
    )
    eligible_parser.add_argument("seller_id")
    eligible_parser.add_argument("year", type=int)
    eligible_parser.set_defaults(func=cmd_mark_eligible)

    list_parser = subparsers.add_parser("list", help="List tax documents as JSON")
    list_parser.add_argument("seller_id")
    list_parser.add_argument("--year", default=None)
    list_parser.set_defaults(func=cmd_list)

    all_parser = subparsers.add_parser(
        "export-all", help="Export every document for a year as a zip archive"
    )
    all_parser.add_argument("seller_id")
    all_parser.add_argument("--year", default=None)
    all_parser.add_argument("--output", "-o", default=None)
    all_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds after which remaining renders are skipped",
    )
    all_parser.set_defaults(func=cmd_export_all)

    one_parser = subparsers.add_parser("export-one", help="Export a single document")
    one_parser.add_argument("seller_id")
    one_parser.add_argument("document_type", choices=DOCUMENT_TYPES)
    one_parser.add_argument("identifier", nargs="?", default=None, help="Q1..Q4")
    one_parser.add_argument("--year", default=None)
    one_parser.add_argument("--output", "-o", default=None)
    one_parser.set_defaults(func=cmd_export_one)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(get_settings())
    with LogContext(command=args.command):
        result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
