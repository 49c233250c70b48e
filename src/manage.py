"""Storefront management CLI.

Creates and drops the database schema, and moves catalogue and order data in
and out as CSV.

Usage:
    python src/manage.py setup-db                          # Create all tables
    python src/manage.py drop-db                           # Drop all tables
    python src/manage.py import-products products.csv      # Bulk-create products
    python src/manage.py export-products --output out.csv  # Dump the catalogue
    python src/manage.py export-orders --status Paid       # Dump orders (one row per line)
"""

import argparse
import sys
from pathlib import Path


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def _write(content, output):
    if output:
        Path(output).write_text(content, encoding="utf-8")
        print(f"Written to {output}.")
    else:
        sys.stdout.write(content)


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def import_products(path, skip_duplicates=True):
    from storefront.catalogue.transfer import ImportProducts

    domain = _domain()
    content = Path(path).read_text(encoding="utf-8-sig")
    with domain.domain_context():
        result = domain.process(ImportProducts(content=content, skip_duplicates=skip_duplicates), asynchronous=False)
    print(f"Imported {result['imported']} product(s), skipped {result['skipped']}.")


def export_products(output=None):
    from storefront.catalogue.transfer import export_products_csv

    domain = _domain()
    with domain.domain_context():
        content = export_products_csv()
    _write(content, output)


def export_orders(output=None, status=None):
    from storefront.order.export import export_orders_csv

    domain = _domain()
    with domain.domain_context():
        content = export_orders_csv(status=status)
    if content is None:
        print("No orders to export.")
        return
    _write(content, output)


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    import_parser = subparsers.add_parser("import-products", help="Create products from a CSV file")
    import_parser.add_argument("file", help="CSV file with a header row")
    import_parser.add_argument(
        "--allow-duplicates",
        action="store_true",
        help="Import rows even when a product with the same name exists",
    )

    products_parser = subparsers.add_parser("export-products", help="Export the catalogue as CSV")
    products_parser.add_argument("--output", help="File to write (default: stdout)")

    orders_parser = subparsers.add_parser("export-orders", help="Export orders as CSV")
    orders_parser.add_argument("--output", help="File to write (default: stdout)")
    orders_parser.add_argument("--status", help="Only export orders in this status")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "import-products":
        import_products(args.file, skip_duplicates=not args.allow_duplicates)
    elif args.command == "export-products":
        export_products(args.output)
    elif args.command == "export-orders":
        export_orders(args.output, status=args.status)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
