"""Storefront database management CLI.

Creates and drops the commerce schema on SQL providers. With the default
in-memory provider both commands are no-ops.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def _commerce():
    from commerce.domain import commerce

    print("Initializing commerce domain...")
    commerce.init()
    return commerce


def setup_databases():
    """Create the commerce database schema."""
    from commerce.utils.db import setup_db

    domain = _commerce()
    print("Creating commerce database schema...")
    setup_db(domain)
    print("Done.")


def drop_databases():
    """Drop the commerce database schema."""
    from commerce.utils.db import drop_db

    domain = _commerce()
    print("Dropping commerce database schema...")
    drop_db(domain)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
