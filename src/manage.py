"""Preparedness database management CLI.

Creates and drops the SQL schema of the preparedness domain. Only SQL
providers (sqlite, postgresql) are touched; the default memory provider
needs no schema.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from preparedness.domain import preparedness
    from preparedness.utils.db import setup_db

    print("Initializing preparedness domain...")
    preparedness.init()
    print("Creating preparedness database schema...")
    setup_db(preparedness)
    print("Done.")


def drop_database():
    from preparedness.domain import preparedness
    from preparedness.utils.db import drop_db

    print("Initializing preparedness domain...")
    preparedness.init()
    print("Dropping preparedness database schema...")
    drop_db(preparedness)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Preparedness database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
