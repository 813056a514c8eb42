"""Lending database management CLI.

Creates and drops the relational schema of the lending domain, and seeds
physical items into stock for local runs and load tests.

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py seed-items --equipment-id equip-projector --count 20
"""

import argparse
import sys


def _domain():
    from lending.domain import lending

    lending.init()
    return lending


def setup_database():
    from lending.utils.db import setup_db

    domain = _domain()
    print("Creating lending database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from lending.utils.db import drop_db

    domain = _domain()
    print("Dropping lending database schema...")
    drop_db(domain)
    print("Done.")


def seed_items(equipment_id, count):
    from lending.item.registration import RegisterItem

    domain = _domain()
    with domain.domain_context():
        for n in range(count):
            domain.process(
                RegisterItem(equipment_id=equipment_id, serial_number=f"{equipment_id}-{n + 1:04d}"),
                asynchronous=False,
            )
    print(f"Registered {count} items of {equipment_id}.")


def main():
    parser = argparse.ArgumentParser(description="Lending database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-items", help="Register items into stock")
    seed_parser.add_argument("--equipment-id", required=True)
    seed_parser.add_argument("--count", type=int, default=10)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-items":
        seed_items(args.equipment_id, args.count)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
