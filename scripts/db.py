#!/usr/bin/env python3
import argparse
import sys

from sqlalchemy import delete, select

from catalog_ingest.db import CatalogRepository
from catalog_ingest.db.models import Base, CatalogEntry, IngestOffset


def migrate(db: CatalogRepository):
    Base.metadata.create_all(db.engine)
    print("Migration complete")


def test(db: CatalogRepository):
    try:
        print(f"Connection: OK ({db.dialect})")
        print(f"  books: {db.count_entries()} rows")
        with db.get_session() as session:
            offsets = session.execute(
                select(IngestOffset.dataset_variant, IngestOffset.next_offset, IngestOffset.total)
            ).all()
        if offsets:
            print("Checkpoints:")
            for variant, next_offset, total in offsets:
                print(f"  {variant}: {next_offset}/{total}")
    except Exception as e:
        print(f"Connection FAILED: {e}")
        sys.exit(1)


def clear_offsets(db: CatalogRepository):
    with db.get_session() as session:
        session.execute(delete(IngestOffset))
    print("Checkpoints cleared")


def clear_all(db: CatalogRepository):
    with db.get_session() as session:
        session.execute(delete(IngestOffset))
        session.execute(delete(CatalogEntry))
    print("All data cleared")


def drop(db: CatalogRepository):
    Base.metadata.drop_all(db.engine)
    print("All tables dropped")


def main():
    parser = argparse.ArgumentParser(description="Database management")
    parser.add_argument("command", choices=["migrate", "test", "clear-offsets", "clear-all", "drop"])
    parser.add_argument("--sqlite", action="store_true", help="Use SQLite database")
    args = parser.parse_args()

    commands = {
        "migrate": migrate,
        "test": test,
        "clear-offsets": clear_offsets,
        "clear-all": clear_all,
        "drop": drop,
    }
    db = CatalogRepository(use_sqlite=args.sqlite or None)
    try:
        commands[args.command](db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
