# check_columns.py
"""Report tables/columns the storefront writes that the live database lacks."""
import sys

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from bookgram.config import settings
from bookgram.database import engine
from bookgram.models import COLLECTIONS


def missing_columns(bind):
    inspector = inspect(bind)
    existing_tables = set(inspector.get_table_names())
    report = {}

    for collection, model in COLLECTIONS.items():
        expected = set(model.__table__.columns.keys())
        if collection not in existing_tables:
            report[collection] = sorted(expected)
            continue
        actual = {col["name"] for col in inspector.get_columns(collection)}
        missing = sorted(expected - actual)
        if missing:
            report[collection] = missing

    return report


def check_columns():
    print(f"Checking {settings.database_url.split('@')[-1]}")
    print("=" * 60)

    try:
        report = missing_columns(engine)
    except SQLAlchemyError as e:
        print(f"Error: {e}")
        return 2

    for collection in COLLECTIONS:
        if collection in report:
            print(f"  ✗ {collection}: missing {', '.join(report[collection])}")
        else:
            print(f"  ✓ {collection}")

    if report:
        print("\nRun `alembic upgrade head` to bring the schema up to date.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(check_columns())
