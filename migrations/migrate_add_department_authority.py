#!/usr/bin/env python3
"""Migration script to add the authority column to the roles table.

Databases created before department authority was stored decide a user's
stage from the department name at request time. This migration adds:
- authority (VARCHAR(20), default='none')

and backfills it once for every existing department from its name:
- names containing "contab" -> contabil
- names containing "folha"/"pessoal" or the words "dp"/"rh" -> dp
- names containing "fiscal"/"tribut" -> fiscal
- anything else -> none

After this, renaming a department no longer changes what its users may do.

Usage:
    python migrations/migrate_add_department_authority.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import reinftrack modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from reinftrack.database.factories import create_sqlite_database
from reinftrack.database.models import Role
from reinftrack.domain.entities import StageAuthority
from reinftrack.domain.permissions import classify_department_name


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None) -> None:
    """Add the authority column and classify existing departments.

    Args:
        database_path: Path to database file. If None, uses default location.
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise RuntimeError("Could not get database engine from session")
        finally:
            session.close()

        inspector = inspect(engine)
        if "roles" not in inspector.get_table_names():
            raise RuntimeError("Table 'roles' does not exist. Please initialize the database schema first.")

        if column_exists(engine, "roles", "authority"):
            print("Migration already applied: authority column exists in roles table")
            return

        print("Starting migration: adding authority column...")
        with engine.begin() as conn:
            conn.execute(text("ALTER TABLE roles ADD COLUMN authority VARCHAR(20) NOT NULL DEFAULT 'none'"))
            print("  Added column: authority")

        print("Classifying existing departments...")
        session = db.session_factory()
        try:
            counts: dict[StageAuthority, int] = {}
            for role in session.query(Role).all():
                authority = classify_department_name(role.name)
                role.authority = authority.value
                counts[authority] = counts.get(authority, 0) + 1
                print(f"  {role.name} -> {authority.value}")
            session.commit()
        finally:
            session.close()

        for authority, count in counts.items():
            print(f"  {count} department(s) set to '{authority.value}'")
        print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate database to store department authority"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides REINFTRACK_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
