#!/usr/bin/env python3
"""Migration script to merge duplicate trust accounts and enforce their key.

Older databases could hold several trust accounts for the same
(project_id, account_type, currency), created by concurrent find-or-create
calls. This migration:
- keeps the lowest-ID account of each duplicate group
- moves the trust transactions of the other accounts onto it
- adds their balances to it and deletes them
- creates the unique index uq_trust_account_key on
  (project_id, account_type, currency)

Orphan accounts (project_id NULL) are left alone.

Usage:
    python migrations/migrate_dedupe_trust_accounts.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import lexledger modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import inspect, text
from lexledger.database.factories import create_sqlite_database

KEY_COLUMNS = ["project_id", "account_type", "currency"]
INDEX_NAME = "uq_trust_account_key"


def key_is_unique(engine) -> bool:
    """Check whether a unique constraint or index already covers the key columns.

    Args:
        engine: SQLAlchemy engine

    Returns:
        True if the key is already enforced, False otherwise
    """
    inspector = inspect(engine)
    for constraint in inspector.get_unique_constraints("trust_accounts"):
        if constraint["column_names"] == KEY_COLUMNS:
            return True
    for index in inspector.get_indexes("trust_accounts"):
        if index.get("unique") and index["column_names"] == KEY_COLUMNS:
            return True
    return False


def merge_duplicates(conn) -> tuple[int, int]:
    """Merge each duplicate group into its lowest-ID account.

    Returns:
        Tuple of (accounts removed, trust transactions moved)
    """
    groups = conn.execute(
        text(
            "SELECT project_id, account_type, currency FROM trust_accounts "
            "WHERE project_id IS NOT NULL "
            "GROUP BY project_id, account_type, currency HAVING COUNT(*) > 1"
        )
    ).fetchall()

    removed = 0
    moved = 0
    for project_id, account_type, currency in groups:
        rows = conn.execute(
            text(
                "SELECT id, balance FROM trust_accounts "
                "WHERE project_id = :project_id AND account_type = :account_type AND currency = :currency "
                "ORDER BY id"
            ),
            {"project_id": project_id, "account_type": account_type, "currency": currency},
        ).fetchall()
        keep_id = rows[0][0]
        duplicate_ids = [row[0] for row in rows[1:]]

        for duplicate_id in duplicate_ids:
            result = conn.execute(
                text("UPDATE trust_transactions SET trust_account_id = :keep WHERE trust_account_id = :dup"),
                {"keep": keep_id, "dup": duplicate_id},
            )
            moved += result.rowcount
            conn.execute(
                text(
                    "UPDATE trust_accounts SET balance = balance + "
                    "(SELECT balance FROM trust_accounts WHERE id = :dup) WHERE id = :keep"
                ),
                {"keep": keep_id, "dup": duplicate_id},
            )
            conn.execute(text("DELETE FROM trust_accounts WHERE id = :dup"), {"dup": duplicate_id})
            removed += 1

        print(
            f"  Project {project_id} {account_type} {currency}: merged "
            f"{len(duplicate_ids)} account(s) into {keep_id}"
        )

    return removed, moved


def migrate_database(database_path: str | None = None) -> None:
    """Merge duplicate trust accounts and create the unique index.

    Args:
        database_path: Path to database file. If None, uses default location.

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")
        finally:
            session.close()

        inspector = inspect(engine)
        if "trust_accounts" not in inspector.get_table_names():
            raise Exception("Table 'trust_accounts' does not exist. Please initialize the database schema first.")

        if key_is_unique(engine):
            print("Migration already applied: trust account key is unique")
            return

        print("Starting migration: merging duplicate trust accounts...")

        # Merge and index in one transaction so a failure leaves the data untouched
        with engine.begin() as conn:
            removed, moved = merge_duplicates(conn)
            print(f"  Removed {removed} duplicate account(s), moved {moved} trust transaction(s)")
            conn.execute(
                text(
                    f"CREATE UNIQUE INDEX IF NOT EXISTS {INDEX_NAME} "
                    f"ON trust_accounts ({', '.join(KEY_COLUMNS)})"
                )
            )
            print(f"  Created unique index: {INDEX_NAME}")

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
        description="Merge duplicate trust accounts and enforce one account per project, type and currency"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides LEXLEDGER_DB_PATH environment variable)",
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
