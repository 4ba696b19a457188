#!/usr/bin/env python3
"""sqlplate CRUD Example.

This example demonstrates the basic usage of sqlplate:
- Literal rendering of [?] markers
- query / query_for_list / update
- Row mapping with dataclasses, Column annotations and plain functions
- IN clause expansion and Raw fragments
- Error translation (EmptyResultDataAccessError, DataAccessError)
- Bind parameter mode

Usage:
    uv run python examples/crud_example.py
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Annotated

from sqlplate import (
    Column,
    DataAccessError,
    EmptyResultDataAccessError,
    Raw,
    SqlTemplate,
    render,
)

# =============================================================================
# Entity Definition
# =============================================================================


@dataclass
class User:
    """User entity.

    Use Annotated[T, Column("DB_COLUMN_NAME")] to define
    mapping between DB column names and field names.
    """

    id: int
    name: str
    email: Annotated[str, Column("mail_address")]
    department: str | None = None


# =============================================================================
# Database Setup
# =============================================================================


def setup_database() -> sqlite3.Connection:
    """Create an in-memory database with sample users."""
    conn = sqlite3.connect(":memory:")
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            mail_address TEXT NOT NULL,
            department TEXT
        )
    """)
    conn.executemany(
        "INSERT INTO users (id, name, mail_address, department) VALUES (?, ?, ?, ?)",
        [
            (1, "Alice", "alice@example.com", "dev"),
            (2, "Bob", "bob@example.com", "sales"),
            (3, "Charlie", "charlie@example.com", "dev"),
            (4, "Dana O'Neil", "dana@example.com", None),
        ],
    )
    conn.commit()
    return conn


# =============================================================================
# Demos
# =============================================================================


def demo_render() -> None:
    """Show how markers are replaced."""
    print("--- render ---")
    print(render("SELECT * FROM users WHERE id = [?] AND name = [?]", [1, "Dana O'Neil"]))
    print()


def demo_query(template: SqlTemplate) -> None:
    """Select rows into dataclasses."""
    print("--- query_for_list / query ---")
    for user in template.query_for_list(
        "SELECT * FROM users WHERE department = [?] ORDER BY id", User, "dev"
    ):
        print(f"  {user}")
    user = template.query("SELECT * FROM users WHERE id = [?]", User, 4)
    print(f"  single: {user}")
    print()


def demo_in_clause(template: SqlTemplate) -> None:
    """Expand a list into an IN clause."""
    print("--- IN clause / Raw ---")
    names = template.query_for_list(
        "SELECT name FROM [?] WHERE id IN [?] ORDER BY id",
        lambda row: row["name"],
        Raw("users"),
        [1, 2],
    )
    print(f"  {names}")
    print()


def demo_update(template: SqlTemplate) -> None:
    """Insert, update and delete."""
    print("--- update ---")
    inserted = template.update(
        "INSERT INTO users (id, name, mail_address) VALUES ([?], [?], [?])",
        5,
        "Eve",
        "eve@example.com",
    )
    updated = template.update("UPDATE users SET department = [?] WHERE department IS NULL", "ops")
    deleted = template.update("DELETE FROM users WHERE id = [?]", 5)
    print(f"  inserted={inserted} updated={updated} deleted={deleted}")
    print()


def demo_errors(template: SqlTemplate) -> None:
    """Show translated errors."""
    print("--- errors ---")
    try:
        template.query("SELECT * FROM users WHERE id = [?]", User, 999)
    except EmptyResultDataAccessError as e:
        print(f"  empty result: {e}")
    try:
        template.update("DELETE FROM missing_table")
    except DataAccessError as e:
        print(f"  driver error: {e} (cause: {type(e.cause).__name__})")
    print()


def demo_bind_parameters(conn: sqlite3.Connection) -> None:
    """Use native bind parameters instead of literal rendering."""
    print("--- bind parameters ---")
    template = SqlTemplate(conn, bind_parameters=True)
    user = template.query("SELECT * FROM users WHERE name = [?]", User, "Dana O'Neil")
    print(f"  {user}")
    print()


def main() -> None:
    """Run the examples."""
    logging.basicConfig(level=logging.CRITICAL)
    print("sqlplate CRUD Example")
    print("=" * 60)
    print()

    conn = setup_database()
    template = SqlTemplate(conn, auto_commit=True)

    demo_render()
    demo_query(template)
    demo_in_clause(template)
    demo_update(template)
    demo_errors(template)
    demo_bind_parameters(conn)

    conn.close()
    print("=" * 60)
    print("Example completed")
    print("=" * 60)


if __name__ == "__main__":
    main()
