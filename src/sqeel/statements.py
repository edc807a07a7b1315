"""
SQL statement emitters over a TableDescription.

All emitters are deterministic, total functions over a validated description.
No quoting or escaping is applied to table names, column names, or types; the
implied dialect is MySQL-family (SHOW TABLES LIKE).

Notes:
    - Column definitions and the PRIMARY KEY / UNIQUE KEY clauses use each key's
      source name, not its resolved SQL name.
    - UNIQUE KEY clauses follow the PRIMARY KEY clause in declaration order.
    - Foreign keys carried by the description are not emitted.

Examples:
    >>> from sqeel.schema import Key, TableDescription
    >>> td = TableDescription(
    ...     name="users",
    ...     keys=(Key(source_name="ID", sql_type="INTEGER", is_primary=True),),
    ...     primary_index=0,
    ... )
    >>> print(create_table_sql(td))
    CREATE TABLE users (
    ID INTEGER,
    PRIMARY KEY (ID));
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import TableDescription

__all__ = [
    "create_table_sql",
    "drop_table_sql",
    "exists_table_sql",
]


def create_table_sql(td: TableDescription) -> str:
    """
    Build the CREATE TABLE statement.

    Args:
        td (TableDescription): Validated table description.

    Returns:
        str: "CREATE TABLE <name> (\\n" + column and key lines joined by ",\\n" + ");".
    """
    lines = [k.sql_definition() for k in td.keys]
    lines.append(f"PRIMARY KEY ({td.primary_key().source_name})")
    lines.extend(f"UNIQUE KEY ({k.source_name})" for k in td.keys if k.is_unique)
    return f"CREATE TABLE {td.name} (\n" + ",\n".join(lines) + ");"


def drop_table_sql(td: TableDescription) -> str:
    """Build the DROP TABLE IF EXISTS statement."""
    return f"DROP TABLE IF EXISTS {td.name};"


def exists_table_sql(td: TableDescription) -> str:
    """Build the existence check (SHOW TABLES LIKE '<name>';)."""
    return f"SHOW TABLES LIKE '{td.name}';"
