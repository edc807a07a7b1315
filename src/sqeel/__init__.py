"""
sqeel: SQL table schemas from annotated record types.

One record type definition is the single source of truth for both the
in-memory shape and the SQL table. Each field carries an annotation string under
the metadata key "sqeel" (e.g. "type:VARCHAR(64),attrs:NOT NULL,unique"); sqeel
walks the fields, builds a TableDescription, and emits CREATE, DROP, and
existence-check statements for MySQL-family dialects.

## Contracts
- Grammar: the tag mini-language (`sqeel.grammar.parse_tag`).
- Naming: default column names in lower_snake (`sqeel.naming.to_snake_case`).
- Describe: record walking and primary-key validation (`sqeel.describe`).
- Schema: frozen Key / TableDescription models (`sqeel.schema`).
- Statements: pure SQL emitters (`sqeel.statements`).
- Config/Errors: `SqeelSettings` and the exception hierarchy.

## Notes
- Zero-IO: stdlib + pydantic only; no connections, execution, or migrations.
- No identifier quoting; table and field names are trusted.
- Foreign keys are accepted and retained opaquely; no FK clauses are emitted.

## Examples
```python
from dataclasses import dataclass, field
from sqeel import describe_table

@dataclass
class User:
    ID: int = field(metadata={"sqeel": "type:INTEGER,primary"})
    Name: str = field(metadata={"sqeel": "type:VARCHAR(64),attrs:NOT NULL"})
    Email: str = field(metadata={"sqeel": "type:VARCHAR(128),unique"})

td = describe_table("users", User)
print(td.create_statement())
```
"""

from __future__ import annotations

from .config import SqeelSettings
from .describe import FieldSpec, TableBuilder, describe_table, iter_fields
from .errors import (
    ConfigError,
    DuplicatePrimaryKey,
    EmptySqlType,
    GrammarError,
    InvalidTagKey,
    MissingPrimaryKey,
    SchemaError,
    SqeelError,
)
from .grammar import TagSpec, format_tag, parse_tag
from .naming import to_snake_case
from .schema import Key, TableDescription

__all__ = [
    "SqeelSettings",
    "FieldSpec",
    "TableBuilder",
    "describe_table",
    "iter_fields",
    "TagSpec",
    "parse_tag",
    "format_tag",
    "to_snake_case",
    "Key",
    "TableDescription",
    "SqeelError",
    "GrammarError",
    "InvalidTagKey",
    "SchemaError",
    "MissingPrimaryKey",
    "DuplicatePrimaryKey",
    "EmptySqlType",
    "ConfigError",
]

__version__ = "0.1.0"
