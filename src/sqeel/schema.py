"""
Pydantic v2 models for normalized table schemas: Key and TableDescription.

A TableDescription is built once (usually by sqeel.describe at program start)
and is immutable afterwards; it may be shared across threads freely. Emitters in
sqeel.statements consume it.

Responsibilities
- Define the frozen Key model (one column entry) and its naming helpers.
- Define the frozen TableDescription model and validate its primary-key invariants.
- Delegate SQL text generation to sqeel.statements.

Invariants (TableDescription)
- primary_index is a valid index into keys.
- Exactly one key is primary, and it is keys[primary_index].
- SQL names are expected to be unique across keys; this is a user contract and
  is not enforced (see TableDescription.duplicate_sql_names).

Examples
--------
>>> from sqeel.schema import Key
>>> Key(source_name="UserID", sql_type="INTEGER").sql_name()
'user_id'
>>> Key(source_name="UserID", column_name="uid", sql_type="INTEGER").sql_name()
'uid'
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import SchemaError
from .hashing import hash_mapping
from .naming import to_snake_case
from .statements import create_table_sql, drop_table_sql, exists_table_sql

__all__ = [
    "Key",
    "TableDescription",
]


class Key(BaseModel):
    """
    Normalized column entry of a table.

    Attributes:
        source_name (str): Field identifier as declared on the record type.
        column_name (str): Explicit SQL column name; empty to derive from source_name.
        source_type (str): Textual in-memory type of the field (informational only).
        sql_type (str): SQL type literal, verbatim.
        sql_attrs (str): Trailing SQL fragment; may be empty.
        raw_tag (str): Original annotation string, kept for diagnostics.
        is_primary (bool): Key is the table's primary key.
        is_unique (bool): Key carries a UNIQUE KEY clause.

    Raises:
        pydantic.ValidationError: If source_name or sql_type is empty.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_name: str = Field(..., min_length=1)
    column_name: str = ""
    source_type: str = ""
    sql_type: str = Field(..., min_length=1)
    sql_attrs: str = ""
    raw_tag: str = ""
    is_primary: bool = False
    is_unique: bool = False

    def sql_definition(self) -> str:
        """Return "<source_name> <sql_type>[ <sql_attrs>]"."""
        sd = f"{self.source_name} {self.sql_type}"
        if self.sql_attrs:
            sd += " " + self.sql_attrs
        return sd

    def sql_name(self) -> str:
        """Return column_name when set, else the lower_snake form of source_name."""
        if self.column_name:
            return self.column_name
        return to_snake_case(self.source_name)


class TableDescription(BaseModel):
    """
    Schema of one SQL table derived from an annotated record type.

    Attributes:
        name (str): Table name, verbatim as supplied by the caller.
        keys (tuple[Key, ...]): Column entries in declaration order.
        primary_index (int): Position of the single primary key within keys.
        foreign_keys (tuple[tuple[str, str], ...]): Opaque foreign-key pairs, sorted
            by key, retained for external collaborators; never consulted by sqeel
            itself. A mapping is accepted on construction; see foreign_key_map().

    Raises:
        pydantic.ValidationError: If the primary-key invariants do not hold.

    Examples:
        >>> td = TableDescription(
        ...     name="users",
        ...     keys=(Key(source_name="ID", sql_type="INTEGER", is_primary=True),),
        ...     primary_index=0,
        ... )
        >>> td.drop_statement()
        'DROP TABLE IF EXISTS users;'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    keys: tuple[Key, ...]
    primary_index: int
    foreign_keys: tuple[tuple[str, str], ...] = ()

    @field_validator("foreign_keys", mode="before")
    @classmethod
    def _freeze_foreign_keys(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return tuple(sorted(v.items()))
        return v

    @model_validator(mode="after")
    def _check_primary(self) -> TableDescription:
        if not 0 <= self.primary_index < len(self.keys):
            raise SchemaError(
                f"primary_index {self.primary_index} out of range for {len(self.keys)} keys"
            )
        primaries = [k.source_name for k in self.keys if k.is_primary]
        if len(primaries) != 1:
            raise SchemaError(f"exactly one primary key required, got {primaries!r}")
        if not self.keys[self.primary_index].is_primary:
            raise SchemaError(
                f"keys[{self.primary_index}] ({self.keys[self.primary_index].source_name!r}) "
                "is not marked primary"
            )
        return self

    def primary_key(self) -> Key:
        return self.keys[self.primary_index]

    def foreign_key_map(self) -> Mapping[str, str]:
        """Read-only view of the foreign-key pairs."""
        return MappingProxyType(dict(self.foreign_keys))

    def key_names(self) -> list[str]:
        """Source names of every key, in declaration order."""
        return [k.source_name for k in self.keys]

    def sql_names(self) -> list[str]:
        """Resolved SQL column names of every key, in declaration order."""
        return [k.sql_name() for k in self.keys]

    def unique_keys(self) -> list[Key]:
        return [k for k in self.keys if k.is_unique]

    def duplicate_sql_names(self) -> list[str]:
        """
        Report resolved SQL names that appear on more than one key.

        Returns:
            list[str]: Colliding names in first-seen order; empty when names are unique.
        """
        counts = Counter(self.sql_names())
        return [name for name, n in counts.items() if n > 1]

    def create_statement(self) -> str:
        return create_table_sql(self)

    def drop_statement(self) -> str:
        return drop_table_sql(self)

    def exists_statement(self) -> str:
        return exists_table_sql(self)

    def fingerprint(self) -> str:
        """
        Stable SHA-256 digest of the description (name, keys, primary, foreign keys).

        Two descriptions built from the same record type and table name produce
        the same fingerprint across processes.
        """
        return hash_mapping(self.model_dump(mode="json"))
