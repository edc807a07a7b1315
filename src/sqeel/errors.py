"""
Exception types raised by tag parsing, table description, and settings loading.

Provides typed exceptions for sqeel failures:
- GrammarError for annotation (tag) syntax violations, notably InvalidTagKey.
- SchemaError for table-level constraints (primary key rules, empty SQL types).
- ConfigError for invalid or unsupported settings.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Every error is fatal to the describe operation; nothing is recovered locally.
    - Statement emitters never raise: they operate on a validated TableDescription.

Examples:
    Catch an unknown tag key.

    >>> from sqeel.errors import InvalidTagKey
    >>> from sqeel.grammar import parse_tag
    >>> try:
    ...     parse_tag("type:TEXT,bogus")
    ... except InvalidTagKey as e:
    ...     bad = e.key
    >>> bad
    'bogus'
"""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "SqeelError",
    "GrammarError",
    "InvalidTagKey",
    "SchemaError",
    "MissingPrimaryKey",
    "DuplicatePrimaryKey",
    "EmptySqlType",
    "ConfigError",
]


class SqeelError(Exception):
    """Base class for every error raised by sqeel."""


class GrammarError(SqeelError, ValueError):
    """Annotation string does not follow the tag grammar."""


class InvalidTagKey(GrammarError):
    """
    Raised when a tag contains an unrecognized key (or a value key without a value).

    Attributes:
        key (str): The offending key, verbatim.
        field (str | None): Source name of the field carrying the tag, once known.
        reason (str): Short human-readable cause.
    """

    def __init__(self, key: str, *, field: str | None = None, reason: str = "unknown tag key") -> None:
        self.key = key
        self.field = field
        self.reason = reason
        super().__init__(self._render())

    def _render(self) -> str:
        msg = f"{self.reason}: {self.key!r}"
        if self.field is not None:
            msg = f"field {self.field!r}: {msg}"
        return msg

    def with_field(self, field: str) -> InvalidTagKey:
        """Return a copy of this error with the field source name attached."""
        return InvalidTagKey(self.key, field=field, reason=self.reason)


class SchemaError(SqeelError, ValueError):
    """Table-level validation failure (primary key rules, shape of the record)."""


class MissingPrimaryKey(SchemaError):
    """Raised when no field of the record is annotated as primary."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"primary key not specified for table {table!r}")


class DuplicatePrimaryKey(SchemaError):
    """
    Raised when more than one field is annotated as primary.

    Attributes:
        table (str): Table name.
        fields (tuple[str, ...]): Source names of every primary-annotated field.
    """

    def __init__(self, table: str, fields: Sequence[str]) -> None:
        self.table = table
        self.fields = tuple(fields)
        super().__init__(
            f"composite primary keys are not supported for table {table!r}: "
            f"{', '.join(self.fields)}"
        )


class EmptySqlType(SchemaError):
    """Raised when a walked field has no `type` in its annotation."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"field {field!r} has no SQL type (missing 'type:' in tag)")


class ConfigError(SqeelError):
    """
    Raised when settings are invalid or unsupported.

    Examples:
        - Empty metadata key
        - Unreadable TOML file passed explicitly
    """
