"""
Configuration for sqeel table description.

Defines SqeelSettings, a frozen dataclass carrying the knobs that influence how
record types are walked. Defaults reproduce the documented behaviour: annotations
are read from the "sqeel" metadata key, duplicate primary keys are rejected, and
fields without a SQL type are rejected.

Notes
- Settings are plain values passed by the caller to sqeel.describe.describe_table
  or TableBuilder; sqeel reads no environment variables or files.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigError

__all__ = [
    "DEFAULT_METADATA_KEY",
    "SqeelSettings",
]

DEFAULT_METADATA_KEY = "sqeel"


@dataclass(frozen=True)
class SqeelSettings:
    """
    Runtime settings for describing tables.

    Attributes:
        metadata_key (str): Field metadata key holding the annotation string.
        strict_primary (bool): If True, more than one primary-annotated field raises
            DuplicatePrimaryKey. If False, the last one wins and earlier ones are demoted.
        allow_empty_type (bool): If True, fields whose annotation has no type are left
            out of the table instead of raising EmptySqlType.

    Raises:
        ConfigError: If metadata_key is empty or any value has the wrong type.

    Examples:
        >>> from sqeel.config import SqeelSettings
        >>> SqeelSettings(strict_primary=False)  # doctest: +ELLIPSIS
        SqeelSettings(...)
    """

    metadata_key: str = DEFAULT_METADATA_KEY
    strict_primary: bool = True
    allow_empty_type: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.metadata_key, str) or not self.metadata_key:
            raise ConfigError(f"metadata_key must be a non-empty string, got {self.metadata_key!r}")
        for name in ("strict_primary", "allow_empty_type"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(f"{name} must be a bool, got {value!r}")
