"""
Table describer: walk an annotated record type and build a TableDescription.

The describer is polymorphic over anything with named, ordered, annotated
fields. Three record surfaces are accepted:

1. dataclasses (type or instance), annotation in ``field(metadata={"sqeel": ...})``;
2. pydantic models (class or instance), annotation in
   ``Field(json_schema_extra={"sqeel": ...})``;
3. any iterable of ``FieldSpec(source_name, source_type, tag)`` triples.

For code that cannot declare a record type up front, ``TableBuilder`` offers an
explicit ``add_field`` surface with the same validation.

Procedure
- Walk fields in declaration order and parse each annotation (sqeel.grammar).
- Build one Key per field; the field's textual type is kept as ``source_type``.
- Require exactly one primary field (duplicates governed by SqeelSettings).

Examples
--------
>>> from dataclasses import dataclass, field
>>> from sqeel.describe import describe_table
>>> @dataclass
... class User:
...     ID: int = field(metadata={"sqeel": "type:INTEGER,primary"})
...     Email: str = field(metadata={"sqeel": "type:VARCHAR(128),unique"})
>>> td = describe_table("users", User)
>>> td.key_names()
['ID', 'Email']
>>> td.primary_key().source_name
'ID'
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, NamedTuple

from pydantic import BaseModel

from .config import SqeelSettings
from .errors import (
    DuplicatePrimaryKey,
    EmptySqlType,
    InvalidTagKey,
    MissingPrimaryKey,
    SchemaError,
)
from .grammar import TagSpec, format_tag, parse_tag
from .schema import Key, TableDescription

__all__ = [
    "FieldSpec",
    "iter_fields",
    "describe_table",
    "TableBuilder",
]

logger = logging.getLogger(__name__)


class FieldSpec(NamedTuple):
    """One walked field: (source_name, source_type, tag)."""

    source_name: str
    source_type: str
    tag: str


def _type_name(tp: Any) -> str:
    # Textual form only; never parsed downstream.
    if tp is None:
        return ""
    if isinstance(tp, str):
        return tp
    if isinstance(tp, type):
        return tp.__name__
    return str(tp).replace("typing.", "")


def _dataclass_fields(record: Any, metadata_key: str) -> Iterator[FieldSpec]:
    for f in dataclasses.fields(record):
        tag = f.metadata.get(metadata_key, "")
        yield FieldSpec(f.name, _type_name(f.type), tag)


def _model_fields(model: type[BaseModel], metadata_key: str) -> Iterator[FieldSpec]:
    for name, info in model.model_fields.items():
        extra = info.json_schema_extra
        tag = extra.get(metadata_key, "") if isinstance(extra, Mapping) else ""
        yield FieldSpec(name, _type_name(info.annotation), tag)


def iter_fields(record: Any, *, metadata_key: str = "sqeel") -> Iterator[FieldSpec]:
    """
    Extract (source_name, source_type, tag) triples from a record surface.

    Args:
        record: Dataclass type/instance, pydantic model class/instance, or an
            iterable of FieldSpec / 3-tuples.
        metadata_key (str): Metadata key holding the annotation string.

    Yields:
        FieldSpec: Fields in declaration order; missing annotations yield "".

    Raises:
        SchemaError: If the record is none of the supported surfaces, or an
            iterable element is not a (str, str, str) triple.
    """
    if dataclasses.is_dataclass(record):
        yield from _dataclass_fields(record, metadata_key)
        return
    if isinstance(record, BaseModel):
        yield from _model_fields(type(record), metadata_key)
        return
    if isinstance(record, type) and issubclass(record, BaseModel):
        yield from _model_fields(record, metadata_key)
        return
    if isinstance(record, (str, bytes, Mapping)) or not isinstance(record, Iterable):
        raise SchemaError(
            f"cannot describe {type(record).__name__!s}: expected a dataclass, "
            "a pydantic model, or an iterable of (source_name, source_type, tag)"
        )
    for item in record:
        try:
            source_name, source_type, tag = item
        except (TypeError, ValueError) as exc:
            raise SchemaError(f"field entry must be a 3-tuple, got {item!r}") from exc
        if not all(isinstance(v, str) for v in (source_name, source_type, tag)):
            raise SchemaError(f"field entry values must be strings, got {item!r}")
        yield FieldSpec(source_name, source_type, tag)


def _build_key(fs: FieldSpec) -> Key | None:
    if not fs.source_name:
        raise SchemaError("field source name must be non-empty")
    try:
        spec = parse_tag(fs.tag)
    except InvalidTagKey as exc:
        raise exc.with_field(fs.source_name) from exc
    if not spec.type:
        return None
    return Key(
        source_name=fs.source_name,
        column_name=spec.name_override,
        source_type=fs.source_type,
        sql_type=spec.type,
        sql_attrs=spec.attrs,
        raw_tag=fs.tag,
        is_primary=spec.is_primary,
        is_unique=spec.is_unique,
    )


def _describe(
    name: str,
    fields: Iterable[FieldSpec],
    foreign_keys: Mapping[str, str] | None,
    settings: SqeelSettings,
) -> TableDescription:
    keys: list[Key] = []
    for fs in fields:
        key = _build_key(fs)
        if key is None:
            if not settings.allow_empty_type:
                raise EmptySqlType(fs.source_name)
            logger.debug("table %s: skipping untyped field %s", name, fs.source_name)
            continue
        logger.debug(
            "table %s: key %s -> %s (%s)", name, key.source_name, key.sql_name(), key.sql_type
        )
        keys.append(key)

    primaries = [i for i, k in enumerate(keys) if k.is_primary]
    if not primaries:
        raise MissingPrimaryKey(name)
    if len(primaries) > 1:
        if settings.strict_primary:
            raise DuplicatePrimaryKey(name, [keys[i].source_name for i in primaries])
        for i in primaries[:-1]:
            keys[i] = keys[i].model_copy(update={"is_primary": False})

    td = TableDescription(
        name=name,
        keys=tuple(keys),
        primary_index=primaries[-1],
        foreign_keys=dict(foreign_keys or {}),
    )
    logger.debug("described table %s with %d keys", name, len(td.keys))
    return td


def describe_table(
    name: str,
    record: Any,
    foreign_keys: Mapping[str, str] | None = None,
    *,
    settings: SqeelSettings | None = None,
) -> TableDescription:
    """
    Describe the SQL table for an annotated record type.

    Args:
        name (str): Table name, used verbatim in generated SQL.
        record: Record surface accepted by `iter_fields`.
        foreign_keys (Mapping[str, str] | None): Opaque mapping retained on the
            description for external collaborators; sqeel ignores it.
        settings (SqeelSettings | None): Describer settings; defaults when None.

    Returns:
        TableDescription: Validated, immutable description.

    Raises:
        InvalidTagKey: If an annotation uses an unknown key (``field`` is set).
        EmptySqlType: If a field has no type and empty types are not allowed.
        MissingPrimaryKey: If no field is annotated primary.
        DuplicatePrimaryKey: If several fields are primary and strict_primary is set.
        SchemaError: If the record surface is unsupported.
    """
    s = settings or SqeelSettings()
    return _describe(name, iter_fields(record, metadata_key=s.metadata_key), foreign_keys, s)


class TableBuilder:
    """
    Explicit builder for a TableDescription, one field at a time.

    Examples:
        >>> td = (
        ...     TableBuilder("users")
        ...     .add_field("ID", "int", "type:INTEGER,primary")
        ...     .add_field("Name", "str", "type:VARCHAR(64),attrs:NOT NULL")
        ...     .build()
        ... )
        >>> td.exists_statement()
        "SHOW TABLES LIKE 'users';"
    """

    def __init__(
        self,
        name: str,
        foreign_keys: Mapping[str, str] | None = None,
        *,
        settings: SqeelSettings | None = None,
    ) -> None:
        self.name = name
        self.foreign_keys = dict(foreign_keys or {})
        self.settings = settings or SqeelSettings()
        self._fields: list[FieldSpec] = []

    def add_field(self, source_name: str, source_type: str, tag: str | TagSpec) -> TableBuilder:
        """
        Queue one field. A TagSpec is rendered to annotation text, so the stored
        raw tag is always a string.
        """
        if isinstance(tag, TagSpec):
            tag = format_tag(tag)
        self._fields.append(FieldSpec(source_name, source_type, tag))
        return self

    def build(self) -> TableDescription:
        """Validate the accumulated fields and return the description (see describe_table)."""
        return _describe(self.name, list(self._fields), self.foreign_keys, self.settings)
