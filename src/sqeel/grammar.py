"""
Field annotation grammar: parsing the `sqeel` tag mini-language.

Each field of a record type carries one annotation string under the metadata key
"sqeel". The string is a comma-separated list of entries; an entry is a bare key
optionally followed by ":" and a value. The value is everything after the first
colon, verbatim, so SQL fragments such as "DEFAULT '12:00'" survive intact.

Grammar
-------
    tag   := entry ("," entry)*
    entry := key (":" value)?
    key   := bareword
    value := remainder of the entry after the first ":"

Recognized keys
---------------
| key                                          | arity | effect                 |
|----------------------------------------------|-------|------------------------|
| type                                         | value | TagSpec.type           |
| attrs                                        | value | TagSpec.attrs          |
| name, column_name                            | value | TagSpec.name_override  |
| primary, primarykey, primary_key, is_primary | flag  | TagSpec.is_primary     |
| unique                                       | flag  | TagSpec.is_unique      |

Notes
-----
- Whitespace is significant and keys are matched exact-case.
- An empty string parses to TagSpec() with all defaults.
- Commas cannot appear inside values; the entry separator always wins.

Examples
--------
>>> from sqeel.grammar import parse_tag
>>> spec = parse_tag("type:VARCHAR(64),primary,unique")
>>> spec.type, spec.is_primary, spec.is_unique
('VARCHAR(64)', True, True)
>>> parse_tag("type:INTEGER,attrs:NOT NULL,name:user_id").name_override
'user_id'
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

from .errors import InvalidTagKey

__all__ = [
    "TagSpec",
    "TAG_KEYS",
    "VALUE_KEYS",
    "PRIMARY_FLAGS",
    "UNIQUE_FLAGS",
    "parse_tag",
    "format_tag",
]

TYPE_KEYS: Final[frozenset[str]] = frozenset({"type"})
ATTRS_KEYS: Final[frozenset[str]] = frozenset({"attrs"})
NAME_KEYS: Final[frozenset[str]] = frozenset({"name", "column_name"})
PRIMARY_FLAGS: Final[frozenset[str]] = frozenset(
    {"primary", "primarykey", "primary_key", "is_primary"}
)
UNIQUE_FLAGS: Final[frozenset[str]] = frozenset({"unique"})

VALUE_KEYS: Final[frozenset[str]] = TYPE_KEYS | ATTRS_KEYS | NAME_KEYS
TAG_KEYS: Final[frozenset[str]] = VALUE_KEYS | PRIMARY_FLAGS | UNIQUE_FLAGS


@dataclass(slots=True, frozen=True)
class TagSpec:
    """
    Parsed form of one field annotation.

    Attributes:
        type (str): SQL type literal passed through verbatim (e.g., "VARCHAR(64)").
        attrs (str): Trailing SQL fragment (e.g., "NOT NULL DEFAULT 0").
        name_override (str): Explicit SQL column name; empty when absent.
        is_primary (bool): Field is the table's primary key.
        is_unique (bool): Field carries a UNIQUE KEY clause.
    """

    type: str = ""
    attrs: str = ""
    name_override: str = ""
    is_primary: bool = False
    is_unique: bool = False


def _apply_entry(spec: TagSpec, entry: str) -> TagSpec:
    key, sep, value = entry.partition(":")
    if key in VALUE_KEYS:
        if not sep:
            raise InvalidTagKey(key, reason="tag key requires a value")
        if key in TYPE_KEYS:
            return replace(spec, type=value)
        if key in ATTRS_KEYS:
            return replace(spec, attrs=value)
        return replace(spec, name_override=value)
    # flags ignore any value
    if key in PRIMARY_FLAGS:
        return replace(spec, is_primary=True)
    if key in UNIQUE_FLAGS:
        return replace(spec, is_unique=True)
    raise InvalidTagKey(key)


def parse_tag(tag: str) -> TagSpec:
    """
    Parse an annotation string into a TagSpec.

    Args:
        tag (str): Raw annotation, e.g. "type:INTEGER,primary".

    Returns:
        TagSpec: Parsed spec; defaults for an empty string.

    Raises:
        InvalidTagKey: If an entry uses an unknown key, or a value key is given
            without ":". The error's `key` attribute names the offending key.
    """
    spec = TagSpec()
    if not tag:
        return spec
    for entry in tag.split(","):
        spec = _apply_entry(spec, entry)
    return spec


def format_tag(spec: TagSpec) -> str:
    """
    Render a TagSpec back to canonical annotation text.

    Entries are emitted in the order type, attrs, name, primary, unique and
    defaulted entries are omitted, so `parse_tag(format_tag(s)) == s` for any
    spec whose values contain no commas.

    Args:
        spec (TagSpec): Spec to render.

    Returns:
        str: Annotation string ("" for the default spec).
    """
    entries: list[str] = []
    if spec.type:
        entries.append(f"type:{spec.type}")
    if spec.attrs:
        entries.append(f"attrs:{spec.attrs}")
    if spec.name_override:
        entries.append(f"name:{spec.name_override}")
    if spec.is_primary:
        entries.append("primary")
    if spec.is_unique:
        entries.append("unique")
    return ",".join(entries)
