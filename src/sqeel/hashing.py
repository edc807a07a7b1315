"""
Canonical JSON serialization and fingerprinting for table descriptions.

A fingerprint lets external collaborators (migration or drift tooling) detect
that the record type behind a table changed between deployments without diffing
the schema themselves. This module is zero-IO and uses only the standard library.

Notes:
    - Canonical JSON: sort_keys=True, separators=(",", ":"), ensure_ascii=False.
    - Hashing is SHA-256 over the UTF-8 encoded canonical JSON string.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

__all__ = [
    "json_dumps_canonical",
    "hash_mapping",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON with sorted keys and compact separators.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def hash_mapping(data: Mapping[str, Any]) -> str:
    """
    Compute a stable SHA-256 hex digest for a mapping via its canonical JSON.

    Args:
        data (Mapping[str, Any]): Mapping to hash; key order does not matter.

    Returns:
        str: Hex digest.

    Examples:
        >>> hash_mapping({"a": 1, "b": 2}) == hash_mapping({"b": 2, "a": 1})
        True
    """
    h = hashlib.sha256()
    h.update(json_dumps_canonical(dict(data)).encode("utf-8"))
    return h.hexdigest()
