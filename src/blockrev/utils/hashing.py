"""Canonical serialisation and MD5 helpers for structural signatures.

Structural equality between blocks is decided by comparing the canonical
JSON form of their wire dicts.  Keys are sorted so the result never depends
on dict insertion order.  The hashes are **not** used for security
purposes.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json(value: Any) -> str:
    """Serialise *value* to a deterministic JSON string.

    Keys are sorted, separators are compact and non-ASCII characters are
    preserved, so two structurally equal values always produce the same
    string.

    Examples
    --------
    >>> canonical_json({"b": [1, 2], "a": None})
    '{"a":null,"b":[1,2]}'
    """
    return json.dumps(value, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def md5_hash(data: str) -> str:
    """Return the hex-encoded MD5 digest of *data*.

    The string is encoded as UTF-8 before hashing.

    Examples
    --------
    >>> md5_hash("hello")
    '5d41402abc4b2a76b9719d911017c592'
    """
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def hash_value(value: Any) -> str:
    """Return the MD5 of the canonical JSON form of *value*.

    Examples
    --------
    >>> hash_value({"b": 2, "a": 1}) == hash_value({"a": 1, "b": 2})
    True
    """
    return md5_hash(canonical_json(value))


def values_equal(a: Any, b: Any) -> bool:
    """Deep structural comparison of two JSON-compatible values."""
    return canonical_json(a) == canonical_json(b)
