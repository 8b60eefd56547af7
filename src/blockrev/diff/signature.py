"""Structural signatures for identity-independent block comparison.

Two blocks are structurally equal when their wire forms match after every
identity has been blanked: the block's own ``id``, and for a columns block
the ids of its columns and of every nested block.  The signature is the MD5
of the canonical JSON of that normalised form, so it never depends on key
order.
"""

from __future__ import annotations

from typing import Any

from blockrev.blocks import Block
from blockrev.utils.hashing import hash_value


def normalize_block(block: Block) -> dict[str, Any]:
    """Return the wire form of *block* with all identities blanked."""
    data = block.to_dict()
    data["id"] = ""
    if "columns" in data:
        data["columns"] = [
            {
                **column,
                "id": "",
                "blocks": [{**child, "id": ""} for child in column.get("blocks", [])],
            }
            for column in data["columns"]
        ]
    return data


def compute_signature(block: Block) -> str:
    """Return the structural signature of *block* as a hex digest.

    Identical content under different identities produces the same
    signature; any difference in type, field values, column layout or
    nested content produces a different one.
    """
    return hash_value(normalize_block(block))


def same_structure(a: Block | None, b: Block | None) -> bool:
    """Compare two optional blocks by signature.  ``None`` equals only ``None``."""
    if a is None or b is None:
        return a is b
    return compute_signature(a) == compute_signature(b)
