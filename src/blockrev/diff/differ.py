"""Identity-based block differ.

Blocks are matched across two snapshots by their stable ``id``, never by
similarity.  A block whose text changed beyond recognition is still the same
logical block, and two identical blocks under different ids are never
conflated.

For a given pair of trees the change list is produced in a fixed order:

1. blocks present on both sides, in old document order (``moved`` before
   ``modified`` for the same block),
2. ``removed`` blocks, in old document order,
3. ``added`` blocks, in new document order.

A block id that is removed and independently re-used for a new block in the
same edit cannot be told apart from a move or modification.  Callers must not
re-use identities.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from blockrev.blocks import Block, ContentBlock
from blockrev.models import BlockChange, ChangeAction, FlatBlock, ValueChange
from blockrev.utils.hashing import values_equal

from .flatten import extract_blocks, index_by_identity

# Identity, discriminator and nested collections are never attribute diffs.
_SKIPPED_ATTRIBUTES = frozenset({"id", "type", "columns", "blocks"})


def diff_attributes(old: Block, new: Block) -> dict[str, ValueChange] | None:
    """Compare the scalar fields of two versions of one block.

    Fields are compared on the wire form.  A field missing on one side is
    treated as ``None``.  Keys are reported in sorted order.

    Returns
    -------
    dict[str, ValueChange] | None
        Changed fields, or ``None`` when nothing differs.
    """
    old_data = old.to_dict()
    new_data = new.to_dict()
    diffs: dict[str, ValueChange] = {}
    for key in sorted(old_data.keys() | new_data.keys()):
        if key in _SKIPPED_ATTRIBUTES:
            continue
        before: Any = old_data.get(key)
        after: Any = new_data.get(key)
        if not values_equal(before, after):
            diffs[key] = ValueChange(before=before, after=after)
    return diffs or None


def _compare_matched(old: FlatBlock, new: FlatBlock) -> list[BlockChange]:
    changes: list[BlockChange] = []
    if old.path != new.path:
        changes.append(
            BlockChange(
                identity=new.identity,
                action=ChangeAction.MOVED,
                block_type=new.block.type,
                path=new.path,
                attribute_diffs={"position": ValueChange(before=old.path, after=new.path)},
            )
        )

    attrs = diff_attributes(old.block, new.block)
    if attrs:
        content_diff = None
        if (
            isinstance(old.block, ContentBlock)
            and isinstance(new.block, ContentBlock)
            and old.block.text != new.block.text
        ):
            content_diff = ValueChange(before=old.block.text, after=new.block.text)
        changes.append(
            BlockChange(
                identity=new.identity,
                action=ChangeAction.MODIFIED,
                block_type=new.block.type,
                path=new.path,
                attribute_diffs=attrs,
                content_diff=content_diff,
            )
        )
    return changes


def diff_blocks(
    old_tree: Iterable[Block] | None,
    new_tree: Iterable[Block] | None,
    *,
    base_path: str = "root",
) -> list[BlockChange]:
    """Compute the block-level changes that turn *old_tree* into *new_tree*.

    Parameters
    ----------
    old_tree, new_tree:
        The two snapshots.  ``None`` is treated as an empty tree.
    base_path:
        Path prefix used when flattening both trees.

    Returns
    -------
    list[BlockChange]
        Every difference, in the deterministic order described in the module
        docstring.  Empty when the trees are identical.
    """
    old_index = index_by_identity(extract_blocks(old_tree, base_path))
    new_index = index_by_identity(extract_blocks(new_tree, base_path))

    changes: list[BlockChange] = []

    for identity, old_entry in old_index.items():
        new_entry = new_index.get(identity)
        if new_entry is not None:
            changes.extend(_compare_matched(old_entry, new_entry))

    for identity, old_entry in old_index.items():
        if identity not in new_index:
            changes.append(
                BlockChange(
                    identity=identity,
                    action=ChangeAction.REMOVED,
                    block_type=old_entry.block.type,
                    path=old_entry.path,
                )
            )

    for identity, new_entry in new_index.items():
        if identity not in old_index:
            changes.append(
                BlockChange(
                    identity=identity,
                    action=ChangeAction.ADDED,
                    block_type=new_entry.block.type,
                    path=new_entry.path,
                )
            )

    return changes
