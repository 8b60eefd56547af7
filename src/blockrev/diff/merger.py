"""Three-way merge of block trees.

:func:`merge_block_structures` reconciles a common ancestor (*base*) with
two independent edits (*ours*, *theirs*).  The unit of merging is the
top-level block: blocks nested in a columns container travel with their
container and are compared through its structural signature.

A top-level block that one side moved into a column is still present on
that side, so it is resolved as moved rather than deleted.  The resolved
block takes the nested place and the merged tree holds each identity once.

Each identity in the union of the three top-level snapshots is resolved
from its presence pattern:

=======================  ==============================================
present in               outcome
=======================  ==============================================
ours only / theirs only  kept
ours + theirs            conflict (concurrent addition)
base + theirs            removed; conflict if theirs modified it
base + ours              removed if ours unmodified, else conflict
base only                removed on both sides
all three                three-way signature comparison
=======================  ==============================================

A conflict is settled by the :class:`~blockrev.models.MergeStrategy`.  The
default ``ours`` strategy treats our deletion as our value, so a block we
deleted stays deleted while a block we modified survives their deletion.

:func:`merge_block_attributes` merges the fields of one block present on all
three sides.  It resolves toward *ours* and records conflicts only when the
caller passes a list to collect them.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import fields, replace
from typing import Any

from blockrev.blocks import LEAF_BLOCK_CLASSES, Block, ColumnsBlock, to_wire_value
from blockrev.models import FlatBlock, MergeConflict, MergeResolution, MergeResult, MergeStrategy
from blockrev.utils.hashing import values_equal

from .flatten import extract_blocks, index_by_identity
from .signature import same_structure

_STRATEGY_RESOLUTION: dict[MergeStrategy, MergeResolution | None] = {
    MergeStrategy.OURS: MergeResolution.OURS,
    MergeStrategy.THEIRS: MergeResolution.THEIRS,
    MergeStrategy.MANUAL: None,
}


def _index(
    tree: Iterable[Block] | None,
    base_path: str,
) -> tuple[dict[str, FlatBlock], list[str]]:
    """Index every block of *tree* and list the top-level identities in order."""
    index = index_by_identity(extract_blocks(tree, base_path))
    return index, [identity for identity, entry in index.items() if entry.depth == 0]


def _settle_nested(
    content: list[Block],
    resolved: dict[str, Block | None],
) -> tuple[Block, ...]:
    """Swap resolved blocks into columns and drop their top-level copies.

    A column child whose identity was resolved takes the resolved block, or
    is removed when the merge removed it.  The first placement of an
    identity wins.
    """
    placed: set[str] = set()
    settled: list[Block] = []
    for block in content:
        if isinstance(block, ColumnsBlock):
            columns = []
            for column in block.columns:
                children = []
                for child in column.blocks:
                    if child.id in placed:
                        continue
                    if child.id in resolved:
                        child = resolved[child.id]
                        if not isinstance(child, LEAF_BLOCK_CLASSES):
                            continue
                    children.append(child)
                    placed.add(child.id)
                columns.append(replace(column, blocks=tuple(children)))
            block = replace(block, columns=tuple(columns))
        settled.append(block)
    return tuple(block for block in settled if block.id not in placed)


def _pick(
    strategy: MergeStrategy,
    base: Block | None,
    ours: Block | None,
    theirs: Block | None,
) -> Block | None:
    if strategy is MergeStrategy.OURS:
        return ours
    if strategy is MergeStrategy.THEIRS:
        return theirs
    return base


def _resolve(
    strategy: MergeStrategy,
    base: Block | None,
    ours: Block | None,
    theirs: Block | None,
) -> tuple[Block | None, bool]:
    """Return the surviving block (``None`` if removed) and a conflict flag."""
    if base is None:
        if ours is not None and theirs is not None:
            return _pick(strategy, base, ours, theirs), True
        return (ours if ours is not None else theirs), False

    if ours is None and theirs is None:
        return None, False

    if ours is None:
        if same_structure(base, theirs):
            return None, False
        return _pick(strategy, base, ours, theirs), True

    if theirs is None:
        if same_structure(base, ours):
            return None, False
        return _pick(strategy, base, ours, theirs), True

    if same_structure(ours, theirs):
        return ours, False
    if same_structure(ours, base):
        return theirs, False
    if same_structure(theirs, base):
        return ours, False
    return _pick(strategy, base, ours, theirs), True


def _block(entry: FlatBlock | None) -> Block | None:
    return entry.block if entry is not None else None


def merge_block_structures(
    base: Iterable[Block] | None,
    ours: Iterable[Block] | None,
    theirs: Iterable[Block] | None,
    *,
    strategy: MergeStrategy | str = MergeStrategy.OURS,
    base_path: str = "root",
) -> MergeResult:
    """Merge two edits of a block tree against their common ancestor.

    Parameters
    ----------
    base:
        The common ancestor.
    ours, theirs:
        The two independent edits.
    strategy:
        How recorded conflicts are settled (``ours``, ``theirs`` or
        ``manual``).
    base_path:
        Path prefix used for conflict paths.

    Returns
    -------
    MergeResult
        The merged tree and every conflict, in processing order (base
        document order, then blocks new in ours, then blocks new in theirs).
        Surviving blocks follow ours' order; blocks that survive only from
        theirs are appended in theirs' order.
    """
    strategy = MergeStrategy(strategy)
    resolution = _STRATEGY_RESOLUTION[strategy]

    base_index, base_top = _index(base, base_path)
    ours_index, ours_top = _index(ours, base_path)
    theirs_index, theirs_top = _index(theirs, base_path)
    base_seen, ours_seen = set(base_top), set(ours_top)

    identities: list[str] = list(base_top)
    identities.extend(i for i in ours_top if i not in base_seen)
    identities.extend(i for i in theirs_top if i not in base_seen and i not in ours_seen)

    resolved: dict[str, Block | None] = {}
    conflicts: list[MergeConflict] = []

    for identity in identities:
        base_entry = base_index.get(identity)
        ours_entry = ours_index.get(identity)
        theirs_entry = theirs_index.get(identity)
        base_block, ours_block, theirs_block = (
            _block(base_entry), _block(ours_entry), _block(theirs_entry),
        )

        merged, conflicted = _resolve(strategy, base_block, ours_block, theirs_block)
        if conflicted:
            located = ours_entry or theirs_entry or base_entry
            conflicts.append(
                MergeConflict(
                    path=located.path,  # type: ignore[union-attr]
                    base=base_block,
                    ours=ours_block,
                    theirs=theirs_block,
                    resolution=resolution,
                )
            )
        resolved[identity] = merged

    content: list[Block] = [resolved[i] for i in ours_top if resolved.get(i) is not None]
    content.extend(
        resolved[i] for i in theirs_top
        if resolved.get(i) is not None and i not in ours_seen
    )

    return MergeResult(content=_settle_nested(content, resolved), conflicts=conflicts)


def merge_block_attributes(
    base: Block,
    ours: Block,
    theirs: Block,
    *,
    conflicts: list[MergeConflict] | None = None,
) -> Block:
    """Merge the fields of one block that exists on all three sides.

    For every field except ``id`` and ``type``: if ours still equals base and
    theirs changed it, theirs is taken; otherwise ours is kept.  Fields that
    exist only on another variant (when the sides disagree on the block
    type) are ignored and ours' type wins.

    Parameters
    ----------
    base, ours, theirs:
        The three versions of the block.
    conflicts:
        If given, a :class:`MergeConflict` is appended for every field where
        all three values differ.  Its ``path`` is ``"<id>.<field>"`` and the
        values are in wire form.

    Returns
    -------
    Block
        A block of ours' type and identity with the merged fields.
    """
    updates: dict[str, Any] = {}
    for f in sorted(fields(ours), key=lambda f: f.metadata.get("wire", f.name)):
        if f.name == "id":
            continue
        wire_name = f.metadata.get("wire", f.name)
        ours_value = to_wire_value(getattr(ours, f.name))
        base_value = to_wire_value(getattr(base, f.name, None))
        if not hasattr(theirs, f.name):
            continue
        theirs_value = to_wire_value(getattr(theirs, f.name))

        if values_equal(ours_value, base_value):
            if not values_equal(theirs_value, base_value):
                updates[f.name] = getattr(theirs, f.name)
        elif values_equal(ours_value, theirs_value):
            continue
        elif conflicts is not None and not values_equal(theirs_value, base_value):
            conflicts.append(
                MergeConflict(
                    path=f"{ours.id}.{wire_name}",
                    base=base_value,
                    ours=ours_value,
                    theirs=theirs_value,
                    resolution=MergeResolution.OURS,
                )
            )

    return replace(ours, **updates) if updates else ours
