"""Tree flattening and identity indexing.

Walks a block tree in document order and pairs every block with its
structural path.  Paths are derived purely from positions, so the same tree
shape always produces the same paths::

    root.0
    root.1                       <- a columns block
    root.1.columns.0.blocks.0
    root.1.columns.1.blocks.0
    root.2
"""

from __future__ import annotations

from collections.abc import Iterable

from blockrev.blocks import Block, ColumnsBlock
from blockrev.models import FlatBlock
from blockrev.observability import get_logger

log = get_logger("blockrev.diff")


def extract_blocks(tree: Iterable[Block] | None, base_path: str = "root") -> list[FlatBlock]:
    """Flatten *tree* into ``(block, path)`` pairs in document order.

    A columns block is emitted before its children.  Column objects are
    not blocks and do not get entries of their own.

    Parameters
    ----------
    tree:
        The top-level blocks.  ``None`` is treated as an empty tree.
    base_path:
        Path prefix for top-level blocks.
    """
    result: list[FlatBlock] = []
    for i, block in enumerate(tree or ()):
        path = f"{base_path}.{i}"
        result.append(FlatBlock(block=block, path=path, depth=0))
        if isinstance(block, ColumnsBlock):
            for j, column in enumerate(block.columns):
                for k, child in enumerate(column.blocks):
                    result.append(
                        FlatBlock(
                            block=child,
                            path=f"{path}.columns.{j}.blocks.{k}",
                            depth=1,
                        )
                    )
    return result


def index_by_identity(flat: Iterable[FlatBlock]) -> dict[str, FlatBlock]:
    """Map each block identity to its entry, preserving document order.

    Identities are expected to be unique within a snapshot.  If one repeats,
    the first occurrence is kept and a warning is logged.
    """
    index: dict[str, FlatBlock] = {}
    for entry in flat:
        existing = index.get(entry.identity)
        if existing is not None:
            log.warning(
                "duplicate block identity in snapshot",
                extra={
                    "extra_fields": {
                        "op": "index",
                        "identity": entry.identity,
                        "kept_path": existing.path,
                        "ignored_path": entry.path,
                    }
                },
            )
            continue
        index[entry.identity] = entry
    return index
