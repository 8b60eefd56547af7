"""blockrev: revision versioning and three-way merge for block documents.

Public re-exports
-----------------

* **Engine:** :class:`RevisionEngine`, :class:`EngineConfig`
* **Blocks:** every block variant, :func:`parse_tree`, :func:`serialize_tree`
* **Versions:** :func:`parse_version`, :func:`format_version`,
  :func:`increment_version`
* **Diff / merge:** :func:`diff_blocks`, :func:`classify_changes`,
  :func:`merge_block_structures`, :func:`merge_block_attributes`
* **History:** :class:`Document`, :class:`Revision`
* **Errors:** every :class:`BlockrevError` subclass and :class:`ErrorCode`

Usage::

    from blockrev import RevisionEngine, parse_tree

    engine = RevisionEngine()
    diff = engine.compute_revision_diff(
        "1.4.0", parse_tree(old), parse_tree(new), "Title", "Title", None, None,
    )
    print(diff.version, diff.change_type.value, diff.summary)
"""

from __future__ import annotations

# ── Blocks ──────────────────────────────────────────────────────────────
from blockrev.blocks import (
    INSERTABLE_BLOCK_TYPES,
    AssetPriceBlock,
    Block,
    BlockType,
    Column,
    ColumnsBlock,
    ContentBlock,
    LeafBlock,
    PageListBlock,
    RecentPagesBlock,
    TocBlock,
    block_from_dict,
    block_to_dict,
    create_block,
    duplicate_block,
    has_code_blocks,
    parse_tree,
    serialize_tree,
    validate_blocks,
)

# ── Configuration ───────────────────────────────────────────────────────
from blockrev.config import EngineConfig

# ── Diff / merge ────────────────────────────────────────────────────────
from blockrev.diff import (
    classify_changes,
    diff_attributes,
    diff_blocks,
    extract_blocks,
    merge_block_attributes,
    merge_block_structures,
)

# ── Engine ──────────────────────────────────────────────────────────────
from blockrev.engine import RevisionEngine

# ── Errors ──────────────────────────────────────────────────────────────
from blockrev.errors import (
    BlockrevError,
    BlockrevMergeConflictError,
    BlockrevNotFoundError,
    BlockrevValidationError,
    ErrorCode,
)

# ── Models ──────────────────────────────────────────────────────────────
from blockrev.models import (
    BlockChange,
    ChangeAction,
    ChangeType,
    FlatBlock,
    MergeConflict,
    MergeResolution,
    MergeResult,
    MergeStrategy,
    Revision,
    RevisionDiff,
    SemVer,
    ValueChange,
)

# ── History ─────────────────────────────────────────────────────────────
from blockrev.revision import Document, compute_revision_diff, generate_change_summary

# ── Versions ────────────────────────────────────────────────────────────
from blockrev.versioning import format_version, increment_version, next_version, parse_version

__all__ = [
    # Engine
    "RevisionEngine",
    "EngineConfig",
    # Blocks
    "Block",
    "LeafBlock",
    "BlockType",
    "ContentBlock",
    "RecentPagesBlock",
    "PageListBlock",
    "AssetPriceBlock",
    "TocBlock",
    "ColumnsBlock",
    "Column",
    "INSERTABLE_BLOCK_TYPES",
    "block_from_dict",
    "block_to_dict",
    "parse_tree",
    "serialize_tree",
    "validate_blocks",
    "create_block",
    "duplicate_block",
    "has_code_blocks",
    # Versions
    "SemVer",
    "parse_version",
    "format_version",
    "increment_version",
    "next_version",
    # Diff / merge
    "extract_blocks",
    "diff_blocks",
    "diff_attributes",
    "classify_changes",
    "merge_block_structures",
    "merge_block_attributes",
    # Models
    "BlockChange",
    "ChangeAction",
    "ChangeType",
    "FlatBlock",
    "ValueChange",
    "MergeConflict",
    "MergeResolution",
    "MergeResult",
    "MergeStrategy",
    "RevisionDiff",
    "Revision",
    # History
    "Document",
    "compute_revision_diff",
    "generate_change_summary",
    # Errors
    "BlockrevError",
    "ErrorCode",
    "BlockrevValidationError",
    "BlockrevNotFoundError",
    "BlockrevMergeConflictError",
]
