"""Diff, classification and merge engine for block trees.

Exports
-------
extract_blocks
    Flatten a tree into ``(block, path)`` pairs in document order.
index_by_identity
    Map block identities to their flattened entries.
compute_signature
    Identity-independent structural fingerprint of a block.
diff_blocks
    Identity-based change list between two snapshots.
diff_attributes
    Field-level differences between two versions of one block.
classify_changes
    Map a change list to a semantic-version increment.
merge_block_structures
    Three-way merge of whole trees with conflict reporting.
merge_block_attributes
    Three-way merge of the fields of a single block.
"""

from .classifier import classify_changes
from .differ import diff_attributes, diff_blocks
from .flatten import extract_blocks, index_by_identity
from .merger import merge_block_attributes, merge_block_structures
from .signature import compute_signature, normalize_block, same_structure

__all__ = [
    "classify_changes",
    "compute_signature",
    "diff_attributes",
    "diff_blocks",
    "extract_blocks",
    "index_by_identity",
    "merge_block_attributes",
    "merge_block_structures",
    "normalize_block",
    "same_structure",
]
