"""Public data models for blockrev.

This module contains every enum, result type and record type referenced by
the public API.  All types are plain dataclasses; the immutable ones are
frozen so snapshots and revision records cannot be edited after creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from blockrev.blocks import Block, BlockType, parse_tree, serialize_tree
from blockrev.errors import BlockrevMergeConflictError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ChangeType(str, Enum):
    """Severity of a revision, mapped onto a semantic-version increment."""

    MAJOR = "major"
    """Structural change: a block was added, removed or moved."""

    MINOR = "minor"
    """Content change, attribute change or title change."""

    PATCH = "patch"
    """Metadata-only change such as a new banner image."""

    NONE = "none"
    """Nothing changed; the version stays the same."""


class ChangeAction(str, Enum):
    """Kind of difference recorded for one block identity."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    MOVED = "moved"


class MergeStrategy(str, Enum):
    """Policy applied to a recorded three-way merge conflict."""

    OURS = "ours"
    """Keep our side.  A deletion on our side keeps the block removed."""

    THEIRS = "theirs"
    """Keep their side.  A deletion on their side removes the block."""

    MANUAL = "manual"
    """Leave the conflict unresolved and keep the base version, if any."""


class MergeResolution(str, Enum):
    """How a recorded conflict was settled in the merged content."""

    OURS = "ours"
    THEIRS = "theirs"


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class SemVer:
    """A ``major.minor.patch`` version triple of non-negative integers."""

    major: int = 1
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


# ---------------------------------------------------------------------------
# Flattened trees
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlatBlock:
    """A block paired with its structural path in one tree snapshot.

    Attributes
    ----------
    block:
        The block itself.
    path:
        Dotted path such as ``"root.2"`` or ``"root.1.columns.0.blocks.3"``.
    depth:
        ``0`` for top-level blocks, ``1`` for blocks inside a column.
    """

    block: Block
    path: str
    depth: int = 0

    @property
    def identity(self) -> str:
        return self.block.id


# ---------------------------------------------------------------------------
# Diff types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValueChange:
    """A before/after pair, serialised as ``{"from": ..., "to": ...}``."""

    before: Any
    after: Any

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.before, "to": self.after}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValueChange:
        return cls(before=data.get("from"), after=data.get("to"))


@dataclass(frozen=True)
class BlockChange:
    """One detected difference between two snapshots.

    Attributes
    ----------
    identity:
        The ``id`` of the block the change applies to.
    action:
        Added, removed, modified or moved.
    block_type:
        Type of the block (the new one for ``modified``/``moved``).
    path:
        Structural path of the block: the new path for ``added``,
        ``modified`` and ``moved``; the old path for ``removed``.
    attribute_diffs:
        Field name to before/after values.  For ``moved`` this holds only
        ``position``.
    content_diff:
        Before/after text of a content block whose text changed.
    """

    identity: str
    action: ChangeAction
    block_type: BlockType
    path: str
    attribute_diffs: dict[str, ValueChange] | None = None
    content_diff: ValueChange | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted form of this change."""
        data: dict[str, Any] = {
            "id": self.identity,
            "action": self.action.value,
            "type": self.block_type.value,
            "path": self.path,
        }
        if self.attribute_diffs:
            data["attributes"] = {
                name: change.to_dict() for name, change in self.attribute_diffs.items()
            }
        if self.content_diff is not None:
            data["contentDiff"] = self.content_diff.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BlockChange:
        attributes = data.get("attributes")
        content_diff = data.get("contentDiff")
        return cls(
            identity=data["id"],
            action=ChangeAction(data["action"]),
            block_type=BlockType(data["type"]),
            path=data["path"],
            attribute_diffs=(
                {name: ValueChange.from_dict(value) for name, value in attributes.items()}
                if attributes
                else None
            ),
            content_diff=ValueChange.from_dict(content_diff) if content_diff else None,
        )


@dataclass
class RevisionDiff:
    """Everything needed to record one revision of a document.

    Attributes
    ----------
    version:
        The new version after applying :attr:`change_type`.
    change_type:
        Severity classification of the edit.
    changes:
        Block-level changes between the old and new trees.
    title_changed:
        Whether the document title changed.
    banner_changed:
        Whether the banner image changed.
    summary:
        Human-readable summary such as ``"title updated, 2 blocks added"``.
    """

    version: SemVer
    change_type: ChangeType
    changes: list[BlockChange] = field(default_factory=list)
    title_changed: bool = False
    banner_changed: bool = False
    summary: str = "no changes"


# ---------------------------------------------------------------------------
# Merge types
# ---------------------------------------------------------------------------

def _dump(value: Any) -> Any:
    return value.to_dict() if hasattr(value, "to_dict") else value


@dataclass
class MergeConflict:
    """A merge outcome where base, ours and theirs diverge.

    For block-level conflicts ``base``/``ours``/``theirs`` are blocks (or
    ``None`` where the block is absent on that side).  For attribute-level
    conflicts they are raw field values and ``path`` is ``"<id>.<field>"``.

    Attributes
    ----------
    path:
        Structural path of the conflicting block or attribute.
    base, ours, theirs:
        The value on each side.
    resolution:
        Which side the merged content uses, or ``None`` if the conflict was
        left for manual resolution.
    """

    path: str
    base: Any
    ours: Any
    theirs: Any
    resolution: MergeResolution | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "base": _dump(self.base),
            "ours": _dump(self.ours),
            "theirs": _dump(self.theirs),
            "resolution": self.resolution.value if self.resolution else None,
        }


@dataclass
class MergeResult:
    """Result of a three-way structural merge.

    Attributes
    ----------
    content:
        The merged block tree.
    conflicts:
        Every conflict encountered, in processing order.
    """

    content: tuple[Block, ...] = ()
    conflicts: list[MergeConflict] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """``True`` when the merge needed no conflict resolution."""
        return not self.conflicts

    def raise_for_conflicts(self) -> None:
        """Raise :class:`BlockrevMergeConflictError` if any conflict was recorded."""
        if self.conflicts:
            raise BlockrevMergeConflictError(
                f"merge produced {len(self.conflicts)} conflict(s)",
                context={
                    "conflict_count": len(self.conflicts),
                    "paths": [conflict.path for conflict in self.conflicts],
                },
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "content": serialize_tree(self.content),
            "conflicts": [conflict.to_dict() for conflict in self.conflicts],
        }


# ---------------------------------------------------------------------------
# Revision records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Revision:
    """Immutable snapshot of a document at one point in its history.

    Attributes
    ----------
    id:
        Unique revision identifier.
    title:
        Document title at this revision.
    content:
        The full block tree at this revision.
    version:
        Formatted semantic version, e.g. ``"2.1.0"``.
    change_type:
        Severity of the edit that produced this revision.
    changes:
        Block-level changes relative to the previous revision.
    author:
        Identifier of the editor.
    message:
        Optional commit message.
    timestamp:
        When the revision was created.
    banner:
        Banner image reference at this revision.
    """

    id: str
    title: str
    content: tuple[Block, ...]
    version: str
    change_type: ChangeType
    changes: tuple[BlockChange, ...]
    author: str
    message: str | None
    timestamp: datetime
    banner: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted form of this revision."""
        return {
            "id": self.id,
            "title": self.title,
            "content": serialize_tree(self.content),
            "banner": self.banner,
            "version": self.version,
            "changeType": self.change_type.value,
            "changes": [change.to_dict() for change in self.changes],
            "author": self.author,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Revision:
        """Rebuild a revision from its persisted form.

        Raises
        ------
        BlockrevValidationError
            If the stored content is not a valid block tree.
        """
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            content=parse_tree(data.get("content")),
            version=data.get("version") or "1.0.0",
            change_type=ChangeType(data.get("changeType", ChangeType.NONE.value)),
            changes=tuple(BlockChange.from_dict(c) for c in data.get("changes") or ()),
            author=data.get("author", ""),
            message=data.get("message"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            banner=data.get("banner"),
        )
