"""Revision records and the document history that owns them.

:func:`compute_revision_diff` bundles the diff, classification and version
bump for one edit.  :class:`Document` holds the current tree, title, banner
and version together with an append-only list of immutable
:class:`~blockrev.models.Revision` records.

Usage::

    doc = Document.create("Roadmap", parse_tree(payload), author="u1")
    revision = doc.commit("u2", content=parse_tree(new_payload), message="Add Q3")
    if revision is not None:
        store(revision.to_dict())
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from blockrev.blocks import Block, serialize_tree
from blockrev.diff import classify_changes, diff_blocks
from blockrev.errors import BlockrevNotFoundError
from blockrev.models import BlockChange, ChangeAction, ChangeType, Revision, RevisionDiff
from blockrev.versioning import format_version, increment_version, parse_version

INITIAL_VERSION = "1.0.0"
INITIAL_MESSAGE = "Initial version"
LAYOUT_MESSAGE = "layout updated"

_SUMMARY_LABELS: tuple[tuple[ChangeAction, str], ...] = (
    (ChangeAction.ADDED, "added"),
    (ChangeAction.REMOVED, "removed"),
    (ChangeAction.MODIFIED, "modified"),
    (ChangeAction.MOVED, "reordered"),
)


def generate_change_summary(
    changes: Sequence[BlockChange],
    title_changed: bool,
    banner_changed: bool,
) -> str:
    """Describe an edit in one line, e.g. ``"title updated, 2 blocks added"``."""
    parts: list[str] = []
    if title_changed:
        parts.append("title updated")
    if banner_changed:
        parts.append("banner updated")
    for action, label in _SUMMARY_LABELS:
        count = sum(1 for change in changes if change.action == action)
        if count:
            parts.append(f"{count} block{'s' if count > 1 else ''} {label}")
    return ", ".join(parts) if parts else "no changes"


def compute_revision_diff(
    current_version: str | None,
    old_content: Iterable[Block] | None,
    new_content: Iterable[Block] | None,
    old_title: str,
    new_title: str,
    old_banner: str | None,
    new_banner: str | None,
    *,
    attribute_change: ChangeType | str = ChangeType.MINOR,
) -> RevisionDiff:
    """Diff two snapshots of a document and pick its next version.

    Parameters
    ----------
    current_version:
        The stored version string.  Malformed values count as ``1.0.0``.
    old_content, new_content:
        The block trees before and after the edit.
    old_title, new_title, old_banner, new_banner:
        Document metadata before and after the edit.
    attribute_change:
        Severity of attribute-only block edits (see
        :func:`~blockrev.diff.classify_changes`).
    """
    changes = diff_blocks(old_content, new_content)
    title_changed = old_title != new_title
    banner_changed = old_banner != new_banner
    change_type = classify_changes(
        changes, title_changed, banner_changed, attribute_change=attribute_change,
    )
    return build_revision_diff(
        current_version, changes, change_type, title_changed, banner_changed,
    )


def build_revision_diff(
    current_version: str | None,
    changes: list[BlockChange],
    change_type: ChangeType,
    title_changed: bool,
    banner_changed: bool,
) -> RevisionDiff:
    """Bump *current_version* by *change_type* and summarise the edit."""
    return RevisionDiff(
        version=increment_version(parse_version(current_version), change_type),
        change_type=change_type,
        changes=changes,
        title_changed=title_changed,
        banner_changed=banner_changed,
        summary=generate_change_summary(changes, title_changed, banner_changed),
    )


_UNSET: Any = object()


class Document:
    """A document's current state plus its append-only revision history.

    Parameters
    ----------
    title:
        Current title.
    content:
        Current block tree.
    banner:
        Current banner image reference.
    version:
        Current version string.
    revisions:
        Existing history, oldest first (e.g. loaded from storage).
    engine:
        Optional :class:`~blockrev.engine.RevisionEngine` used to compute
        revision diffs with its configuration, logging and metrics.
    """

    def __init__(
        self,
        title: str,
        content: Iterable[Block] = (),
        *,
        banner: str | None = None,
        version: str = INITIAL_VERSION,
        revisions: Iterable[Revision] = (),
        engine: Any | None = None,
    ) -> None:
        self.title = title
        self.content: tuple[Block, ...] = tuple(content)
        self.banner = banner
        self.version = version
        self._revisions: list[Revision] = list(revisions)
        self._engine = engine

    @classmethod
    def create(
        cls,
        title: str,
        content: Iterable[Block],
        author: str,
        *,
        banner: str | None = None,
        message: str = INITIAL_MESSAGE,
        revision_id: str | None = None,
        timestamp: datetime | None = None,
        engine: Any | None = None,
    ) -> Document:
        """Create a document at version ``1.0.0`` with its initial revision."""
        doc = cls(title, content, banner=banner, engine=engine)
        doc._append(
            Revision(
                id=revision_id or uuid.uuid4().hex,
                title=title,
                content=doc.content,
                version=INITIAL_VERSION,
                change_type=ChangeType.NONE,
                changes=(),
                author=author,
                message=message,
                timestamp=timestamp or datetime.now(timezone.utc),
                banner=banner,
            )
        )
        return doc

    @property
    def revisions(self) -> tuple[Revision, ...]:
        """The revision history, oldest first."""
        return tuple(self._revisions)

    @property
    def latest_revision(self) -> Revision | None:
        return self._revisions[-1] if self._revisions else None

    def get_revision(self, revision_id: str) -> Revision:
        """Return the revision with *revision_id*.

        Raises
        ------
        BlockrevNotFoundError
            If no such revision exists.
        """
        for revision in self._revisions:
            if revision.id == revision_id:
                return revision
        raise BlockrevNotFoundError(
            f"revision {revision_id!r} not found",
            context={"revision_id": revision_id},
        )

    def _append(self, revision: Revision) -> None:
        self._revisions.append(revision)

    def _diff(self, content: tuple[Block, ...], title: str, banner: str | None) -> RevisionDiff:
        if self._engine is not None:
            return self._engine.compute_revision_diff(
                self.version, self.content, content, self.title, title, self.banner, banner,
            )
        return compute_revision_diff(
            self.version, self.content, content, self.title, title, self.banner, banner,
        )

    def commit(
        self,
        author: str,
        *,
        content: Iterable[Block] | None = None,
        title: str | None = None,
        banner: str | None = _UNSET,
        message: str | None = None,
        revision_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> Revision | None:
        """Record an edit as a new revision.

        Omitted arguments keep their current values.  When the edit changes
        nothing the document is left untouched and ``None`` is returned.
        Column-only edits (width, column identity) carry no block changes:
        they are recorded at the current version with change type ``none``.

        Returns
        -------
        Revision | None
            The appended revision, or ``None`` for a no-op edit.
        """
        new_content = self.content if content is None else tuple(content)
        new_title = self.title if title is None else title
        new_banner = self.banner if banner is _UNSET else banner

        diff = self._diff(new_content, new_title, new_banner)
        summary = diff.summary
        if diff.change_type is ChangeType.NONE:
            if serialize_tree(new_content) == serialize_tree(self.content):
                return None
            summary = LAYOUT_MESSAGE

        revision = Revision(
            id=revision_id or uuid.uuid4().hex,
            title=new_title,
            content=new_content,
            version=format_version(diff.version),
            change_type=diff.change_type,
            changes=tuple(diff.changes),
            author=author,
            message=message if message is not None else summary,
            timestamp=timestamp or datetime.now(timezone.utc),
            banner=new_banner,
        )
        self._append(revision)
        self.content = new_content
        self.title = new_title
        self.banner = new_banner
        self.version = revision.version
        return revision

    def restore(
        self,
        revision_id: str,
        author: str,
        *,
        message: str | None = None,
        new_revision_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> Revision | None:
        """Commit the content, title and banner of an earlier revision.

        History is never rewritten: the restore is a new revision whose
        version follows the current one.  It goes through the same diff as
        any commit, so the bump reflects what actually changed (not always
        a major bump) and the revision lists those changes.  Restoring the
        current state appends nothing.

        Raises
        ------
        BlockrevNotFoundError
            If *revision_id* is unknown.
        """
        source = self.get_revision(revision_id)
        return self.commit(
            author,
            content=source.content,
            title=source.title,
            banner=source.banner,
            message=message or f"Restored version {source.version}",
            revision_id=new_revision_id,
            timestamp=timestamp,
        )
