"""Change-severity classification.

Maps a change list plus title/banner deltas onto a :class:`ChangeType`,
checking rules in precedence order:

1. ``none``  -- no block changes, title and banner unchanged.
2. ``major`` -- any block added, removed or moved.
3. ``minor`` -- any content edit, or a title change.  Attribute-only edits
   land here too unless *attribute_change* says otherwise.
4. ``patch`` -- everything else (banner-only changes).
"""

from __future__ import annotations

from collections.abc import Sequence

from blockrev.models import BlockChange, ChangeAction, ChangeType

_STRUCTURAL_ACTIONS = frozenset({ChangeAction.ADDED, ChangeAction.REMOVED, ChangeAction.MOVED})


def classify_changes(
    changes: Sequence[BlockChange],
    title_changed: bool,
    banner_changed: bool,
    *,
    attribute_change: ChangeType | str = ChangeType.MINOR,
) -> ChangeType:
    """Return the severity of an edit.

    Parameters
    ----------
    changes:
        Output of :func:`~blockrev.diff.differ.diff_blocks`.
    title_changed, banner_changed:
        Whether the document title / banner changed.
    attribute_change:
        Severity of a ``modified`` change that has attribute diffs but no
        content diff.  ``minor`` (the default) or ``patch``.
    """
    if not changes and not title_changed and not banner_changed:
        return ChangeType.NONE

    if any(change.action in _STRUCTURAL_ACTIONS for change in changes):
        return ChangeType.MAJOR

    modified = [change for change in changes if change.action == ChangeAction.MODIFIED]
    if title_changed or any(change.content_diff is not None for change in modified):
        return ChangeType.MINOR

    if any(change.attribute_diffs for change in modified):
        return ChangeType(attribute_change)

    return ChangeType.PATCH
