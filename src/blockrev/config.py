"""Engine configuration for blockrev.

:class:`EngineConfig` captures the policy knobs of the revision engine.  The
defaults reproduce the historical behaviour exactly: conflicts resolve
toward *ours*, attribute-only edits are a minor change, and the
per-attribute merge records nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

MERGE_STRATEGIES: tuple[str, ...] = ("ours", "theirs", "manual")
"""Accepted values for :attr:`EngineConfig.merge_strategy`."""

ATTRIBUTE_CHANGE_TYPES: tuple[str, ...] = ("minor", "patch")
"""Accepted values for :attr:`EngineConfig.attribute_change_type`."""


@dataclass
class EngineConfig:
    """Complete configuration for a :class:`~blockrev.engine.RevisionEngine`.

    Parameters
    ----------
    merge_strategy:
        How a recorded three-way merge conflict is resolved.

        * ``"ours"``: keep our side, treating a deletion as a value.
        * ``"theirs"``: keep their side.
        * ``"manual"``: leave the conflict unresolved and keep the base
          version of the block in the merged content.
    attribute_change_type:
        Severity of a ``modified`` change that carries attribute diffs but
        no content diff (for example a widget's ``limit``).

        * ``"minor"``: same tier as a content edit.
        * ``"patch"``: lowest tier, alongside banner changes.
    report_attribute_conflicts:
        Record a :class:`~blockrev.models.MergeConflict` for each field
        where all three sides differ during a per-attribute merge.  The
        merged value is still *ours*.
    root_path:
        Prefix used for structural paths (``root.0.columns.1.blocks.2``).
    metrics:
        A :class:`~blockrev.observability.MetricsHook` implementation, or
        ``None`` for the no-op default.
    debug_dump_diff:
        Write every change list and conflict list to *stderr* as JSON.
    """

    merge_strategy: Literal["ours", "theirs", "manual"] = "ours"

    attribute_change_type: Literal["minor", "patch"] = "minor"

    report_attribute_conflicts: bool = False

    root_path: str = "root"

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_diff: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.merge_strategy not in MERGE_STRATEGIES:
            raise ValueError(
                f"merge_strategy must be one of {MERGE_STRATEGIES}, got {self.merge_strategy!r}"
            )
        if self.attribute_change_type not in ATTRIBUTE_CHANGE_TYPES:
            raise ValueError(
                "attribute_change_type must be one of "
                f"{ATTRIBUTE_CHANGE_TYPES}, got {self.attribute_change_type!r}"
            )
        if not self.root_path or "." in self.root_path:
            raise ValueError(
                f"root_path must be a non-empty segment without '.', got {self.root_path!r}"
            )
