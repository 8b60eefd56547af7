"""Configured facade over the diff, classification and merge functions.

The functions in :mod:`blockrev.diff` are pure.  :class:`RevisionEngine`
applies an :class:`~blockrev.config.EngineConfig` to them and reports what
happened through the structured logger and the metrics hook.  It holds no
state between calls beyond its configuration.

Usage::

    from blockrev import EngineConfig, RevisionEngine

    engine = RevisionEngine(EngineConfig(merge_strategy="manual"))
    result = engine.merge(base, ours, theirs)
    if not result.success:
        surface(result.conflicts)
"""

from __future__ import annotations

import json
import sys
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Any

from blockrev.blocks import Block
from blockrev.config import EngineConfig
from blockrev.diff import (
    classify_changes,
    diff_blocks,
    merge_block_attributes,
    merge_block_structures,
)
from blockrev.models import BlockChange, ChangeType, MergeConflict, MergeResult, RevisionDiff
from blockrev.observability import NoopMetricsHook, get_logger
from blockrev.revision import build_revision_diff

log = get_logger("blockrev.engine")


class RevisionEngine:
    """Diff, classify and merge block trees under one configuration.

    Parameters
    ----------
    config:
        Engine configuration.  Defaults to :class:`EngineConfig` defaults.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ── Diff ────────────────────────────────────────────────────────────

    def diff(
        self,
        old_tree: Iterable[Block] | None,
        new_tree: Iterable[Block] | None,
    ) -> list[BlockChange]:
        """Return the block-level changes between two snapshots."""
        changes = diff_blocks(old_tree, new_tree, base_path=self._config.root_path)
        counts: Counter[str] = Counter(change.action.value for change in changes)
        for action, count in sorted(counts.items()):
            self._metrics.increment(
                "blockrev.block_changes_total", count, tags={"action": action},
            )
        log.debug(
            "diff complete",
            extra={"extra_fields": {"op": "diff", "changes": len(changes), **counts}},
        )
        if self._config.debug_dump_diff:
            self._dump("diff", [change.to_dict() for change in changes])
        return changes

    def classify(
        self,
        changes: Sequence[BlockChange],
        title_changed: bool,
        banner_changed: bool,
    ) -> ChangeType:
        """Classify an edit using the configured attribute-change severity."""
        change_type = classify_changes(
            changes,
            title_changed,
            banner_changed,
            attribute_change=self._config.attribute_change_type,
        )
        self._metrics.increment(
            "blockrev.revisions_classified_total",
            tags={"change_type": change_type.value},
        )
        return change_type

    def compute_revision_diff(
        self,
        current_version: str | None,
        old_content: Iterable[Block] | None,
        new_content: Iterable[Block] | None,
        old_title: str,
        new_title: str,
        old_banner: str | None,
        new_banner: str | None,
    ) -> RevisionDiff:
        """Diff two document snapshots and pick the next version.

        Same result as :func:`blockrev.revision.compute_revision_diff` with
        the configured attribute-change severity, plus metrics and logging.
        """
        changes = self.diff(old_content, new_content)
        title_changed = old_title != new_title
        banner_changed = old_banner != new_banner
        change_type = self.classify(changes, title_changed, banner_changed)
        result = build_revision_diff(
            current_version, changes, change_type, title_changed, banner_changed,
        )
        log.debug(
            "revision classified",
            extra={
                "extra_fields": {
                    "op": "classify",
                    "from_version": current_version,
                    "to_version": str(result.version),
                    "change_type": change_type.value,
                }
            },
        )
        return result

    # ── Merge ───────────────────────────────────────────────────────────

    def merge(
        self,
        base: Iterable[Block] | None,
        ours: Iterable[Block] | None,
        theirs: Iterable[Block] | None,
    ) -> MergeResult:
        """Three-way merge using the configured strategy."""
        strategy = self._config.merge_strategy
        result = merge_block_structures(
            base, ours, theirs, strategy=strategy, base_path=self._config.root_path,
        )
        outcome = "clean" if result.success else "conflicted"
        self._metrics.increment("blockrev.merges_total", tags={"outcome": outcome})
        self._metrics.gauge(
            "blockrev.merged_blocks", len(result.content), tags={"strategy": strategy},
        )
        if result.conflicts:
            self._metrics.increment(
                "blockrev.merge_conflicts_total",
                len(result.conflicts),
                tags={"strategy": strategy},
            )
            log.info(
                "merge produced conflicts",
                extra={
                    "extra_fields": {
                        "op": "merge",
                        "strategy": strategy,
                        "conflicts": len(result.conflicts),
                        "paths": [conflict.path for conflict in result.conflicts],
                    }
                },
            )
        else:
            log.debug(
                "merge clean",
                extra={"extra_fields": {"op": "merge", "blocks": len(result.content)}},
            )
        if self._config.debug_dump_diff:
            self._dump("merge", result.to_dict())
        return result

    def merge_attributes(
        self,
        base: Block,
        ours: Block,
        theirs: Block,
        *,
        conflicts: list[MergeConflict] | None = None,
    ) -> Block:
        """Per-field three-way merge of one block.

        When :attr:`EngineConfig.report_attribute_conflicts` is set, field
        conflicts are logged and counted, and appended to *conflicts* if a
        list is given.
        """
        if not self._config.report_attribute_conflicts:
            return merge_block_attributes(base, ours, theirs)

        found: list[MergeConflict] = []
        merged = merge_block_attributes(base, ours, theirs, conflicts=found)
        if found:
            self._metrics.increment(
                "blockrev.merge_conflicts_total",
                len(found),
                tags={"strategy": "attribute"},
            )
            log.info(
                "attribute merge kept ours over conflicting fields",
                extra={
                    "extra_fields": {
                        "op": "merge_attributes",
                        "identity": ours.id,
                        "paths": [conflict.path for conflict in found],
                    }
                },
            )
            if conflicts is not None:
                conflicts.extend(found)
        return merged

    # ── Debug ───────────────────────────────────────────────────────────

    @staticmethod
    def _dump(label: str, payload: Any) -> None:
        print(
            f"[blockrev] {label}:",
            json.dumps(payload, indent=2, ensure_ascii=False, default=str),
            file=sys.stderr,
        )
