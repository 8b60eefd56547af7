"""Metrics hook protocol and no-op default implementation.

:class:`~blockrev.engine.RevisionEngine` emits counters after each diff,
classification and merge, and a gauge for the size of each merge result.
By default a :class:`NoopMetricsHook` discards them.  Callers can pass any
object satisfying :class:`MetricsHook` through :attr:`EngineConfig.metrics`
to route them to StatsD, Prometheus, etc.

Emitted metric names:

* ``blockrev.block_changes_total``        -- counter, tagged ``action``
* ``blockrev.revisions_classified_total`` -- counter, tagged ``change_type``
* ``blockrev.merges_total``               -- counter, tagged ``outcome``
* ``blockrev.merge_conflicts_total``      -- counter, tagged ``strategy``
* ``blockrev.merged_blocks``              -- gauge, top-level blocks in the last
  merge result, tagged ``strategy``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric by *value*."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
