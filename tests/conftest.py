"""Shared test fixtures for the blockrev test suite."""

from __future__ import annotations

import pytest

from blockrev.config import EngineConfig
from blockrev.engine import RevisionEngine


class RecordingMetrics:
    """Metrics hook that keeps every data point for assertions."""

    def __init__(self) -> None:
        self.counters: list[tuple[str, int, dict[str, str]]] = []
        self.gauges: list[tuple[str, float, dict[str, str]]] = []

    def increment(self, name, value=1, tags=None):
        self.counters.append((name, value, dict(tags or {})))

    def gauge(self, name, value, tags=None):
        self.gauges.append((name, value, dict(tags or {})))

    def total(self, name: str, **tags: str) -> int:
        return sum(
            value
            for metric, value, metric_tags in self.counters
            if metric == name and all(metric_tags.get(k) == v for k, v in tags.items())
        )


@pytest.fixture
def config() -> EngineConfig:
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def engine(config: EngineConfig) -> RevisionEngine:
    """Engine using the default configuration."""
    return RevisionEngine(config)


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()
