"""
Per-stage timing for the analysis engine.

Collected only when AnalysisSettings.collect_timings is set (CODESCOPE_DEBUG=1).
Stages are timed from worker threads, so the collector is lock-protected.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class StageStats:
    """Running duration statistics for one stage.

    Attributes:
        stage: Stage name (e.g. 'lex', 'metrics', 'duplicates')
        calls: Number of recorded runs
        total_ms: Sum of durations in milliseconds
        slowest_ms: Longest single run
        fastest_ms: Shortest single run
    """

    stage: str
    calls: int = 0
    total_ms: float = 0.0
    slowest_ms: float = 0.0
    fastest_ms: float = field(default=float('inf'))

    def add(self, duration_ms: float) -> None:
        self.calls += 1
        self.total_ms += duration_ms
        self.slowest_ms = max(self.slowest_ms, duration_ms)
        self.fastest_ms = min(self.fastest_ms, duration_ms)

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.calls if self.calls else 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'stage': self.stage,
            'calls': self.calls,
            'total_ms': round(self.total_ms, 2),
            'mean_ms': round(self.mean_ms, 2),
            'fastest_ms': round(self.fastest_ms, 2) if self.calls else 0.0,
            'slowest_ms': round(self.slowest_ms, 2),
        }


class StageTimer:
    """Collects StageStats by name; a disabled timer records nothing.

    Usage:
        timer = StageTimer(enabled=True)
        with timer.stage('metrics'):
            extract_metrics(source)
        timer.snapshot()['metrics']['mean_ms']
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._stats: dict[str, StageStats] = {}
        self._lock = threading.Lock()

    def record(self, stage: str, duration_ms: float) -> None:
        with self._lock:
            stats = self._stats.get(stage)
            if stats is None:
                stats = self._stats[stage] = StageStats(stage)
            stats.add(duration_ms)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        if not self.enabled:
            yield
            return
        started = time.perf_counter()
        try:
            yield
        finally:
            self.record(name, (time.perf_counter() - started) * 1000)

    def snapshot(self) -> dict[str, dict]:
        """Copy of the statistics, keyed by stage name."""
        with self._lock:
            return {name: stats.to_dict() for name, stats in self._stats.items()}

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()
