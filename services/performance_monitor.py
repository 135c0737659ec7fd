# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Services Module - Performance Monitor
# Rolling window of cycle outcomes and durations

import threading
import time
from collections import deque
from dataclasses import dataclass, field

from core.outcomes import OutcomeKind

DEFAULT_WINDOW = 100


@dataclass(frozen=True)
class PerformanceSample:
    outcome: OutcomeKind
    duration_ms: float
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def from_outcome(cls, outcome, timestamp=None):
        return cls(
            outcome.kind,
            outcome.duration_ms,
            time.time() if timestamp is None else timestamp,
        )


@dataclass(frozen=True)
class PerformanceSnapshot:
    success_rate: float = 0.0
    avg_duration_ms: float = 0.0
    error_count: int = 0
    samples: int = 0

    def __str__(self):
        return (
            f"success {self.success_rate * 100:.1f}% | "
            f"avg {self.avg_duration_ms / 1000:.1f}s | errors {self.error_count}"
        )


class PerformanceMonitor:
    """
    Bounded rolling window of PerformanceSample records.

    success_rate is the fraction of Caught samples (0.0 - 1.0).
    """

    def __init__(self, window=DEFAULT_WINDOW):
        if window <= 0:
            raise ValueError("Window size must be positive")
        self.window = window
        self._samples = deque(maxlen=window)
        self._lock = threading.Lock()

    def record(self, sample):
        """Append a sample; the oldest is evicted when the window is full"""
        with self._lock:
            self._samples.append(sample)

    def record_outcome(self, outcome, timestamp=None):
        """Record a CycleOutcome as a sample"""
        self.record(PerformanceSample.from_outcome(outcome, timestamp))

    def snapshot(self):
        with self._lock:
            samples = list(self._samples)

        total = len(samples)
        if total == 0:
            return PerformanceSnapshot()

        caught = sum(1 for s in samples if s.outcome is OutcomeKind.CAUGHT)
        errors = sum(1 for s in samples if s.outcome is OutcomeKind.ERROR)
        avg = sum(s.duration_ms for s in samples) / total
        return PerformanceSnapshot(
            success_rate=caught / total,
            avg_duration_ms=avg,
            error_count=errors,
            samples=total,
        )

    def clear(self):
        with self._lock:
            self._samples.clear()

    def __len__(self):
        with self._lock:
            return len(self._samples)
