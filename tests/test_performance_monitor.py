"""
Test suite for services/performance_monitor.py
==============================================
Rolling window statistics over cycle outcomes.
"""

import pytest

from core.outcomes import CycleOutcome, ErrorKind, OutcomeKind
from services.performance_monitor import PerformanceMonitor, PerformanceSample


class TestSnapshot:
    """Tests for snapshot() aggregates"""

    def test_empty_window(self):
        snapshot = PerformanceMonitor().snapshot()

        assert snapshot.success_rate == 0.0
        assert snapshot.avg_duration_ms == 0.0
        assert snapshot.error_count == 0
        assert snapshot.samples == 0

    def test_success_rate_counts_catches(self):
        monitor = PerformanceMonitor()
        monitor.record_outcome(CycleOutcome.caught(1000.0))
        monitor.record_outcome(CycleOutcome.timed_out(2000.0))
        monitor.record_outcome(CycleOutcome.caught(3000.0))

        snapshot = monitor.snapshot()

        assert snapshot.success_rate == pytest.approx(2 / 3)
        assert snapshot.avg_duration_ms == pytest.approx(2000.0)
        assert snapshot.error_count == 0

    def test_error_count(self):
        monitor = PerformanceMonitor()
        monitor.record_outcome(CycleOutcome.error(ErrorKind.CAPTURE))
        monitor.record_outcome(CycleOutcome.error(ErrorKind.INPUT))
        monitor.record_outcome(CycleOutcome.caught())

        snapshot = monitor.snapshot()

        assert snapshot.error_count == 2
        assert snapshot.success_rate == pytest.approx(1 / 3)

    def test_str(self):
        monitor = PerformanceMonitor()
        monitor.record_outcome(CycleOutcome.caught(1500.0))

        assert str(monitor.snapshot()) == "success 100.0% | avg 1.5s | errors 0"


class TestWindow:
    """Tests for window bounds"""

    def test_oldest_sample_evicted(self):
        monitor = PerformanceMonitor(window=3)
        monitor.record_outcome(CycleOutcome.error(ErrorKind.CAPTURE))
        for _ in range(3):
            monitor.record_outcome(CycleOutcome.caught())

        snapshot = monitor.snapshot()

        assert len(monitor) == 3
        assert snapshot.error_count == 0
        assert snapshot.success_rate == 1.0

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            PerformanceMonitor(window=0)

    def test_clear(self):
        monitor = PerformanceMonitor()
        monitor.record_outcome(CycleOutcome.caught())
        monitor.clear()

        assert len(monitor) == 0


class TestSamples:
    """Tests for PerformanceSample"""

    def test_from_outcome(self):
        sample = PerformanceSample.from_outcome(CycleOutcome.timed_out(250.0), timestamp=42.0)

        assert sample.outcome is OutcomeKind.TIMED_OUT
        assert sample.duration_ms == 250.0
        assert sample.timestamp == 42.0
