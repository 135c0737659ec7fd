# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Services Module - Public Interface

from .webhook_service import WebhookService
from .stats_manager import LifetimeStats, StatsManager
from .performance_monitor import PerformanceMonitor, PerformanceSample, PerformanceSnapshot
from .screenshot_service import ScreenshotService
from .logging_service import LoggingService

__all__ = [
    "WebhookService",
    "LifetimeStats",
    "StatsManager",
    "PerformanceMonitor",
    "PerformanceSample",
    "PerformanceSnapshot",
    "ScreenshotService",
    "LoggingService",
]
