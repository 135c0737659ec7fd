# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Services Module - Stats Manager
# Lifetime statistics and their JSON persistence

import json
import logging
import os
import threading
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime

logger = logging.getLogger("FishingBot")


def _now_iso():
    return datetime.now().astimezone().isoformat()


@dataclass
class LifetimeStats:
    """
    Counters accumulated over every session.

    Counters only grow; reset() is the single way to clear them.
    """

    total_fish_caught: int = 0
    total_runtime_seconds: int = 0
    sessions_completed: int = 0
    best_session_fish: int = 0
    total_feeds: int = 0
    average_fish_per_hour: float = 0.0
    uptime_percentage: float = 100.0
    last_updated: str = field(default_factory=_now_iso)

    @classmethod
    def from_dict(cls, data):
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})

    def to_dict(self):
        return asdict(self)

    def copy(self):
        return LifetimeStats(**asdict(self))

    def add_fish(self, count=1):
        if count < 0:
            raise ValueError("Fish count cannot be negative")
        self.total_fish_caught += int(count)
        self.update_calculations()

    def add_runtime(self, seconds):
        if seconds < 0:
            raise ValueError("Runtime cannot be negative")
        self.total_runtime_seconds += int(seconds)
        self.update_calculations()

    def add_feed(self):
        self.total_feeds += 1
        self.update_calculations()

    def complete_session(self, session_fish, runtime_seconds=0, uptime_pct=None):
        """Fold one finished session into the totals"""
        self.sessions_completed += 1
        self.best_session_fish = max(self.best_session_fish, int(session_fish))
        if runtime_seconds:
            self.total_runtime_seconds += int(runtime_seconds)
        if uptime_pct is not None:
            # Running mean over completed sessions
            n = self.sessions_completed
            self.uptime_percentage = ((self.uptime_percentage * (n - 1)) + float(uptime_pct)) / n
        self.update_calculations()

    def update_calculations(self):
        if self.total_runtime_seconds > 0:
            self.average_fish_per_hour = (self.total_fish_caught * 3600.0) / self.total_runtime_seconds
        self.last_updated = _now_iso()

    def reset(self):
        fresh = LifetimeStats()
        self.__dict__.update(fresh.__dict__)

    def formatted_runtime(self):
        hours = self.total_runtime_seconds // 3600
        minutes = (self.total_runtime_seconds % 3600) // 60
        return f"{hours}h {minutes}m"


class StatsManager:
    """
    JSON persistence for LifetimeStats.

    Missing or corrupt files yield default stats; write failures are logged.
    """

    def __init__(self, stats_file: str):
        self.stats_file = stats_file
        self._lock = threading.Lock()

    def load(self) -> LifetimeStats:
        """Load lifetime stats from disk"""
        with self._lock:
            if not os.path.exists(self.stats_file):
                return LifetimeStats()
            try:
                with open(self.stats_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("stats file is not a JSON object")
                return LifetimeStats.from_dict(data)
            except (json.JSONDecodeError, ValueError, TypeError, OSError) as e:
                logger.warning(f"Failed to load stats ({e}), starting from defaults")
                return LifetimeStats()

    def save(self, stats: LifetimeStats) -> bool:
        """
        Save lifetime stats to disk.

        Returns:
            bool: True on success
        """
        with self._lock:
            try:
                stats.update_calculations()
                parent = os.path.dirname(self.stats_file)
                if parent:
                    os.makedirs(parent, exist_ok=True)
                with open(self.stats_file, "w", encoding="utf-8") as f:
                    json.dump(stats.to_dict(), f, indent=4)
                return True
            except (OSError, TypeError) as e:
                logger.error(f"Error saving stats: {e}")
                return False
