"""
Session State Definitions

Defines the lifecycle states of the fishing engine, the phases of a single
fishing cycle, and the SessionState record owned by the engine worker.
"""

import copy
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

# Seconds of downtime charged per error when estimating uptime
ERROR_DOWNTIME_SECONDS = 2.0


class MacroState(Enum):
    """Engine execution states"""

    IDLE = auto()       # Never started in this process
    RUNNING = auto()    # Worker thread is fishing
    PAUSED = auto()     # Worker alive, cycles suspended
    STOPPING = auto()   # Stop requested, in-flight cycle finishing
    STOPPED = auto()    # Session finalized

    def __str__(self):
        return self.name.title()

    @property
    def is_active(self):
        """Returns True if a worker thread owns the session"""
        return self in (MacroState.RUNNING, MacroState.PAUSED, MacroState.STOPPING)

    @property
    def can_start(self):
        """Returns True if a session can be started from this state"""
        return self in (MacroState.IDLE, MacroState.STOPPED)

    @property
    def can_stop(self):
        """Returns True if the session can be stopped from this state"""
        return self in (MacroState.RUNNING, MacroState.PAUSED)


class FishingPhase(Enum):
    """Phases of one fishing cycle (plus feeding/error for display)"""

    IDLE = "idle"
    CASTING = "casting"
    AWAITING_BITE = "awaiting_bite"
    REELING = "reeling"
    CAUGHT = "caught"
    TIMED_OUT = "timed_out"
    FEEDING = "feeding"
    ERROR = "error"

    def __str__(self):
        return self.value.replace("_", " ").title()


@dataclass
class SessionState:
    """
    Live state of the current (or last) session.

    Written only by the engine worker thread. UI readers get copies from
    FishingEngine.get_state().
    """

    running: bool = False
    paused: bool = False
    state: MacroState = MacroState.IDLE
    phase: FishingPhase = FishingPhase.IDLE
    last_action: str = "Idle"
    fish_caught: int = 0
    hunger_level: int = 100
    hunger_known: bool = False
    errors_count: int = 0
    consecutive_errors: int = 0
    catches_since_feed: int = 0
    current_streak: int = 0
    best_streak: int = 0
    started_at: Optional[float] = None
    uptime_seconds: float = 0.0

    @property
    def uptime_minutes(self) -> int:
        return int(self.uptime_seconds // 60)

    @property
    def fish_per_hour(self) -> float:
        hours = self.uptime_seconds / 3600.0
        if hours <= 0:
            return 0.0
        return self.fish_caught / hours

    @property
    def uptime_percentage(self) -> float:
        """Share of the session not lost to error recovery"""
        if self.uptime_seconds <= 0:
            return 100.0
        lost = self.errors_count * ERROR_DOWNTIME_SECONDS
        return max(0.0, (self.uptime_seconds - lost) / self.uptime_seconds * 100.0)

    def reset(self, now=None):
        """Reset counters for a new session"""
        fresh = SessionState()
        self.__dict__.update(fresh.__dict__)
        self.started_at = now if now is not None else time.time()

    def copy(self) -> "SessionState":
        return copy.copy(self)
