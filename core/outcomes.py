"""
Cycle Outcomes

Tagged result of one fishing cycle. Returned by FishingCycle.run() and
consumed by the ReliabilityGovernor and the PerformanceMonitor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutcomeKind(Enum):
    CAUGHT = "caught"
    TIMED_OUT = "timed_out"
    INTERRUPTED = "interrupted"
    ERROR = "error"


class ErrorKind(Enum):
    CAPTURE = "capture"
    CLASSIFY = "classify"
    INPUT = "input"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class CycleOutcome:
    kind: OutcomeKind
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    duration_ms: float = 0.0
    marker: Optional[str] = None

    @classmethod
    def caught(cls, duration_ms=0.0, marker=None):
        return cls(OutcomeKind.CAUGHT, duration_ms=duration_ms, marker=marker)

    @classmethod
    def timed_out(cls, duration_ms=0.0):
        return cls(OutcomeKind.TIMED_OUT, duration_ms=duration_ms)

    @classmethod
    def interrupted(cls, reason="", duration_ms=0.0):
        return cls(OutcomeKind.INTERRUPTED, message=reason, duration_ms=duration_ms)

    @classmethod
    def error(cls, error_kind, message="", duration_ms=0.0):
        return cls(
            OutcomeKind.ERROR,
            error_kind=error_kind,
            message=message,
            duration_ms=duration_ms,
        )

    @property
    def is_catch(self) -> bool:
        return self.kind is OutcomeKind.CAUGHT

    @property
    def is_error(self) -> bool:
        return self.kind is OutcomeKind.ERROR

    @property
    def resets_streak(self) -> bool:
        """Caught and TimedOut clear the consecutive-error streak"""
        return self.kind in (OutcomeKind.CAUGHT, OutcomeKind.TIMED_OUT)

    def __str__(self):
        if self.is_error:
            return f"Error({self.error_kind.value}): {self.message}"
        return self.kind.value.replace("_", " ").title()
