"""
Reliability Governor

Bounds failure for a fishing session:
    - counts consecutive cycle errors (Caught/TimedOut reset the streak)
    - the single fatal condition is MAX_CONSECUTIVE_ERRORS errors in a row
    - an Interrupted outcome (operator failsafe) stops the session at once

Errors are never retried inside a cycle; the next loop iteration starts a
fresh cycle after backoff_seconds().
"""

import logging
import threading
from enum import Enum

from core.outcomes import OutcomeKind

MAX_CONSECUTIVE_ERRORS = 5
ALERT_THRESHOLD = 3
MAX_BACKOFF_SECONDS = 5.0


class Verdict(Enum):
    CONTINUE = "continue"
    STOP_FAILSAFE = "stop_failsafe"
    STOP_ERRORS = "stop_errors"

    @property
    def is_fatal(self):
        return self is not Verdict.CONTINUE


class ReliabilityGovernor:
    """Decides continue vs. stop after every cycle"""

    def __init__(self, input_ctrl=None, max_consecutive_errors=MAX_CONSECUTIVE_ERRORS,
                 alert_threshold=ALERT_THRESHOLD, logger=None):
        """
        Args:
            input_ctrl: Provides failsafe_tripped() (optional)
            max_consecutive_errors (int): Error streak that stops the session
            alert_threshold (int): Error streak that triggers an alert webhook
            logger: Logger instance (default: "FishingBot")
        """
        self.input_ctrl = input_ctrl
        self.max_consecutive_errors = max_consecutive_errors
        self.alert_threshold = alert_threshold
        self.logger = logger or logging.getLogger("FishingBot")

        self._lock = threading.Lock()
        self._streak = 0
        self._failsafe_tripped = False

    @property
    def consecutive_errors(self):
        with self._lock:
            return self._streak

    def reset(self):
        """Clear streak and failsafe flag (session start)"""
        with self._lock:
            self._streak = 0
            self._failsafe_tripped = False

    def record(self, outcome):
        """
        Fold one cycle outcome into the streak.

        Args:
            outcome: CycleOutcome

        Returns:
            Verdict: CONTINUE or the reason to stop
        """
        with self._lock:
            if outcome.kind is OutcomeKind.INTERRUPTED:
                self._failsafe_tripped = True
                self.logger.warning(f"[Governor] Failsafe stop: {outcome.message}")
                return Verdict.STOP_FAILSAFE

            if outcome.is_error:
                self._streak += 1
                if self._streak >= self.max_consecutive_errors:
                    self.logger.error(
                        f"[Governor] {self._streak} consecutive errors - stopping for safety"
                    )
                    return Verdict.STOP_ERRORS
                return Verdict.CONTINUE

            if outcome.resets_streak:
                self._streak = 0
            return Verdict.CONTINUE

    def failsafe_tripped(self, enabled=True):
        """
        Consult the operator abort signal.

        Returns:
            bool: True if enabled and tripped (stays True until reset())
        """
        if not enabled:
            return False
        with self._lock:
            if self._failsafe_tripped:
                return True
        if self.input_ctrl is not None and self.input_ctrl.failsafe_tripped():
            with self._lock:
                self._failsafe_tripped = True
            return True
        return False

    def backoff_seconds(self):
        """Recovery pause after an error: 1s per consecutive error, max 5s"""
        with self._lock:
            return min(float(self._streak), MAX_BACKOFF_SECONDS)

    def should_alert(self):
        with self._lock:
            return self._streak >= self.alert_threshold
