"""
Fishing Cycle Module
--------------------
One cast -> wait-for-bite -> reel cycle.

Architecture:
- FishingCycle receives all dependencies via constructor (dependency injection)
- It never writes session state: the result is returned as a CycleOutcome
  and phase changes are reported through the on_phase callback
- At most one cycle is in flight; a cycle is not preempted mid-phase

Phases:
  Idle -> Casting -> AwaitingBite -> Reeling -> Caught
                          |
                          +--> TimedOut (bite deadline elapsed)

Any CaptureError / ClassifyError / InputError ends the cycle as Error(kind)
without running the remaining phases.
"""

import logging
import time

from core.exceptions import CaptureError, ClassifyError, FailsafeTriggered, InputError
from core.outcomes import CycleOutcome, ErrorKind
from core.state import FishingPhase
from utils.timing import ms_to_seconds


class FishingCycle:
    """
    Cycle Controller.

    Runs exactly one fishing cycle per run() call against a config snapshot.
    """

    def __init__(self, sampler, classifier, input_ctrl, on_phase=None,
                 clock=time.time, sleep=time.sleep, logger=None):
        """
        Initialize FishingCycle with all dependencies.

        Args:
            sampler: Region Sampler (sample(region) -> buffer)
            classifier: VisualClassifier (detect_bite)
            input_ctrl: InputController (click, failsafe_tripped)
            on_phase: Callback on_phase(phase, message), optional
            clock: Time source in seconds (injectable for tests)
            sleep: Sleep function in seconds (injectable for tests)
            logger: Logger instance (default: "FishingBot")
        """
        self.sampler = sampler
        self.classifier = classifier
        self.input_ctrl = input_ctrl
        self.on_phase = on_phase
        self.clock = clock
        self.sleep = sleep
        self.logger = logger or logging.getLogger("FishingBot")

    def _set_phase(self, phase, message):
        if self.on_phase is None:
            return
        try:
            self.on_phase(phase, message)
        except Exception as e:
            self.logger.error(f"[Cycle] on_phase callback failed: {e}", exc_info=True)

    def _elapsed_ms(self, started):
        return max(0.0, (self.clock() - started) * 1000.0)

    def run(self, config):
        """
        Execute one cycle.

        Args:
            config: BotConfig snapshot, read-only for the whole cycle

        Returns:
            CycleOutcome: Caught, TimedOut, Interrupted or Error(kind)
        """
        started = self.clock()

        if config.failsafe_enabled and self.input_ctrl.failsafe_tripped():
            self._set_phase(FishingPhase.IDLE, "Failsafe triggered")
            return CycleOutcome.interrupted("Failsafe triggered", duration_ms=0.0)

        try:
            return self._run_phases(config, started)
        except FailsafeTriggered as e:
            self._set_phase(FishingPhase.IDLE, str(e))
            return CycleOutcome.interrupted(str(e), self._elapsed_ms(started))
        except CaptureError as e:
            return self._error(ErrorKind.CAPTURE, e, started)
        except ClassifyError as e:
            return self._error(ErrorKind.CLASSIFY, e, started)
        except InputError as e:
            return self._error(ErrorKind.INPUT, e, started)
        except Exception as e:
            self.logger.error(f"[Cycle] Unexpected error: {e}", exc_info=True)
            return self._error(ErrorKind.UNEXPECTED, e, started)

    def _error(self, kind, exc, started):
        message = f"{kind.value} error: {exc}"
        self.logger.warning(f"[Cycle] {message}")
        self._set_phase(FishingPhase.ERROR, message)
        return CycleOutcome.error(kind, str(exc), self._elapsed_ms(started))

    def _run_phases(self, config, started):
        # Casting
        self._set_phase(FishingPhase.CASTING, "Casting fishing line...")
        self.input_ctrl.click()
        self.sleep(ms_to_seconds(config.autoclick_interval_ms))

        # AwaitingBite
        timeout_ms = config.calculate_max_bite_time()
        self._set_phase(
            FishingPhase.AWAITING_BITE,
            f"Waiting for fish bite... (Timeout: {timeout_ms / 1000:.0f}s)",
        )
        marker = self._await_bite(config, timeout_ms)
        if marker is None:
            self._set_phase(FishingPhase.TIMED_OUT, "No bite detected - Recasting...")
            self.logger.debug(f"[Cycle] No bite within {timeout_ms:.0f}ms")
            return CycleOutcome.timed_out(self._elapsed_ms(started))

        # Reeling
        self._set_phase(FishingPhase.REELING, f"Fish bite detected ({marker})! Reeling in...")
        self.input_ctrl.click()

        self._set_phase(FishingPhase.CAUGHT, "Fish successfully caught!")
        return CycleOutcome.caught(self._elapsed_ms(started), marker=marker)

    def _await_bite(self, config, timeout_ms):
        """
        Poll both marker regions until one matches or the deadline elapses.

        Returns:
            str | None: Name of the matched marker, None on timeout
        """
        wait_started = self.clock()
        deadline = wait_started + timeout_ms / 1000.0
        interval = ms_to_seconds(config.detection_interval_ms)
        markers = config.bite_markers()

        while True:
            buffers = [
                (name, self.sampler.sample(region), color)
                for name, region, color in markers
            ]
            marker = self.classifier.detect_bite(
                buffers, config.color_tolerance, config.advanced_detection
            )
            if marker is not None:
                self.logger.debug(
                    f"[Cycle] {marker} marker after {self.clock() - wait_started:.2f}s"
                )
                return marker

            if self.clock() >= deadline:
                return None
            self.sleep(interval)
