"""
FishingEngine - Session Orchestrator

The FishingEngine is the "ignition key" of the fishing bot.
It owns the session lifecycle, the session state and the worker thread.

Responsibilities:
    - Control session lifecycle (start/stop/pause)
    - Run one FishingCycle per loop iteration on a config snapshot
    - Fold cycle outcomes into SessionState, the PerformanceMonitor and
      the ReliabilityGovernor
    - Feeding, milestone/alert webhooks and periodic screenshots
    - Fold session totals into LifetimeStats at stop

What it does NOT do:
    - GUI logic
    - Vision/detection (delegates to FishingCycle / VisualClassifier)
    - Settings I/O (delegates to SettingsManager / StatsManager via DI)

Design:
    - Pure dependency injection (no imports of vision/input/automation/services)
    - Single writer: only the worker thread mutates SessionState during a
      session; readers get copies under a lock
    - Commands (pause/resume/config/stop) reach the worker via a queue
    - A stop observed between cycles aborts before the next cycle; an
      in-flight cycle always finishes first

Usage:
    engine = FishingEngine(cycle, governor, monitor, input_ctrl, classifier,
                           sampler, config, stats)
    engine.start_session()  # Starts background thread
    # ... bot runs ...
    engine.stop_session()   # Stops after the in-flight cycle
"""

import logging
import queue
import threading
import time
from typing import Optional

from core.exceptions import CaptureError, ClassifyError, InputError
from core.outcomes import OutcomeKind
from core.reliability import Verdict
from core.state import FishingPhase, MacroState, SessionState
from utils.timing import interruptible_sleep, ms_to_seconds

PAUSE_POLL_SECONDS = 0.5
MILESTONE_EVERY = 10


class FishingEngine:
    """
    Session orchestrator.

    The engine owns:
        - SessionState (single writer: the worker thread)
        - BotConfig and LifetimeStats held for the process lifetime
        - Worker thread and command queue
        - Lifecycle callbacks

    The engine delegates one fishing cycle at a time to FishingCycle.
    """

    def __init__(
        self,
        cycle,
        governor,
        monitor,
        input_ctrl,
        classifier,
        sampler,
        config,
        stats,
        settings_manager=None,
        stats_manager=None,
        notifier=None,
        screenshots=None,
        callbacks: Optional[dict] = None,
        clock=time.time,
        sleep=time.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize FishingEngine with dependencies.

        Args:
            cycle: FishingCycle (run(config) -> CycleOutcome)
            governor: ReliabilityGovernor
            monitor: PerformanceMonitor
            input_ctrl: InputController (rod reset, feeding, failsafe)
            classifier: VisualClassifier (hunger reading)
            sampler: Region Sampler (hunger region capture)
            config: BotConfig
            stats: LifetimeStats
            settings_manager: Persists BotConfig (optional)
            stats_manager: Persists LifetimeStats (optional)
            notifier: WebhookService-like, send_message(text) (optional)
            screenshots: ScreenshotService (optional)
            callbacks: Optional dict of callbacks:
                - on_state_change: (old_state, new_state) -> None
                - on_start: () -> None
                - on_stop: (session_state) -> None
                - on_error: (exception) -> None
            clock: Time source in seconds (injectable for tests)
            sleep: Sleep function in seconds (injectable for tests)
            logger: Optional logger for engine events
        """
        # Dependencies (injected, not created)
        self._cycle = cycle
        self._governor = governor
        self._monitor = monitor
        self._input = input_ctrl
        self._classifier = classifier
        self._sampler = sampler
        self._settings = settings_manager
        self._stats_manager = stats_manager
        self._notifier = notifier
        self._screenshots = screenshots
        self._clock = clock
        self._sleep = sleep
        self._logger = logger or logging.getLogger("FishingBot")

        self._callbacks = callbacks or {}

        # Owned state (guarded by _lock)
        self._config = config
        self._stats = stats
        self._session = SessionState()
        self._lock = threading.RLock()

        # Thread control
        self._worker_thread: Optional[threading.Thread] = None
        self._commands = queue.Queue()
        self._stop_event = threading.Event()
        self._stop_reason: Optional[str] = None

        # Phase reports from the cycle land in SessionState
        self._cycle.on_phase = self._on_cycle_phase

        self._propagate_config(config)

        self._logger.info("FishingEngine initialized")

    # ========== READ API (copy-on-read) ==========

    def get_state(self) -> SessionState:
        with self._lock:
            return self._session.copy()

    def get_config(self):
        with self._lock:
            return self._config.snapshot()

    def get_stats(self):
        with self._lock:
            return self._stats.copy()

    def get_performance(self):
        return self._monitor.snapshot()

    def is_running(self) -> bool:
        with self._lock:
            return self._session.running

    # ========== COMMANDS ==========

    def start_session(self) -> bool:
        """
        Start a fishing session on a background worker thread.

        Idempotent: if a session is already active only last_action changes.

        Returns:
            True if a new session was started
        """
        with self._lock:
            if not self._session.state.can_start:
                self._session.last_action = f"Already {str(self._session.state).lower()}"
                self._logger.warning(f"Cannot start: session is {self._session.state}")
                return False

            old_state = self._session.state
            self._session.reset(now=self._clock())
            self._session.running = True
            self._session.last_action = "Starting fishing bot..."
            self._stop_event.clear()
            self._stop_reason = None
            self._drain_commands()
            self._governor.reset()
            self._monitor.clear()
            if hasattr(self._input, "clear_failsafe"):
                self._input.clear_failsafe()

            self._set_state(old_state, MacroState.RUNNING)
            self._worker_thread = threading.Thread(
                target=self._worker_loop,
                name="FishingEngine-Worker",
                daemon=True,  # Daemon to prevent hanging on exit
            )
            self._worker_thread.start()

        self._fire("on_start")
        self._logger.info("Fishing session started")
        return True

    def stop_session(self, wait: bool = True, timeout: float = 5.0) -> bool:
        """
        Request a stop. The in-flight cycle (if any) finishes first.

        Idempotent: stopping a stopped session is a no-op.

        Args:
            wait: Block until the worker has finalized the session
            timeout: Maximum seconds to wait

        Returns:
            True if the session is stopped (or stopping when wait=False)
        """
        with self._lock:
            state = self._session.state
            if state is MacroState.STOPPING:
                return self.wait(timeout) if wait else True
            if not state.can_stop:
                return True
            self._session.last_action = "Stopping after current cycle..."
            self._set_state(state, MacroState.STOPPING)
            self._stop_reason = self._stop_reason or "Bot stopped"

        self._stop_event.set()
        self._commands.put(("stop", None))
        self._logger.info("Stop signal sent, waiting for worker thread...")

        if wait:
            return self.wait(timeout)
        return True

    def pause(self) -> bool:
        return self._enqueue("pause")

    def resume(self) -> bool:
        return self._enqueue("resume")

    def toggle_pause(self) -> bool:
        return self._enqueue("toggle_pause")

    def save_config(self, config) -> None:
        """
        Validate, persist and apply a new configuration.

        While a session runs the new config is applied by the worker
        between cycles. Either way the flags that collaborators cache
        (failsafe, detection mode, webhook, screenshots) follow it.

        Raises:
            ConfigError: Invalid configuration (nothing is changed)
        """
        config.validate()
        snapshot = config.snapshot()
        if self._settings is not None:
            self._settings.save_config(snapshot)

        with self._lock:
            active = self._session.state.is_active
            if not active:
                self._config = snapshot
        if active:
            self._commands.put(("config", snapshot))
        else:
            self._propagate_config(snapshot)
        self._logger.info("Configuration saved")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the worker thread to exit.

        Returns:
            True if no worker is running anymore
        """
        thread = self._worker_thread
        if thread is None or thread is threading.current_thread():
            return True
        thread.join(timeout=timeout)
        if thread.is_alive():
            self._logger.warning(f"Worker thread did not stop within {timeout}s")
            return False
        return True

    def _enqueue(self, name) -> bool:
        with self._lock:
            if self._session.state not in (MacroState.RUNNING, MacroState.PAUSED):
                return False
        self._commands.put((name, None))
        return True

    # ========== WORKER ==========

    def _worker_loop(self):
        """
        Worker thread main loop.

        This is the ONLY code that mutates SessionState while a session runs.
        """
        self._logger.info("Worker thread started")

        try:
            self._prepare_session()

            while not self._stop_event.is_set():
                self._process_commands()
                if self._stop_event.is_set():
                    break

                with self._lock:
                    paused = self._session.paused
                if paused:
                    self._wait_while_paused()
                    continue

                config = self.get_config()
                outcome = self._cycle.run(config)
                if self._handle_outcome(outcome, config):
                    break

                if self._screenshots is not None:
                    self._screenshots.maybe_capture()

                self._interruptible_sleep(ms_to_seconds(config.idle_interval_ms))

        except Exception as e:
            # Any unhandled exception ends the session cleanly
            self._logger.error(f"Worker thread exception: {e}", exc_info=True)
            self._stop_reason = f"Stopped: unexpected error ({e})"
            self._fire("on_error", e)

        finally:
            self._finalize_session()
            self._logger.info("Worker thread exited")

    def _prepare_session(self):
        config = self.get_config()
        self._update(last_action="Initializing bot systems...", phase=FishingPhase.IDLE)
        if not self._interruptible_sleep(ms_to_seconds(config.startup_delay_ms)):
            return

        self._update(last_action="Preparing fishing rod...")
        try:
            self._input.reset_rod(config.rod_hotkey)
        except InputError as e:
            self._logger.warning(f"Rod reset failed: {e}")

        self._notify("Arcane Fishing Bot Started! Beginning automated fishing session...")
        if self._screenshots is not None:
            self._screenshots.reset_timer()
            if self._screenshots.active:
                self._screenshots.capture_now("Bot Started - Ready to Fish!")

        self._update(last_action="Bot active! Starting fishing sequence...")

    def _handle_outcome(self, outcome, config) -> bool:
        """
        Fold one outcome into session state and consult the governor.

        Returns:
            True if the session must stop
        """
        self._monitor.record_outcome(outcome, timestamp=self._clock())
        verdict = self._governor.record(outcome)
        streak = self._governor.consecutive_errors

        with self._lock:
            s = self._session
            s.consecutive_errors = streak
            if outcome.kind is OutcomeKind.CAUGHT:
                s.fish_caught += 1
                s.catches_since_feed += 1
                s.current_streak += 1
                s.best_streak = max(s.best_streak, s.current_streak)
                s.last_action = f"Fish #{s.fish_caught} caught! Current streak: {s.current_streak}"
            elif outcome.kind is OutcomeKind.TIMED_OUT:
                s.last_action = "No bite detected - Recasting..."
            elif outcome.is_error:
                s.errors_count += 1
                s.current_streak = 0
                s.last_action = f"Error #{s.errors_count}: {outcome} (Consecutive: {streak})"
            self._refresh_uptime()
            fish_caught = s.fish_caught
            errors_count = s.errors_count

        if outcome.is_catch:
            self._after_catch(config, fish_caught)
        elif outcome.is_error:
            self._logger.warning(f"Cycle error #{errors_count}: {outcome} (consecutive: {streak})")
            if self._governor.should_alert():
                self._notify(f"Critical Error Alert: Error #{errors_count}: {outcome} (Consecutive: {streak})")

        if verdict is Verdict.STOP_FAILSAFE:
            self._stop_reason = f"Failsafe triggered - {outcome.message or 'operator abort'}"
            return True
        if verdict is Verdict.STOP_ERRORS:
            self._stop_reason = "Too many consecutive errors - Stopping for safety"
            return True

        if outcome.is_error:
            self._interruptible_sleep(self._governor.backoff_seconds())
        return False

    def _after_catch(self, config, fish_caught):
        try:
            self._input.reset_rod(config.rod_hotkey)
        except InputError as e:
            self._logger.warning(f"Rod reset failed: {e}")

        with self._lock:
            self._stats.add_fish(1)

        if fish_caught % MILESTONE_EVERY == 0:
            self._notify(f"Milestone Reached! {fish_caught} fish caught this session!")

        self._maybe_feed(config)

    def _maybe_feed(self, config):
        """Feed every fish_per_feed catches (hunger-gated in advanced mode)"""
        if config.fish_per_feed <= 0:
            return
        with self._lock:
            if self._session.catches_since_feed < config.fish_per_feed:
                return
            self._session.catches_since_feed = 0
            self._session.phase = FishingPhase.FEEDING
            self._session.last_action = "Checking hunger level..."

        hunger = self._read_hunger(config) if config.advanced_detection else None
        if hunger is not None and hunger >= config.feed_hunger_threshold:
            self._update(last_action=f"Hunger at {hunger}% - No feeding needed")
            return

        if hunger is None:
            self._update(last_action="Feeding character...")
        else:
            self._update(last_action=f"Hunger at {hunger}% - Feeding character...")

        try:
            self._input.eat_food(config.rod_hotkey, config.food_hotkey)
        except InputError as e:
            self._logger.warning(f"Feeding failed: {e}")
            self._update(last_action=f"Feeding failed: {e}")
            return

        with self._lock:
            self._stats.add_feed()
        self._update(last_action="Successfully fed character!")
        if hunger is None:
            self._notify("Fed character (hunger unknown)")
        else:
            self._notify(f"Fed character (Hunger was {hunger}%)")

    def _read_hunger(self, config):
        """
        Read the hunger percentage.

        Returns:
            int | None: Hunger level, None when unknown
        """
        try:
            buffer = self._sampler.sample(config.hunger_region)
            hunger = self._classifier.read_percentage(buffer)
        except (CaptureError, ClassifyError) as e:
            self._logger.info(f"Could not read hunger ({e}) - treating as unknown")
            self._update(hunger_known=False)
            return None
        self._update(hunger_level=hunger, hunger_known=True)
        return hunger

    def _wait_while_paused(self):
        config = self.get_config()
        if self._governor.failsafe_tripped(config.failsafe_enabled):
            self._stop_reason = "Failsafe triggered while paused"
            self._stop_event.set()
            return
        try:
            name, payload = self._commands.get(timeout=PAUSE_POLL_SECONDS)
        except queue.Empty:
            return
        self._apply_command(name, payload)

    def _process_commands(self):
        while True:
            try:
                name, payload = self._commands.get_nowait()
            except queue.Empty:
                return
            self._apply_command(name, payload)

    def _apply_command(self, name, payload):
        with self._lock:
            s = self._session
            if name == "stop":
                self._stop_event.set()
            elif name == "config":
                self._config = payload
                s.last_action = "Configuration updated"
            elif name in ("pause", "resume", "toggle_pause"):
                paused = {"pause": True, "resume": False}.get(name, not s.paused)
                if paused == s.paused or s.state is MacroState.STOPPING:
                    return
                s.paused = paused
                s.last_action = "Bot paused" if paused else "Bot resumed"
                self._set_state(s.state, MacroState.PAUSED if paused else MacroState.RUNNING)
            else:
                self._logger.warning(f"Unknown command: {name}")
                return
        if name == "config":
            self._propagate_config(payload)
        elif name in ("pause", "resume", "toggle_pause"):
            self._notify("Bot Paused" if paused else "Bot Resumed")

    def _drain_commands(self):
        """Drop stale commands; a config saved as the last session ended still applies"""
        while True:
            try:
                name, payload = self._commands.get_nowait()
            except queue.Empty:
                return
            if name == "config":
                self._config = payload
                self._propagate_config(payload)

    def _finalize_session(self):
        """Finalize SessionState and fold the session into LifetimeStats"""
        with self._lock:
            s = self._session
            self._refresh_uptime()
            old_state = s.state
            s.running = False
            s.paused = False
            s.phase = FishingPhase.IDLE
            s.last_action = self._stop_reason or "Fishing session completed"

            self._stats.complete_session(s.fish_caught, int(s.uptime_seconds), s.uptime_percentage)
            stats_copy = self._stats.copy()
            config = self._config
            summary = (
                f"Session Complete!\nFish Caught: {s.fish_caught}\n"
                f"Runtime: {int(s.uptime_seconds) // 3600}h {(int(s.uptime_seconds) % 3600) // 60}m\n"
                f"Best Streak: {s.best_streak}"
            )
            final_state = s.copy()

        if config.auto_save_enabled and self._stats_manager is not None:
            self._stats_manager.save(stats_copy)

        self._notify(summary)
        self._logger.info(f"Session finished: {final_state.last_action}")

        # STOPPED last so a new start_session sees a fully finalized session
        with self._lock:
            self._set_state(old_state, MacroState.STOPPED)
            final_state.state = MacroState.STOPPED

        self._fire("on_stop", final_state)

    # ========== INTERNAL ==========

    def _on_cycle_phase(self, phase, message):
        self._update(phase=phase, last_action=message)

    def _update(self, **changes):
        with self._lock:
            for name, value in changes.items():
                setattr(self._session, name, value)
            self._refresh_uptime()

    def _refresh_uptime(self):
        """Must be called while holding _lock"""
        if self._session.started_at is not None:
            self._session.uptime_seconds = max(0.0, self._clock() - self._session.started_at)

    def _interruptible_sleep(self, seconds) -> bool:
        if seconds <= 0:
            return not self._stop_event.is_set()
        return interruptible_sleep(
            seconds,
            lambda: not self._stop_event.is_set(),
            clock=self._clock,
            sleep=self._sleep,
        )

    def _propagate_config(self, config):
        """
        Push the config flags that collaborators cache.

        Collaborators are duck-typed; a missing setter is skipped.
        """
        if hasattr(self._input, "set_failsafe_enabled"):
            self._input.set_failsafe_enabled(config.failsafe_enabled)
        if hasattr(self._input, "set_failsafe_hotkey"):
            self._input.set_failsafe_hotkey(config.failsafe_hotkey)
        if hasattr(self._classifier, "set_advanced"):
            self._classifier.set_advanced(config.advanced_detection)
        if self._notifier is not None and hasattr(self._notifier, "update_settings"):
            self._notifier.update_settings(webhook_url=config.webhook_url)
        if self._screenshots is not None:
            self._screenshots.update_settings(
                interval_mins=config.screenshot_interval_mins,
                enabled=config.screenshot_enabled,
            )

    def _notify(self, text):
        if self._notifier is None:
            return
        try:
            self._notifier.send_message(text)
        except Exception as e:
            self._logger.error(f"Notification failed: {e}")

    def _set_state(self, old_state, new_state):
        """
        Internal state transition with callback.

        Must be called while holding _lock.
        """
        self._session.state = new_state
        self._logger.debug(f"State transition: {old_state} -> {new_state}")
        if "on_state_change" in self._callbacks:
            try:
                self._callbacks["on_state_change"](old_state, new_state)
            except Exception as e:
                self._logger.error(f"State change callback error: {e}")

    def _fire(self, name, *args):
        callback = self._callbacks.get(name)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            self._logger.error(f"{name} callback error: {e}")
