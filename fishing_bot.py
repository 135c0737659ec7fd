# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Console runner: builds the bot from saved settings and drives it with hotkeys
#
#   F1  start / stop
#   F4  pause / resume
#   F3  failsafe (stop immediately after the current cycle)
#   Ctrl+C  stop, save stats and exit

import argparse
import logging
import time

from automation import FishingCycle
from config import REGION_PRESETS, SettingsManager
from core import ConfigError, FishingEngine, InputError, ReliabilityGovernor
from input import HotkeyListener, InputController, KeyboardController, MouseController
from services import (
    LoggingService,
    PerformanceMonitor,
    ScreenshotService,
    StatsManager,
    WebhookService,
)
from utils.path_helpers import SCREENSHOT_DIRNAME, SETTINGS_FILENAME, STATS_FILENAME, get_data_path
from vision import OCRService, ScreenCapture, VisualClassifier

STATUS_REFRESH_SECONDS = 1.0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Arcane Odyssey fishing bot (F1 start/stop, F4 pause, F3 failsafe)."
    )
    parser.add_argument(
        "--settings",
        default=get_data_path(SETTINGS_FILENAME),
        help="Path to the settings JSON file.",
    )
    parser.add_argument(
        "--stats",
        default=get_data_path(STATS_FILENAME),
        help="Path to the lifetime stats JSON file.",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(REGION_PRESETS),
        help="Apply a screen resolution preset to the regions and save it.",
    )
    parser.add_argument(
        "--start",
        action="store_true",
        help="Start fishing immediately instead of waiting for F1.",
    )
    parser.add_argument(
        "--save-screenshots",
        action="store_true",
        help="Also write periodic screenshots to disk.",
    )
    parser.add_argument(
        "--test-webhook",
        action="store_true",
        help="Send a test message to the configured webhook and exit.",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging.")
    return parser.parse_args(argv)


def build_engine(config, settings, stats_manager, save_screenshots=False):
    """
    Wire the object graph.

    Returns:
        tuple: (engine, input_ctrl, notifier)
    """
    sampler = ScreenCapture()
    classifier = VisualClassifier(ocr=OCRService(), advanced=config.advanced_detection)
    input_ctrl = InputController(
        MouseController(failsafe_enabled=config.failsafe_enabled),
        KeyboardController(),
        failsafe_enabled=config.failsafe_enabled,
    )

    notifier = WebhookService(config.webhook_url)
    screenshots = ScreenshotService(
        sampler,
        notifier,
        interval_mins=config.screenshot_interval_mins,
        enabled=config.screenshot_enabled,
        save_dir=get_data_path(SCREENSHOT_DIRNAME) if save_screenshots else None,
    )

    engine = FishingEngine(
        cycle=FishingCycle(sampler, classifier, input_ctrl),
        governor=ReliabilityGovernor(input_ctrl),
        monitor=PerformanceMonitor(),
        input_ctrl=input_ctrl,
        classifier=classifier,
        sampler=sampler,
        config=config,
        stats=stats_manager.load(),
        settings_manager=settings,
        stats_manager=stats_manager,
        notifier=notifier,
        screenshots=screenshots,
    )
    return engine, input_ctrl, notifier


def format_status(engine):
    state = engine.get_state()
    perf = engine.get_performance()
    hunger = f"{state.hunger_level}%" if state.hunger_known else "?"
    return (
        f"[{state.state}] {state.phase} | fish {state.fish_caught} "
        f"({state.fish_per_hour:.1f}/h) | hunger {hunger} | "
        f"errors {state.errors_count} | {perf} | {state.last_action}"
    )


def main(argv=None):
    args = parse_args(argv)
    logging_service = LoggingService(
        log_level=logging.DEBUG if args.debug else logging.INFO, console=False
    )
    logger = logging_service.get_logger()

    settings = SettingsManager(args.settings)
    config = settings.load_config()
    if args.preset:
        try:
            config.apply_resolution_preset(args.preset)
            settings.save_config(config)
        except ConfigError as e:
            print(f"Invalid preset: {e}")
            return 2

    if args.test_webhook:
        ok, message = WebhookService(config.webhook_url).send_test_message()
        print(message)
        return 0 if ok else 1

    stats_manager = StatsManager(args.stats)
    try:
        engine, input_ctrl, notifier = build_engine(
            config, settings, stats_manager, save_screenshots=args.save_screenshots
        )
    except InputError as e:
        logger.error(f"Input backend unavailable: {e}")
        print(f"Input backend unavailable: {e}")
        return 1

    def toggle_session():
        if engine.get_state().state.can_start:
            input_ctrl.clear_failsafe()
            engine.start_session()
        else:
            engine.stop_session(wait=False)

    hotkeys = HotkeyListener({
        "f1": toggle_session,
        "f4": engine.toggle_pause,
    })

    notifier.start()
    try:
        hotkeys.start()
        input_ctrl.start_failsafe_listener(config.failsafe_hotkey)
    except InputError as e:
        logger.error(f"Hotkeys unavailable: {e}")
        print(f"Hotkeys unavailable: {e}")
        notifier.stop()
        return 1

    print(f"Arcane Fishing Bot ready - {config.timeout_description()}")
    print(f"F1 start/stop | F4 pause | {config.failsafe_hotkey.upper()} failsafe | Ctrl+C exit")
    if args.start:
        engine.start_session()

    try:
        while True:
            print(f"\r{format_status(engine)}", end="", flush=True)
            time.sleep(STATUS_REFRESH_SECONDS)
    except KeyboardInterrupt:
        print("\nStopping...")
    finally:
        engine.stop_session(wait=True, timeout=30.0)
        hotkeys.stop()
        input_ctrl.stop_failsafe_listener()
        stats = engine.get_stats()
        stats_manager.save(stats)
        notifier.stop()
        print(
            f"Lifetime: {stats.total_fish_caught} fish in {stats.formatted_runtime()} "
            f"over {stats.sessions_completed} sessions"
        )
        logger.info("Fishing bot exited")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
