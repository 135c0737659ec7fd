# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Bot configuration: screen regions, timing, feature flags

import copy
import logging
from dataclasses import dataclass, field, fields

from core.exceptions import ConfigError
from utils.validators import validate_webhook_url
from .defaults import (
    DEFAULT_CONFIG,
    DEFAULT_PRESET,
    MAX_COLOR_TOLERANCE,
    RED_EXCLAMATION,
    YELLOW_CAUGHT,
    get_preset_regions,
)

logger = logging.getLogger("FishingBot")

REGION_FIELDS = ("red_region", "yellow_region", "hunger_region")
NUMERIC_FIELDS = (
    "color_tolerance",
    "autoclick_interval_ms",
    "detection_interval_ms",
    "startup_delay_ms",
    "idle_interval_ms",
    "max_fishing_timeout_ms",
    "min_bite_timeout_ms",
    "rod_lure_value",
    "fish_per_feed",
    "feed_hunger_threshold",
    "screenshot_interval_mins",
)


@dataclass(frozen=True)
class Region:
    """Rectangular screen area in absolute pixel coordinates"""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        try:
            width, height = int(self.width), int(self.height)
        except (TypeError, ValueError):
            raise ConfigError(f"Region size must be numeric: {self.width}x{self.height}")
        if width <= 0 or height <= 0:
            raise ConfigError(f"Region must have positive size, got {width}x{height}")

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(
                int(data["x"]), int(data["y"]), int(data["width"]), int(data["height"])
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid region {data!r}: {e}")

    def to_dict(self):
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    def as_monitor(self):
        """Region in the dict shape mss.grab() expects"""
        return {"left": self.x, "top": self.y, "width": self.width, "height": self.height}

    def __str__(self):
        return f"x:{self.x} y:{self.y} w:{self.width} h:{self.height}"


def _preset_region(name):
    return Region.from_dict(get_preset_regions(DEFAULT_PRESET)[name])


@dataclass
class BotConfig:
    """
    All tunables of the fishing bot.

    Mutated only between sessions or through FishingEngine.save_config().
    A cycle always works on a snapshot().
    """

    color_tolerance: int = DEFAULT_CONFIG["color_tolerance"]
    autoclick_interval_ms: int = DEFAULT_CONFIG["autoclick_interval_ms"]
    detection_interval_ms: int = DEFAULT_CONFIG["detection_interval_ms"]
    startup_delay_ms: int = DEFAULT_CONFIG["startup_delay_ms"]
    max_fishing_timeout_ms: int = DEFAULT_CONFIG["max_fishing_timeout_ms"]
    min_bite_timeout_ms: int = DEFAULT_CONFIG["min_bite_timeout_ms"]
    idle_interval_ms: int = DEFAULT_CONFIG["idle_interval_ms"]
    rod_lure_value: float = DEFAULT_CONFIG["rod_lure_value"]
    fish_per_feed: int = DEFAULT_CONFIG["fish_per_feed"]
    feed_hunger_threshold: int = DEFAULT_CONFIG["feed_hunger_threshold"]
    webhook_url: str = DEFAULT_CONFIG["webhook_url"]
    screenshot_interval_mins: int = DEFAULT_CONFIG["screenshot_interval_mins"]
    screenshot_enabled: bool = DEFAULT_CONFIG["screenshot_enabled"]
    red_region: Region = field(default_factory=lambda: _preset_region("red_region"))
    yellow_region: Region = field(default_factory=lambda: _preset_region("yellow_region"))
    hunger_region: Region = field(default_factory=lambda: _preset_region("hunger_region"))
    region_preset: str = DEFAULT_CONFIG["region_preset"]
    rod_hotkey: str = DEFAULT_CONFIG["rod_hotkey"]
    food_hotkey: str = DEFAULT_CONFIG["food_hotkey"]
    failsafe_hotkey: str = DEFAULT_CONFIG["failsafe_hotkey"]
    always_on_top: bool = DEFAULT_CONFIG["always_on_top"]
    auto_save_enabled: bool = DEFAULT_CONFIG["auto_save_enabled"]
    failsafe_enabled: bool = DEFAULT_CONFIG["failsafe_enabled"]
    advanced_detection: bool = DEFAULT_CONFIG["advanced_detection"]

    # ========== SERIALIZATION ==========

    @classmethod
    def from_dict(cls, data):
        """Build a config from a JSON dict; unknown keys ignored, missing keys defaulted"""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (data or {}).items():
            if key not in known:
                logger.debug(f"Ignoring unknown config key: {key}")
                continue
            if key in REGION_FIELDS:
                value = value if isinstance(value, Region) else Region.from_dict(value)
            kwargs[key] = value
        return cls(**kwargs)

    def to_dict(self):
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.to_dict() if isinstance(value, Region) else value
        return data

    def snapshot(self):
        """Independent copy for one cycle or one UI read"""
        return copy.deepcopy(self)

    # ========== VALIDATION ==========

    def validate(self):
        """
        Check every field and raise ConfigError listing all problems.

        Region screen bounds are NOT checked here; the sampler validates them
        lazily at capture time.
        """
        problems = []

        def check(condition, name, message):
            if not condition:
                problems.append((name, message))

        numbers = {}
        for name in NUMERIC_FIELDS:
            value = getattr(self, name)
            # bool is an int subclass but never a valid count or duration
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                problems.append((name, "must be a number"))
            else:
                numbers[name] = value

        def number_check(name, predicate, message):
            if name in numbers:
                check(predicate(numbers[name]), name, message)

        number_check(
            "color_tolerance",
            lambda v: 0 <= v <= MAX_COLOR_TOLERANCE,
            f"must be between 0 and {MAX_COLOR_TOLERANCE}",
        )
        for name in (
            "autoclick_interval_ms",
            "detection_interval_ms",
            "startup_delay_ms",
            "idle_interval_ms",
            "fish_per_feed",
        ):
            number_check(name, lambda v: v >= 0, "must be >= 0")
        for name in ("max_fishing_timeout_ms", "rod_lure_value", "screenshot_interval_mins"):
            number_check(name, lambda v: v > 0, "must be > 0")
        max_timeout = numbers.get("max_fishing_timeout_ms")
        number_check(
            "min_bite_timeout_ms",
            lambda v: v > 0 and (max_timeout is None or v <= max_timeout),
            "must be > 0 and <= max_fishing_timeout_ms",
        )
        number_check(
            "feed_hunger_threshold",
            lambda v: 0 <= v <= 100,
            "must be between 0 and 100",
        )
        check(
            not self.webhook_url or validate_webhook_url(self.webhook_url),
            "webhook_url",
            "must be empty or a Discord webhook URL",
        )
        for name in REGION_FIELDS:
            check(isinstance(getattr(self, name), Region), name, "must be a Region")
        for name in ("rod_hotkey", "food_hotkey"):
            value = getattr(self, name)
            check(isinstance(value, str) and len(value) == 1, name, "must be a single key")

        if problems:
            summary = "; ".join(f"{name} {message}" for name, message in problems)
            raise ConfigError(f"Invalid configuration: {summary}", [n for n, _ in problems])
        return True

    # ========== DERIVED VALUES ==========

    def calculate_max_bite_time(self):
        """
        Bite timeout in milliseconds for the configured lure.

        Better lures bite faster, so the timeout shrinks as the lure value
        grows. Lure 1.0 yields exactly max_fishing_timeout_ms; the result is
        clamped to [min_bite_timeout_ms, max_fishing_timeout_ms].
        """
        lure = float(self.rod_lure_value)
        if lure <= 1.0:
            multiplier = 3.0 - 2.0 * lure
        else:
            multiplier = 1.25 - lure / 3.0

        baseline = float(self.max_fishing_timeout_ms)
        floor = float(min(self.min_bite_timeout_ms, self.max_fishing_timeout_ms))
        return min(max(baseline * multiplier, floor), baseline)

    def timeout_description(self):
        seconds = self.calculate_max_bite_time() / 1000.0
        return f"Lure {self.rod_lure_value:.1f}: ~{seconds:.0f}s timeout"

    def apply_resolution_preset(self, preset):
        """Replace the three regions with a resolution preset's regions"""
        regions = get_preset_regions(preset)
        if regions is None:
            raise ConfigError(f"Unknown region preset: {preset}", ["region_preset"])
        for name in REGION_FIELDS:
            setattr(self, name, Region.from_dict(regions[name]))
        self.region_preset = preset
        logger.info(f"Applied region preset {preset}")

    def bite_markers(self):
        """(name, region, reference color) for each bite marker region"""
        return [
            ("red", self.red_region, RED_EXCLAMATION),
            ("yellow", self.yellow_region, YELLOW_CAUGHT),
        ]
