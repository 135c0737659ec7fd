# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Default configuration values, marker colors and resolution presets

# Bite marker reference colors (RGB)
RED_EXCLAMATION = (241, 27, 28)
YELLOW_CAUGHT = (255, 255, 0)

# Region presets per screen resolution
REGION_PRESETS = {
    "3440x1440": {
        "red_region": {"x": 1321, "y": 99, "width": 768, "height": 546},
        "yellow_region": {"x": 3097, "y": 1234, "width": 342, "height": 205},
        "hunger_region": {"x": 274, "y": 1301, "width": 43, "height": 36},
    },
    "1920x1080": {
        "red_region": {"x": 598, "y": 29, "width": 901, "height": 477},
        "yellow_region": {"x": 1649, "y": 632, "width": 270, "height": 447},
        "hunger_region": {"x": 212, "y": 984, "width": 21, "height": 18},
    },
}

DEFAULT_PRESET = "3440x1440"

# Tolerance is a percentage of the 0-255 channel range
MAX_COLOR_TOLERANCE = 30

# Default feature and timing values (applied on first run)
DEFAULT_CONFIG = {
    "color_tolerance": 10,
    "autoclick_interval_ms": 70,
    "detection_interval_ms": 50,
    "startup_delay_ms": 3000,
    "max_fishing_timeout_ms": 25000,
    "min_bite_timeout_ms": 10000,
    "idle_interval_ms": 50,
    "rod_lure_value": 1.0,
    "fish_per_feed": 5,
    "feed_hunger_threshold": 100,
    "webhook_url": "",
    "screenshot_interval_mins": 60,
    "screenshot_enabled": True,
    "region_preset": DEFAULT_PRESET,
    "rod_hotkey": "5",
    "food_hotkey": "6",
    "failsafe_hotkey": "f3",
    "always_on_top": False,
    "auto_save_enabled": True,
    "failsafe_enabled": True,
    "advanced_detection": False,
}


def get_preset_regions(preset):
    """Get a copy of the region dicts for a resolution preset (None if unknown)"""
    regions = REGION_PRESETS.get(preset)
    if regions is None:
        return None
    return {name: dict(coords) for name, coords in regions.items()}
