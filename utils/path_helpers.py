# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Path utilities for settings, stats and screenshot locations

import os
import sys

SETTINGS_FILENAME = "settings.json"
STATS_FILENAME = "stats.json"
LOG_FILENAME = "fishing_bot.log"
SCREENSHOT_DIRNAME = "screenshots"


def get_app_dir():
    """Get the directory where the executable/script is located (for settings/logs)

    For non-frozen runs this is the project root (parent of utils/).
    """
    if getattr(sys, 'frozen', False):
        # Running as compiled executable
        return os.path.dirname(sys.executable)
    # Running as script: parent of utils/ folder (same as main script directory)
    return os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def get_data_path(filename, base_dir=None):
    """Absolute path of a data file inside the app directory"""
    return os.path.join(base_dir or get_app_dir(), filename)
