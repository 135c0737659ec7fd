# Config module for Arcane Fishing Bot
# Regions, bot configuration, presets and JSON persistence

from .bot_config import BotConfig, Region
from .settings_manager import SettingsManager
from .defaults import REGION_PRESETS, RED_EXCLAMATION, YELLOW_CAUGHT

__all__ = [
    'BotConfig',
    'Region',
    'SettingsManager',
    'REGION_PRESETS',
    'RED_EXCLAMATION',
    'YELLOW_CAUGHT',
]
