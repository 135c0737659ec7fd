# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Centralized settings manager
# Loads and saves BotConfig as a JSON document (load-on-first-use, save-on-demand)

import os
import json
import logging
import threading

from core.exceptions import ConfigError
from .bot_config import BotConfig

logger = logging.getLogger("FishingBot")


class SettingsManager:
    """Settings persistence for the fishing bot

    Keeps an in-memory cache of the JSON document and writes it back on
    save. Unknown keys in the file are preserved so that UI-only settings
    survive a round trip through the core.
    """

    def __init__(self, settings_file: str):
        """Initialize settings manager

        Args:
            settings_file: Absolute path to settings JSON file
        """
        self.settings_file = settings_file
        self._data = {}  # In-memory cache
        self._lock = threading.Lock()  # Thread-safe access
        self._ensure_settings_file_exists()
        self._load_all()

    def _ensure_settings_file_exists(self):
        """Create default settings file if it doesn't exist"""
        if os.path.exists(self.settings_file):
            return
        logger.info("Creating default settings file...")
        try:
            parent = os.path.dirname(self.settings_file)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_file, "w", encoding="utf-8") as f:
                json.dump(BotConfig().to_dict(), f, indent=4, ensure_ascii=False)
            logger.info(f"Default settings created at: {self.settings_file}")
        except OSError as e:
            logger.error(f"Failed to create default settings: {e}")

    def _load_all(self):
        """Load all settings from file (called at init, no lock needed)"""
        try:
            if os.path.exists(self.settings_file):
                with open(self.settings_file, "r", encoding="utf-8") as f:
                    self._data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse settings file: {e}")
            self._data = {}
        except OSError as e:
            logger.error(f"Error loading settings: {e}")
            self._data = {}

    def _save_all(self):
        """Save all settings to file (assumes caller holds lock)"""
        try:
            with open(self.settings_file, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=4, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

    def load_config(self) -> BotConfig:
        """Load the bot configuration, falling back to defaults on bad data"""
        with self._lock:
            data = dict(self._data)
        try:
            config = BotConfig.from_dict(data)
            config.validate()
            return config
        except ConfigError as e:
            logger.warning(f"Stored settings invalid, using defaults: {e}")
            return BotConfig()

    def save_config(self, config: BotConfig) -> bool:
        """Validate and persist the bot configuration

        Raises:
            ConfigError: If the configuration is invalid (nothing is written)
        """
        config.validate()
        with self._lock:
            self._data.update(config.to_dict())
            saved = self._save_all()
        if saved:
            logger.info(f"Settings saved to {self.settings_file}")
        return saved

    def get(self, key, default=None):
        """Read a raw setting (including UI-only keys)"""
        with self._lock:
            return self._data.get(key, default)

    def set(self, key, value):
        """Write a raw setting and persist"""
        with self._lock:
            self._data[key] = value
            return self._save_all()
