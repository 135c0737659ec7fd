"""
Test suite for config/settings_manager.py
==========================================
Tests for settings loading, saving, and caching.
"""

import json
import os
import tempfile

import pytest

from config.bot_config import BotConfig, Region
from config.settings_manager import SettingsManager
from core.exceptions import ConfigError


class TestSettingsManagerInitialization:
    """Tests for SettingsManager initialization"""

    def test_initialization_creates_default_file(self):
        """Test that initialization creates settings file if it doesn't exist"""
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")

            SettingsManager(temp_file)

            assert os.path.exists(temp_file)
            with open(temp_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            assert data["color_tolerance"] == 10
            assert data["red_region"]["width"] > 0

    def test_creates_parent_directories(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "nested", "dir", "settings.json")

            SettingsManager(temp_file)

            assert os.path.exists(temp_file)

    def test_existing_file_not_overwritten(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump({"color_tolerance": 20}, f)

            manager = SettingsManager(temp_file)

            assert manager.load_config().color_tolerance == 20


class TestBotConfigPersistence:
    """Tests for BotConfig load/save"""

    def test_save_and_load_config(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            manager = SettingsManager(temp_file)

            config = BotConfig(rod_lure_value=1.5, hunger_region=Region(5, 6, 7, 8))
            assert manager.save_config(config) is True

            reloaded = SettingsManager(temp_file).load_config()
            assert reloaded.rod_lure_value == 1.5
            assert reloaded.hunger_region == Region(5, 6, 7, 8)

    def test_invalid_config_not_saved(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            manager = SettingsManager(temp_file)

            with pytest.raises(ConfigError):
                manager.save_config(BotConfig(color_tolerance=99))

            assert SettingsManager(temp_file).load_config().color_tolerance == 10

    def test_invalid_stored_config_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump({"color_tolerance": 500}, f)

            config = SettingsManager(temp_file).load_config()

            assert config.color_tolerance == 10

    def test_null_stored_number_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump({"fish_per_feed": None}, f)

            config = SettingsManager(temp_file).load_config()

            assert config == BotConfig()

    def test_string_stored_number_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump({"screenshot_interval_mins": "60", "feed_hunger_threshold": "low"}, f)

            config = SettingsManager(temp_file).load_config()

            assert config == BotConfig()

    def test_null_number_not_saved(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            manager = SettingsManager(temp_file)

            with pytest.raises(ConfigError) as exc_info:
                manager.save_config(BotConfig(min_bite_timeout_ms=None))

            assert exc_info.value.fields == ["min_bite_timeout_ms"]
            assert manager.get("min_bite_timeout_ms") is not None

    def test_corrupt_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            with open(temp_file, "w", encoding="utf-8") as f:
                f.write("{not json")

            config = SettingsManager(temp_file).load_config()

            assert config == BotConfig()


class TestRawSettings:
    """Tests for raw get/set (UI-only keys)"""

    def test_unknown_keys_survive_config_save(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_file = os.path.join(temp_dir, "test_settings.json")
            manager = SettingsManager(temp_file)

            manager.set("theme", "dark")
            manager.save_config(BotConfig(color_tolerance=12))

            reloaded = SettingsManager(temp_file)
            assert reloaded.get("theme") == "dark"
            assert reloaded.get("color_tolerance") == 12

    def test_get_default(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            manager = SettingsManager(os.path.join(temp_dir, "s.json"))
            assert manager.get("missing", "fallback") == "fallback"
