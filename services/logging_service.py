# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Services Module - Logging Service

import logging

from utils.path_helpers import LOG_FILENAME, get_data_path

LOGGER_NAME = "FishingBot"
LOG_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'


class LoggingService:
    """
    Centralized logging service

    Configures the root handlers once (file + console); every module logs
    through logging.getLogger("FishingBot").
    """

    def __init__(self, log_file: str = None, log_level: int = logging.INFO, console: bool = True):
        """
        Initialize logging service

        Args:
            log_file: Path to log file (default: fishing_bot.log in the app dir)
            log_level: Logging level (default: INFO)
            console: Also log to stderr
        """
        self.log_file = log_file or get_data_path(LOG_FILENAME)
        self.log_level = log_level
        self.console = console
        self.logger = None
        self._setup_logging()

    def _setup_logging(self):
        """Setup logging with file and console handlers"""
        handlers = [logging.FileHandler(self.log_file, encoding='utf-8')]
        if self.console:
            handlers.append(logging.StreamHandler())
        logging.basicConfig(
            level=self.log_level,
            format=LOG_FORMAT,
            handlers=handlers,
        )
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(self.log_level)

    def get_logger(self):
        """Get the logger instance"""
        return self.logger

    def set_level(self, log_level: int):
        self.log_level = log_level
        self.logger.setLevel(log_level)
