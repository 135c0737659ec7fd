"""
Keyboard Controller
===================
Handles keyboard input and global hotkeys.

This module centralizes keyboard input using pynput.keyboard.Controller,
and global hotkey listening using pynput.keyboard.Listener.
"""

import logging
import time

from core.exceptions import InputError

logger = logging.getLogger("FishingBot")


def resolve_key(name):
    """
    Turn a key name into a pynput key.

    Single characters stay strings ('5'); names like 'f3' or 'esc' map to
    pynput Key members.
    """
    from pynput.keyboard import Key

    if isinstance(name, str) and len(name) == 1:
        return name
    try:
        return getattr(Key, str(name).lower())
    except AttributeError:
        raise InputError(f"Unknown key: {name}")


def key_name(key):
    """Normalized name of a pynput key event ('5', 'f3', ...)"""
    char = getattr(key, "char", None)
    if char:
        return char.lower()
    name = getattr(key, "name", None)
    return name.lower() if name else str(key)


class KeyboardController:
    """
    Centralized keyboard control using pynput.

    Provides methods for pressing, releasing, and tapping keys.
    Supports both character keys ('5', '6') and special keys ('f3', 'esc').
    """

    def __init__(self):
        """
        Initialize keyboard controller with pynput Controller.

        Raises:
            InputError: pynput cannot be loaded (no display, missing backend)
        """
        try:
            from pynput.keyboard import Controller
            self.kb = Controller()
        except Exception as e:
            raise InputError(f"Keyboard backend unavailable: {e}") from e

    def tap(self, key, delay=0.05):
        """
        Press and release a key with a delay.

        Args:
            key: Key name to tap ('5' or 'f3')
            delay (float): Delay between press and release in seconds (default: 0.05)
        """
        resolved = resolve_key(key)
        try:
            self.kb.press(resolved)
            time.sleep(delay)
            self.kb.release(resolved)
        except Exception as e:
            raise InputError(f"Key press failed ({key}): {e}") from e


class HotkeyListener:
    """
    Global hotkey listener.

    Maps key names to callbacks; callbacks run on the pynput listener
    thread and must only set flags or enqueue commands.
    """

    def __init__(self, bindings=None):
        self._bindings = {}
        for name, callback in (bindings or {}).items():
            self.bind(name, callback)
        self._listener = None

    def bind(self, name, callback):
        self._bindings[str(name).lower()] = callback

    def unbind(self, name):
        self._bindings.pop(str(name).lower(), None)

    def _on_press(self, key):
        callback = self._bindings.get(key_name(key))
        if callback is None:
            return
        try:
            callback()
        except Exception as e:
            logger.error(f"[Hotkey] Callback for {key_name(key)} failed: {e}", exc_info=True)

    def start(self):
        if self._listener is not None:
            return
        try:
            from pynput.keyboard import Listener
            self._listener = Listener(on_press=self._on_press)
            self._listener.daemon = True
            self._listener.start()
        except Exception as e:
            self._listener = None
            raise InputError(f"Hotkey listener unavailable: {e}") from e
        logger.info(f"[Hotkey] Listening for: {', '.join(sorted(self._bindings))}")

    def stop(self):
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
