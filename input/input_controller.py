"""
Input Controller
================
Game-facing input actions and the operator failsafe signal.

Actions are fire-and-forget: nothing verifies their effect in the game.
Backend failures raise InputError; the fishing cycle turns them into an
error outcome.

Failsafe sources:
    - pointer parked within `corner_margin` pixels of the top-left corner
    - the failsafe hotkey (default F3) pressed since the last clear
"""

import logging
import threading
import time

from core.exceptions import InputError
from .keyboard_controller import HotkeyListener

logger = logging.getLogger("FishingBot")

# Delay between steps of multi-key actions (longer for Roblox)
ACTION_STEP_DELAY = 0.2


class InputController:
    """Click, key presses, rod/food sequences and the failsafe check"""

    def __init__(self, mouse, keyboard, failsafe_enabled=True, corner_margin=5, step_delay=ACTION_STEP_DELAY):
        """
        Args:
            mouse: MouseController (click(), position())
            keyboard: KeyboardController (tap(key))
            failsafe_enabled (bool): Honor corner/hotkey aborts
            corner_margin (int): Pixels from the top-left corner that trip the failsafe
            step_delay (float): Seconds between steps of eat_food/reset_rod
        """
        self.mouse = mouse
        self.keyboard = keyboard
        self.failsafe_enabled = failsafe_enabled
        self.corner_margin = corner_margin
        self.step_delay = step_delay

        self._abort_requested = threading.Event()
        self._hotkey_listener = None
        self._failsafe_hotkey = None

    # ========== ACTIONS ==========

    def click(self):
        self.mouse.click()

    def press_key(self, key):
        self.keyboard.tap(key)

    def reset_rod(self, rod_key):
        """Unequip and re-equip the rod"""
        self.press_key(rod_key)
        time.sleep(self.step_delay)
        self.press_key(rod_key)
        time.sleep(self.step_delay)

    def eat_food(self, rod_key, food_key):
        """Switch to food, eat it, switch back to the rod"""
        self.click()
        time.sleep(self.step_delay)
        self.press_key(food_key)
        time.sleep(self.step_delay)
        self.click()
        time.sleep(self.step_delay)
        self.press_key(rod_key)
        time.sleep(self.step_delay)

    # ========== FAILSAFE ==========

    def request_abort(self):
        """Trip the failsafe (called from the hotkey listener thread)"""
        if not self._abort_requested.is_set():
            logger.warning("[Failsafe] Abort hotkey pressed")
        self._abort_requested.set()

    def clear_failsafe(self):
        self._abort_requested.clear()

    def failsafe_tripped(self):
        """
        Check the operator abort signal.

        Returns:
            bool: True if the failsafe is enabled and tripped
        """
        if not self.failsafe_enabled:
            return False
        if self._abort_requested.is_set():
            return True
        try:
            x, y = self.mouse.position()
        except InputError as e:
            logger.debug(f"[Failsafe] Pointer position unavailable: {e}")
            return False
        if x < self.corner_margin and y < self.corner_margin:
            logger.warning("[Failsafe] Mouse in top-left corner")
            return True
        return False

    def start_failsafe_listener(self, hotkey):
        """
        Listen globally for the failsafe hotkey.

        The listener runs even while the failsafe is disabled;
        failsafe_tripped() ignores it until the failsafe is switched on.
        """
        if self._hotkey_listener is not None:
            return
        self._failsafe_hotkey = hotkey
        self._hotkey_listener = HotkeyListener({hotkey: self.request_abort})
        self._hotkey_listener.start()

    def stop_failsafe_listener(self):
        if self._hotkey_listener is not None:
            self._hotkey_listener.stop()
            self._hotkey_listener = None

    def set_failsafe_enabled(self, enabled):
        self.failsafe_enabled = bool(enabled)
        if hasattr(self.mouse, "set_failsafe"):
            self.mouse.set_failsafe(enabled)

    def set_failsafe_hotkey(self, hotkey):
        """Rebind the failsafe hotkey on a running listener"""
        if self._hotkey_listener is not None and hotkey != self._failsafe_hotkey:
            self._hotkey_listener.unbind(self._failsafe_hotkey)
            self._hotkey_listener.bind(hotkey, self.request_abort)
            logger.info(f"[Failsafe] Hotkey changed to {hotkey}")
        self._failsafe_hotkey = hotkey
