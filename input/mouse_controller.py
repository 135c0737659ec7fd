"""
Mouse Controller
================
Handles mouse clicks and pointer position using pyautogui.

Clicks are issued at the current pointer position (the game window is
expected to be focused under the pointer). pyautogui is imported when the
controller is created so that a missing display surfaces as InputError.
"""

import time

from core.exceptions import FailsafeTriggered, InputError


class MouseController:
    """
    Centralized mouse control.

    pyautogui's own corner failsafe is enabled together with the bot
    failsafe and reported as FailsafeTriggered.
    """

    def __init__(self, failsafe_enabled=True, hold_delay=0.05):
        """
        Initialize mouse controller.

        Args:
            failsafe_enabled (bool): Let pyautogui abort when the pointer hits a corner
            hold_delay (float): Seconds between button down and up (default: 0.05)

        Raises:
            InputError: pyautogui cannot be loaded (no display, missing backend)
        """
        try:
            import pyautogui
        except Exception as e:
            raise InputError(f"Mouse backend unavailable: {e}") from e

        self._pyautogui = pyautogui
        self._pyautogui.FAILSAFE = bool(failsafe_enabled)
        self._pyautogui.PAUSE = 0  # Timing is handled by the fishing cycle
        self.hold_delay = hold_delay

    def click(self):
        """
        Left click at the current pointer position.

        Raises:
            FailsafeTriggered: Pointer in a screen corner with failsafe on
            InputError: Backend failure
        """
        try:
            self._pyautogui.mouseDown()
            time.sleep(self.hold_delay)
            self._pyautogui.mouseUp()
        except self._pyautogui.FailSafeException as e:
            raise FailsafeTriggered("Failsafe triggered: mouse in screen corner") from e
        except Exception as e:
            raise InputError(f"Click failed: {e}") from e

    def position(self):
        """
        Current pointer position.

        Returns:
            tuple: (x, y) screen coordinates
        """
        try:
            point = self._pyautogui.position()
            return int(point[0]), int(point[1])
        except Exception as e:
            raise InputError(f"Cannot read pointer position: {e}") from e

    def set_failsafe(self, enabled):
        self._pyautogui.FAILSAFE = bool(enabled)
