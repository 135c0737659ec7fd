"""
Input Module
============
Input abstraction layer for mouse, keyboard and the operator failsafe.

This module isolates pyautogui and pynput from the rest of the codebase.

Modules:
    - mouse_controller: Clicks and pointer position (pyautogui)
    - keyboard_controller: Key taps and global hotkeys (pynput)
    - input_controller: Game actions (cast/reel click, rod reset, eating) and failsafe

Usage:
    from input import MouseController, KeyboardController, InputController

    controls = InputController(MouseController(), KeyboardController())
    controls.click()
    controls.eat_food(rod_key='5', food_key='6')
    if controls.failsafe_tripped():
        ...
"""

from .mouse_controller import MouseController
from .keyboard_controller import KeyboardController, HotkeyListener
from .input_controller import InputController

__all__ = [
    'MouseController',
    'KeyboardController',
    'HotkeyListener',
    'InputController',
]
