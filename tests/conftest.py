"""
Shared test fakes
=================
Fake clock, screen sampler and input used across the suite. No test touches
a real screen, keyboard or network.
"""

import threading

import numpy as np
import pytest

from config.bot_config import BotConfig, Region
from config.defaults import RED_EXCLAMATION, YELLOW_CAUGHT


def solid(rgb, width=12, height=12, alpha=True):
    """BGRA (or BGR) buffer filled with one RGB color, like an mss grab"""
    r, g, b = rgb
    channels = [b, g, r, 255] if alpha else [b, g, r]
    buffer = np.zeros((height, width, len(channels)), dtype=np.uint8)
    buffer[:, :] = channels
    return buffer


class FakeClock:
    """Clock that only moves when sleep() is called"""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            return self.now

    def sleep(self, seconds):
        with self._lock:
            self.sleeps.append(seconds)
            # Always move forward so polling loops terminate
            self.now += max(float(seconds), 0.001)


class FakeSampler:
    """
    Region sampler returning scripted buffers.

    Args:
        background: Buffer returned for any region without a scripted hit
        error: Exception raised on every sample() call
    """

    def __init__(self, background=None, error=None):
        self.background = background if background is not None else solid((20, 40, 60))
        self.error = error
        self.hits = {}          # region -> buffer
        self.hit_after = {}     # region -> number of calls before the hit shows
        self.calls = []
        self.full_captures = 0
        self.on_sample = None   # hook(region) run before returning

    def show(self, region, buffer, after_calls=0):
        self.hits[region] = buffer
        self.hit_after[region] = after_calls

    def sample(self, region):
        self.calls.append(region)
        if self.on_sample is not None:
            self.on_sample(region)
        if self.error is not None:
            raise self.error
        if region in self.hits:
            seen = sum(1 for r in self.calls if r == region)
            if seen > self.hit_after[region]:
                return self.hits[region]
        return self.background

    def capture_full(self):
        self.full_captures += 1
        if self.error is not None:
            raise self.error
        return solid((10, 20, 30), width=8, height=6)


class FakeInput:
    """Records input actions; failsafe controlled by the test"""

    def __init__(self):
        self.events = []
        self.tripped = False
        self.click_error = None
        self.cleared = 0

    @property
    def clicks(self):
        return self.events.count("click")

    def click(self):
        if self.click_error is not None:
            raise self.click_error
        self.events.append("click")

    def press_key(self, key):
        self.events.append(("key", key))

    def reset_rod(self, rod_key):
        self.events.append(("reset_rod", rod_key))

    def eat_food(self, rod_key, food_key):
        self.events.append(("eat_food", rod_key, food_key))

    def failsafe_tripped(self):
        return self.tripped

    def clear_failsafe(self):
        self.cleared += 1
        self.tripped = False


class FakeOCR:
    def __init__(self, text="100", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    def recognize(self, buffer):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sampler():
    return FakeSampler()


@pytest.fixture
def fake_input():
    return FakeInput()


@pytest.fixture
def config():
    """Fast config: no startup delay, short timeouts"""
    return BotConfig(
        startup_delay_ms=0,
        idle_interval_ms=0,
        autoclick_interval_ms=10,
        detection_interval_ms=50,
        max_fishing_timeout_ms=25000,
        min_bite_timeout_ms=10000,
        red_region=Region(100, 100, 12, 12),
        yellow_region=Region(200, 100, 12, 12),
        hunger_region=Region(300, 100, 40, 20),
        screenshot_enabled=False,
    )


@pytest.fixture
def red_buffer():
    return solid(RED_EXCLAMATION)


@pytest.fixture
def yellow_buffer():
    return solid(YELLOW_CAUGHT)
