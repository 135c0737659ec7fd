"""
Screen Capture - Region Sampler
===============================
Fetches pixel data for rectangular screen regions using mss.

- One mss instance per ScreenCapture (created lazily, reset after failures)
- Short per-region cache (16ms by default) to absorb back-to-back reads
- Regions are validated against the virtual screen at capture time

No retries happen here; a failed capture raises CaptureError and the
caller (FishingCycle) turns it into an error outcome.
"""

import time
import threading
import logging
import mss
import numpy as np

from core.exceptions import CaptureError
from utils.validators import validate_region_bounds

logger = logging.getLogger("FishingBot")


class ScreenCapture:
    """
    Region sampler backed by mss.

    Buffers are returned as BGRA numpy arrays (mss native layout).
    All coordinates are absolute screen coordinates.
    """

    def __init__(self, cache_duration=0.016, backend_factory=None):
        """
        Initialize screen capture.

        Args:
            cache_duration (float): Seconds a region capture is reused (default: 16ms)
            backend_factory (callable): Creates the capture backend (default: mss.mss)
        """
        self._backend_factory = backend_factory or mss.mss
        self._mss_instance = None
        self._mss_lock = threading.Lock()

        # Per-region cache: key -> (buffer, timestamp)
        self._cache = {}
        self._cache_duration = cache_duration

    def _get_mss_instance(self):
        """Get or create mss instance (thread-safe)."""
        with self._mss_lock:
            if self._mss_instance is None:
                try:
                    self._mss_instance = self._backend_factory()
                except Exception as e:
                    raise CaptureError(f"Screen capture backend unavailable: {e}") from e
            return self._mss_instance

    def _reset_mss_instance(self):
        """Reset mss instance (thread-safe)."""
        with self._mss_lock:
            if self._mss_instance is not None:
                try:
                    self._mss_instance.close()
                except Exception as e:
                    logger.debug(f"[ScreenCapture] Error closing mss: {e}")
                self._mss_instance = None

    def screen_bounds(self):
        """
        Bounds of the capturable virtual screen (all monitors).

        Returns:
            dict: {'left', 'top', 'width', 'height'}
        """
        sct = self._get_mss_instance()
        try:
            monitor = sct.monitors[0]
        except (AttributeError, IndexError) as e:
            raise CaptureError(f"No screens found: {e}") from e
        return {
            "left": monitor["left"],
            "top": monitor["top"],
            "width": monitor["width"],
            "height": monitor["height"],
        }

    def sample(self, region, use_cache=True):
        """
        Capture the pixels of a region.

        Args:
            region (config.Region): Area to capture
            use_cache (bool): Reuse a capture younger than cache_duration

        Returns:
            numpy.ndarray: HxWx4 BGRA buffer

        Raises:
            CaptureError: Region degenerate or off-screen, or backend failure
        """
        if region is None or region.width <= 0 or region.height <= 0:
            raise CaptureError(f"Degenerate region: {region}")

        key = (region.x, region.y, region.width, region.height)
        if use_cache and self._cache_duration > 0:
            cached = self._cache.get(key)
            if cached is not None and time.time() - cached[1] < self._cache_duration:
                return cached[0]

        bounds = self.screen_bounds()
        if not validate_region_bounds(region, bounds):
            raise CaptureError(f"Region {region} is outside the screen {bounds}")

        try:
            screenshot = self._get_mss_instance().grab(region.as_monitor())
            buffer = np.array(screenshot)
        except CaptureError:
            raise
        except Exception as e:
            logger.warning(f"[ScreenCapture] capture failed at ({region}): {e}")
            self._reset_mss_instance()
            raise CaptureError(f"Capture failed at ({region}): {e}") from e

        if use_cache and self._cache_duration > 0:
            now = time.time()
            self._cache[key] = (buffer, now)
            # Drop stale entries
            self._cache = {
                k: v for k, v in self._cache.items() if now - v[1] < 10.0
            }
        return buffer

    def capture_full(self):
        """
        Capture the primary monitor.

        Returns:
            numpy.ndarray: BGRA buffer of the whole primary screen

        Raises:
            CaptureError: Backend failure or no monitor
        """
        sct = self._get_mss_instance()
        try:
            monitors = sct.monitors
            monitor = monitors[1] if len(monitors) > 1 else monitors[0]
            return np.array(sct.grab(monitor))
        except Exception as e:
            logger.warning(f"[ScreenCapture] full capture failed: {e}")
            self._reset_mss_instance()
            raise CaptureError(f"Full screenshot failed: {e}") from e

    def cleanup(self):
        """Close the mss instance if it exists."""
        self._reset_mss_instance()

    def clear_cache(self):
        """Clear the region cache."""
        self._cache = {}
