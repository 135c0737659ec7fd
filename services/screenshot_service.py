# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Services Module - Screenshot Service
# Periodic full-screen screenshots sent to the webhook

import io
import logging
import os
import time
from datetime import datetime

import numpy as np
from PIL import Image

from core.exceptions import CaptureError

logger = logging.getLogger("FishingBot")

JPEG_QUALITY = 85


def encode_jpeg(buffer, quality=JPEG_QUALITY):
    """
    Encode a BGRA/BGR capture buffer as JPEG bytes.

    Args:
        buffer: numpy array (H, W, 3|4) in BGR(A) channel order, as mss returns

    Returns:
        bytes: JPEG data
    """
    pixels = np.asarray(buffer)
    if pixels.ndim != 3 or pixels.shape[2] < 3:
        raise ValueError(f"Expected an (H, W, 3|4) buffer, got {pixels.shape}")
    rgb = np.ascontiguousarray(pixels[:, :, 2::-1]).astype(np.uint8)
    out = io.BytesIO()
    Image.fromarray(rgb).save(out, "JPEG", quality=quality)
    return out.getvalue()


class ScreenshotService:
    """
    Takes a full screenshot every `interval_mins` minutes.

    Screenshots go to the notifier (webhook) and, when save_dir is set, to
    disk. Failures are logged and never raised.
    """

    def __init__(self, sampler, notifier=None, interval_mins=60, enabled=True,
                 save_dir=None, clock=time.time):
        self.sampler = sampler
        self.notifier = notifier
        self.interval_mins = interval_mins
        self.enabled = enabled
        self.save_dir = save_dir
        self.clock = clock
        self._last_capture = clock()

    def update_settings(self, interval_mins=None, enabled=None):
        if interval_mins is not None:
            self.interval_mins = interval_mins
        if enabled is not None:
            self.enabled = enabled

    @property
    def active(self):
        """Enabled, with a webhook or a directory to receive the image"""
        webhook_url = getattr(self.notifier, "webhook_url", "") if self.notifier is not None else ""
        return bool(self.enabled and (webhook_url or self.save_dir))

    def reset_timer(self):
        self._last_capture = self.clock()

    def maybe_capture(self):
        """
        Capture if active and the interval elapsed.

        Returns:
            bool: True if a screenshot was taken
        """
        if not self.active or self.interval_mins <= 0:
            return False
        if self.clock() - self._last_capture < self.interval_mins * 60:
            return False
        self._last_capture = self.clock()
        return self.capture_now("Periodic Screenshot")

    def capture_now(self, message):
        """Take and dispatch one screenshot now"""
        try:
            data = encode_jpeg(self.sampler.capture_full())
        except (CaptureError, ValueError, OSError) as e:
            logger.warning(f"[Screenshot] Capture failed: {e}")
            return False

        if self.notifier is not None:
            self.notifier.send_screenshot(message, data)

        if self.save_dir:
            try:
                os.makedirs(self.save_dir, exist_ok=True)
                filename = f"screenshot_{datetime.now().strftime('%Y%m%d_%H%M%S')}.jpg"
                with open(os.path.join(self.save_dir, filename), "wb") as f:
                    f.write(data)
            except OSError as e:
                logger.warning(f"[Screenshot] Could not save file: {e}")

        logger.debug(f"[Screenshot] {message} ({len(data)} bytes)")
        return True
