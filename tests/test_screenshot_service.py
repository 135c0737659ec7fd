"""
Test suite for services/screenshot_service.py
=============================================
JPEG encoding and the periodic screenshot timer.
"""

import io
import os
import tempfile
from unittest.mock import MagicMock

import numpy as np
import pytest
from PIL import Image

from core.exceptions import CaptureError
from services.screenshot_service import ScreenshotService, encode_jpeg
from tests.conftest import FakeClock, FakeSampler, solid


class TestEncodeJpeg:
    """Tests for encode_jpeg()"""

    def test_encodes_bgra_buffer(self):
        data = encode_jpeg(solid((255, 0, 0), width=16, height=8))

        image = Image.open(io.BytesIO(data))
        assert image.format == "JPEG"
        assert image.size == (16, 8)

    def test_channel_order_converted(self):
        data = encode_jpeg(solid((255, 0, 0), width=16, height=16, alpha=False))

        r, g, b = Image.open(io.BytesIO(data)).convert("RGB").getpixel((8, 8))
        assert r > 200 and g < 50 and b < 50

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            encode_jpeg(np.zeros((4, 4), dtype=np.uint8))


class TestScreenshotTimer:
    """Tests for maybe_capture()"""

    def test_not_due(self):
        clock = FakeClock()
        notifier = MagicMock()
        service = ScreenshotService(FakeSampler(), notifier, interval_mins=1, clock=clock)

        clock.sleep(30)

        assert service.maybe_capture() is False
        notifier.send_screenshot.assert_not_called()

    def test_due_after_interval(self):
        clock = FakeClock()
        notifier = MagicMock()
        service = ScreenshotService(FakeSampler(), notifier, interval_mins=1, clock=clock)

        clock.sleep(61)

        assert service.maybe_capture() is True
        message, data = notifier.send_screenshot.call_args[0]
        assert message == "Periodic Screenshot"
        assert data[:2] == b"\xff\xd8"
        # Timer restarted
        assert service.maybe_capture() is False

    def test_disabled(self):
        clock = FakeClock()
        service = ScreenshotService(FakeSampler(), MagicMock(), interval_mins=1,
                                    enabled=False, clock=clock)
        clock.sleep(3600)

        assert service.maybe_capture() is False

    def test_reset_timer(self):
        clock = FakeClock()
        service = ScreenshotService(FakeSampler(), MagicMock(), interval_mins=1, clock=clock)
        clock.sleep(50)
        service.reset_timer()
        clock.sleep(50)

        assert service.maybe_capture() is False

    def test_inactive_without_webhook_or_directory(self):
        clock = FakeClock()
        notifier = MagicMock(webhook_url="")
        service = ScreenshotService(FakeSampler(), notifier, interval_mins=1, clock=clock)
        clock.sleep(61)

        assert service.active is False
        assert service.maybe_capture() is False

        notifier.webhook_url = "https://discord.com/api/webhooks/123/abc"
        assert service.active is True

    def test_directory_alone_is_enough(self):
        service = ScreenshotService(FakeSampler(), None, save_dir="shots")
        assert service.active is True

        service.update_settings(enabled=False)
        assert service.active is False


class TestCaptureNow:
    """Tests for capture_now()"""

    def test_capture_failure_is_logged_not_raised(self):
        sampler = FakeSampler(error=CaptureError("no display"))
        notifier = MagicMock()
        service = ScreenshotService(sampler, notifier)

        assert service.capture_now("Session started") is False
        notifier.send_screenshot.assert_not_called()

    def test_saves_to_directory(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            save_dir = os.path.join(temp_dir, "shots")
            service = ScreenshotService(FakeSampler(), None, save_dir=save_dir)

            assert service.capture_now("Manual") is True

            files = os.listdir(save_dir)
            assert len(files) == 1
            assert files[0].startswith("screenshot_") and files[0].endswith(".jpg")
