# Copyright (C) 2026 BPS
# This file is part of Arcane Fishing Bot.
#
# Services Module - Webhook Service
# Queued Discord webhook notifications

import threading
import time
from collections import deque
import logging

import requests

logger = logging.getLogger("FishingBot")

MAX_WEBHOOK_RETRIES = 3
RETRY_DELAY_SECONDS = 1.0
WEBHOOK_TIMEOUT = 30.0

# Queue limits (oldest dropped first)
MAX_QUEUED_MESSAGES = 50
MAX_QUEUED_SCREENSHOTS = 10
BATCH_SIZE = 5


class WebhookService:
    """
    Discord Webhook Service - handles all webhook notifications

    send_message()/send_screenshot() only enqueue and return immediately.
    A daemon worker posts the queue with requests; delivery failures are
    logged and never reach the caller.
    """

    def __init__(self, webhook_url: str = "", retry_delay: float = RETRY_DELAY_SECONDS):
        """
        Initialize webhook service

        Args:
            webhook_url: Discord webhook URL (empty disables delivery)
            retry_delay: Seconds between retries of a failed post
        """
        self.webhook_url = webhook_url
        self.retry_delay = retry_delay

        self._queue = deque()
        self._cond = threading.Condition()
        self._running = False
        self._thread = None

    # ========== LIFECYCLE ==========

    def start(self):
        with self._cond:
            if self._running:
                return
            self._running = True
        self._thread = threading.Thread(target=self._worker, name="WebhookWorker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0):
        """Stop the worker after it delivers what is already queued"""
        with self._cond:
            if not self._running:
                return
            self._running = False
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    @property
    def running(self):
        return self._running

    # ========== PRODUCERS ==========

    def send_message(self, text: str):
        """Queue a text message"""
        with self._cond:
            self._queue.append(("text", text, None))
            while len(self._queue) > MAX_QUEUED_MESSAGES:
                self._queue.popleft()
            self._cond.notify()

    def send_screenshot(self, text: str, image_data: bytes):
        """Queue a JPEG screenshot with a caption"""
        with self._cond:
            self._queue.append(("screenshot", text, image_data))
            while len(self._queue) > MAX_QUEUED_SCREENSHOTS:
                self._queue.popleft()
            self._cond.notify()

    def pending(self):
        with self._cond:
            return len(self._queue)

    # ========== DELIVERY ==========

    def _worker(self):
        while True:
            with self._cond:
                while self._running and not self._queue:
                    self._cond.wait(timeout=1.0)
                if not self._running and not self._queue:
                    return
            self.process_pending()

    def process_pending(self, batch_size: int = BATCH_SIZE):
        """
        Deliver up to batch_size queued items.

        Returns:
            int: Number of items delivered successfully
        """
        batch = []
        with self._cond:
            while self._queue and len(batch) < batch_size:
                batch.append(self._queue.popleft())

        webhook_url = self.webhook_url.strip() if self.webhook_url else ""
        if not webhook_url:
            if batch:
                logger.debug(f"Webhook not configured, dropping {len(batch)} message(s)")
            return 0

        delivered = 0
        for kind, text, image_data in batch:
            if self._post(webhook_url, kind, text, image_data):
                delivered += 1
        return delivered

    def _post(self, webhook_url, kind, text, image_data):
        """Post one item with retry on 5xx and network errors"""
        retry_count = 0
        while retry_count < MAX_WEBHOOK_RETRIES:
            try:
                if kind == "screenshot":
                    files = {"file": ("screenshot.jpg", image_data, "image/jpeg")}
                    response = requests.post(
                        webhook_url, data={"content": text}, files=files, timeout=WEBHOOK_TIMEOUT
                    )
                else:
                    response = requests.post(
                        webhook_url, json={"content": text}, timeout=WEBHOOK_TIMEOUT
                    )

                if response.status_code in [200, 204]:
                    logger.debug("Webhook sent successfully")
                    return True

                logger.error(f"Webhook failed: {response.status_code}")
                if response.status_code >= 500:
                    retry_count += 1
                    if retry_count < MAX_WEBHOOK_RETRIES:
                        time.sleep(self.retry_delay)
                        continue
                return False
            except requests.RequestException as e:
                retry_count += 1
                if retry_count < MAX_WEBHOOK_RETRIES:
                    time.sleep(self.retry_delay)
                else:
                    logger.error(f"Webhook error: {e}")
        return False

    # ========== SETTINGS ==========

    def send_test_message(self):
        """
        Send a test webhook message synchronously

        Returns:
            tuple: (success: bool, message: str)
        """
        webhook_url = self.webhook_url.strip() if self.webhook_url else ""
        if not webhook_url:
            return False, "Please enter a Webhook URL first!"

        try:
            data = {"content": "Test message from Arcane Fishing Bot!"}
            response = requests.post(webhook_url, json=data, timeout=10)

            if response.status_code in [200, 204]:
                return True, "Test message sent successfully!"
            return False, f"Webhook error: {response.status_code}"
        except requests.RequestException as e:
            return False, f"Error testing webhook: {e}"

    def update_settings(self, webhook_url: str = None):
        """Update webhook settings"""
        if webhook_url is not None:
            self.webhook_url = webhook_url
