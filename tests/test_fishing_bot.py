"""
Test suite for fishing_bot.py
=============================
Console runner options that finish without starting the bot.
"""

import json
import os
import tempfile
from unittest.mock import MagicMock, patch

import fishing_bot

WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc"


def write_settings(temp_dir, **values):
    path = os.path.join(temp_dir, "settings.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(values, f)
    return path


class TestWebhookCheck:
    """Tests for --test-webhook"""

    def test_sends_to_configured_webhook(self, capsys):
        with tempfile.TemporaryDirectory() as temp_dir:
            settings = write_settings(temp_dir, webhook_url=WEBHOOK_URL)
            with patch("fishing_bot.LoggingService"), patch(
                "services.webhook_service.requests.post",
                return_value=MagicMock(status_code=204),
            ) as mock_post:
                code = fishing_bot.main(["--settings", settings, "--test-webhook"])

        assert code == 0
        assert mock_post.call_args[0][0] == WEBHOOK_URL
        assert "sent successfully" in capsys.readouterr().out

    def test_missing_webhook_fails(self, capsys):
        with tempfile.TemporaryDirectory() as temp_dir:
            settings = write_settings(temp_dir)
            with patch("fishing_bot.LoggingService"), patch(
                "services.webhook_service.requests.post"
            ) as mock_post:
                code = fishing_bot.main(["--settings", settings, "--test-webhook"])

        assert code == 1
        mock_post.assert_not_called()
        assert "Webhook URL" in capsys.readouterr().out
