"""
Test suite for vision/ocr_service.py
====================================
Percentage parsing and Tesseract invocation (subprocess replaced).
"""

import subprocess
from unittest.mock import MagicMock

import numpy as np
import pytest

from core.exceptions import ClassifyError, OcrError
from vision.ocr_service import OCRService, parse_percentage


class TestParsePercentage:
    """Tests for OCR text -> 0-100 integer"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("87", 87),
            ("87%", 87),
            (" 42 %\n", 42),
            ("100", 100),
            ("0", 0),
            ("lOO", 100),
            ("5O%", 50),
            ("I9", 19),
        ],
    )
    def test_valid_values(self, text, expected):
        assert parse_percentage(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", None, "%", "abc"])
    def test_no_digits(self, text):
        with pytest.raises(ClassifyError):
            parse_percentage(text)

    def test_out_of_range(self):
        with pytest.raises(ClassifyError) as exc_info:
            parse_percentage("150")
        assert exc_info.value.text == "150"

    @pytest.mark.parametrize("text", ["8 7", "87 %\n12", "4 O"])
    def test_split_read_rejected(self, text):
        with pytest.raises(ClassifyError) as exc_info:
            parse_percentage(text)
        assert exc_info.value.text == text


class TestOCRServiceAvailability:
    """Tests for Tesseract discovery"""

    def test_explicit_path_is_available(self):
        service = OCRService(tesseract_path="/usr/bin/tesseract")
        assert service.is_available() is True

    def test_missing_binary(self, monkeypatch):
        monkeypatch.setattr("vision.ocr_service.shutil.which", lambda name: None)
        monkeypatch.setattr("vision.ocr_service.TESSERACT_PATHS", [])

        service = OCRService()

        assert service.is_available() is False
        with pytest.raises(OcrError):
            service.recognize(np.zeros((10, 10, 3), dtype=np.uint8))

    def test_none_image(self):
        service = OCRService(tesseract_path="/usr/bin/tesseract")
        with pytest.raises(OcrError):
            service.recognize(None)


class TestRecognize:
    """Tests for the Tesseract command line and error mapping"""

    @pytest.fixture
    def image(self):
        image = np.zeros((18, 40, 4), dtype=np.uint8)
        image[:, 20:, :3] = 255
        image[:, :, 3] = 255
        return image

    def test_returns_stripped_stdout(self, image):
        runner = MagicMock(return_value=MagicMock(returncode=0, stdout="87%\n", stderr=""))
        service = OCRService(tesseract_path="/usr/bin/tesseract", runner=runner)

        assert service.recognize(image) == "87%"

        cmd = runner.call_args[0][0]
        assert cmd[0] == "/usr/bin/tesseract"
        assert cmd[cmd.index("--psm") + 1] == "8"
        assert cmd[cmd.index("--dpi") + 1] == "150"
        assert "tessedit_char_whitelist=0123456789%" in cmd

    def test_timeout(self, image):
        runner = MagicMock(side_effect=subprocess.TimeoutExpired(cmd="tesseract", timeout=1))
        service = OCRService(tesseract_path="/usr/bin/tesseract", runner=runner)

        with pytest.raises(OcrError):
            service.recognize(image)

    def test_nonzero_exit(self, image):
        runner = MagicMock(return_value=MagicMock(returncode=1, stdout="", stderr="boom"))
        service = OCRService(tesseract_path="/usr/bin/tesseract", runner=runner)

        with pytest.raises(OcrError):
            service.recognize(image)
