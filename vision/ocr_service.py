"""
OCR Service
===========
Tesseract OCR wrapper for reading the hunger percentage.

The external Tesseract binary is run on a preprocessed copy of the region
(grayscale, median filter, Otsu threshold). Failures raise OcrError; text
that is not a valid 0-100 percentage raises ClassifyError from
parse_percentage().
"""

import logging
import os
import shutil
import subprocess
import tempfile

from core.exceptions import ClassifyError, OcrError

logger = logging.getLogger("FishingBot")

# Tesseract paths to check (in priority order)
TESSERACT_PATHS = [
    # 1. Standard Tesseract installation
    r"C:\Program Files\Tesseract-OCR\tesseract.exe",
    r"C:\Program Files (x86)\Tesseract-OCR\tesseract.exe",
    # 2. Relative to the project (for portable mode)
    os.path.join(
        os.path.dirname(os.path.abspath(__file__)), "..", "tesseract", "tesseract.exe"
    ),
]

# Digits plus the percent sign shown next to the hunger value
HUNGER_WHITELIST = "0123456789%"

# Common OCR misreads for digits
MISREADS = {"O": "0", "o": "0", "D": "0", "l": "1", "I": "1", "|": "1", "S": "5"}


def parse_percentage(ocr_text):
    """
    Parse OCR text into a 0-100 integer.

    Handles common OCR misreads (O->0, l->1, I->1) and a trailing '%'.

    Args:
        ocr_text (str): Raw text from OCR

    Returns:
        int: Percentage between 0 and 100

    Raises:
        ClassifyError: No digits found, several numbers found, or value above 100
    """
    if ocr_text is None or ocr_text.strip() == "":
        raise ClassifyError("OCR returned no text", text=ocr_text)

    cleaned = ocr_text.strip().replace("%", "")
    tokens = ["".join(MISREADS.get(c, c) for c in token) for token in cleaned.split()]
    numeric = [token for token in tokens if any(c.isdigit() for c in token)]
    # A split read like "8 7" is ambiguous, not 8
    if len(numeric) > 1:
        raise ClassifyError(f"OCR returned several numbers: {ocr_text!r}", text=ocr_text)
    digits_only = "".join(c for c in numeric[0] if c.isdigit()) if numeric else ""

    if digits_only == "":
        raise ClassifyError(f"OCR returned no digits: {ocr_text!r}", text=ocr_text)

    value = int(digits_only)
    if value > 100:
        raise ClassifyError(f"OCR value out of range: {value}", text=ocr_text)
    return value


class OCRService:
    """
    OCR service using external Tesseract.

    Uses PSM 8 (single word) with a digit whitelist for the hunger value.
    """

    def __init__(self, tesseract_path=None, default_timeout_ms=1000, runner=None):
        """
        Initialize OCR service.

        Args:
            tesseract_path (str): Explicit binary path (default: auto-detect)
            default_timeout_ms (int): Default OCR timeout in milliseconds (default: 1000)
            runner (callable): subprocess.run replacement (for tests)
        """
        self.default_timeout_ms = default_timeout_ms
        self.tesseract_path = tesseract_path or self._find_tesseract()
        self.available = self.tesseract_path is not None
        self._run = runner or subprocess.run

        if self.available:
            logger.info(f"✅ Tesseract found: {self.tesseract_path}")
        else:
            logger.warning(
                "⚠️ Tesseract not found! Hunger will be treated as unknown. "
                "Install from: https://github.com/tesseract-ocr/tesseract"
            )

    def _find_tesseract(self):
        """Find Tesseract executable."""
        on_path = shutil.which("tesseract")
        if on_path:
            return on_path
        for path in TESSERACT_PATHS:
            if os.path.exists(path):
                return path
        return None

    def is_available(self):
        """
        Check if OCR is available.

        Returns:
            bool: True if Tesseract is installed, False otherwise
        """
        return self.available

    def preprocess(self, image):
        """
        Preprocess a region buffer for OCR.

        Applies:
        - Weighted grayscale conversion
        - 3x3 median filter (noise reduction)
        - Otsu threshold (binarization)

        Args:
            image (numpy.ndarray): BGR or BGRA image

        Returns:
            numpy.ndarray: Binary grayscale image
        """
        import cv2

        if image.ndim == 3 and image.shape[2] == 4:
            gray = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        else:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

        denoised = cv2.medianBlur(gray, 3)
        _, binary = cv2.threshold(denoised, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        return binary

    def recognize(self, image, timeout_ms=None, psm_mode=8, char_whitelist=HUNGER_WHITELIST):
        """
        Run OCR on an image.

        Args:
            image (numpy.ndarray): Region buffer (BGR/BGRA)
            timeout_ms (int): Timeout in milliseconds (default: default_timeout_ms)
            psm_mode (int): Tesseract page segmentation mode (default: 8, single word)
            char_whitelist (str): Characters Tesseract may return

        Returns:
            str: Recognized text (stripped)

        Raises:
            OcrError: Tesseract missing, timed out or failed
        """
        if image is None:
            raise OcrError("OCR called without an image")

        if not self.available:
            raise OcrError("Tesseract not available")

        import cv2

        timeout_sec = (timeout_ms or self.default_timeout_ms) / 1000.0
        tmp_path = None
        try:
            processed_image = self.preprocess(image)

            # Save image to temporary file
            with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as tmp:
                tmp_path = tmp.name
            cv2.imwrite(tmp_path, processed_image)

            cmd = [
                self.tesseract_path,
                tmp_path,
                "stdout",
                "--psm",
                str(psm_mode),
                "--dpi",
                "150",
            ]
            if char_whitelist:
                cmd.extend(["-c", f"tessedit_char_whitelist={char_whitelist}"])

            # Hide console window on Windows
            kwargs = {}
            if os.name == "nt":
                startupinfo = subprocess.STARTUPINFO()
                startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
                startupinfo.wShowWindow = subprocess.SW_HIDE
                kwargs["startupinfo"] = startupinfo
                kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

            logger.debug(f"[OCR] Running Tesseract with timeout={timeout_sec}s")
            result = self._run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout_sec,
                encoding="utf-8",
                **kwargs,
            )
        except subprocess.TimeoutExpired as e:
            logger.warning(f"[OCR] ⏰ Timeout exceeded ({timeout_sec}s)")
            raise OcrError(f"Tesseract timed out after {timeout_sec}s") from e
        except cv2.error as e:
            raise OcrError(f"Image preprocessing failed: {e}") from e
        except OSError as e:
            raise OcrError(f"Tesseract execution failed: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass

        if result.returncode != 0:
            logger.warning(f"[OCR] Tesseract error: {result.stderr}")
            raise OcrError(f"Tesseract exited with {result.returncode}")

        text = result.stdout.strip()
        logger.debug(f"[OCR] Result: '{text}'")
        return text

