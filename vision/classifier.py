"""
Visual Classifier
=================
Decides from sampled region buffers whether a bite marker is showing,
and reads the hunger percentage through OCR.

Detection strategies (both pure functions of the buffer):
    - basic: any single pixel within tolerance of the marker color
      (Manhattan RGB distance)
    - advanced: Euclidean RGB distance, and a matching pixel only counts
      when at least `cluster_quorum` matching pixels lie in the 11x11
      window around it. Rejects isolated hits from compression/dithering.
"""

import logging

from core.exceptions import ClassifyError, OcrError
from .color_detector import ColorDetector
from .ocr_service import parse_percentage

logger = logging.getLogger("FishingBot")


class VisualClassifier:
    """Bite marker and hunger classification over region buffers"""

    def __init__(self, ocr=None, color_detector=None, advanced=False):
        """
        Args:
            ocr: Object with recognize(buffer) -> str (OCRService)
            color_detector: ColorDetector instance (default: new one)
            advanced: Start in advanced (cluster quorum) detection mode
        """
        self.ocr = ocr
        self.color_detector = color_detector or ColorDetector()
        self.advanced = advanced

    def set_advanced(self, enabled):
        self.advanced = bool(enabled)

    def matches_marker(self, buffer, reference_color, tolerance, advanced=None):
        """
        Check if a region buffer shows a marker color.

        Args:
            buffer (numpy.ndarray): Region buffer (BGR/BGRA)
            reference_color (tuple): (R, G, B) marker color
            tolerance (float): Tolerance in percent of the channel range (0-30)
            advanced (bool): Override the classifier's mode for this call

        Returns:
            bool: True if the marker is present
        """
        use_advanced = self.advanced if advanced is None else advanced
        try:
            if use_advanced:
                return self.color_detector.has_cluster(buffer, reference_color, tolerance)
            return self.color_detector.has_match(buffer, reference_color, tolerance)
        except (ValueError, TypeError) as e:
            raise ClassifyError(f"Buffer cannot be classified: {e}", reason="bad_buffer") from e

    def detect_bite(self, buffers, tolerance, advanced=None):
        """
        Check several marker buffers, in order.

        Args:
            buffers: Iterable of (name, buffer, reference_color)
            tolerance (float): Tolerance percentage
            advanced (bool): Override the classifier's mode for this call

        Returns:
            str: Name of the first matching marker, or None
        """
        for name, buffer, reference_color in buffers:
            if self.matches_marker(buffer, reference_color, tolerance, advanced):
                return name
        return None

    def read_percentage(self, buffer):
        """
        Read a 0-100 percentage (hunger) from a region buffer.

        Returns:
            int: Percentage

        Raises:
            ClassifyError: OCR unavailable/failed or text not a percentage.
                Callers treat hunger as unknown.
        """
        if self.ocr is None:
            raise ClassifyError("No OCR backend configured", reason="no_ocr")
        try:
            text = self.ocr.recognize(buffer)
        except OcrError as e:
            raise ClassifyError(f"OCR failed: {e}", reason="ocr_failed") from e
        value = parse_percentage(text)
        logger.debug(f"[Classifier] Hunger OCR '{text}' -> {value}%")
        return value
