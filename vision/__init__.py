"""
Vision Module
=============
Screen sampling, color classification and OCR for the fishing bot.

Modules:
    - screen_capture: Region Sampler backed by mss
    - color_detector: Color distance and cluster matching over numpy buffers
    - ocr_service: Tesseract wrapper and percentage parsing
    - classifier: Visual Classifier (bite markers, hunger)

Usage:
    from vision import ScreenCapture, VisualClassifier, OCRService

    sampler = ScreenCapture()
    classifier = VisualClassifier(ocr=OCRService(), advanced=False)
    buffer = sampler.sample(config.red_region)
    bite = classifier.matches_marker(buffer, RED_EXCLAMATION, config.color_tolerance)
"""

from .screen_capture import ScreenCapture
from .color_detector import ColorDetector
from .ocr_service import OCRService, parse_percentage
from .classifier import VisualClassifier

__all__ = [
    'ScreenCapture',
    'ColorDetector',
    'OCRService',
    'parse_percentage',
    'VisualClassifier',
]
