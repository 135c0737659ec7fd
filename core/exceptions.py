"""
Core Exceptions

Custom exceptions for session lifecycle control and cycle error handling.

Capture, classify and input errors are raised by the collaborators and
converted into CycleOutcome.error() by the cycle controller. They never reach
the UI individually.
"""


class EngineException(Exception):
    """Base exception for FishingEngine errors"""
    pass


class ConfigError(EngineException):
    """Raised when a BotConfig or Region fails validation"""

    def __init__(self, message, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])


class CaptureError(EngineException):
    """Region off-screen, capture permission denied or capture backend missing"""
    pass


class OcrError(EngineException):
    """OCR backend missing, timed out or failed"""
    pass


class ClassifyError(EngineException):
    """
    Classifier could not produce a value.

    Raised by read_percentage when OCR text is not a valid 0-100 percentage.
    Hunger callers treat this as "unknown", never as a cycle error.
    """

    UNPARSEABLE = "unparseable"

    def __init__(self, message, reason=UNPARSEABLE, text=None):
        super().__init__(message)
        self.reason = reason
        self.text = text


class InputError(EngineException):
    """Input simulation backend unavailable"""
    pass


class FailsafeTriggered(InputError):
    """
    Operator abort (pointer in the corner or failsafe hotkey).

    This is a NORMAL flow control exception, not an error.
    The cycle converts it into an Interrupted outcome.
    """
    pass
