"""Exception types raised across the label extraction pipeline."""

from typing import Optional


class LabelLensError(Exception):
    """Base class for all user-facing LabelLens failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InputValidationError(LabelLensError):
    """Raised when a submitted file is rejected before anything is staged."""


class ExtractionError(LabelLensError):
    """Raised when the recognition service fails or returns unusable output."""


class ConfigurationError(ExtractionError):
    """Raised when the service rejects or is missing its credentials."""

    DEFAULT_MESSAGE = "Invalid or missing API key. Please check your environment."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.DEFAULT_MESSAGE)


class LifecycleError(LabelLensError):
    """Raised for a transition the processing lifecycle does not allow."""


class CaptureDeviceError(LabelLensError):
    """
    Raised when the camera cannot be acquired.

    ``kind`` is one of ``permission_denied``, ``no_device`` or ``unknown``;
    each kind carries its own user-facing message.
    """

    PERMISSION_DENIED = "permission_denied"
    NO_DEVICE = "no_device"
    UNKNOWN = "unknown"

    MESSAGES = {
        PERMISSION_DENIED: (
            "Camera permission was dismissed. Please grant permission "
            "and allow access when prompted."
        ),
        NO_DEVICE: "No camera device found on this system.",
        UNKNOWN: (
            "Unable to access camera. Please check your device "
            "settings and permissions."
        ),
    }

    def __init__(self, kind: str = UNKNOWN, detail: Optional[str] = None):
        if kind not in self.MESSAGES:
            kind = self.UNKNOWN
        self.kind = kind
        self.detail = detail
        super().__init__(self.MESSAGES[kind])
