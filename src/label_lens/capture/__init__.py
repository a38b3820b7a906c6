"""Live camera capture feeding stills into the extraction pipeline."""

from label_lens.capture.device import CaptureDevice, OpenCVCaptureDevice
from label_lens.capture.session import CaptureSession, CaptureState

__all__ = [
    "CaptureDevice",
    "OpenCVCaptureDevice",
    "CaptureSession",
    "CaptureState",
]
