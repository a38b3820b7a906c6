"""
Camera devices used by the capture session.

``CaptureDevice`` is the contract the session drives; ``OpenCVCaptureDevice``
implements it on top of ``cv2.VideoCapture`` with a background reader
thread that keeps the latest frame.
"""

import asyncio
import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

import cv2
import numpy as np

from label_lens.core.errors import CaptureDeviceError

logger = logging.getLogger(__name__)

READ_RETRY_DELAY = 0.05
MAX_READ_FAILURES = 100
READER_JOIN_TIMEOUT = 2.0


class CaptureDevice(ABC):
    """A live video source that can be opened, released and snapshotted."""

    @abstractmethod
    async def open(self, width: int, height: int, on_ready: Callable[[], None]) -> None:
        """
        Acquire the stream at a target resolution, rear-facing if possible.

        ``on_ready`` is invoked once, on the event loop, when the first
        frame has arrived. Returning from ``open`` does not mean ready.

        Raises:
            CaptureDeviceError: If the device is missing or access is denied
        """

    @abstractmethod
    def release(self) -> None:
        """Stop the stream and free the device. Safe to call repeatedly."""

    @abstractmethod
    def has_torch(self) -> bool:
        """Whether the device reports an illumination control."""

    @abstractmethod
    async def set_torch(self, on: bool) -> None:
        """Switch the illumination on or off."""

    @abstractmethod
    async def grab_still(self, jpeg_quality: int) -> bytes:
        """Encode the current live frame as JPEG bytes."""


class OpenCVCaptureDevice(CaptureDevice):
    """
    Webcam device backed by OpenCV.

    The configured index stands in for "rear-facing"; OpenCV exposes no
    facing mode. OpenCV also has no torch control, so ``has_torch`` is False.

    The reader thread owns the ``VideoCapture`` and releases it when it
    stops, so ``release()`` never waits on a blocking ``read()``. The next
    ``open()`` joins the retiring reader off the event loop before it
    touches the camera again.
    """

    def __init__(self, index: int = 0):
        self.index = index
        self._cap: Optional[cv2.VideoCapture] = None
        self._frame: Optional[np.ndarray] = None
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._reader: Optional[threading.Thread] = None
        self._retiring: Optional[threading.Thread] = None
        self._token = 0

    def _device_node(self) -> str:
        return f"/dev/video{self.index}"

    def _probe(self) -> None:
        node = self._device_node()
        if os.path.exists(node) and not os.access(node, os.R_OK):
            raise CaptureDeviceError(CaptureDeviceError.PERMISSION_DENIED, f"No read access to {node}")

    def _open_capture(self, width: int, height: int) -> cv2.VideoCapture:
        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise CaptureDeviceError(CaptureDeviceError.NO_DEVICE, f"Camera index {self.index} did not open")
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        return cap

    async def open(self, width: int, height: int, on_ready: Callable[[], None]) -> None:
        self.release()
        token = self._token
        retiring, self._retiring = self._retiring, None
        if retiring is not None:
            await asyncio.to_thread(retiring.join, READER_JOIN_TIMEOUT)
        if token != self._token:
            return

        self._probe()
        cap = await asyncio.to_thread(self._open_capture, width, height)
        if token != self._token:
            # Released or reopened while the capture was being created
            cap.release()
            logger.debug(f"Discarded superseded handle for camera {self.index}")
            return

        loop = asyncio.get_running_loop()
        self._cap = cap
        self._stop = threading.Event()
        self._reader = threading.Thread(
            target=self._read_loop,
            args=(cap, self._stop, lambda: loop.call_soon_threadsafe(on_ready)),
            daemon=True,
        )
        self._reader.start()
        logger.info(f"Opened camera {self.index} at requested {width}x{height}")

    def _read_loop(self, cap: cv2.VideoCapture, stop: threading.Event, signal_ready: Callable[[], None]) -> None:
        signalled = False
        failures = 0
        try:
            while not stop.is_set():
                ok, frame = cap.read()
                if not ok:
                    failures += 1
                    if failures >= MAX_READ_FAILURES:
                        logger.error(f"Camera {self.index} stopped delivering frames")
                        with self._lock:
                            if not stop.is_set():
                                self._frame = None
                        return
                    stop.wait(READ_RETRY_DELAY)
                    continue
                failures = 0
                with self._lock:
                    if stop.is_set():
                        return
                    self._frame = frame
                if not signalled:
                    signalled = True
                    signal_ready()
        finally:
            cap.release()
            logger.debug(f"Released camera {self.index}")

    def release(self) -> None:
        self._token += 1
        self._stop.set()
        with self._lock:
            self._frame = None
        if self._reader is not None:
            self._retiring = self._reader
            self._reader = None
        elif self._cap is not None:
            self._cap.release()
        self._cap = None

    def has_torch(self) -> bool:
        return False

    async def set_torch(self, on: bool) -> None:
        raise NotImplementedError("OpenCV devices expose no torch control")

    async def grab_still(self, jpeg_quality: int) -> bytes:
        with self._lock:
            frame = None if self._frame is None else self._frame.copy()
        if frame is None:
            raise CaptureDeviceError(CaptureDeviceError.UNKNOWN, "No frame available")

        ok, encoded = await asyncio.to_thread(
            cv2.imencode, ".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, jpeg_quality]
        )
        if not ok:
            raise CaptureDeviceError(CaptureDeviceError.UNKNOWN, "JPEG encoding failed")
        return encoded.tobytes()
