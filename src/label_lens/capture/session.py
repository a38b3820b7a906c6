"""
Capture Session - live camera lifecycle feeding stills into extraction.

    INITIALIZING --device ready--> READY
    INITIALIZING --failure-------> ERROR
    READY --restart--> INITIALIZING
    ERROR --retry/restart--> INITIALIZING
    any --close------> CLOSED

The device is released before every re-acquisition and on every exit
path, including leaving the ``async with`` block.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from label_lens.capture.device import CaptureDevice
from label_lens.core import config
from label_lens.core.errors import CaptureDeviceError, LifecycleError
from label_lens.extraction.acquisition import StagedInput, stage_bytes

logger = logging.getLogger(__name__)

CAPTURE_MIME_TYPE = "image/jpeg"


class CaptureState(str, Enum):
    """Observable camera states."""

    INITIALIZING = "initializing"
    READY = "ready"
    ERROR = "error"
    CLOSED = "closed"


def captured_filename() -> str:
    return f"captured-label-{int(time.time() * 1000)}.jpg"


class CaptureSession:
    """
    Owns one camera device for the duration of capture mode.

    ``on_capture`` receives each captured still; wire it to
    ``ProcessingLifecycle.submit_capture`` so captures extract at once.
    """

    def __init__(
        self,
        device: CaptureDevice,
        on_capture: Optional[Callable[[StagedInput], Awaitable[object]]] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        ready_timeout: Optional[float] = None,
    ):
        self.device = device
        self.on_capture = on_capture
        self.width = width or config.CAMERA_WIDTH
        self.height = height or config.CAMERA_HEIGHT
        self.ready_timeout = config.CAMERA_READY_TIMEOUT if ready_timeout is None else ready_timeout

        self.state = CaptureState.CLOSED
        self.error: Optional[CaptureDeviceError] = None
        self.torch_on = False
        self._ready: Optional[asyncio.Event] = None
        self._generation = 0

    @property
    def is_ready(self) -> bool:
        return self.state == CaptureState.READY

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    async def __aenter__(self) -> "CaptureSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def _teardown(self) -> None:
        self.device.release()
        self.torch_on = False

    def _on_device_ready(self, generation: int) -> None:
        if generation == self._generation and self.state == CaptureState.INITIALIZING:
            self._ready.set()

    def _fail(self, error: CaptureDeviceError) -> None:
        logger.error(f"Camera unavailable ({error.kind}): {error.detail or error.message}")
        self._teardown()
        self.error = error
        self.state = CaptureState.ERROR

    async def start(self) -> CaptureState:
        """
        Acquire the device and wait for its first frame.

        Failures do not raise; they move the session to ERROR with a
        per-kind message.
        """
        self._teardown()
        self._generation += 1
        generation = self._generation
        if self._ready is not None:
            # Wakes a superseded start() still waiting for its first frame
            self._ready.set()
        self._ready = asyncio.Event()
        ready = self._ready
        self.error = None
        self.state = CaptureState.INITIALIZING
        logger.info("Camera initializing")

        try:
            await self.device.open(
                self.width,
                self.height,
                on_ready=lambda: self._on_device_ready(generation),
            )
            await asyncio.wait_for(ready.wait(), timeout=self.ready_timeout)
        except CaptureDeviceError as e:
            if generation == self._generation:
                self._fail(e)
            return self.state
        except asyncio.TimeoutError:
            if generation == self._generation:
                self._fail(CaptureDeviceError(CaptureDeviceError.UNKNOWN, "Timed out waiting for first frame"))
            return self.state
        except Exception as e:
            if generation == self._generation:
                self._fail(CaptureDeviceError(CaptureDeviceError.UNKNOWN, str(e)))
            return self.state

        if generation != self._generation or self.state != CaptureState.INITIALIZING:
            # Closed or restarted while waiting
            if self.state == CaptureState.CLOSED:
                self.device.release()
            return self.state

        self.state = CaptureState.READY
        logger.info("Camera ready")
        return self.state

    async def restart(self) -> CaptureState:
        """
        Tear down the current stream and acquire it again.

        Raises:
            LifecycleError: Unless the camera is READY or in ERROR
        """
        if self.state not in (CaptureState.READY, CaptureState.ERROR):
            raise LifecycleError(f"Cannot restart the camera while {self.state.value}.")
        return await self.start()

    async def retry(self) -> CaptureState:
        """Re-attempt acquisition after a failure."""
        if self.state != CaptureState.ERROR:
            raise LifecycleError(f"Nothing to retry from {self.state.value}.")
        return await self.start()

    def close(self) -> None:
        """Release the device and end the session."""
        self._generation += 1
        self._teardown()
        self.state = CaptureState.CLOSED
        if self._ready is not None:
            # Wakes a start() still waiting for the first frame
            self._ready.set()
        logger.info("Camera closed")

    # ------------------------------------------------------------------
    # Ready-state actions
    # ------------------------------------------------------------------

    async def toggle_torch(self) -> bool:
        """
        Best-effort illumination toggle.

        Returns:
            True if the torch state changed. Unsupported devices and
            device failures return False and leave the session unchanged.
        """
        if not self.is_ready or not self.device.has_torch():
            return False
        try:
            await self.device.set_torch(not self.torch_on)
        except Exception as e:
            logger.warning(f"Flash toggle failed: {e}")
            return False
        self.torch_on = not self.torch_on
        return True

    async def capture(self) -> StagedInput:
        """
        Snapshot the live frame, close the session and hand the still on.

        Raises:
            LifecycleError: If the camera is not READY
        """
        if not self.is_ready:
            raise LifecycleError("Camera is not ready.")

        try:
            raw = await self.device.grab_still(config.CAPTURE_JPEG_QUALITY)
        except CaptureDeviceError as e:
            self._fail(e)
            raise

        staged = stage_bytes(raw, captured_filename(), CAPTURE_MIME_TYPE)
        self.close()

        if self.on_capture is not None:
            await self.on_capture(staged)
        return staged
