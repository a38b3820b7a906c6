"""
Processing Lifecycle

State machine coordinating input staging, extraction and result holding.
The presentation layer observes status, result and error through
``snapshot()`` or by subscribing a callback; it never mutates them.

    IDLE --stage--> IDLE (input staged, nothing extracted yet)
    IDLE --trigger--> PROCESSING --ok--> SUCCESS
                                 --fail--> ERROR
    ERROR --retry--> IDLE (staged input kept)
    any --clear--> IDLE (staged input and result discarded)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from label_lens.core.errors import LabelLensError, LifecycleError
from label_lens.core.schema import ExtractionResult, LabelRecord
from label_lens.extraction.acquisition import StagedInput, read_upload

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to extract data. Please check the file and try again."

Extractor = Callable[[str, str], Awaitable[List[LabelRecord]]]


class PipelineStatus(str, Enum):
    """All observable pipeline states."""

    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class PipelineState:
    """Read-only view of the lifecycle for display."""
    status: PipelineStatus
    staged: Optional[StagedInput] = None
    result: Optional[ExtractionResult] = None
    error: Optional[str] = None

    @property
    def can_trigger(self) -> bool:
        return self.status == PipelineStatus.IDLE and self.staged is not None


class ProcessingLifecycle:
    """
    Owns the staged input, the current result and the current error.

    Only one extraction may be in flight; a second trigger while
    PROCESSING is rejected rather than queued.
    """

    def __init__(self, extractor: Extractor):
        """
        Args:
            extractor: Coroutine function ``(data, mime_type) -> labels``,
                normally a partial of ``extract_label_data`` bound to a client
        """
        self._extractor = extractor
        self._status = PipelineStatus.IDLE
        self._staged: Optional[StagedInput] = None
        self._result: Optional[ExtractionResult] = None
        self._error: Optional[str] = None
        self._attempt = 0
        self._observers: List[Callable[[PipelineState], None]] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def status(self) -> PipelineStatus:
        return self._status

    @property
    def staged(self) -> Optional[StagedInput]:
        return self._staged

    @property
    def result(self) -> Optional[ExtractionResult]:
        return self._result

    @property
    def error(self) -> Optional[str]:
        return self._error

    def snapshot(self) -> PipelineState:
        return PipelineState(
            status=self._status,
            staged=self._staged,
            result=self._result,
            error=self._error,
        )

    def subscribe(self, callback: Callable[[PipelineState], None]) -> None:
        """Register a callback invoked with a snapshot after every transition."""
        self._observers.append(callback)

    def _transition(
        self,
        status: PipelineStatus,
        result: Optional[ExtractionResult] = None,
        error: Optional[str] = None,
    ) -> None:
        logger.info(f"Pipeline {self._status.value} -> {status.value}")
        self._status = status
        self._result = result
        self._error = error
        state = self.snapshot()
        for callback in self._observers:
            callback(state)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def stage(self, staged: StagedInput) -> None:
        """
        Replace the staged input and drop any prior result or error.

        Raises:
            LifecycleError: If an extraction is in flight
        """
        if self._status == PipelineStatus.PROCESSING:
            raise LifecycleError("Wait for the current extraction to finish.")
        self._staged = staged
        self._transition(PipelineStatus.IDLE)

    async def submit_file(self, path: str, mime_type: Optional[str] = None) -> None:
        """
        Validate, encode and stage a file. Extraction is not started.

        A rejected file raises InputValidationError and leaves state untouched.
        """
        if self._status == PipelineStatus.PROCESSING:
            raise LifecycleError("Wait for the current extraction to finish.")
        staged = await read_upload(path, mime_type)
        self.stage(staged)

    async def submit_capture(self, staged: StagedInput) -> PipelineState:
        """Stage a captured still and start extraction immediately."""
        self.stage(staged)
        return await self.trigger()

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    async def trigger(self) -> PipelineState:
        """
        Run extraction on the staged input.

        Returns:
            The state after the attempt resolves (SUCCESS or ERROR)

        Raises:
            LifecycleError: If nothing is staged or the pipeline is not IDLE
        """
        if self._status == PipelineStatus.PROCESSING:
            raise LifecycleError("An extraction is already in progress.")
        if self._status != PipelineStatus.IDLE:
            raise LifecycleError(f"Cannot start extraction from {self._status.value}.")
        if self._staged is None:
            raise LifecycleError("No file is staged for extraction.")

        self._attempt += 1
        attempt = self._attempt
        staged = self._staged
        self._transition(PipelineStatus.PROCESSING)

        try:
            labels = await self._extractor(staged.data, staged.mime_type)
        except LabelLensError as e:
            outcome = (PipelineStatus.ERROR, None, e.message)
        except Exception as e:
            logger.error(f"Extraction failed for {staged.filename}: {e}")
            outcome = (PipelineStatus.ERROR, None, str(e) or GENERIC_FAILURE_MESSAGE)
        else:
            result = ExtractionResult(filename=staged.filename, labels=list(labels))
            outcome = (PipelineStatus.SUCCESS, result, None)

        if attempt != self._attempt or self._status != PipelineStatus.PROCESSING:
            # Cleared while in flight; the late outcome is discarded
            logger.info(f"Discarding stale extraction outcome for {staged.filename}")
            return self.snapshot()

        status, result, error = outcome
        if error:
            logger.error(f"Extraction error: {error}")
        self._transition(status, result=result, error=error)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Reset paths
    # ------------------------------------------------------------------

    def retry(self) -> None:
        """
        Dismiss an error and return to IDLE, keeping the staged input.

        Raises:
            LifecycleError: If the pipeline is not in ERROR
        """
        if self._status != PipelineStatus.ERROR:
            raise LifecycleError(f"Nothing to retry from {self._status.value}.")
        self._transition(PipelineStatus.IDLE)

    def clear(self) -> None:
        """Discard staged input and any result (new scan)."""
        self._staged = None
        self._attempt += 1
        self._transition(PipelineStatus.IDLE)
