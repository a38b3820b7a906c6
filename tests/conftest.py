"""Shared test fixtures for label_lens tests."""

from types import SimpleNamespace
from typing import Callable, List, Optional

import pytest

from label_lens.capture.device import CaptureDevice
from label_lens.core.errors import CaptureDeviceError
from label_lens.core.schema import LabelRecord


@pytest.fixture
def sample_label_payload():
    """Service output for two labels, as returned by the record_labels tool."""
    return {
        "labels": [
            {
                "title": "DENIM 6-7 25\nAW",
                "model": "D5480AX/NM36",
                "color": "Anthracite",
                "size": "32-28",
                "spn": "11056",
                "barcode_type": "EAN-13",
                "barcode_value": "5901234123457",
                "raw_text": "DENIM 6-7 25 AW D5480AX/NM36 Anthracite 32-28 11056",
            },
            {
                "title": None,
                "model": None,
                "color": "Midnight Blue",
                "size": "Large",
                "raw_text": "Midnight Blue Large",
            },
        ]
    }


@pytest.fixture
def sample_labels(sample_label_payload) -> List[LabelRecord]:
    return [LabelRecord.from_dict(entry) for entry in sample_label_payload["labels"]]


def tool_response(labels_input, stop_reason: str = "tool_use"):
    """Build a Messages API response carrying one record_labels tool call."""
    block = SimpleNamespace(type="tool_use", name="record_labels", id="toolu_1", input=labels_input)
    return SimpleNamespace(content=[block], stop_reason=stop_reason)


def text_response(text: str, stop_reason: str = "end_turn"):
    """Build a Messages API response carrying plain text."""
    block = SimpleNamespace(type="text", text=text)
    return SimpleNamespace(content=[block], stop_reason=stop_reason)


class FakeMessages:
    def __init__(self, response=None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeAnthropic:
    """Stands in for AsyncAnthropic; only ``messages.create`` is used."""

    def __init__(self, response=None, error: Optional[Exception] = None):
        self.messages = FakeMessages(response, error)


@pytest.fixture
def fake_client_factory():
    return FakeAnthropic


@pytest.fixture
def make_tool_response():
    return tool_response


@pytest.fixture
def make_text_response():
    return text_response


class FakeCaptureDevice(CaptureDevice):
    """
    Scriptable camera.

    ``failures`` is a list of CaptureDeviceError kinds raised by successive
    ``open`` calls; once exhausted, opens succeed.
    """

    def __init__(
        self,
        failures: Optional[List[str]] = None,
        signal_ready: bool = True,
        torch: bool = False,
        torch_error: Optional[Exception] = None,
        still: bytes = b"\xff\xd8\xff\xe0fake-jpeg",
    ):
        self.failures = list(failures or [])
        self.signal_ready = signal_ready
        self.torch = torch
        self.torch_error = torch_error
        self.still = still
        self.open_calls = 0
        self.release_calls = 0
        self.active = False
        self.torch_states: List[bool] = []
        self.on_ready: Optional[Callable[[], None]] = None

    async def open(self, width, height, on_ready):
        self.open_calls += 1
        self.requested = (width, height)
        if self.failures:
            raise CaptureDeviceError(self.failures.pop(0))
        assert not self.active, "device opened twice without release"
        self.active = True
        self.on_ready = on_ready
        if self.signal_ready:
            on_ready()

    def release(self):
        self.release_calls += 1
        self.active = False

    def has_torch(self):
        return self.torch

    async def set_torch(self, on):
        if self.torch_error is not None:
            raise self.torch_error
        self.torch_states.append(on)

    async def grab_still(self, jpeg_quality):
        return self.still


@pytest.fixture
def fake_device_factory():
    return FakeCaptureDevice
