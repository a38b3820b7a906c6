"""
Input Acquisition - validate and encode user-supplied files for extraction.

Every entry point (file path, raw bytes from a drop target or picker,
captured camera still) goes through ``stage_bytes`` so validation and
encoding never diverge.

Usage:
    from label_lens.extraction.acquisition import read_upload

    staged = await read_upload("labels.pdf")
"""

import asyncio
import base64
import logging
import mimetypes
import os
from dataclasses import dataclass
from typing import Optional

from label_lens.core import config
from label_lens.core.errors import InputValidationError

logger = logging.getLogger(__name__)


ACCEPTED_MIME_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/webp",
)

ACCEPTED_EXTENSIONS = (".pdf", ".jpg", ".jpeg", ".png", ".webp")

REJECTION_MESSAGE = "Please upload a PDF or Image file (JPEG, PNG, WebP)."

# mimetypes does not know webp on every platform
mimetypes.add_type("image/webp", ".webp")


@dataclass(frozen=True)
class StagedInput:
    """A validated file, base64-encoded and ready to embed in a request."""
    filename: str
    mime_type: str
    data: str

    @property
    def kind(self) -> str:
        return "pdf" if self.mime_type == "application/pdf" else "image"

    @property
    def subtype(self) -> str:
        return self.mime_type.split("/")[1]


def upload_hint() -> str:
    """Text shown next to the upload target."""
    return (
        "Upload clothing labels in PDF, JPG, PNG or WebP format "
        f"(max {config.MAX_UPLOAD_MB}MB)"
    )


def resolve_mime_type(filename: str, declared: Optional[str] = None) -> str:
    """
    Return the accepted media type for a file or raise.

    A declared type wins over the file extension.

    Raises:
        InputValidationError: If the type is not in the allow-list
    """
    mime_type = declared or mimetypes.guess_type(filename)[0]
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"
    if mime_type not in ACCEPTED_MIME_TYPES:
        logger.warning(f"Rejected {filename}: unsupported type {mime_type!r}")
        raise InputValidationError(REJECTION_MESSAGE)
    return mime_type


def encode_payload(raw: bytes) -> str:
    """Base64-encode raw bytes for a request body."""
    return base64.standard_b64encode(raw).decode("utf-8")


def stage_bytes(raw: bytes, filename: str, mime_type: Optional[str] = None) -> StagedInput:
    """
    Validate and encode an in-memory file.

    Raises:
        InputValidationError: If the media type is not accepted
    """
    resolved = resolve_mime_type(filename, mime_type)
    size_mb = len(raw) / (1024 * 1024)
    if size_mb > config.MAX_UPLOAD_MB:
        logger.warning(
            f"{filename} is {size_mb:.1f} MB, above the advertised {config.MAX_UPLOAD_MB} MB"
        )
    staged = StagedInput(filename=filename, mime_type=resolved, data=encode_payload(raw))
    logger.info(f"Staged {filename} ({resolved}, {len(raw)} bytes)")
    return staged


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


async def read_upload(path: str, mime_type: Optional[str] = None) -> StagedInput:
    """
    Read a file from disk, validate it and encode it.

    The type check runs before the file is read; reading and encoding run
    in a worker thread.

    Raises:
        InputValidationError: If the type is rejected or the file is unreadable
    """
    filename = os.path.basename(path)
    resolve_mime_type(filename, mime_type)

    try:
        raw = await asyncio.to_thread(_read_file, path)
    except OSError as e:
        raise InputValidationError(f"Could not read {filename}: {e}")

    return await asyncio.to_thread(stage_bytes, raw, filename, mime_type)
