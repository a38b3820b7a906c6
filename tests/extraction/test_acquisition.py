"""Tests for file validation and encoding."""

import asyncio
import base64

import pytest

from label_lens.core.errors import InputValidationError
from label_lens.extraction.acquisition import (
    REJECTION_MESSAGE,
    read_upload,
    resolve_mime_type,
    stage_bytes,
    upload_hint,
)


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("labels.pdf", "application/pdf"),
        ("photo.jpg", "image/jpeg"),
        ("photo.JPEG", "image/jpeg"),
        ("scan.png", "image/png"),
        ("scan.webp", "image/webp"),
    ],
)
def test_accepted_types(filename, expected):
    assert resolve_mime_type(filename) == expected


@pytest.mark.parametrize("filename", ["notes.txt", "sheet.xlsx", "photo.gif", "noextension"])
def test_rejected_types(filename):
    with pytest.raises(InputValidationError) as excinfo:
        resolve_mime_type(filename)
    assert excinfo.value.message == REJECTION_MESSAGE


def test_declared_type_wins_over_extension():
    assert resolve_mime_type("upload.bin", "image/png") == "image/png"
    with pytest.raises(InputValidationError):
        resolve_mime_type("photo.jpg", "image/gif")


def test_stage_bytes_encodes_base64():
    staged = stage_bytes(b"\x00\x01label", "photo.jpg")
    assert base64.b64decode(staged.data) == b"\x00\x01label"
    assert staged.mime_type == "image/jpeg"
    assert staged.kind == "image"
    assert staged.subtype == "jpeg"


def test_pdf_kind():
    staged = stage_bytes(b"%PDF", "labels.pdf")
    assert staged.kind == "pdf"
    assert staged.subtype == "pdf"


def test_oversize_file_is_still_accepted(monkeypatch):
    from label_lens.core import config

    monkeypatch.setattr(config, "MAX_UPLOAD_MB", 0)
    staged = stage_bytes(b"x" * 2048, "big.png")
    assert staged.mime_type == "image/png"


def test_read_upload_matches_stage_bytes(tmp_path):
    path = tmp_path / "scan.webp"
    path.write_bytes(b"RIFF....WEBP")
    staged = asyncio.run(read_upload(str(path)))
    assert staged == stage_bytes(b"RIFF....WEBP", "scan.webp")


def test_read_upload_rejects_before_reading(tmp_path):
    missing = tmp_path / "notes.txt"
    with pytest.raises(InputValidationError, match="PDF or Image"):
        asyncio.run(read_upload(str(missing)))


def test_read_upload_missing_file(tmp_path):
    with pytest.raises(InputValidationError, match="Could not read"):
        asyncio.run(read_upload(str(tmp_path / "gone.png")))


def test_upload_hint_mentions_limit():
    assert "PDF, JPG, PNG or WebP" in upload_hint()
    assert "MB)" in upload_hint()
