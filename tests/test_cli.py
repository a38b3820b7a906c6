"""Tests for the label-lens command line."""

import json
from pathlib import Path

import pytest

from label_lens import cli
from label_lens.core.errors import CaptureDeviceError


@pytest.fixture
def labels_pdf(tmp_path):
    path = tmp_path / "labels.pdf"
    path.write_bytes(b"%PDF-1.4 fake")
    return path


def test_extract_prints_rows_and_writes_exports(
    monkeypatch, capsys, tmp_path, labels_pdf, fake_client_factory, make_tool_response, sample_label_payload
):
    client = fake_client_factory(make_tool_response(sample_label_payload))
    monkeypatch.setattr(cli, "create_client", lambda: client)
    out_dir = tmp_path / "out"

    code = cli.main(["extract", str(labels_pdf), "-o", "both", "--xlsx", "--output-dir", str(out_dir)])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.startswith("TITLE,SUB-TITLE,STYLE,COLOR,SIZE,ORDER,BARCODE\n")
    assert "2 labels detected in labels.pdf" in captured.err
    assert (out_dir / "Label_Extraction_Report.xlsx").exists()
    saved = json.loads((out_dir / "labels.json").read_text())
    assert saved["filename"] == "labels.pdf"
    assert len(saved["labels"]) == 2


def test_extract_rejected_file(monkeypatch, capsys, tmp_path, fake_client_factory):
    monkeypatch.setattr(cli, "create_client", lambda: fake_client_factory())
    path = tmp_path / "notes.txt"
    path.write_text("hello")

    assert cli.main(["extract", str(path)]) == 1
    assert "PDF or Image" in capsys.readouterr().err


def test_extract_service_failure(monkeypatch, capsys, labels_pdf, fake_client_factory, make_text_response):
    monkeypatch.setattr(cli, "create_client", lambda: fake_client_factory(make_text_response("")))

    assert cli.main(["extract", str(labels_pdf)]) == 1
    assert "Extraction Failed" in capsys.readouterr().err


def test_extract_without_api_key(monkeypatch, capsys, labels_pdf):
    from label_lens.core import config

    monkeypatch.setattr(config, "ANTHROPIC_API_KEY", None)

    assert cli.main(["extract", str(labels_pdf)]) == 1
    assert "API key" in capsys.readouterr().err


def test_scan_auto_extracts_capture(
    monkeypatch, capsys, fake_client_factory, fake_device_factory, make_tool_response
):
    client = fake_client_factory(make_tool_response({"labels": [{"raw_text": "X"}]}))
    device = fake_device_factory()
    monkeypatch.setattr(cli, "create_client", lambda: client)
    monkeypatch.setattr(cli, "OpenCVCaptureDevice", lambda index: device)

    code = cli.main(["scan"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip().split("\n") == ["TITLE,SUB-TITLE,STYLE,COLOR,SIZE,ORDER,BARCODE", ",,,,,,"]
    assert client.messages.calls[0]["messages"][0]["content"][0]["source"]["media_type"] == "image/jpeg"
    assert not device.active


def test_scan_permission_denied(monkeypatch, capsys, fake_client_factory, fake_device_factory):
    device = fake_device_factory(failures=[CaptureDeviceError.PERMISSION_DENIED])
    monkeypatch.setattr(cli, "create_client", lambda: fake_client_factory())
    monkeypatch.setattr(cli, "OpenCVCaptureDevice", lambda index: device)

    assert cli.main(["scan"]) == 1
    assert CaptureDeviceError.MESSAGES[CaptureDeviceError.PERMISSION_DENIED] in capsys.readouterr().err
    assert not device.active


def test_scan_retry_recovers(monkeypatch, fake_client_factory, fake_device_factory, make_tool_response):
    device = fake_device_factory(failures=[CaptureDeviceError.NO_DEVICE])
    monkeypatch.setattr(cli, "create_client", lambda: fake_client_factory(make_tool_response({"labels": []})))
    monkeypatch.setattr(cli, "OpenCVCaptureDevice", lambda index: device)

    assert cli.main(["scan", "--retries", "1"]) == 0
    assert device.open_calls == 2


def test_theme_round_trip(monkeypatch, capsys, tmp_path):
    from label_lens.core import config

    monkeypatch.setattr(config, "PREFERENCES_FILE", str(tmp_path / "prefs.json"))

    assert cli.main(["theme", "dark"]) == 0
    assert cli.main(["theme"]) == 0
    assert capsys.readouterr().out.split() == ["dark", "dark"]


def test_config_reports_missing_key(monkeypatch, capsys):
    from label_lens.core import config

    monkeypatch.setattr(config, "ANTHROPIC_API_KEY", None)
    assert cli.main(["config"]) == 1
    assert "ANTHROPIC_API_KEY" in capsys.readouterr().err
