"""Tests for core configuration module."""

import pytest


def test_get_config_summary_returns_string():
    """Config summary should return a formatted string."""
    from label_lens.core.config import get_config_summary

    summary = get_config_summary()
    assert isinstance(summary, str)
    assert "LabelLens Configuration" in summary


def test_config_summary_masks_api_key(monkeypatch):
    """The API key must never appear in full."""
    from label_lens.core import config

    monkeypatch.setattr(config, "ANTHROPIC_API_KEY", "sk-ant-REDACTED")
    summary = config.get_config_summary()
    assert "secretvalue" not in summary
    assert "1234" in summary


def test_output_dir_default():
    """OUTPUT_DIR should have a default value."""
    from label_lens.core.config import OUTPUT_DIR

    assert OUTPUT_DIR is not None
    assert isinstance(OUTPUT_DIR, str)


def test_extraction_favors_determinism():
    """Default temperature should be low."""
    from label_lens.core.config import EXTRACTION_TEMPERATURE

    assert 0.0 <= EXTRACTION_TEMPERATURE <= 0.2


def test_validate_config_reports_missing_key(monkeypatch):
    from label_lens.core import config

    monkeypatch.setattr(config, "ANTHROPIC_API_KEY", None)
    problems = config.validate_config()
    assert any("ANTHROPIC_API_KEY" in p for p in problems)


def test_validate_config_accepts_key(monkeypatch):
    from label_lens.core import config

    monkeypatch.setattr(config, "ANTHROPIC_API_KEY", "sk-test")
    assert config.validate_config() == []
