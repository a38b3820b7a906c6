#!/usr/bin/env python3
"""
Configuration for LabelLens label extraction.
Handles environment variable loading and validation.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()


# =============================================================================
# Recognition Service
# =============================================================================

ANTHROPIC_API_KEY: Optional[str] = os.getenv("ANTHROPIC_API_KEY")

# Claude model used for label reading (must accept image and PDF input)
MODEL_ID: str = os.getenv("MODEL_ID", "claude-sonnet-4-5")

# Maximum tokens for Claude responses
MAX_TOKENS: int = int(os.getenv("MAX_TOKENS", "8192"))

# Low temperature: high precision, low creativity
EXTRACTION_TEMPERATURE: float = float(os.getenv("EXTRACTION_TEMPERATURE", "0.1"))


# =============================================================================
# Input Acquisition
# =============================================================================

# Advertised upload limit; only the media type is enforced
MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", "10"))


# =============================================================================
# Camera Capture
# =============================================================================

CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
CAMERA_WIDTH: int = int(os.getenv("CAMERA_WIDTH", "1920"))
CAMERA_HEIGHT: int = int(os.getenv("CAMERA_HEIGHT", "1080"))

# Seconds to wait for the first frame before giving up
CAMERA_READY_TIMEOUT: float = float(os.getenv("CAMERA_READY_TIMEOUT", "10"))

CAPTURE_JPEG_QUALITY: int = int(os.getenv("CAPTURE_JPEG_QUALITY", "90"))


# =============================================================================
# Output Configuration
# =============================================================================

OUTPUT_DIR: str = os.getenv("OUTPUT_DIR", "output")

REPORT_FILENAME: str = os.getenv("REPORT_FILENAME", "Label_Extraction_Report.xlsx")

PREFERENCES_FILE: str = os.getenv(
    "PREFERENCES_FILE",
    str(Path.home() / ".label_lens" / "preferences.json"),
)


# =============================================================================
# Validation
# =============================================================================

def validate_config() -> List[str]:
    """
    Validate that all required configuration values are present.

    Returns:
        List of problems found (empty when the configuration is usable)
    """
    errors = []

    if not ANTHROPIC_API_KEY:
        errors.append("ANTHROPIC_API_KEY environment variable is required")

    if MAX_TOKENS <= 0:
        errors.append("MAX_TOKENS must be a positive integer")

    if not 0.0 <= EXTRACTION_TEMPERATURE <= 1.0:
        errors.append("EXTRACTION_TEMPERATURE must be between 0.0 and 1.0")

    return errors


def _mask(value: Optional[str]) -> str:
    if not value:
        return "Not configured"
    return f"{value[:7]}...{value[-4:]}" if len(value) > 12 else "****"


def get_config_summary() -> str:
    """
    Get a summary of the current configuration (for logging).
    Sensitive values are masked.
    """
    return f"""
LabelLens Configuration:
  Recognition Service:
    - API Key: {_mask(ANTHROPIC_API_KEY)}
    - Model: {MODEL_ID}
    - Max Tokens: {MAX_TOKENS}
    - Temperature: {EXTRACTION_TEMPERATURE}

  Input:
    - Max Upload Size: {MAX_UPLOAD_MB} MB

  Camera:
    - Device Index: {CAMERA_INDEX}
    - Target Resolution: {CAMERA_WIDTH}x{CAMERA_HEIGHT}
    - Ready Timeout: {CAMERA_READY_TIMEOUT}s
    - JPEG Quality: {CAPTURE_JPEG_QUALITY}

  Output:
    - Output Directory: {OUTPUT_DIR}
    - Report File: {REPORT_FILENAME}
    - Preferences File: {PREFERENCES_FILE}
"""
