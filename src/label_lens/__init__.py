"""
label_lens - Garment Label Extraction

Reads clothing labels from photos, PDFs or a live camera with Claude and
exports them as structured rows (clipboard text or spreadsheet).
"""

__version__ = "1.0.0"

from label_lens.core.config import validate_config, get_config_summary
from label_lens.core.schema import ExtractionResult, LabelRecord
from label_lens.core.state import PipelineStatus, ProcessingLifecycle
from label_lens.core.normalizer import normalize_rows

__all__ = [
    "validate_config",
    "get_config_summary",
    "ExtractionResult",
    "LabelRecord",
    "PipelineStatus",
    "ProcessingLifecycle",
    "normalize_rows",
]
