"""Core infrastructure: configuration, schema, normalization, state management."""

from label_lens.core.config import (
    validate_config,
    get_config_summary,
    ANTHROPIC_API_KEY,
    MODEL_ID,
    OUTPUT_DIR,
)
from label_lens.core.errors import (
    LabelLensError,
    InputValidationError,
    ExtractionError,
    ConfigurationError,
    LifecycleError,
    CaptureDeviceError,
)
from label_lens.core.schema import LabelRecord, ExtractionResult
from label_lens.core.normalizer import EXPORT_COLUMNS, normalize_rows, split_title
from label_lens.core.state import PipelineState, PipelineStatus, ProcessingLifecycle
from label_lens.core.preferences import PreferenceStore

__all__ = [
    "validate_config",
    "get_config_summary",
    "ANTHROPIC_API_KEY",
    "MODEL_ID",
    "OUTPUT_DIR",
    "LabelLensError",
    "InputValidationError",
    "ExtractionError",
    "ConfigurationError",
    "LifecycleError",
    "CaptureDeviceError",
    "LabelRecord",
    "ExtractionResult",
    "EXPORT_COLUMNS",
    "normalize_rows",
    "split_title",
    "PipelineState",
    "PipelineStatus",
    "ProcessingLifecycle",
    "PreferenceStore",
]
