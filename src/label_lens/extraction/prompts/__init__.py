"""System prompts and output schemas for label extraction."""

from label_lens.extraction.prompts.labels import (
    LABEL_EXTRACTION_PROMPT,
    LABEL_LIST_SCHEMA,
    LABEL_SCHEMA,
    RECORD_LABELS_TOOL,
)

__all__ = [
    "LABEL_EXTRACTION_PROMPT",
    "LABEL_LIST_SCHEMA",
    "LABEL_SCHEMA",
    "RECORD_LABELS_TOOL",
]
