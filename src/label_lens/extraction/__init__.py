"""Input acquisition and label extraction modules."""

from label_lens.extraction.acquisition import (
    ACCEPTED_MIME_TYPES,
    StagedInput,
    read_upload,
    stage_bytes,
)
from label_lens.extraction.processor import (
    create_client,
    extract_label_data,
    parse_label_list,
)

__all__ = [
    "ACCEPTED_MIME_TYPES",
    "StagedInput",
    "read_upload",
    "stage_bytes",
    "create_client",
    "extract_label_data",
    "parse_label_list",
]
