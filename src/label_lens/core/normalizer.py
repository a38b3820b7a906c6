"""
Label Normalizer

Flattens label records into the fixed export columns shared by every
export surface (clipboard text and spreadsheet).

Usage:
    from label_lens.core.normalizer import normalize_rows

    rows = normalize_rows(result.labels)   # one 7-cell row per label
"""

import logging
from typing import Iterable, List, Sequence, Tuple

from label_lens.core.schema import LabelRecord, WIRE_FIELDS

logger = logging.getLogger(__name__)


TITLE_LINE_BREAK = "\n"

EXPORT_COLUMNS: List[str] = [
    "TITLE",
    "SUB-TITLE",
    "STYLE",
    "COLOR",
    "SIZE",
    "ORDER",
    "BARCODE",
]


# ============================================================================
# FIELD HELPERS
# ============================================================================

def split_title(title) -> Tuple[str, str]:
    """
    Split a stacked title into (title line 1, title line 2).

    The first segment is the primary title; the remaining segments are
    joined with a single space. A missing title yields two empty strings.
    """
    segments = (title or "").split(TITLE_LINE_BREAK)
    first = segments[0].strip()
    rest = " ".join(segments[1:]).strip()
    return first, rest


def field_value(record: LabelRecord, name: str) -> str:
    """
    Return one field verbatim for single-value copy (no escaping).

    Accepts either the Python attribute name or the wire key.
    """
    attribute = name
    if name not in WIRE_FIELDS:
        reverse = {wire: attr for attr, wire in WIRE_FIELDS.items()}
        if name not in reverse:
            raise ValueError(f"Unknown label field: {name}")
        attribute = reverse[name]
    value = getattr(record, attribute)
    return value if value is not None else ""


# ============================================================================
# ROW NORMALIZATION
# ============================================================================

def normalize_record(record: LabelRecord) -> List[str]:
    """Transform a single label into its export row (column order fixed)."""
    title, sub_title = split_title(record.title)
    return [
        title,
        sub_title,
        record.model or "",
        record.color or "",
        record.size or "",
        record.order_reference or "",
        record.barcode_value or "",
    ]


def normalize_rows(labels: Iterable[LabelRecord]) -> List[List[str]]:
    """
    Normalize every label in detection order.

    The input sequence is never mutated or re-sorted.
    """
    rows = [normalize_record(label) for label in labels]
    logger.debug(f"Normalized {len(rows)} label row(s)")
    return rows


def rows_as_dicts(rows: Sequence[Sequence[str]]) -> List[dict]:
    """Key each row by its export column header."""
    return [dict(zip(EXPORT_COLUMNS, row)) for row in rows]
