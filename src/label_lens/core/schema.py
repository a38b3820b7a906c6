"""
Label Record Schema

Defines the in-memory shape of one detected garment label and of the
result produced by a single extraction.

Wire names (what the recognition service returns) differ from the
Python attribute names in two places:

    spn           -> order_reference
    raw_text      -> raw_text (the only required key)

Every other key maps one-to-one. ``raw_text`` is enforced at the parse
boundary in ``LabelRecord.from_dict``; everything else is optional and
independently nullable.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
import json

from label_lens.core.errors import ExtractionError


# ============================================================================
# FIELD MAPPING
# ============================================================================

# Python attribute -> key in the service response
WIRE_FIELDS: Dict[str, str] = {
    "title": "title",
    "model": "model",
    "color": "color",
    "size": "size",
    "order_reference": "spn",
    "barcode_type": "barcode_type",
    "barcode_value": "barcode_value",
    "raw_text": "raw_text",
}

OPTIONAL_FIELDS = [name for name in WIRE_FIELDS if name != "raw_text"]


# ============================================================================
# SCHEMA DEFINITIONS
# ============================================================================

@dataclass(frozen=True)
class LabelRecord:
    """
    One detected physical label.

    ``title`` may hold several stacked header lines joined by ``\\n``;
    the first line is the primary title.
    """
    raw_text: str
    title: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    order_reference: Optional[str] = None  # SPN / order / factory code
    barcode_type: Optional[str] = None
    barcode_value: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LabelRecord":
        """
        Build a record from one element of the service response.

        Raises:
            ExtractionError: If the element is not an object, lacks
                ``raw_text``, or carries a non-string field value
        """
        if not isinstance(data, dict):
            raise ExtractionError(
                f"Label entry must be an object, got {type(data).__name__}"
            )

        raw_text = data.get("raw_text")
        if not isinstance(raw_text, str):
            raise ExtractionError("Label entry is missing required field 'raw_text'")

        values: Dict[str, Optional[str]] = {}
        for name in OPTIONAL_FIELDS:
            value = data.get(WIRE_FIELDS[name])
            if value is not None and not isinstance(value, str):
                raise ExtractionError(
                    f"Label field '{WIRE_FIELDS[name]}' must be a string or null"
                )
            values[name] = value

        return cls(raw_text=raw_text, **values)

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert back to the wire shape."""
        return {WIRE_FIELDS[name]: value for name, value in asdict(self).items()}


@dataclass(frozen=True)
class ExtractionResult:
    """The outcome of one successful extraction: filename plus ordered labels."""
    filename: str
    labels: List[LabelRecord] = field(default_factory=list)

    @property
    def label_count(self) -> int:
        return len(self.labels)

    def summary(self) -> str:
        count = self.label_count
        noun = "label" if count == 1 else "labels"
        return f"{count} {noun} detected in {self.filename}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "labels": [label.to_dict() for label in self.labels],
        }


def to_json(result: ExtractionResult, indent: int = 2) -> str:
    """Convert ExtractionResult to JSON string"""
    return json.dumps(result.to_dict(), indent=indent, ensure_ascii=False)
