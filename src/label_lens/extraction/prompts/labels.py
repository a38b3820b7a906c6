"""
System prompt and output schema for garment label extraction.
"""

LABEL_EXTRACTION_PROMPT = """Act as a high-precision OCR and data extraction specialist for retail logistics.
Examine the provided document (PDF/Image) which contains physical clothing labels.

Your task:
1. Segment the document into individual labels.
2. For EVERY label found, extract the requested fields into a structured format.

FIELD-SPECIFIC INSTRUCTIONS:
- TITLE: This is the primary brand name or collection line. Clothing labels often have stacked headers (e.g., "COLLECTION" on line 1, "FALL/WINTER" on line 2). Concatenate these using '\\n'.
- MODEL/STYLE: Look for unique alphanumeric codes.
- SPN/ORDER: Often a 5-8 digit number labeled as 'Order', 'SPN', or 'PO'.
- BARCODE: Ensure the 'barcode_value' is exactly as printed under the barcode.

Use null for any field that is not present on the label. Never invent values.

Report the labels by calling the record_labels tool exactly once, with one entry per label in the order they appear.
If no clothing labels or relevant product data is found, call the tool with an empty labels array [].
"""


LABEL_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {
            "type": ["string", "null"],
            "description": (
                "The main brand/collection header. If it spans multiple lines at the very top "
                "(e.g. 'DENIM 6-7 25' and 'AW' underneath), capture all lines separated by a newline '\\n'."
            ),
        },
        "model": {
            "type": ["string", "null"],
            "description": (
                "The alphanumeric model code or style reference, often found near the top "
                "or below the header (e.g., D5480AX/NM36)."
            ),
        },
        "color": {
            "type": ["string", "null"],
            "description": "The primary color name (e.g., Anthracite, Midnight Blue).",
        },
        "size": {
            "type": ["string", "null"],
            "description": "The sizing information (e.g., 32-28, Large, 42R).",
        },
        "spn": {
            "type": ["string", "null"],
            "description": "The SPN, Order Number, or Factory reference (e.g., 11056).",
        },
        "barcode_type": {
            "type": ["string", "null"],
            "description": "The specific barcode symbology if identified (e.g., EAN-13, CODE-128).",
        },
        "barcode_value": {
            "type": ["string", "null"],
            "description": "The precise numeric or alphanumeric sequence encoded in the barcode.",
        },
        "raw_text": {
            "type": "string",
            "description": "A complete dump of all text found on this specific label.",
        },
    },
    "required": ["raw_text"],
}


LABEL_LIST_SCHEMA = {
    "type": "array",
    "items": LABEL_SCHEMA,
}


RECORD_LABELS_TOOL = {
    "name": "record_labels",
    "description": "Record every clothing label found in the document, in reading order.",
    "input_schema": {
        "type": "object",
        "properties": {
            "labels": LABEL_LIST_SCHEMA,
        },
        "required": ["labels"],
    },
}
