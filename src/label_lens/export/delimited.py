"""Comma-delimited text export (the clipboard copy format)."""

from typing import Iterable, List

from label_lens.core.normalizer import EXPORT_COLUMNS, normalize_rows
from label_lens.core.schema import LabelRecord

ROW_SEPARATOR = "\n"
CELL_SEPARATOR = ","

_SPECIAL_CHARACTERS = (",", '"', "\n")


def escape_cell(value: str) -> str:
    """Quote a cell containing a comma, double quote or newline; double inner quotes."""
    text = str(value)
    if any(char in text for char in _SPECIAL_CHARACTERS):
        return '"' + text.replace('"', '""') + '"'
    return text


def format_row(cells: Iterable[str]) -> str:
    return CELL_SEPARATOR.join(escape_cell(cell) for cell in cells)


def to_delimited_text(labels: Iterable[LabelRecord]) -> str:
    """
    Render labels as delimited text: header row plus one row per label.

    An empty label sequence renders the header row only.
    """
    lines: List[str] = [CELL_SEPARATOR.join(EXPORT_COLUMNS)]
    lines.extend(format_row(row) for row in normalize_rows(labels))
    return ROW_SEPARATOR.join(lines)
