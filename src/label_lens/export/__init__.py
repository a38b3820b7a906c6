"""Export surfaces: delimited clipboard text and spreadsheet report."""

from label_lens.export.delimited import escape_cell, to_delimited_text
from label_lens.export.spreadsheet import build_workbook, save_spreadsheet

__all__ = [
    "escape_cell",
    "to_delimited_text",
    "build_workbook",
    "save_spreadsheet",
]
