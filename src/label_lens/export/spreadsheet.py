"""
Spreadsheet Export

Writes the label report workbook using openpyxl. The sheet holds the same
header row and cell values as the delimited text export, plus fixed
column widths.
"""

import logging
import os
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from label_lens.core import config
from label_lens.core.normalizer import EXPORT_COLUMNS, normalize_rows
from label_lens.core.schema import LabelRecord

logger = logging.getLogger(__name__)


SHEET_NAME = "Labels"

# Display widths (characters) in EXPORT_COLUMNS order
COLUMN_WIDTHS = [25, 15, 25, 15, 12, 15, 22]


def build_workbook(labels: Iterable[LabelRecord]) -> Workbook:
    """
    Build the report workbook in memory.

    Row 1 is the header; each following row is one label in detection order.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME

    bold_font = Font(bold=True)
    for col, header in enumerate(EXPORT_COLUMNS, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = bold_font

    for row_idx, row in enumerate(normalize_rows(labels), 2):
        for col, value in enumerate(row, 1):
            # Label text starting with "=" must stay text, not a formula
            cell = ws.cell(row=row_idx, column=col, value=value)
            cell.data_type = "s"

    for col, width in enumerate(COLUMN_WIDTHS, 1):
        ws.column_dimensions[get_column_letter(col)].width = width

    return wb


def save_spreadsheet(
    labels: Iterable[LabelRecord],
    output_dir: Optional[str] = None,
    file_name: Optional[str] = None,
) -> str:
    """
    Write the report workbook to disk.

    Args:
        labels: Label records to export
        output_dir: Target directory (default: config.OUTPUT_DIR)
        file_name: Report file name (default: config.REPORT_FILENAME)

    Returns:
        Path to the generated file
    """
    output_dir = output_dir or config.OUTPUT_DIR
    file_name = file_name or config.REPORT_FILENAME

    wb = build_workbook(labels)

    os.makedirs(output_dir, exist_ok=True)
    file_path = os.path.join(output_dir, file_name)
    wb.save(file_path)

    logger.info(f"Saved spreadsheet to: {file_path}")
    return file_path
