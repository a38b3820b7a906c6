"""Tests for the spreadsheet report export."""

import csv
import io
from pathlib import Path

from openpyxl import load_workbook

from label_lens.core.normalizer import EXPORT_COLUMNS
from label_lens.core.schema import LabelRecord
from label_lens.export.delimited import to_delimited_text
from label_lens.export.spreadsheet import COLUMN_WIDTHS, SHEET_NAME, build_workbook, save_spreadsheet


def _sheet_rows(ws):
    return [[cell.value or "" for cell in row] for row in ws.iter_rows()]


def test_sheet_name_and_header(sample_labels):
    ws = build_workbook(sample_labels).active
    assert ws.title == SHEET_NAME
    assert [cell.value for cell in ws[1]] == EXPORT_COLUMNS


def test_column_widths(sample_labels):
    ws = build_workbook(sample_labels).active
    widths = [ws.column_dimensions[letter].width for letter in "ABCDEFG"]
    assert widths == COLUMN_WIDTHS == [25, 15, 25, 15, 12, 15, 22]


def test_matches_delimited_text(sample_labels, tmp_path):
    labels = sample_labels + [LabelRecord(raw_text="X", title='Quote "A", B\nC')]
    path = save_spreadsheet(labels, str(tmp_path))

    ws = load_workbook(path)[SHEET_NAME]
    parsed = list(csv.reader(io.StringIO(to_delimited_text(labels))))
    assert _sheet_rows(ws) == parsed


def test_header_only_for_no_labels(tmp_path):
    path = save_spreadsheet([], str(tmp_path))
    ws = load_workbook(path)[SHEET_NAME]
    assert ws.max_row == 1


def test_formula_like_text_stays_text(tmp_path):
    path = save_spreadsheet([LabelRecord(raw_text="X", model="=1+1")], str(tmp_path))
    ws = load_workbook(path)[SHEET_NAME]
    assert ws["C2"].value == "=1+1"
    assert ws["C2"].data_type == "s"


def test_default_report_name(sample_labels, tmp_path):
    path = save_spreadsheet(sample_labels, str(tmp_path))
    assert Path(path).name == "Label_Extraction_Report.xlsx"
