from __future__ import annotations

import csv
import io
from typing import Sequence

import pandas as pd
from openpyxl.styles import Font, PatternFill

from ..visits.model import Visit
from .summary import REPORT_COLUMNS, report_rows

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_NAME = "Visit Report"

_COLUMN_WIDTHS = [14, 20, 18, 22, 16, 36, 40, 16, 36, 40, 14, 14, 14]


def build_visit_workbook(visits: Sequence[Visit]) -> bytes:
    """Render visits to an .xlsx file in memory (no file on disk)."""
    df = pd.DataFrame(report_rows(visits), columns=REPORT_COLUMNS)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        sheet = writer.sheets[SHEET_NAME]

        header_fill = PatternFill(start_color="3857DD", end_color="3857DD", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF", size=11)
        for cell in sheet[1]:
            cell.fill = header_fill
            cell.font = header_font
        for idx, width in enumerate(_COLUMN_WIDTHS, start=1):
            sheet.column_dimensions[sheet.cell(row=1, column=idx).column_letter].width = width

    return output.getvalue()


def build_visit_csv(visits: Sequence[Visit]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=REPORT_COLUMNS)
    writer.writeheader()
    for row in report_rows(visits):
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")
