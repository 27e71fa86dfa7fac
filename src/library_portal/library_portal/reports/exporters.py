"""Spreadsheet and PDF renderings of attendance report rows.

Exporters never sort: rows come out in the order they were given.
"""

from __future__ import annotations

import io
from datetime import datetime
from typing import List, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..attendance.model import AttendanceReportRow
from ..core.constants import STILL_IN_LABEL

SHEET_NAME = "Attendance"
REPORT_COLUMNS = ["student_id", "student_name", "check_in", "check_out", "duration", "date"]
PDF_HEADER = ["Student ID", "Name", "Check In", "Check Out", "Duration", "Date"]

EXCEL_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIMETYPE = "application/pdf"

_HEADER_FILL = colors.HexColor("#4F46E5")


def rows_to_frame(rows: Sequence[AttendanceReportRow]) -> pd.DataFrame:
    data = [
        {
            "student_id": r.student_id,
            "student_name": r.student_name,
            "check_in": r.check_in.isoformat(),
            "check_out": r.check_out.isoformat() if r.check_out else None,
            "duration": r.duration,
            "date": r.date.strftime("%Y-%m-%d"),
        }
        for r in rows
    ]
    return pd.DataFrame(data, columns=REPORT_COLUMNS)


def column_widths(rows: Sequence[AttendanceReportRow]) -> List[int]:
    name_width = max([10] + [len(r.student_name) for r in rows])
    return [15, name_width, 20, 20, 15, 12]


def export_excel(rows: Sequence[AttendanceReportRow]) -> io.BytesIO:
    df = rows_to_frame(rows)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        sheet = writer.sheets[SHEET_NAME]
        for idx, width in enumerate(column_widths(rows), start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = width

    output.seek(0)
    return output


def pdf_table_rows(rows: Sequence[AttendanceReportRow]) -> List[List[str]]:
    body = [PDF_HEADER]
    for r in rows:
        body.append(
            [
                r.student_id,
                r.student_name,
                r.check_in.strftime("%I:%M:%S %p"),
                r.check_out.strftime("%I:%M:%S %p") if r.check_out else STILL_IN_LABEL,
                r.duration,
                r.date.strftime("%Y-%m-%d"),
            ]
        )
    return body


def _add_page_number(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 9)
    canvas.drawRightString(A4[0] - 30, 20, f"Page {canvas.getPageNumber()}")
    canvas.restoreState()


def export_pdf(rows: Sequence[AttendanceReportRow], *, title: str, generated_at: datetime) -> io.BytesIO:
    buffer = io.BytesIO()
    pdf = SimpleDocTemplate(
        buffer, pagesize=A4, rightMargin=25, leftMargin=25, topMargin=40, bottomMargin=40, title=title
    )
    styles = getSampleStyleSheet()

    elements = [
        Paragraph(title, styles["Title"]),
        Paragraph(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M')}", styles["Normal"]),
        Spacer(1, 12),
    ]

    table = Table(pdf_table_rows(rows), repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _HEADER_FILL),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f0f4ff")]),
            ]
        )
    )
    elements.append(table)

    pdf.build(elements, onFirstPage=_add_page_number, onLaterPages=_add_page_number)
    buffer.seek(0)
    return buffer
