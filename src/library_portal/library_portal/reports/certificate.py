from __future__ import annotations

import io
from datetime import date

from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas


def render_certificate(*, full_name: str, student_id: str, sessions: int, issued_on: date) -> io.BytesIO:
    """Single landscape page certifying a student's library attendance."""

    buffer = io.BytesIO()
    width, height = landscape(A4)
    pdf = canvas.Canvas(buffer, pagesize=(width, height))
    pdf.setTitle("Attendance Certificate")
    center = width / 2

    def line(text: str, y_mm: float, font: str, size: int) -> None:
        pdf.setFont(font, size)
        # Positions are measured from the top edge.
        pdf.drawCentredString(center, height - y_mm * mm, text)

    pdf.setLineWidth(2)
    pdf.rect(10 * mm, 10 * mm, width - 20 * mm, height - 20 * mm)

    line("ATTENDANCE CERTIFICATE", 50, "Helvetica-Bold", 30)
    line("This is to certify that", 80, "Helvetica", 16)
    line(full_name, 100, "Helvetica-Bold", 24)
    line(f"Student ID: {student_id}", 115, "Helvetica", 14)
    line(f"Has attended the library for {sessions} sessions", 135, "Helvetica", 16)
    line(f"Issue Date: {issued_on.strftime('%Y-%m-%d')}", 170, "Helvetica", 12)

    pdf.showPage()
    pdf.save()
    buffer.seek(0)
    return buffer
