"""PDF rendering of documentation records.

The report has a header (employee, position, interview date), the
knowledge transfer summary with each multi-line field split into bullets,
and a numbered listing of the parsed transcript turns.
"""

from __future__ import annotations

import io
from typing import Protocol

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from app.models import DocumentationRecord

SPEAKER_NAMES = {"interviewer": "Interviewer", "candidate": "Candidate"}


class ReportRenderer(Protocol):
    def render(self, record: DocumentationRecord) -> bytes: ...


def bullet_items(value: str | list[str] | None) -> list[str]:
    """Split a summary field into non-empty bullet lines."""
    if not value:
        return []
    lines = value if isinstance(value, list) else value.split("\n")
    return [line.strip() for line in lines if line.strip()]


class _PdfWriter:
    """Cursor over a reportlab canvas that wraps text and breaks pages."""

    def __init__(self, buffer: io.BytesIO, margin: float = 50) -> None:
        self.canvas = canvas.Canvas(buffer, pagesize=A4)
        self.width, self.height = A4
        self.margin = margin
        self.y = self.height - margin

    def text(self, text: str, *, size: float = 11, bold: bool = False, indent: float = 0,
             align_center: bool = False, underline: bool = False) -> None:
        font = "Helvetica-Bold" if bold else "Helvetica"
        leading = size * 1.35
        max_width = self.width - 2 * self.margin - indent
        for line in simpleSplit(text, font, size, max_width) or [""]:
            self._ensure_space(leading)
            self.canvas.setFont(font, size)
            x = self.margin + indent
            if align_center:
                self.canvas.drawCentredString(self.width / 2, self.y, line)
            else:
                self.canvas.drawString(x, self.y, line)
                if underline:
                    line_width = self.canvas.stringWidth(line, font, size)
                    self.canvas.line(x, self.y - 2, x + line_width, self.y - 2)
            self.y -= leading

    def space(self, amount: float) -> None:
        self.y -= amount

    def bullets(self, items: list[str], size: float = 11) -> None:
        for item in items:
            self.text(f"• {item}", size=size, indent=10)
            self.space(2)

    def _ensure_space(self, needed: float) -> None:
        if self.y - needed < self.margin:
            self.canvas.showPage()
            self.y = self.height - self.margin

    def finish(self) -> None:
        self.canvas.showPage()
        self.canvas.save()


class PdfReportRenderer:
    def render(self, record: DocumentationRecord) -> bytes:
        buffer = io.BytesIO()
        pdf = _PdfWriter(buffer)
        summary = record.summary

        pdf.text("Exit Interview Report", size=22, bold=True, align_center=True)
        pdf.space(18)
        pdf.text(f"Employee: {record.candidate_name}", size=14)
        pdf.text(f"Position: {record.position}", size=14)
        pdf.text(f"Interview Date: {record.interview_date:%Y-%m-%d %H:%M}", size=14)
        pdf.space(18)

        pdf.text("Knowledge Transfer Summary", size=16, bold=True)
        pdf.space(8)
        pdf.text(f"Total Responses: {summary.total_responses}", size=12)
        pdf.space(6)

        sections = [
            ("Key Points", summary.key_points),
            ("Knowledge Transfer", summary.insights.knowledge_transfer),
            ("Documentation Gaps", summary.insights.documentation_gaps),
            ("Successor Recommendations", summary.recommendations),
            ("Organizational Value", summary.organizational_value),
        ]
        for title, value in sections:
            items = bullet_items(value)
            if not items:
                continue
            pdf.text(f"{title}:", size=12, underline=True)
            pdf.space(4)
            pdf.bullets(items)
            pdf.space(6)

        pdf.space(10)
        pdf.text("Interview Transcription", size=16, bold=True)
        pdf.space(8)
        if record.full_responses:
            for index, turn in enumerate(record.full_responses, start=1):
                speaker = SPEAKER_NAMES[turn.role]
                pdf.text(f"{index}. {speaker}: {turn.content}", size=11)
                pdf.space(4)
        else:
            pdf.text("No transcript available.", size=11)

        pdf.finish()
        return buffer.getvalue()
