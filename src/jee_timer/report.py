from __future__ import annotations

"""PDF study reports.

``build_report`` shapes a record list into the rows and header/footer text of
a report; ``render_pdf`` lays it out with reportlab. Row order always follows
the input list and every record produces exactly one row.
"""

from dataclasses import dataclass
from datetime import datetime
import logging
from pathlib import Path
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .errors import ReportError
from .models import STUDY_TYPE_LABELS, StudyRecord, check_study_type, subject_label
from .stats import total_time
from .time_utils import format_clock, format_datetime, format_hhmmss

_log = logging.getLogger(__name__)

REPORT_TITLE = "JEE TIMER"
FOOTER_TEXT = "Made by programmer_deepak"
TABLE_HEADERS = ("Date", "Subject", "Start Time", "End Time", "Duration")
HEADER_FILL = colors.Color(34 / 255, 119 / 255, 1)
ALT_ROW_FILL = colors.Color(245 / 255, 245 / 255, 245 / 255)


@dataclass(frozen=True, slots=True)
class ReportRow:
    date: str
    subject: str
    start_label: str
    end_label: str
    duration_label: str

    def cells(self) -> list[str]:
        return [self.date, self.subject, self.start_label, self.end_label, self.duration_label]


@dataclass(frozen=True, slots=True)
class Report:
    study_type: str
    title: str
    subtitle: str
    generated_label: str
    total_time_label: str
    session_count: int
    rows: tuple[ReportRow, ...]
    footer: str
    filename: str


def report_filename(study_type: str, when: datetime) -> str:
    return f"{study_type}-report-{when.date().isoformat()}.pdf"


def build_report(records: Sequence[StudyRecord], study_type: str, generated_at: datetime) -> Report:
    check_study_type(study_type)
    rows = tuple(
        ReportRow(
            date=r.date,
            subject=subject_label(r.subject),
            start_label=format_clock(r.start_time),
            end_label=format_clock(r.end_time),
            duration_label=format_hhmmss(r.duration),
        )
        for r in records
    )
    return Report(
        study_type=study_type,
        title=REPORT_TITLE,
        subtitle=f"{STUDY_TYPE_LABELS[study_type]} Report",
        generated_label=f"Generated on: {format_datetime(generated_at)}",
        total_time_label=f"Total Study Time: {format_hhmmss(total_time(records))}",
        session_count=len(records),
        rows=rows,
        footer=FOOTER_TEXT,
        filename=report_filename(study_type, generated_at),
    )


def render_pdf(report: Report, path: Path) -> Path:
    styles = getSampleStyleSheet()
    centered = ParagraphStyle("centered", parent=styles["Normal"], alignment=TA_CENTER, fontSize=10)
    title_style = ParagraphStyle("title", parent=styles["Title"], fontSize=20)
    subtitle_style = ParagraphStyle("subtitle", parent=centered, fontSize=16, leading=20)

    doc = SimpleDocTemplate(
        str(path),
        pagesize=A4,
        leftMargin=1.5 * cm,
        rightMargin=1.5 * cm,
        title=f"{report.title} - {report.subtitle}",
    )
    story = [
        Paragraph(report.title, title_style),
        Paragraph(report.subtitle, subtitle_style),
        Spacer(1, 0.3 * cm),
        Paragraph(report.generated_label, centered),
        Paragraph(report.total_time_label, centered),
        Paragraph(f"Total Sessions: {report.session_count}", centered),
        Spacer(1, 0.6 * cm),
    ]
    table = Table([list(TABLE_HEADERS)] + [row.cells() for row in report.rows], repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    for i in range(2, len(report.rows) + 1, 2):
        style.append(("BACKGROUND", (0, i), (-1, i), ALT_ROW_FILL))
    table.setStyle(TableStyle(style))
    story.append(table)

    def _footer(canvas, doc_):
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.drawCentredString(A4[0] / 2, 1 * cm, report.footer)
        canvas.restoreState()

    doc.build(story, onFirstPage=_footer, onLaterPages=_footer)
    return path


def export_report(
    records: Sequence[StudyRecord],
    study_type: str,
    out_dir: Path,
    now: Optional[datetime] = None,
) -> Path:
    """Write the report for ``records`` into ``out_dir`` and return its path."""
    if not records:
        raise ReportError("No study sessions to report")
    report = build_report(records, study_type, now or datetime.now())
    out_dir = Path(out_dir)
    path = out_dir / report.filename
    # An existing report of the same name is only replaced after a complete render
    partial = path.with_name(path.name + ".part")
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        render_pdf(report, partial)
        partial.replace(path)
    except Exception as e:
        partial.unlink(missing_ok=True)
        _log.exception("report generation failed")
        raise ReportError("Failed to generate PDF report") from e
    _log.info("report written", extra={"_json_rows": len(report.rows), "_json_file": report.filename})
    return path


__all__ = [
    "Report",
    "ReportRow",
    "build_report",
    "render_pdf",
    "export_report",
    "report_filename",
]
