"""
Calibration Tracker - Export Renderers
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Status distribution chart under the PDF table
v1.0.0 (2026-10-05): CSV (UTF-8 BOM, fully quoted) and PDF device table
"""

import csv
import io
import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from config import settings
from models.report import PDF_COLUMNS, REPORT_COLUMNS, ReportRow
from models.status import ChartBucket, DeviceStatus
from services.report_projector import status_label
from services.text_utils import strip_accents
from services.translations import format_date, translate

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
PDF_MEDIA_TYPE = "application/pdf"
BOM = "\ufeff"

CHART_COLORS = {
    DeviceStatus.VALID: "#22c55e",
    DeviceStatus.DUE_SOON: "#eab308",
    DeviceStatus.OVERDUE: "#ef4444",
    DeviceStatus.UNCALIBRATED: "#64748b",
    DeviceStatus.CALIBRATION_FREE: "#3b82f6",
}


def header_cells(columns, lang: Optional[str] = None) -> List[str]:
    return [translate(key, lang) for _, key in columns]


def export_filename(kind: str, lang: Optional[str] = None) -> str:
    """Download filename, e.g. zariadenia_kalibracie.csv"""
    return f"{translate(f'export.{kind}Filename', lang)}.{kind}"


# ================================================================
# CSV
# ================================================================

def render_csv(rows: Sequence[ReportRow], lang: Optional[str] = None) -> bytes:
    """
    Comma-separated, every field double-quoted (embedded quotes doubled),
    UTF-8 with a byte-order mark so spreadsheet apps pick the encoding.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(header_cells(REPORT_COLUMNS, lang))
    for row in rows:
        writer.writerow(row.cells(REPORT_COLUMNS))
    return (BOM + buffer.getvalue()).encode("utf-8")


# ================================================================
# PDF
# ================================================================

def render_pdf(rows: Sequence[ReportRow], lang: Optional[str] = None,
               chart_buckets: Optional[Sequence[ChartBucket]] = None,
               generated_on: Optional[date] = None) -> bytes:
    """
    Device table as PDF.

    rows must come from report_projector.to_pdf_row: the built-in Helvetica
    font has no glyphs for most diacritics. Headers and title are stripped here.
    """
    generated_on = generated_on or date.today()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=landscape(A4),
                            topMargin=0.5*inch, bottomMargin=0.5*inch,
                            leftMargin=0.5*inch, rightMargin=0.5*inch)
    styles = getSampleStyleSheet()
    story = []

    # -- Title --
    title = strip_accents(translate("export.pdfTitle", lang))
    story.append(Paragraph(f"<b>{title}</b>", styles['Title']))
    story.append(Paragraph(format_date(generated_on, lang), styles['Normal']))
    story.append(Spacer(1, 0.2 * inch))

    # -- Device table --
    table_rows = [[strip_accents(h) for h in header_cells(PDF_COLUMNS, lang)]]
    table_rows.extend(row.cells(PDF_COLUMNS) for row in rows)

    red, green, blue = settings.PDF_HEADER_COLOR
    table = Table(table_rows, repeatRows=1)
    table.setStyle(TableStyle([
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('BACKGROUND', (0, 0), (-1, 0), colors.Color(red / 255, green / 255, blue / 255)),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), settings.PDF_FONT_SIZE),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('LEFTPADDING', (0, 0), (-1, -1), 4),
    ]))
    story.append(table)

    # -- Status chart --
    if chart_buckets:
        chart = _render_status_chart(chart_buckets, lang)
        if chart is not None:
            story.append(Spacer(1, 0.3 * inch))
            story.append(Paragraph(
                f"<b>{strip_accents(translate('export.chartTitle', lang))}</b>",
                styles['Heading2']))
            story.append(Image(chart, width=6*inch, height=2.5*inch))

    doc.build(story)
    logger.info(f"Rendered PDF export: {len(rows)} rows at {datetime.now().isoformat()}")
    return buffer.getvalue()


def _render_status_chart(buckets: Sequence[ChartBucket], lang: Optional[str] = None):
    """Horizontal bar chart of the status buckets as an in-memory PNG"""
    if not any(b.count for b in buckets):
        return None
    try:
        labels = [strip_accents(status_label(b.status, lang, short=True)) for b in buckets]
        counts = [b.count for b in buckets]

        fig, ax = plt.subplots(figsize=(8, 3.3))
        bars = ax.barh(labels, counts, color=[CHART_COLORS[b.status] for b in buckets])
        for bar, bucket in zip(bars, buckets):
            ax.text(bar.get_width(), bar.get_y() + bar.get_height() / 2,
                    f" {bucket.count} ({bucket.percentage:.0f}%)", va='center', fontsize=8)
        ax.invert_yaxis()
        ax.set_xlabel('Count')
        ax.grid(True, axis='x', alpha=0.3)
        plt.tight_layout()

        png = io.BytesIO()
        plt.savefig(png, format='png', dpi=settings.REPORT_DPI)
        plt.close(fig)
        png.seek(0)
        return png

    except Exception as e:
        logger.error(f"Failed to render status chart: {e}")
        return None
