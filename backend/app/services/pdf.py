"""PDF export for unit plans.

Layout:
- Title block with subject / grade / date range
- Overview paragraph and a standards table
- One section per lesson: objectives, procedure, materials, assessment, resources
- Footer with page number + branding
"""

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle,
    HRFlowable, KeepTogether,
)
from reportlab.lib.enums import TA_CENTER
import io
from xml.sax.saxutils import escape as xml_escape


# ──────────────────────────────────────────────
# Colours
# ──────────────────────────────────────────────
_PRIMARY = colors.Color(0.26, 0.22, 0.79)       # indigo
_LIGHT_BG = colors.Color(0.96, 0.96, 0.99)      # pale indigo
_MUTED = colors.Color(0.45, 0.47, 0.52)         # slate grey
_RULE = colors.Color(0.82, 0.84, 0.88)          # rule line colour


# ──────────────────────────────────────────────
# Unicode → latin-1 safe replacements
# ──────────────────────────────────────────────
_UNICODE_REPLACEMENTS = {
    "—": "-",   # em dash
    "–": "-",   # en dash
    "‘": "'",   # left single quote
    "’": "'",   # right single quote
    "“": '"',   # left double quote
    "”": '"',   # right double quote
    "…": "...", # ellipsis
    "•": "-",   # bullet
    "→": "->",  # right arrow
    "≤": "<=",  # less than or equal
    "≥": ">=",  # greater than or equal
}


def _sanitize_text(text: str) -> str:
    """Replace Unicode characters that Helvetica/latin-1 cannot encode, then escape markup."""
    if not text:
        return ""
    for char, replacement in _UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    text = text.encode("latin-1", errors="replace").decode("latin-1")
    return xml_escape(text)


def _multiline(text: str) -> str:
    return _sanitize_text(text).replace("\n", "<br/>")


class UnitPlanPDFService:
    """Renders a stored unit plan document as a printable PDF."""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()
        self._page_count = 0

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='UnitTitle',
            fontName='Helvetica-Bold',
            fontSize=20,
            leading=24,
            spaceAfter=4,
            alignment=TA_CENTER,
            textColor=_PRIMARY,
        ))
        self.styles.add(ParagraphStyle(
            name='UnitSubtitle',
            fontName='Helvetica',
            fontSize=10,
            textColor=_MUTED,
            alignment=TA_CENTER,
            spaceAfter=14,
        ))
        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            fontName='Helvetica-Bold',
            fontSize=13,
            leading=16,
            textColor=_PRIMARY,
            spaceBefore=14,
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name='LessonTitle',
            fontName='Helvetica-Bold',
            fontSize=12,
            leading=15,
            spaceBefore=12,
            spaceAfter=2,
        ))
        self.styles.add(ParagraphStyle(
            name='LessonMeta',
            fontName='Helvetica-Oblique',
            fontSize=8.5,
            textColor=_MUTED,
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name='FieldLabel',
            fontName='Helvetica-Bold',
            fontSize=9.5,
            leading=12,
            spaceBefore=4,
            spaceAfter=2,
        ))
        self.styles.add(ParagraphStyle(
            name='BodyTextSmall',
            fontName='Helvetica',
            fontSize=9.5,
            leading=13,
            spaceAfter=4,
        ))
        self.styles.add(ParagraphStyle(
            name='BulletItem',
            fontName='Helvetica',
            fontSize=9.5,
            leading=13,
            leftIndent=12,
        ))
        self.styles.add(ParagraphStyle(
            name='TableCell',
            fontName='Helvetica',
            fontSize=8.5,
            leading=11,
        ))

    # ──────────────────────────────────────────
    # Main entry point
    # ──────────────────────────────────────────
    def generate_unit_pdf(self, unit: dict) -> bytes:
        """Render a unit plan document (camelCase keys, as stored) to PDF bytes."""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=2.0 * cm,
            leftMargin=2.0 * cm,
            topMargin=2.0 * cm,
            bottomMargin=2.0 * cm,
            title=unit.get("title", "Unit Plan"),
        )
        self._page_count = 0

        story = []
        self._build_header(story, unit)
        self._build_standards(story, unit.get("standards") or [])
        self._build_lessons(story, unit.get("lessons") or [])

        doc.build(
            story,
            onFirstPage=self._draw_page_furniture,
            onLaterPages=self._draw_page_furniture,
        )
        buffer.seek(0)
        return buffer.getvalue()

    def _draw_page_furniture(self, canvas, doc):
        canvas.saveState()
        page_width, page_height = A4
        self._page_count += 1

        canvas.setStrokeColor(_PRIMARY)
        canvas.setLineWidth(1.5)
        canvas.line(2.0 * cm, page_height - 1.6 * cm,
                    page_width - 2.0 * cm, page_height - 1.6 * cm)

        y_footer = 1.0 * cm
        canvas.setFont('Helvetica', 7)
        canvas.setFillColor(_MUTED)
        canvas.drawString(2.0 * cm, y_footer, "PlanPro  |  Unit Plan")
        canvas.drawRightString(
            page_width - 2.0 * cm, y_footer,
            f"Page {self._page_count}"
        )

        canvas.setStrokeColor(_RULE)
        canvas.setLineWidth(0.5)
        canvas.line(2.0 * cm, y_footer + 10, page_width - 2.0 * cm, y_footer + 10)

        canvas.restoreState()

    # ──────────────────────────────────────────
    # Sections
    # ──────────────────────────────────────────
    def _build_header(self, story: list, unit: dict) -> None:
        story.append(Paragraph(_sanitize_text(unit.get("title") or "Untitled Unit"), self.styles['UnitTitle']))

        parts = [unit.get("subject"), unit.get("gradeLevel")]
        if unit.get("startDate") or unit.get("endDate"):
            parts.append(f"{unit.get('startDate') or '?'} to {unit.get('endDate') or '?'}")
        subtitle = "  |  ".join(p for p in parts if p)
        if subtitle:
            story.append(Paragraph(_sanitize_text(subtitle), self.styles['UnitSubtitle']))

        if unit.get("description"):
            story.append(Paragraph("Overview", self.styles['SectionHeader']))
            story.append(Paragraph(_multiline(unit["description"]), self.styles['BodyTextSmall']))

    def _build_standards(self, story: list, standards: list[dict]) -> None:
        if not standards:
            return
        story.append(Paragraph("Standards", self.styles['SectionHeader']))

        cell = self.styles['TableCell']
        rows = [[Paragraph("<b>Code</b>", cell), Paragraph("<b>Description</b>", cell)]]
        for std in standards:
            rows.append([
                Paragraph(_sanitize_text(std.get("code", "")), cell),
                Paragraph(_sanitize_text(std.get("description", "")), cell),
            ])

        page_width = A4[0] - 4.0 * cm
        table = Table(rows, colWidths=[page_width * 0.32, page_width * 0.68], repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), _LIGHT_BG),
            ('BOX', (0, 0), (-1, -1), 0.5, _PRIMARY),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, _RULE),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ]))
        story.append(table)

    def _build_lessons(self, story: list, lessons: list[dict]) -> None:
        if not lessons:
            return
        story.append(Paragraph("Lessons", self.styles['SectionHeader']))
        for number, lesson in enumerate(lessons, start=1):
            story.extend(self._build_single_lesson(lesson, number))

    def _bullets(self, items: list[str]) -> list:
        return [
            Paragraph(f"<bullet>&bull;</bullet> {_sanitize_text(item)}", self.styles['BulletItem'])
            for item in items if item
        ]

    def _build_single_lesson(self, lesson: dict, number: int) -> list:
        elements = []
        title = lesson.get("title") or f"Lesson {number}"
        heading = [Paragraph(_sanitize_text(title), self.styles['LessonTitle'])]

        meta = [m for m in (lesson.get("duration"), lesson.get("scheduledDate")) if m]
        if meta:
            heading.append(Paragraph(_sanitize_text("  |  ".join(meta)), self.styles['LessonMeta']))
        elements.append(KeepTogether(heading))

        if lesson.get("objectives"):
            elements.append(Paragraph("Objectives", self.styles['FieldLabel']))
            elements.extend(self._bullets(lesson["objectives"]))

        if lesson.get("activities"):
            elements.append(Paragraph("Activities", self.styles['FieldLabel']))
            elements.append(Paragraph(_multiline(lesson["activities"]), self.styles['BodyTextSmall']))

        if lesson.get("materials"):
            elements.append(Paragraph("Materials", self.styles['FieldLabel']))
            elements.extend(self._bullets(lesson["materials"]))

        if lesson.get("assessment"):
            elements.append(Paragraph("Assessment", self.styles['FieldLabel']))
            elements.append(Paragraph(_multiline(lesson["assessment"]), self.styles['BodyTextSmall']))

        resources = lesson.get("resources") or []
        if resources:
            elements.append(Paragraph("Resources", self.styles['FieldLabel']))
            elements.extend(self._bullets([
                f"{r.get('title', '')} ({r.get('type', '')}"
                + (f", {r['estimatedTime']}" if r.get("estimatedTime") else "")
                + ")"
                for r in resources
            ]))

        if lesson.get("notes"):
            elements.append(Paragraph("Notes", self.styles['FieldLabel']))
            elements.append(Paragraph(_multiline(lesson["notes"]), self.styles['BodyTextSmall']))

        elements.append(Spacer(1, 6))
        elements.append(HRFlowable(width="100%", thickness=0.5, color=_RULE))
        return elements


def get_pdf_service() -> UnitPlanPDFService:
    return UnitPlanPDFService()
