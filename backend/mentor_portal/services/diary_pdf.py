"""
PDF renderer for project diaries
Lays a built DiaryDocument out on A4 pages, one section per page
"""

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, PageBreak,
    Table, TableStyle, Image as RLImage
)
from PIL import Image as PILImage
from xml.sax.saxutils import escape
from typing import List, Optional
from io import BytesIO
import httpx

from mentor_portal.core.config import settings
from mentor_portal.core.exceptions import DocumentGenerationError
from mentor_portal.core.logging_config import logger
from mentor_portal.services.diary_builder import DiaryDocument, DiaryTable


class DiaryPDFGenerator:
    """
    Render project diaries to PDF

    Every page repeats the institution header: the configured banner image
    when it can be fetched, otherwise the configured header text lines.
    """

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Create paragraph styles for the diary"""

        self.styles.add(ParagraphStyle(
            name='HeaderLine',
            parent=self.styles['Normal'],
            fontSize=10,
            leading=12,
            alignment=TA_CENTER,
            fontName='Helvetica-Bold'
        ))

        self.styles.add(ParagraphStyle(
            name='DiaryTitle',
            parent=self.styles['Normal'],
            fontSize=14,
            spaceBefore=6,
            spaceAfter=6,
            alignment=TA_CENTER,
            fontName='Helvetica-Bold'
        ))

        self.styles.add(ParagraphStyle(
            name='DocRef',
            parent=self.styles['Normal'],
            fontSize=8,
            alignment=TA_CENTER,
            textColor=HexColor('#4a4a4a'),
            fontName='Helvetica'
        ))

        self.styles.add(ParagraphStyle(
            name='FieldLine',
            parent=self.styles['Normal'],
            fontSize=10,
            spaceAfter=4,
            alignment=TA_LEFT,
            fontName='Helvetica'
        ))

        self.styles.add(ParagraphStyle(
            name='SectionTitle',
            parent=self.styles['Normal'],
            fontSize=12,
            spaceBefore=10,
            spaceAfter=8,
            fontName='Helvetica-Bold',
            keepWithNext=True
        ))

        self.styles.add(ParagraphStyle(
            name='DiaryCell',
            parent=self.styles['Normal'],
            fontSize=8,
            leading=10,
            fontName='Helvetica'
        ))

        self.styles.add(ParagraphStyle(
            name='DiaryHeadCell',
            parent=self.styles['Normal'],
            fontSize=8,
            leading=10,
            alignment=TA_CENTER,
            fontName='Helvetica-Bold'
        ))

    async def fetch_header_image(self, url: str) -> Optional[bytes]:
        """Download the banner image. Returns None when it cannot be used"""
        if not url:
            return None

        try:
            async with httpx.AsyncClient(timeout=settings.DIARY_HEADER_TIMEOUT) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.content
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Could not fetch diary header image {url}: {e}")
            return None

        try:
            PILImage.open(BytesIO(data)).verify()
        except (OSError, SyntaxError, ValueError) as e:
            logger.warning(f"Diary header image {url} is not a readable image: {e}")
            return None
        return data

    def _image_header(self, header_image: bytes, width: float) -> Optional[RLImage]:
        """Banner scaled to the frame width, or None when the bytes cannot be decoded"""
        try:
            with PILImage.open(BytesIO(header_image)) as img:
                img.load()
                img_width, img_height = img.size
        except (OSError, SyntaxError, ValueError) as e:
            logger.warning(f"Diary header image could not be laid out, using text header: {e}")
            return None

        height = width * img_height / img_width if img_width else 0.8 * inch
        return RLImage(BytesIO(header_image), width=width, height=height)

    def _header(self, document: DiaryDocument, header_image: Optional[bytes], width: float) -> List:
        story = []

        banner = self._image_header(header_image, width) if header_image else None
        if banner is not None:
            story.append(banner)
        else:
            for line in document.header_lines:
                story.append(Paragraph(escape(line), self.styles['HeaderLine']))

        story.append(Spacer(1, 0.1*inch))
        story.append(Paragraph("PROJECT WORK", self.styles['DiaryTitle']))
        if document.doc_ref:
            story.append(Paragraph(f"Doc Ref: {escape(document.doc_ref)}", self.styles['DocRef']))
        story.append(Spacer(1, 0.1*inch))
        return story

    def _cover_fields(self, document: DiaryDocument) -> List:
        story = [Paragraph("PROJECT DIARY", self.styles['DiaryTitle'])]
        fields = [
            ("Department", document.department),
            ("Year/Sem/Sec", document.year_sem_sec),
            ("Course Code &amp; Title", document.course),
            ("Project Title", document.project_title),
        ]
        for label, value in fields:
            story.append(Paragraph(f"<b>{label}:</b> {escape(value or '')}", self.styles['FieldLine']))
        story.append(Spacer(1, 0.15*inch))
        return story

    def _table(self, section: DiaryTable, width: float) -> Table:
        head = [Paragraph(escape(c), self.styles['DiaryHeadCell']) for c in section.columns]
        body = [
            [Paragraph(escape(cell or ''), self.styles['DiaryCell']) for cell in row]
            for row in section.rows
        ]
        col_width = width / max(len(section.columns), 1)

        table = Table([head] + body, colWidths=[col_width] * len(section.columns), repeatRows=1)
        table.setStyle(TableStyle([
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
            ('BACKGROUND', (0, 0), (-1, 0), HexColor('#e8e8e8')),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 4),
            # Blank rows need room for handwriting
            ('BOTTOMPADDING', (0, 1), (-1, -1), 10),
        ]))
        return table

    def _signatures(self, document: DiaryDocument, width: float) -> Table:
        rows = [
            [Paragraph(escape(cell), self.styles['DiaryHeadCell']) for cell in row]
            for row in document.signatures
        ]
        columns = max((len(row) for row in rows), default=1)
        table = Table(rows, colWidths=[width / columns] * columns)
        table.setStyle(TableStyle([
            ('TOPPADDING', (0, 0), (-1, 0), 36),
            ('VALIGN', (0, 0), (-1, -1), 'BOTTOM'),
        ]))
        return table

    def render(self, document: DiaryDocument, header_image: Optional[bytes] = None) -> bytes:
        """
        Lay out the diary and return the PDF bytes

        Raises:
            DocumentGenerationError: reportlab could not build the document
        """
        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                rightMargin=36,
                leftMargin=36,
                topMargin=36,
                bottomMargin=36,
                title=f"Project Diary - {document.project_title}",
            )
            width = doc.width

            story = []
            for index, section in enumerate(document.sections):
                if index:
                    story.append(PageBreak())
                story.extend(self._header(document, header_image, width))
                if index == 0:
                    story.extend(self._cover_fields(document))
                story.append(Paragraph(escape(section.title), self.styles['SectionTitle']))
                story.append(self._table(section, width))

            story.append(Spacer(1, 0.4*inch))
            story.append(self._signatures(document, width))

            doc.build(story)
        except Exception as e:
            logger.error(f"Error generating diary PDF: {e}", exc_info=True)
            raise DocumentGenerationError(doc_type="diary") from e

        pdf = buffer.getvalue()
        logger.info(f"Generated diary PDF: {len(pdf)} bytes, {len(document.sections)} sections")
        return pdf

    async def generate(self, document: DiaryDocument) -> bytes:
        """Fetch the header image once, then render"""
        header_image = await self.fetch_header_image(settings.DIARY_HEADER_IMAGE_URL)
        return self.render(document, header_image)


# Singleton instance
diary_pdf_generator = DiaryPDFGenerator()
