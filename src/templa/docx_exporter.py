# builds word documents from projects using python-docx
import io
import logging
import re
from typing import Dict, List

from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from .layout_parser import Block, parse_blocks, parse_inline
from .models import Project
from .themes import get_theme_styles, get_font_family

logger = logging.getLogger(__name__)

BODY_SIZE = Pt(12)
TABLE_BORDER_COLOR = "CCCCCC"
# characters xml 1.0 cannot hold, word line and page breaks are kept as newlines
SOFT_BREAK_PATTERN = re.compile(r"[\x0b\x0c]")
XML_ILLEGAL_PATTERN = re.compile(r"[\x00-\x08\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def xml_safe(text: str) -> str:
    """Make text acceptable to python-docx"""
    return XML_ILLEGAL_PATTERN.sub("", SOFT_BREAK_PATTERN.sub("\n", text or ""))


def set_cell_shading(cell, color: str):
    """Set cell background color"""
    shading_elm = OxmlElement('w:shd')
    shading_elm.set(qn('w:val'), 'clear')
    shading_elm.set(qn('w:color'), 'auto')
    shading_elm.set(qn('w:fill'), color)
    cell._tc.get_or_add_tcPr().append(shading_elm)


def set_cell_borders(cell, color: str = TABLE_BORDER_COLOR, size: int = 4):
    """Give a cell a single thin border on every side"""
    tc_pr = cell._tc.get_or_add_tcPr()
    borders = OxmlElement('w:tcBorders')
    for edge in ('top', 'left', 'bottom', 'right'):
        element = OxmlElement(f'w:{edge}')
        element.set(qn('w:val'), 'single')
        element.set(qn('w:sz'), str(size))
        element.set(qn('w:space'), '0')
        element.set(qn('w:color'), color)
        borders.append(element)
    tc_pr.append(borders)


def set_page_background(doc, color: str):
    """Fill every page with the theme background colour"""
    background = OxmlElement('w:background')
    background.set(qn('w:color'), color)
    doc.element.insert(0, background)
    # word only paints w:background when the settings ask for it,
    # the flag has to sit right after w:zoom in settings.xml
    settings = doc.settings.element
    zoom = settings.find(qn('w:zoom'))
    position = list(settings).index(zoom) + 1 if zoom is not None else 0
    settings.insert(position, OxmlElement('w:displayBackgroundShape'))


# class that maps parsed section content onto a word document tree
class DocxExporter:

    def build(self, project: Project) -> Document:
        """Build the document tree for a project"""
        styles = get_theme_styles(project.style.template)
        font_face = get_font_family(project.style.font)

        doc = Document()
        set_page_background(doc, styles["bg"])

        # set default font for body text
        normal = doc.styles['Normal']
        normal.font.name = font_face
        normal.font.size = BODY_SIZE

        # project title in the accent colour
        title = doc.add_heading(xml_safe(project.title), level=0)
        title.paragraph_format.space_after = Pt(20)
        self._style_runs(title.runs, font_face, styles["accent"], Pt(32), bold=True)

        for section in project.sections:
            heading = doc.add_heading(xml_safe(section.title), level=1)
            heading.paragraph_format.space_before = Pt(20)
            heading.paragraph_format.space_after = Pt(10)
            self._style_runs(heading.runs, font_face, styles["accent"], Pt(16), bold=True)

            for block in parse_blocks(section.content):
                self._add_block(doc, block, styles, font_face)

        logger.info(f"Built docx for '{project.title}' with {len(project.sections)} sections")
        return doc

    def export(self, project: Project) -> bytes:
        """Export a project to docx bytes"""
        buffer = io.BytesIO()
        self.build(project).save(buffer)
        return buffer.getvalue()

    def _style_runs(self, runs, font_face: str, color: str, size, bold: bool = False):
        for run in runs:
            run.font.name = font_face
            run.font.size = size
            run.font.bold = bold
            run.font.color.rgb = RGBColor.from_string(color)

    # add runs for text with **bold** spans
    def _add_inline_runs(self, paragraph, text: str, font_face: str, color: str, size=BODY_SIZE):
        for part in parse_inline(text):
            run = paragraph.add_run(xml_safe(part.text))
            run.bold = part.bold
            run.font.name = font_face
            run.font.size = size
            run.font.color.rgb = RGBColor.from_string(color)

    def _add_block(self, doc, block: Block, styles: Dict[str, str], font_face: str):
        if block.kind == "heading":
            text = xml_safe(block.text.replace("**", ""))
            if block.level <= 2:
                heading = doc.add_heading(text, level=2)
                heading.paragraph_format.space_before = Pt(12)
                heading.paragraph_format.space_after = Pt(6)
                self._style_runs(heading.runs, font_face, styles["text"], Pt(14), bold=True)
            else:
                heading = doc.add_heading(text, level=3)
                heading.paragraph_format.space_before = Pt(7.5)
                heading.paragraph_format.space_after = Pt(2.5)
                self._style_runs(heading.runs, font_face, styles["text"], Pt(12), bold=True)

        elif block.kind == "bullet":
            paragraph = doc.add_paragraph(style="List Bullet")
            paragraph.paragraph_format.space_after = Pt(5)
            self._add_inline_runs(paragraph, block.text, font_face, styles["text"])

        elif block.kind == "table":
            self._add_table(doc, block.rows, styles, font_face)
            # spacer so following text does not touch the table
            spacer = doc.add_paragraph()
            spacer.paragraph_format.space_after = Pt(10)

        else:
            paragraph = doc.add_paragraph()
            paragraph.paragraph_format.space_after = Pt(10)
            paragraph.paragraph_format.line_spacing = 1.15
            self._add_inline_runs(paragraph, block.text, font_face, styles["text"])

    def _add_table(self, doc, rows: List[List[str]], styles: Dict[str, str], font_face: str):
        """Add a full-width table, the first row is the shaded header"""
        cols = max(len(row) for row in rows)
        table = doc.add_table(rows=len(rows), cols=cols)
        table.alignment = WD_TABLE_ALIGNMENT.CENTER

        section = doc.sections[-1]
        usable_width = section.page_width - section.left_margin - section.right_margin
        col_width = int(usable_width / cols)

        for row_index, row_data in enumerate(rows):
            row = table.rows[row_index]
            for col_index in range(cols):
                cell = row.cells[col_index]
                cell.width = col_width
                set_cell_borders(cell)
                if row_index == 0:
                    set_cell_shading(cell, styles["accent_alt"])

                paragraph = cell.paragraphs[0]
                paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
                text = row_data[col_index] if col_index < len(row_data) else ""
                self._add_inline_runs(paragraph, text, font_face, styles["text"])

        return table
