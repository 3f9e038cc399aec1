# writes slide decks to pptx using python-pptx
import io
import logging
from typing import List

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE, MSO_CONNECTOR
from pptx.enum.text import PP_ALIGN, MSO_ANCHOR
from pptx.util import Inches, Pt

from .layout_parser import parse_inline
from .models import Project, SlideDeck, Slide, ShapeSpec
from .slide_generator import SlideGenerator

logger = logging.getLogger(__name__)

ALIGNMENTS = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
}

ANCHORS = {
    "top": MSO_ANCHOR.TOP,
    "middle": MSO_ANCHOR.MIDDLE,
    "bottom": MSO_ANCHOR.BOTTOM,
}

AUTO_SHAPES = {
    "ellipse": MSO_SHAPE.OVAL,
    "chevron": MSO_SHAPE.CHEVRON,
    "round_rect": MSO_SHAPE.ROUNDED_RECTANGLE,
}

BLANK_LAYOUT_INDEX = 6


def _rgb(color: str) -> RGBColor:
    return RGBColor.from_string(color)


# class that draws a computed slide deck onto a python-pptx presentation
class PptxExporter:
    def __init__(self, slide_generator: SlideGenerator = None):
        self.slide_generator = slide_generator or SlideGenerator()

    def export(self, project: Project) -> bytes:
        """Lay out a project and export it to pptx bytes"""
        slide_deck = self.slide_generator.generate_slide_deck(project)
        buffer = io.BytesIO()
        self.render(slide_deck).save(buffer)
        return buffer.getvalue()

    def render(self, slide_deck: SlideDeck) -> Presentation:
        """Draw every slide of the deck"""
        prs = Presentation()
        prs.slide_width = Inches(slide_deck.width)
        prs.slide_height = Inches(slide_deck.height)

        for slide_spec in slide_deck.slides:
            self._render_slide(prs, slide_spec, slide_deck.font_face)

        logger.info(f"Rendered {len(slide_deck.slides)} slides for '{slide_deck.title}'")
        return prs

    def _render_slide(self, prs: Presentation, slide_spec: Slide, font_face: str):
        slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT_INDEX])

        background = slide.background.fill
        background.solid()
        background.fore_color.rgb = _rgb(slide_spec.background)

        for shape_spec in slide_spec.shapes:
            if shape_spec.kind == "line":
                self._add_line(slide, shape_spec)
            elif shape_spec.kind == "table":
                self._add_table(slide, shape_spec, font_face)
            elif shape_spec.kind in AUTO_SHAPES:
                self._add_auto_shape(slide, shape_spec, font_face)
            else:
                self._add_text_box(slide, shape_spec, font_face)

        if slide_spec.notes:
            slide.notes_slide.notes_text_frame.text = slide_spec.notes

        return slide

    def _add_line(self, slide, spec: ShapeSpec):
        connector = slide.shapes.add_connector(
            MSO_CONNECTOR.STRAIGHT,
            Inches(spec.x), Inches(spec.y),
            Inches(spec.x + spec.w), Inches(spec.y + spec.h)
        )
        if spec.line_color:
            connector.line.color.rgb = _rgb(spec.line_color)
        connector.line.width = Pt(spec.line_width or 1)
        return connector

    def _add_auto_shape(self, slide, spec: ShapeSpec, font_face: str):
        shape = slide.shapes.add_shape(
            AUTO_SHAPES[spec.kind],
            Inches(spec.x), Inches(spec.y), Inches(spec.w), Inches(spec.h)
        )
        if spec.fill:
            shape.fill.solid()
            shape.fill.fore_color.rgb = _rgb(spec.fill)
        shape.line.fill.background()

        if spec.text or spec.items:
            self._fill_text_frame(shape.text_frame, spec, font_face)
        return shape

    def _add_text_box(self, slide, spec: ShapeSpec, font_face: str):
        box = slide.shapes.add_textbox(Inches(spec.x), Inches(spec.y), Inches(spec.w), Inches(spec.h))
        if spec.fill:
            box.fill.solid()
            box.fill.fore_color.rgb = _rgb(spec.fill)
        self._fill_text_frame(box.text_frame, spec, font_face)
        return box

    def _add_table(self, slide, spec: ShapeSpec, font_face: str):
        rows, cols = len(spec.rows), len(spec.rows[0])
        graphic = slide.shapes.add_table(
            rows, cols, Inches(spec.x), Inches(spec.y), Inches(spec.w), Inches(spec.h)
        )
        table = graphic.table

        for r, row in enumerate(spec.rows):
            for c, value in enumerate(row):
                cell = table.cell(r, c)
                cell.fill.solid()
                fill = spec.header_fill if r == 0 else spec.fill
                cell.fill.fore_color.rgb = _rgb(fill or "FFFFFF")
                cell.vertical_anchor = MSO_ANCHOR.MIDDLE

                paragraph = cell.text_frame.paragraphs[0]
                paragraph.alignment = ALIGNMENTS.get(spec.align, PP_ALIGN.CENTER)
                self._add_runs(paragraph, value, spec, font_face, bold=spec.bold or r == 0)
        return graphic

    def _fill_text_frame(self, text_frame, spec: ShapeSpec, font_face: str):
        """Write plain text or bulleted items into a text frame"""
        text_frame.clear()
        text_frame.word_wrap = True
        text_frame.vertical_anchor = ANCHORS.get(spec.valign, MSO_ANCHOR.TOP)
        margin = Inches(spec.margin)
        text_frame.margin_left = text_frame.margin_right = margin
        text_frame.margin_top = text_frame.margin_bottom = margin

        lines: List[str] = spec.items if spec.items else (spec.text or "").split("\n")
        for index, line in enumerate(lines):
            paragraph = text_frame.paragraphs[0] if index == 0 else text_frame.add_paragraph()
            paragraph.alignment = ALIGNMENTS.get(spec.align, PP_ALIGN.LEFT)
            if spec.line_spacing:
                paragraph.line_spacing = Pt(spec.line_spacing)

            if spec.items:
                bullet = paragraph.add_run()
                bullet.text = "•  "
                bullet.font.size = Pt(spec.font_size)
                bullet.font.name = font_face
                bullet.font.color.rgb = _rgb(spec.bullet_color or spec.color or "000000")

            self._add_runs(paragraph, line, spec, font_face)

    def _add_runs(self, paragraph, text: str, spec: ShapeSpec, font_face: str, bold: bool = None):
        # one run per **bold** span
        for part in parse_inline(text):
            run = paragraph.add_run()
            run.text = part.text
            run.font.name = font_face
            run.font.size = Pt(spec.font_size)
            run.font.bold = part.bold or (spec.bold if bold is None else bold)
            if spec.color:
                run.font.color.rgb = _rgb(spec.color)
