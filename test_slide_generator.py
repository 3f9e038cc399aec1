"""
tests for slide geometry and the pptx writer
"""

import sys
from pathlib import Path

import pytest
from pptx.enum.shapes import MSO_SHAPE, MSO_SHAPE_TYPE
from pptx.util import Inches

sys.path.insert(0, str(Path(__file__).parent))

from src.templa.models import Project, Section, ProjectStyle, DocumentType, Template, SlideType
from src.templa.pptx_exporter import PptxExporter
from src.templa.slide_generator import SlideGenerator, TITLE_SLIDE_SUBTITLE
from src.templa.themes import THEMES


def make_project(*contents, template=Template.OCEAN):
    return Project(
        id="proj_slides",
        user_id="local",
        title="Launch Plan",
        type=DocumentType.PPTX,
        style=ProjectStyle(template=template),
        sections=[
            Section(id=f"sec_{i}", title=f"Slide {i}", content=content)
            for i, content in enumerate(contents, start=1)
        ],
        created_at="2025-01-01T00:00:00",
        updated_at="2025-01-01T00:00:00"
    )


def body_shapes(content):
    """Shapes below the title and accent rule of a single section slide"""
    deck = SlideGenerator().generate_slide_deck(make_project(content))
    return deck.slides[1].shapes[2:]


def test_title_slide():
    deck = SlideGenerator().generate_slide_deck(make_project("- a"))
    title_slide = deck.slides[0]

    assert title_slide.type == SlideType.TITLE
    assert title_slide.background == THEMES["Ocean"]["bg"]
    assert title_slide.shapes[0].text == "Launch Plan"
    assert title_slide.shapes[0].font_size == 48
    assert title_slide.shapes[1].text == TITLE_SLIDE_SUBTITLE


def test_section_slide_header_and_notes():
    project = make_project("[LAYOUT: GRID]\n- a\n- b")
    project.sections[0].notes = "Mention the pilot"
    slide = SlideGenerator().generate_slide_deck(project).slides[1]

    title, rule = slide.shapes[0], slide.shapes[1]
    assert (title.text, title.font_size, title.color) == ("Slide 1", 32, THEMES["Ocean"]["accent"])
    assert (rule.kind, rule.y, rule.line_width) == ("line", 1.4, 2)
    assert slide.layout == "GRID"
    assert slide.notes == "Mention the pilot"
    assert slide.metadata["item_count"] == 2


def test_standard_bullet_box():
    shapes = body_shapes("- one\n- two")
    assert len(shapes) == 1
    box = shapes[0]
    assert box.items == ["one", "two"]
    assert (box.x, box.y, box.w) == (0.5, 1.8, 9.0)
    assert box.font_size == 24
    # kept above the bottom margin
    assert box.y + box.h <= 5.625 - 0.25 + 1e-9


def test_empty_section_has_no_body():
    assert body_shapes("") == []


def test_centered_text():
    shapes = body_shapes("[LAYOUT: CENTERED]\nBig idea\nSmall print")
    assert len(shapes) == 1
    assert shapes[0].text == "Big idea\n\nSmall print"
    assert (shapes[0].align, shapes[0].valign, shapes[0].bold) == ("center", "middle", True)
    assert shapes[0].font_size == 32


def test_grid_splits_into_two_cards():
    shapes = body_shapes("[LAYOUT: GRID]\n- a\n- b\n- c")
    assert [s.kind for s in shapes] == ["round_rect", "round_rect"]
    assert shapes[0].items == ["a", "b"]
    assert shapes[1].items == ["c"]
    assert (shapes[0].x, shapes[1].x) == (0.5, 5.2)
    assert shapes[0].h == pytest.approx(3.15)
    assert shapes[0].fill == THEMES["Ocean"]["card_bg"]


def test_grid_single_item_has_one_card():
    shapes = body_shapes("[LAYOUT: GRID]\n- only")
    assert len(shapes) == 1


def test_timeline_geometry():
    shapes = body_shapes("[LAYOUT: TIMELINE]\n- 2019\n- 2021\n- 2024")
    axis = shapes[0]
    assert (axis.kind, axis.y, axis.w, axis.line_width) == ("line", 3.2, 9.0, 4)

    dots = [s for s in shapes if s.kind == "ellipse"]
    labels = [s for s in shapes if s.kind == "text"]
    connectors = [s for s in shapes[1:] if s.kind == "line"]
    assert len(dots) == len(labels) == len(connectors) == 3

    # step 3.0, first centre at 2.0
    assert dots[0].x == pytest.approx(1.85)
    assert dots[0].y == pytest.approx(3.05)
    assert connectors[0].y == pytest.approx(2.6)
    assert connectors[1].y == pytest.approx(3.2)
    assert (labels[0].y, labels[0].valign) == (1.8, "bottom")
    assert (labels[1].y, labels[1].valign) == (3.6, "top")
    assert labels[2].text == "2024"


def test_timeline_caps_items_and_handles_empty():
    many = "[LAYOUT: TIMELINE]\n" + "\n".join(f"- {year}" for year in range(2018, 2025))
    assert len([s for s in body_shapes(many) if s.kind == "ellipse"]) == 5

    empty = body_shapes("[LAYOUT: TIMELINE]")
    assert [s.kind for s in empty] == ["line"]


def test_workflow_chevrons():
    content = "[LAYOUT: WORKFLOW]\n" + "\n".join(f"- Step {i}" for i in range(1, 7))
    shapes = body_shapes(content)

    assert [s.kind for s in shapes] == ["chevron"] * 4
    assert shapes[1].x == pytest.approx(2.75)
    assert shapes[0].w == pytest.approx(2.15)
    assert (shapes[0].y, shapes[0].h, shapes[0].color) == (2.5, 1.5, "FFFFFF")
    assert body_shapes("[LAYOUT: WORKFLOW]") == []


def test_table_layout_with_rows():
    shapes = body_shapes("[LAYOUT: TABLE]\n| Plan | Price |\n|---|---|\n| Basic |\n| Pro | $20 |")
    assert len(shapes) == 1
    table = shapes[0]
    assert table.kind == "table"
    assert table.rows == [["Plan", "Price"], ["Basic", ""], ["Pro", "$20"]]
    assert table.header_fill == THEMES["Ocean"]["accent_alt"]
    assert table.font_size == 14


def test_table_layout_draws_only_the_table():
    shapes = body_shapes("[LAYOUT: TABLE]\n## Pricing\nIntro text\n| Plan | Price |\n|---|---|\n| Pro | $20 |\n- closing bullet")
    assert [shape.kind for shape in shapes] == ["table"]
    assert shapes[0].rows == [["Plan", "Price"], ["Pro", "$20"]]


def test_table_layout_without_rows_uses_bullets():
    shapes = body_shapes("[LAYOUT: TABLE]\n- one\n- two")
    assert shapes[0].kind == "text"
    assert shapes[0].items == ["one", "two"]


def test_slide_statistics():
    generator = SlideGenerator()
    project = make_project("[LAYOUT: GRID]\n- a\n- b", "- c")
    project.sections[1].notes = "note"
    stats = generator.get_slide_statistics(generator.generate_slide_deck(project))

    assert stats["total_slides"] == 3
    assert stats["content_slides"] == 2
    assert stats["title_slides"] == 1
    assert stats["total_items"] == 3
    assert stats["slides_with_notes"] == 1
    assert stats["layouts"] == {"GRID": 1, "STANDARD": 1}
    assert stats["average_items_per_slide"] == 1.5


def test_slide_deck_json_file(tmp_path):
    generator = SlideGenerator()
    deck = generator.generate_slide_deck(make_project("[LAYOUT: TIMELINE]\n- a\n- b"))
    path = tmp_path / "deck.json"

    generator.export_to_json(deck, str(path))
    assert generator.load_from_json(str(path)) == deck


# pptx

def test_pptx_render_slides_and_size():
    project = make_project(
        "[LAYOUT: WORKFLOW]\n- Plan\n- Build",
        "[LAYOUT: TABLE]\n| A | B |\n|---|---|\n| 1 | 2 |",
        "- **Bold** start"
    )
    project.sections[0].notes = "Walk through the steps"
    exporter = PptxExporter()
    prs = exporter.render(exporter.slide_generator.generate_slide_deck(project))

    assert len(prs.slides) == 4
    assert prs.slide_width == Inches(10)
    assert prs.slide_height == Inches(5.625)

    workflow_slide = prs.slides[1]
    chevrons = [
        shape for shape in workflow_slide.shapes
        if shape.shape_type == MSO_SHAPE_TYPE.AUTO_SHAPE and shape.auto_shape_type == MSO_SHAPE.CHEVRON
    ]
    assert [shape.text_frame.text for shape in chevrons] == ["Plan", "Build"]
    assert workflow_slide.notes_slide.notes_text_frame.text == "Walk through the steps"

    tables = [shape for shape in prs.slides[2].shapes if shape.has_table]
    assert len(tables) == 1
    assert tables[0].table.cell(1, 1).text == "2"


def test_pptx_bullets_and_bold_runs():
    exporter = PptxExporter()
    prs = exporter.render(exporter.slide_generator.generate_slide_deck(make_project("- **Bold** start")))

    text_boxes = [shape for shape in prs.slides[1].shapes if shape.shape_type == MSO_SHAPE_TYPE.TEXT_BOX]
    body = text_boxes[-1]
    runs = body.text_frame.paragraphs[0].runs
    assert [run.text for run in runs] == ["•  ", "Bold", " start"]
    assert runs[1].font.bold is True
    assert str(runs[0].font.color.rgb) == THEMES["Ocean"]["accent"]


def test_pptx_export_bytes():
    data = PptxExporter().export(make_project("[LAYOUT: GRID]\n- a\n- b"))
    assert data.startswith(b"PK")
