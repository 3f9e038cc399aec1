# imports for type hints, json handling, logging, and maths
from typing import List, Dict, Any
import json
import logging
import math
from collections import Counter
from datetime import datetime

# import data models for slides and projects
from .models import Project, Section, Slide, SlideDeck, SlideType, ShapeSpec
from .layout_parser import Layout, parse_content, ParsedContent
from .themes import get_theme_styles, get_font_family, calculate_layout_metrics

logger = logging.getLogger(__name__)

# slide geometry in inches, 16:9
SLIDE_WIDTH = 10.0
SLIDE_HEIGHT = 5.625
MARGIN_X = 0.5
CONTENT_WIDTH = 9.0
BODY_TOP = 1.8
BODY_HEIGHT = 3.5
BOTTOM_MARGIN = 0.25

TIMELINE_AXIS_Y = 3.2
TIMELINE_MAX_ITEMS = 5
WORKFLOW_MAX_ITEMS = 4

TITLE_SLIDE_SUBTITLE = "Generated by Templa AI"

# class that lays out projects as slide decks with computed geometry
class SlideGenerator:
    # initialize slide generator with counter
    def __init__(self):
        # track slide numbers as we create them
        self.slide_counter = 0

    # main method to create a complete slide deck from a project
    def generate_slide_deck(self, project: Project) -> SlideDeck:
        """Generate the title slide plus one slide per section"""
        self.slide_counter = 0
        styles = get_theme_styles(project.style.template)

        slides = [self._create_title_slide(project.title, styles)]
        for section in project.sections:
            slides.append(self._create_section_slide(section, styles))

        slide_deck = SlideDeck(
            title=project.title,
            slides=slides,
            font_face=get_font_family(project.style.font),
            width=SLIDE_WIDTH,
            height=SLIDE_HEIGHT,
            metadata={
                "project_id": project.id,
                "template": getattr(project.style.template, "value", project.style.template),
            },
            created_at=datetime.now().isoformat()
        )

        logger.info(f"Generated slide deck with {len(slides)} slides")
        return slide_deck

    # create the first slide with the project title
    def _create_title_slide(self, title: str, styles: Dict[str, str]) -> Slide:
        """Create title slide"""
        self.slide_counter += 1

        shapes = [
            ShapeSpec(kind="text", x=MARGIN_X, y=1.8, w=CONTENT_WIDTH, h=1.5, text=title,
                      font_size=48, bold=True, color=styles["text"], align="center", valign="middle"),
            ShapeSpec(kind="text", x=MARGIN_X, y=4.0, w=CONTENT_WIDTH, h=0.6, text=TITLE_SLIDE_SUBTITLE,
                      font_size=18, color=styles["subtext"], align="center", valign="middle"),
        ]

        return Slide(
            id=f"slide_{self.slide_counter}",
            type=SlideType.TITLE,
            title=title,
            layout="TITLE",
            background=styles["bg"],
            shapes=shapes,
            metadata={"slide_number": self.slide_counter, "is_title": True}
        )

    # create the slide for one section, body shapes depend on its layout tag
    def _create_section_slide(self, section: Section, styles: Dict[str, str]) -> Slide:
        self.slide_counter += 1
        parsed = parse_content(section.content)

        shapes = [
            ShapeSpec(kind="text", x=MARGIN_X, y=0.6, w=CONTENT_WIDTH, h=0.8, text=section.title,
                      font_size=32, bold=True, color=styles["accent"], valign="middle"),
            ShapeSpec(kind="line", x=MARGIN_X, y=1.4, w=CONTENT_WIDTH, h=0,
                      line_color=styles["accent"], line_width=2),
        ]
        shapes.extend(self.layout_body(parsed, styles))

        return Slide(
            id=f"slide_{self.slide_counter}",
            type=SlideType.CONTENT,
            title=section.title,
            layout=parsed.layout.value,
            background=styles["bg"],
            shapes=shapes,
            notes=section.notes or None,
            metadata={
                "slide_number": self.slide_counter,
                "section_id": section.id,
                "item_count": len(parsed.items)
            }
        )

    def layout_body(self, parsed: ParsedContent, styles: Dict[str, str]) -> List[ShapeSpec]:
        """Compute body shapes for parsed content"""
        if parsed.layout == Layout.CENTERED:
            return self._layout_centered(parsed.items, styles)
        if parsed.layout == Layout.GRID:
            return self._layout_grid(parsed.items, styles)
        if parsed.layout == Layout.TIMELINE:
            return self._layout_timeline(parsed.items, styles)
        if parsed.layout == Layout.WORKFLOW:
            return self._layout_workflow(parsed.items, styles)
        if parsed.layout == Layout.TABLE:
            return self._layout_table(parsed, styles)
        return self._layout_standard(parsed.items, styles)

    # bullet box height as a share of the slide, kept above the bottom margin
    def _body_height(self, share: float) -> float:
        return min(SLIDE_HEIGHT * share, SLIDE_HEIGHT - BODY_TOP - BOTTOM_MARGIN)

    def _bullet_box(self, items: List[str], styles: Dict[str, str], layout: Layout, share: float) -> ShapeSpec:
        metrics = calculate_layout_metrics(len(items), layout)
        return ShapeSpec(
            kind="text", x=MARGIN_X, y=BODY_TOP, w=CONTENT_WIDTH, h=self._body_height(share),
            items=items, font_size=metrics.font_size, line_spacing=metrics.line_spacing,
            color=styles["text"], bullet_color=styles["accent"], valign="top"
        )

    def _layout_standard(self, items: List[str], styles: Dict[str, str]) -> List[ShapeSpec]:
        if not items:
            return []
        return [self._bullet_box(items, styles, Layout.STANDARD, 0.75)]

    def _layout_centered(self, items: List[str], styles: Dict[str, str]) -> List[ShapeSpec]:
        if not items:
            return []
        metrics = calculate_layout_metrics(len(items), Layout.CENTERED)
        return [ShapeSpec(
            kind="text", x=1.0, y=BODY_TOP, w=8.0, h=BODY_HEIGHT, text="\n\n".join(items),
            font_size=metrics.font_size, color=styles["text"], bold=True,
            align="center", valign="middle"
        )]

    def _layout_grid(self, items: List[str], styles: Dict[str, str]) -> List[ShapeSpec]:
        """Two rounded cards, the first takes the extra item when the count is odd"""
        metrics = calculate_layout_metrics(len(items), Layout.GRID)
        mid = math.ceil(len(items) / 2)
        shapes = []
        for x, column in ((MARGIN_X, items[:mid]), (5.2, items[mid:])):
            if not column:
                continue
            shapes.append(ShapeSpec(
                kind="round_rect", x=x, y=BODY_TOP, w=4.3, h=BODY_HEIGHT * 0.9, items=column,
                fill=styles["card_bg"], color=styles["card_text"], bullet_color=styles["accent"],
                font_size=metrics.font_size, valign="top", margin=0.2
            ))
        return shapes

    def _layout_timeline(self, items: List[str], styles: Dict[str, str]) -> List[ShapeSpec]:
        """Horizontal axis with labels alternating above and below it"""
        shapes = [ShapeSpec(kind="line", x=MARGIN_X, y=TIMELINE_AXIS_Y, w=CONTENT_WIDTH, h=0,
                            line_color=styles["accent"], line_width=4)]

        shown = items[:TIMELINE_MAX_ITEMS]
        if not shown:
            return shapes

        step = CONTENT_WIDTH / len(shown)
        for i, item in enumerate(shown):
            x_pos = MARGIN_X + (i * step) + (step / 2)
            is_top = i % 2 == 0

            shapes.append(ShapeSpec(kind="ellipse", x=x_pos - 0.15, y=TIMELINE_AXIS_Y - 0.15, w=0.3, h=0.3,
                                    fill=styles["accent"]))
            shapes.append(ShapeSpec(kind="line", x=x_pos, y=TIMELINE_AXIS_Y - 0.6 if is_top else TIMELINE_AXIS_Y,
                                    w=0, h=0.6, line_color=styles["accent"], line_width=1))
            shapes.append(ShapeSpec(kind="text", x=x_pos - 1.0, y=1.8 if is_top else 3.6, w=2.0, h=1.2,
                                    text=item, font_size=14, bold=True, color=styles["text"],
                                    align="center", valign="bottom" if is_top else "top"))

        if len(items) > TIMELINE_MAX_ITEMS:
            logger.debug(f"Timeline shows {TIMELINE_MAX_ITEMS} of {len(items)} items")
        return shapes

    def _layout_workflow(self, items: List[str], styles: Dict[str, str]) -> List[ShapeSpec]:
        """Row of chevrons, one per step"""
        shown = items[:WORKFLOW_MAX_ITEMS]
        if not shown:
            return []

        width = CONTENT_WIDTH / len(shown)
        gap = 0.1
        return [
            ShapeSpec(kind="chevron", x=MARGIN_X + (i * width), y=2.5, w=width - gap, h=1.5, text=item,
                      fill=styles["accent"], color="FFFFFF", font_size=14, bold=True,
                      align="center", valign="middle")
            for i, item in enumerate(shown)
        ]

    def _layout_table(self, parsed: ParsedContent, styles: Dict[str, str]) -> List[ShapeSpec]:
        rows = parsed.table_rows
        if not rows:
            # no pipe table in the content, fall back to bullets
            if not parsed.items:
                return []
            return [self._bullet_box(parsed.items, styles, Layout.TABLE, 0.70)]

        # the table fills the body, text around it is only kept in the docx and html output
        width = max(len(row) for row in rows)
        padded = [row + [""] * (width - len(row)) for row in rows]
        font_size = 14 if len(rows) <= 6 else 11
        return [ShapeSpec(
            kind="table", x=MARGIN_X, y=BODY_TOP, w=CONTENT_WIDTH,
            h=min(0.4 * len(rows), self._body_height(0.70)), rows=padded,
            font_size=font_size, color=styles["text"], header_fill=styles["accent_alt"],
            fill=styles["card_bg"], align="center"
        )]

    # save slide deck to a json file
    def export_to_json(self, slide_deck: SlideDeck, filepath: str):
        """Export slide deck to JSON file"""
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(slide_deck.model_dump(mode="json"), f, indent=2, ensure_ascii=False)

            logger.info(f"Slide deck exported to {filepath}")

        except Exception as e:
            logger.error(f"Error exporting slide deck: {str(e)}")
            raise

    # load slide deck from a json file
    def load_from_json(self, filepath: str) -> SlideDeck:
        """Load slide deck from JSON file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)

            return SlideDeck(**data)

        except Exception as e:
            logger.error(f"Error loading slide deck: {str(e)}")
            raise

    # calculate statistics about the slide deck
    def get_slide_statistics(self, slide_deck: SlideDeck) -> Dict[str, Any]:
        """Get statistics about the slide deck"""
        total_slides = len(slide_deck.slides)
        content_slides = [s for s in slide_deck.slides if s.type == SlideType.CONTENT]
        layouts = Counter(s.layout for s in content_slides)
        total_items = sum(s.metadata.get("item_count", 0) for s in content_slides)

        return {
            "total_slides": total_slides,
            "content_slides": len(content_slides),
            "title_slides": total_slides - len(content_slides),
            "total_shapes": sum(len(s.shapes) for s in slide_deck.slides),
            "total_items": total_items,
            "slides_with_notes": len([s for s in slide_deck.slides if s.notes]),
            "layouts": dict(layouts),
            "average_items_per_slide": total_items / len(content_slides) if content_slides else 0
        }
