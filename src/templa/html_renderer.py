# renders section content to html for the on-screen editor and preview
import logging
from html import escape
from typing import List, Optional

from .layout_parser import Layout, Block, parse_content, parse_inline
from .models import Project, Section, DocumentType, ProjectStyle
from .themes import get_theme_styles, get_font_family, html_text_scale

logger = logging.getLogger(__name__)

BASE_CSS = """
body { margin: 0; background: #1f2937; font-family: var(--tp-font), Arial, sans-serif; }
.tp-deck { display: flex; flex-direction: column; align-items: center; gap: 48px; padding: 48px 16px; }
.tp-section { background: var(--tp-bg); color: var(--tp-text); width: 100%; max-width: 1024px; box-sizing: border-box; }
.tp-slide { aspect-ratio: 16 / 9; padding: 48px; display: flex; flex-direction: column; overflow: hidden; border-radius: 12px; }
.tp-page { min-height: 800px; padding: 64px; }
.tp-title { font-size: 2.5rem; text-align: center; color: var(--tp-text); }
.tp-section-title { font-size: 1.875rem; margin: 0 0 24px; padding-bottom: 16px; border-bottom: 1px solid var(--tp-accent-alt); color: var(--tp-accent); }
.tp-body { flex: 1; }
.tp-size-lg { font-size: 1.125rem; }
.tp-size-xl2 { font-size: 1.5rem; }
.tp-size-xl3 { font-size: 1.875rem; }
.tp-bullet { display: flex; gap: 12px; margin: 0 0 8px 8px; align-items: flex-start; }
.tp-dot { width: 6px; height: 6px; margin-top: 0.6em; border-radius: 50%; background: var(--tp-accent); flex-shrink: 0; }
.tp-timeline { border-left: 4px solid var(--tp-accent); margin-left: 24px; }
.tp-timeline-item { position: relative; padding-left: 32px; margin-bottom: 24px; }
.tp-timeline-marker { position: absolute; left: -12px; top: 6px; width: 20px; height: 20px; border-radius: 50%; background: var(--tp-accent); }
.tp-card { background: var(--tp-card-bg); color: var(--tp-card-text); padding: 24px; border-radius: 12px; }
.tp-grid { display: grid; grid-template-columns: repeat(2, 1fr); gap: 16px; }
.tp-badge { display: inline-flex; width: 32px; height: 32px; border-radius: 50%; align-items: center; justify-content: center; font-weight: bold; background: var(--tp-accent); color: var(--tp-bg); }
.tp-centered { display: flex; flex-direction: column; align-items: center; justify-content: center; text-align: center; height: 100%; }
.tp-lead { font-size: 2.5rem; font-weight: bold; }
.tp-workflow { display: flex; gap: 4px; align-items: stretch; }
.tp-step { flex: 1; background: var(--tp-accent); color: #FFFFFF; font-weight: bold; text-align: center; padding: 24px 28px; clip-path: polygon(0 0, 88% 0, 100% 50%, 88% 100%, 0 100%, 12% 50%); }
.tp-step-number { display: block; font-size: 0.75em; opacity: 0.8; margin-bottom: 4px; }
.tp-table { width: 100%; border-collapse: collapse; margin-bottom: 16px; }
.tp-table td, .tp-table th { border: 1px solid #CCCCCC; padding: 6px 10px; text-align: center; }
.tp-table th { background: var(--tp-accent-alt); }
"""


# class that turns parsed section content into html fragments and pages
class HtmlRenderer:

    # render inline **bold** spans with all text escaped
    def render_inline(self, text: str) -> str:
        parts = []
        for run in parse_inline(text):
            if run.bold:
                parts.append(f"<strong>{escape(run.text)}</strong>")
            else:
                parts.append(escape(run.text))
        return "".join(parts)

    def render_content(self, content: Optional[str], is_slide: bool = False) -> str:
        """Render one section body, choosing markup from its layout tag"""
        if not content or not content.strip():
            return ""

        parsed = parse_content(content)
        if not parsed.items and not parsed.blocks:
            return ""

        size = f"tp-size-{html_text_scale(len(parsed.items), is_slide)}"

        if parsed.layout == Layout.TIMELINE:
            body = self._render_timeline(parsed.items, size)
        elif parsed.layout == Layout.GRID:
            body = self._render_grid(parsed.items, size)
        elif parsed.layout == Layout.CENTERED:
            body = self._render_centered(parsed.items)
        elif parsed.layout == Layout.WORKFLOW:
            body = self._render_workflow(parsed.items, size)
        else:
            # TABLE and STANDARD share the block renderer, tables become <table>
            body = self._render_blocks(parsed.blocks, size)

        return f'<div class="tp-layout tp-layout-{parsed.layout.value.lower()}">{body}</div>'

    def _render_timeline(self, items: List[str], size: str) -> str:
        entries = "".join(
            f'<div class="tp-timeline-item"><div class="tp-timeline-marker"></div>'
            f'<div class="tp-card"><p class="{size}">{self.render_inline(item)}</p></div></div>'
            for item in items
        )
        return f'<div class="tp-timeline">{entries}</div>'

    def _render_grid(self, items: List[str], size: str) -> str:
        cards = "".join(
            f'<div class="tp-card"><div class="tp-badge">{index}</div>'
            f'<p class="{size}">{self.render_inline(item)}</p></div>'
            for index, item in enumerate(items, start=1)
        )
        return f'<div class="tp-grid">{cards}</div>'

    def _render_centered(self, items: List[str]) -> str:
        # first line is the lead statement, the rest support it
        lines = []
        for index, item in enumerate(items):
            css_class = "tp-lead" if index == 0 else "tp-size-xl2"
            lines.append(f'<p class="{css_class}">{self.render_inline(item)}</p>')
        return f'<div class="tp-centered">{"".join(lines)}</div>'

    def _render_workflow(self, items: List[str], size: str) -> str:
        steps = "".join(
            f'<div class="tp-step {size}"><span class="tp-step-number">{index}</span>'
            f'{self.render_inline(item)}</div>'
            for index, item in enumerate(items, start=1)
        )
        return f'<div class="tp-workflow">{steps}</div>'

    def _render_table(self, rows: List[List[str]]) -> str:
        if not rows:
            return ""
        width = max(len(row) for row in rows)
        html_rows = []
        for row_index, row in enumerate(rows):
            tag = "th" if row_index == 0 else "td"
            padded = row + [""] * (width - len(row))
            cells = "".join(f"<{tag}>{self.render_inline(cell)}</{tag}>" for cell in padded)
            html_rows.append(f"<tr>{cells}</tr>")
        return f'<table class="tp-table">{"".join(html_rows)}</table>'

    def _render_blocks(self, blocks: List[Block], size: str) -> str:
        elements = []
        for block in blocks:
            if block.kind == "heading":
                tag = "h2" if block.level <= 2 else "h3"
                elements.append(f"<{tag}>{self.render_inline(block.text)}</{tag}>")
            elif block.kind == "bullet":
                elements.append(
                    f'<div class="tp-bullet"><span class="tp-dot"></span>'
                    f'<span class="{size}">{self.render_inline(block.text)}</span></div>'
                )
            elif block.kind == "table":
                elements.append(self._render_table(block.rows))
            else:
                elements.append(f'<p class="{size}">{self.render_inline(block.text)}</p>')
        return "".join(elements)

    def render_section(self, section: Section, document_type: DocumentType) -> str:
        """Wrap a section in its slide or page container"""
        is_slide = document_type == DocumentType.PPTX
        container = "tp-slide" if is_slide else "tp-page"
        body = self.render_content(section.content, is_slide=is_slide)
        return (
            f'<section class="tp-section {container}" data-section-id="{escape(section.id)}">'
            f'<h2 class="tp-section-title">{escape(section.title)}</h2>'
            f'<div class="tp-body">{body}</div>'
            f'</section>'
        )

    def theme_css(self, style: ProjectStyle) -> str:
        # theme colours as css custom properties
        colors = get_theme_styles(style.template)
        font = get_font_family(style.font)
        return (
            ":root { "
            f"--tp-bg: #{colors['bg']}; --tp-text: #{colors['text']}; --tp-subtext: #{colors['subtext']}; "
            f"--tp-accent: #{colors['accent']}; --tp-accent-alt: #{colors['accent_alt']}; "
            f"--tp-card-bg: #{colors['card_bg']}; --tp-card-text: #{colors['card_text']}; "
            f"--tp-font: '{font}'; "
            "}"
        )

    def render_project(self, project: Project) -> str:
        """Render a whole project as a standalone html document"""
        container = "tp-slide" if project.type == DocumentType.PPTX else "tp-page"
        sections = "\n".join(
            self.render_section(section, project.type) for section in project.sections
        )
        logger.info(f"Rendered {len(project.sections)} sections of '{project.title}' to html")
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{escape(project.title)}</title>
<style>
{self.theme_css(project.style)}
{BASE_CSS}
</style>
</head>
<body>
<main class="tp-deck">
<section class="tp-section {container} tp-cover"><h1 class="tp-title">{escape(project.title)}</h1></section>
{sections}
</main>
</body>
</html>
"""
