# parser for the markdown-like dialect the ai writes section content in
import re
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

# the closed vocabulary of layout tags, e.g. [LAYOUT: TIMELINE]
class Layout(str, Enum):
    STANDARD = "STANDARD"
    TIMELINE = "TIMELINE"
    WORKFLOW = "WORKFLOW"
    GRID = "GRID"
    CENTERED = "CENTERED"
    TABLE = "TABLE"

LAYOUT_TAG_PATTERN = re.compile(r'\[\s*LAYOUT\s*:\s*([A-Za-z_]+)\s*\]', re.IGNORECASE)
# layout, chart and image tags never reach the reader
MARKUP_TAG_PATTERN = re.compile(r'\[\s*(?:LAYOUT|CHART|IMAGE)\s*:[^\]\n]*\]', re.IGNORECASE)
HTML_TAG_PATTERN = re.compile(r'<[^>]*>')
BOLD_SPLIT_PATTERN = re.compile(r'(\*\*.+?\*\*)')
LIST_MARKER_PATTERN = re.compile(r'^(?:#{1,6}\s+|[-*]\s+|•\s*)')
BULLET_PATTERN = re.compile(r'^(?:[-*]\s+|•\s*)')
RULE_PATTERN = re.compile(r'^(?:-{3,}|\*{3,}|_{3,})$')

# a piece of inline text, bold or not
@dataclass
class TextRun:
    text: str
    bold: bool = False

# one block-level element of parsed content
@dataclass
class Block:
    kind: str  # "heading", "bullet", "paragraph" or "table"
    text: str = ""
    level: int = 0
    rows: List[List[str]] = field(default_factory=list)

# everything the renderers need to know about a section body
@dataclass
class ParsedContent:
    layout: Layout
    blocks: List[Block]
    items: List[str]

    @property
    def tables(self) -> List[Block]:
        return [block for block in self.blocks if block.kind == "table"]

    @property
    def table_rows(self) -> List[List[str]]:
        rows = []
        for table in self.tables:
            rows.extend(table.rows)
        return rows


def detect_layout(content: Optional[str]) -> Layout:
    """Return the layout named by the earliest known layout tag, STANDARD if none"""
    if not content:
        return Layout.STANDARD

    for match in LAYOUT_TAG_PATTERN.finditer(content):
        name = match.group(1).upper()
        if name in Layout.__members__:
            return Layout[name]
        logger.debug(f"Ignoring unknown layout tag: {match.group(0)}")

    return Layout.STANDARD


def strip_tags(content: Optional[str]) -> str:
    """Remove html tags and layout/chart/image tags"""
    if not content:
        return ""
    cleaned = HTML_TAG_PATTERN.sub('', content)
    cleaned = MARKUP_TAG_PATTERN.sub('', cleaned)
    return cleaned.strip()


def clean_text(content: Optional[str], keep_bold: bool = False) -> str:
    cleaned = strip_tags(content)
    if not keep_bold:
        cleaned = cleaned.replace('**', '')
    return cleaned.strip()


def parse_inline(text: str) -> List[TextRun]:
    """Split text on **bold** spans, an unmatched ** stays literal"""
    runs = []
    for part in BOLD_SPLIT_PATTERN.split(text or ""):
        if not part:
            continue
        if len(part) > 4 and part.startswith('**') and part.endswith('**'):
            runs.append(TextRun(text=part[2:-2], bold=True))
        else:
            runs.append(TextRun(text=part))
    return runs


def strip_list_marker(line: str) -> str:
    return LIST_MARKER_PATTERN.sub('', line.strip()).strip()


def _unwrap_bold(text: str) -> str:
    # "**whole line**" -> "whole line", inline bold is left alone
    if len(text) > 4 and text.startswith('**') and text.endswith('**') and '**' not in text[2:-2]:
        return text[2:-2].strip()
    return text


def _is_table_row(line: str) -> bool:
    return len(line) > 1 and line.startswith('|') and line.endswith('|')


def _split_table_row(line: str) -> List[str]:
    return [cell.strip() for cell in line.split('|')[1:-1]]


def _is_separator_row(cells: List[str]) -> bool:
    return any('---' in cell for cell in cells)


def parse_blocks(content: Optional[str]) -> List[Block]:
    """Turn section content into headings, bullets, paragraphs and tables"""
    blocks = []
    table_rows = []

    # close the table being collected, if any
    def flush_table():
        if table_rows:
            blocks.append(Block(kind="table", rows=list(table_rows)))
            table_rows.clear()

    for line in strip_tags(content).split('\n'):
        trimmed = line.strip()

        if _is_table_row(trimmed):
            cells = _split_table_row(trimmed)
            if not _is_separator_row(cells):
                table_rows.append(cells)
            continue

        flush_table()

        if not trimmed or RULE_PATTERN.match(trimmed):
            continue

        if trimmed.startswith('### '):
            blocks.append(Block(kind="heading", text=trimmed[4:].strip(), level=3))
        elif trimmed.startswith('## ') or trimmed.startswith('# '):
            blocks.append(Block(kind="heading", text=trimmed.lstrip('#').strip(), level=2))
        elif BULLET_PATTERN.match(trimmed):
            blocks.append(Block(kind="bullet", text=BULLET_PATTERN.sub('', trimmed).strip()))
        else:
            blocks.append(Block(kind="paragraph", text=trimmed))

    flush_table()
    return blocks


def extract_items(content: Optional[str]) -> List[str]:
    """Flatten content into the one-line items slide layouts are built from"""
    items = []
    for line in strip_tags(content).split('\n'):
        trimmed = line.strip()
        if not trimmed or RULE_PATTERN.match(trimmed):
            continue

        if _is_table_row(trimmed):
            cells = _split_table_row(trimmed)
            if _is_separator_row(cells):
                continue
            item = " | ".join(cell for cell in cells if cell)
        else:
            item = _unwrap_bold(strip_list_marker(trimmed))

        if item:
            items.append(item)
    return items


def parse_content(content: Optional[str]) -> ParsedContent:
    return ParsedContent(
        layout=detect_layout(content),
        blocks=parse_blocks(content),
        items=extract_items(content)
    )
