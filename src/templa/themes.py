# colour palettes, font families and size tables shared by all renderers
import logging
from dataclasses import dataclass
from typing import Dict

from .layout_parser import Layout

logger = logging.getLogger(__name__)

# palette per visual template, hex colours without '#'
THEMES: Dict[str, Dict[str, str]] = {
    "Minimal": {"bg": "FFFFFF", "text": "000000", "subtext": "666666", "accent": "000000", "accent_alt": "E0E0E0", "card_bg": "F8FAFC", "card_text": "1E293B"},
    "Corporate": {"bg": "F8FAFC", "text": "1E293B", "subtext": "475569", "accent": "0047AB", "accent_alt": "D1E4FF", "card_bg": "FFFFFF", "card_text": "1E293B"},
    "Executive": {"bg": "0F172A", "text": "F1F5F9", "subtext": "94A3B8", "accent": "38BDF8", "accent_alt": "0369A1", "card_bg": "1E293B", "card_text": "F1F5F9"},
    "Paper": {"bg": "FDFBF7", "text": "2C2C2C", "subtext": "555555", "accent": "8B4513", "accent_alt": "E6D0B3", "card_bg": "FFFFFF", "card_text": "2C2C2C"},
    "Vibrant": {"bg": "111827", "text": "FFFFFF", "subtext": "A1A1AA", "accent": "D946EF", "accent_alt": "86198F", "card_bg": "1F2937", "card_text": "FFFFFF"},
    "Ocean": {"bg": "F0F9FF", "text": "0C4A6E", "subtext": "334155", "accent": "0284C7", "accent_alt": "BAE6FD", "card_bg": "FFFFFF", "card_text": "0C4A6E"},
    "Dark": {"bg": "000000", "text": "E5E5E5", "subtext": "A3A3A3", "accent": "22C55E", "accent_alt": "14532D", "card_bg": "171717", "card_text": "E5E5E5"},
}

DEFAULT_THEME = "Minimal"

FONT_FAMILIES: Dict[str, str] = {
    "Modern": "Inter",
    "Clean": "Roboto",
    "Classic": "Times New Roman",
    "Formal": "Calibri",
    "Display": "Impact",
    "Handwriting": "Segoe Print",
}

DEFAULT_FONT_FAMILY = "Arial"

# font size and line spacing (points) for a slide body
@dataclass
class LayoutMetrics:
    font_size: int
    line_spacing: int


def _name(value) -> str:
    # accepts plain strings as well as the str enums from models.py
    return getattr(value, "value", value) or ""


def get_theme_styles(template) -> Dict[str, str]:
    """Get the colour palette for a template, Minimal for unknown names"""
    name = _name(template)
    if name not in THEMES:
        logger.debug(f"Unknown template '{name}', using {DEFAULT_THEME}")
        return dict(THEMES[DEFAULT_THEME])
    return dict(THEMES[name])


def get_font_family(font_style) -> str:
    return FONT_FAMILIES.get(_name(font_style), DEFAULT_FONT_FAMILY)


def calculate_layout_metrics(item_count: int, layout: Layout) -> LayoutMetrics:
    """Pick a font size that lets the given number of items fit the slide body"""
    if layout == Layout.CENTERED:
        return LayoutMetrics(font_size=24 if item_count > 3 else 32, line_spacing=36)
    if layout == Layout.GRID:
        return LayoutMetrics(font_size=16, line_spacing=22)
    if item_count <= 3:
        return LayoutMetrics(font_size=24, line_spacing=36)
    if item_count <= 5:
        return LayoutMetrics(font_size=20, line_spacing=28)
    return LayoutMetrics(font_size=16, line_spacing=22)


def html_text_scale(item_count: int, is_slide: bool) -> str:
    # on-screen counterpart of calculate_layout_metrics, used as a css class suffix
    if not is_slide:
        return "lg"
    if item_count <= 3:
        return "xl3"
    if item_count <= 5:
        return "xl2"
    return "lg"
