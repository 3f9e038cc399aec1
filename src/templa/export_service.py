# turns a project into a downloadable docx, pptx or html file
import logging
import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from .docx_exporter import DocxExporter
from .html_renderer import HtmlRenderer
from .models import Project
from .pptx_exporter import PptxExporter

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "html": "text/html; charset=utf-8",
}

# keeps unicode letters and digits, drops path separators and reserved characters
UNSAFE_FILENAME_CHARS = re.compile(r'[^\w \-]+')


@dataclass
class ExportResult:
    content: bytes
    filename: str
    media_type: str


def safe_filename(title: Optional[str]) -> str:
    """Make a project title usable as a file name"""
    name = unicodedata.normalize("NFC", title or "")
    name = UNSAFE_FILENAME_CHARS.sub('', name).strip()
    name = re.sub(r'\s+', '_', name)
    return name or "Untitled"


def content_disposition(filename: str) -> str:
    """Attachment header value, non-ascii names get an ascii fallback plus filename*"""
    try:
        filename.encode("ascii")
        return f'attachment; filename="{filename}"'
    except UnicodeEncodeError:
        stem, _, extension = filename.rpartition(".")
        fallback = unicodedata.normalize("NFKD", stem).encode("ascii", "ignore").decode("ascii")
        return f"attachment; filename=\"{safe_filename(fallback)}.{extension}\"; filename*=UTF-8''{quote(filename)}"


# dispatches a project to the exporter for the requested format
class ExportService:
    def __init__(self):
        self.docx_exporter = DocxExporter()
        self.pptx_exporter = PptxExporter()
        self.html_renderer = HtmlRenderer()

    def export(self, project: Project, fmt: Optional[str] = None) -> ExportResult:
        """Export a project, the format defaults to the project's own type"""
        fmt = (fmt or project.type.value).lower()
        if fmt not in MEDIA_TYPES:
            raise ValueError(f"Unsupported export format: {fmt}. Use one of: {', '.join(MEDIA_TYPES)}")

        if fmt == "docx":
            content = self.docx_exporter.export(project)
        elif fmt == "pptx":
            content = self.pptx_exporter.export(project)
        else:
            content = self.html_renderer.render_project(project).encode("utf-8")

        filename = f"{safe_filename(project.title)}.{fmt}"
        logger.info(f"✓ Exported '{project.title}' as {filename} ({len(content)} bytes)")
        return ExportResult(content=content, filename=filename, media_type=MEDIA_TYPES[fmt])

    def save(self, project: Project, directory: Union[str, Path], fmt: Optional[str] = None) -> Path:
        """Export a project and write it into a directory"""
        result = self.export(project, fmt)
        output_dir = Path(directory)
        output_dir.mkdir(parents=True, exist_ok=True)

        path = output_dir / result.filename
        path.write_bytes(result.content)
        logger.info(f"Saved export to {path}")
        return path
