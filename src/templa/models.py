# pydantic models for projects, sections and api payloads
from pydantic import BaseModel
from typing import List, Dict, Any, Optional
from enum import Enum

# enum for the two export targets a project can have
class DocumentType(str, Enum):
    DOCX = "DOCX"
    PPTX = "PPTX"

# lifecycle of a section while content is generated
class SectionStatus(str, Enum):
    PENDING = "PENDING"
    GENERATING = "GENERATING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"

class Feedback(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"

# typography choices, mapped to real font families in themes.py
class FontStyle(str, Enum):
    MODERN = "Modern"
    CLEAN = "Clean"
    CLASSIC = "Classic"
    FORMAL = "Formal"
    DISPLAY = "Display"
    HANDWRITING = "Handwriting"

# visual themes, mapped to colour palettes in themes.py
class Template(str, Enum):
    MINIMAL = "Minimal"
    CORPORATE = "Corporate"
    EXECUTIVE = "Executive"
    PAPER = "Paper"
    VIBRANT = "Vibrant"
    OCEAN = "Ocean"
    DARK = "Dark"

# model for the look of a project
class ProjectStyle(BaseModel):
    font: FontStyle = FontStyle.MODERN
    template: Template = Template.MINIMAL

# model for one document section or slide
class Section(BaseModel):
    id: str
    title: str
    content: str = ""  # raw ai/markdown text including layout tags
    notes: Optional[str] = None
    feedback: Optional[Feedback] = None
    status: SectionStatus = SectionStatus.PENDING
    history: List[str] = []  # past contents, newest last
    future: List[str] = []  # undone contents for redo, newest last

# model for a chat message kept with the project
class ChatMessage(BaseModel):
    role: str  # "user" or "model"
    text: str
    timestamp: float

# model for a complete project
class Project(BaseModel):
    id: str
    user_id: str
    title: str
    type: DocumentType
    style: ProjectStyle = ProjectStyle()
    sections: List[Section] = []
    chat_history: List[ChatMessage] = []
    created_at: str
    updated_at: str

    def find_section(self, section_id: str) -> Optional[Section]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

# enum for different types of slides
class SlideType(str, Enum):
    TITLE = "title"
    CONTENT = "content"

# model for one drawable element on a slide, geometry in inches
class ShapeSpec(BaseModel):
    kind: str  # text, line, ellipse, chevron, round_rect or table
    x: float
    y: float
    w: float
    h: float
    text: Optional[str] = None
    items: List[str] = []  # bulleted paragraphs
    rows: List[List[str]] = []  # table cells, first row is the header
    fill: Optional[str] = None
    color: Optional[str] = None
    line_color: Optional[str] = None
    line_width: float = 0.0
    font_size: int = 14
    bold: bool = False
    align: str = "left"  # left, center or right
    valign: str = "top"  # top, middle or bottom
    bullet_color: Optional[str] = None
    line_spacing: Optional[int] = None
    header_fill: Optional[str] = None
    margin: float = 0.1

# model for a single slide
class Slide(BaseModel):
    id: str
    type: SlideType
    title: str
    layout: str = "STANDARD"
    background: str = "FFFFFF"
    shapes: List[ShapeSpec] = []
    notes: Optional[str] = None
    metadata: Dict[str, Any] = {}

# model for a complete slide deck, 16:9 at 10 x 5.625 inches
class SlideDeck(BaseModel):
    title: str
    slides: List[Slide]
    font_face: str = "Arial"
    width: float = 10.0
    height: float = 5.625
    metadata: Dict[str, Any] = {}
    created_at: str

# request model for creating a project from a topic, an edited outline skips the ai
class CreateProjectRequest(BaseModel):
    topic: str
    type: DocumentType = DocumentType.DOCX
    section_count: int = 5
    user_id: str = "local"
    style: ProjectStyle = ProjectStyle()
    title: Optional[str] = None
    outline: Optional[List[str]] = None

# request model for previewing the ai title and outline before creating a project
class OutlineRequest(BaseModel):
    topic: str
    type: DocumentType = DocumentType.DOCX
    section_count: int = 5

# ai suggested title and section titles, editable before creation
class OutlinePreview(BaseModel):
    title: str
    sections: List[str]

class AddSectionRequest(BaseModel):
    title: str = "New Section"
    index: Optional[int] = None

class RenameSectionRequest(BaseModel):
    title: str

# direction is -1 to move a section up, 1 to move it down
class MoveSectionRequest(BaseModel):
    direction: int

# request model for a manual edit of section content
class UpdateSectionRequest(BaseModel):
    content: str

# request model for asking the ai to rewrite a section
class RefineRequest(BaseModel):
    instruction: str

class ApplyLayoutRequest(BaseModel):
    layout: str

class FeedbackRequest(BaseModel):
    feedback: Optional[Feedback] = None

class NotesRequest(BaseModel):
    notes: str = ""

# partial style update, unset fields keep their value
class StyleUpdateRequest(BaseModel):
    font: Optional[FontStyle] = None
    template: Optional[Template] = None

# request model for rendering ad-hoc content to html
class RenderRequest(BaseModel):
    content: str
    is_slide: bool = False

# response model wrapping a project after an operation
class ProjectResponse(BaseModel):
    success: bool
    message: str
    project: Optional[Project] = None
    processing_time: float = 0.0
