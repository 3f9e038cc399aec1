# project service orchestrates outline creation, section generation and the editor operations
import time
import logging
from typing import Optional, List

from .content_generator import ContentGenerator
from .layout_parser import Layout
from .models import (
    Project, Section, ProjectStyle, DocumentType, SectionStatus, Feedback, OutlinePreview,
    FontStyle, Template
)
from .project_store import ProjectStore, new_section

logger = logging.getLogger(__name__)


class ProjectNotFoundError(LookupError):
    pass


class SectionNotFoundError(LookupError):
    pass


def parse_layout(value: str) -> Layout:
    """Look up a layout by name, raises ValueError for unknown names"""
    try:
        return Layout(value.strip().upper())
    except ValueError:
        names = ", ".join(layout.value for layout in Layout)
        raise ValueError(f"Unknown layout: {value}. Use one of: {names}")


# applies editor operations to stored projects, every change is saved immediately
class ProjectService:
    def __init__(self, store: ProjectStore, generator: Optional[ContentGenerator] = None):
        self.store = store
        self.generator = generator or ContentGenerator()

    def get_project(self, project_id: str) -> Project:
        project = self.store.get(project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project not found: {project_id}")
        return project

    def _get_section(self, project: Project, section_id: str) -> Section:
        section = project.find_section(section_id)
        if section is None:
            raise SectionNotFoundError(f"Section not found: {section_id}")
        return section

    def list_projects(self, user_id: Optional[str] = None) -> List[Project]:
        return self.store.list_projects(user_id)

    def delete_project(self, project_id: str):
        if not self.store.delete(project_id):
            raise ProjectNotFoundError(f"Project not found: {project_id}")

    def preview_outline(self, topic: str, document_type: DocumentType, section_count: int = 5) -> OutlinePreview:
        """Suggest a title and outline without saving anything"""
        title = self.generator.generate_title(topic)
        sections = self.generator.generate_outline(topic, document_type, section_count)
        logger.info(f"✓ Outline preview for '{topic}': {len(sections)} sections")
        return OutlinePreview(title=title, sections=sections)

    def create_project(
        self,
        user_id: str,
        topic: str,
        document_type: DocumentType,
        section_count: int = 5,
        style: Optional[ProjectStyle] = None,
        title: Optional[str] = None,
        outline: Optional[List[str]] = None
    ) -> Project:
        """Save a new project, the ai fills in whatever title or outline is not given"""
        start_time = time.time()
        logger.info(f"Creating {document_type.value} project for topic: {topic}")

        if outline is not None:
            outline = [entry.strip() for entry in outline if entry and entry.strip()]
            if not outline:
                raise ValueError("Outline must contain at least one section")
            # an edited outline is taken as is, the title falls back to the topic
            title = (title or "").strip() or topic
        else:
            title = (title or "").strip() or self.generator.generate_title(topic)
            outline = self.generator.generate_outline(topic, document_type, section_count)
        logger.info(f"  ✓ Title: {title}")
        logger.info(f"  ✓ Outline: {len(outline)} sections")

        project = self.store.create_project(user_id, title, document_type, outline, style)
        logger.info(f"✓ Project {project.id} created in {time.time() - start_time:.2f} seconds")
        return project

    def add_section(self, project_id: str, title: str = "New Section", index: Optional[int] = None) -> Project:
        """Insert a pending section, appended when no index is given"""
        project = self.get_project(project_id)
        section = new_section(title.strip() or "New Section", len(project.sections))

        if index is None or index >= len(project.sections):
            project.sections.append(section)
        else:
            project.sections.insert(max(index, 0), section)
        return self.store.save(project)

    def remove_section(self, project_id: str, section_id: str) -> Project:
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        project.sections.remove(section)
        return self.store.save(project)

    def rename_section(self, project_id: str, section_id: str, title: str) -> Project:
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        if not title or not title.strip():
            raise ValueError("Section title must not be empty")
        section.title = title.strip()
        return self.store.save(project)

    def move_section(self, project_id: str, section_id: str, direction: int) -> Project:
        """Swap a section with its neighbour, moving past either end does nothing"""
        if direction not in (-1, 1):
            raise ValueError(f"Direction must be -1 or 1, got {direction}")

        project = self.get_project(project_id)
        section = self._get_section(project, section_id)
        index = project.sections.index(section)
        target = index + direction

        if target < 0 or target >= len(project.sections):
            return project

        project.sections[index], project.sections[target] = project.sections[target], section
        return self.store.save(project)

    def generate_section(self, project_id: str, section_id: str) -> Project:
        """Generate content for one section"""
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        section.status = SectionStatus.GENERATING
        self.store.save(project)

        try:
            content = self.generator.generate_section_content(project.title, section.title, project.type)
        except Exception as e:
            logger.error(f"✗ Generating section '{section.title}' failed: {str(e)}", exc_info=True)
            section.status = SectionStatus.ERROR
            return self.store.save(project)

        if section.content:
            section.history.append(section.content)
        section.future = []
        section.content = content
        section.status = SectionStatus.COMPLETED
        logger.info(f"  ✓ Generated section '{section.title}'")
        return self.store.save(project)

    def generate_all(self, project_id: str) -> Project:
        """Generate every section that has no content yet"""
        project = self.get_project(project_id)
        for section in project.sections:
            if section.status != SectionStatus.COMPLETED:
                project = self.generate_section(project_id, section.id)
        return project

    # replace content after pushing the current version onto the undo stack
    def _replace_content(self, section: Section, content: str):
        section.history.append(section.content)
        section.future = []
        section.content = content

    def refine_section(self, project_id: str, section_id: str, instruction: str) -> Project:
        """Rewrite section content following an instruction"""
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        if not section.content or not instruction or not instruction.strip():
            return project

        refined = self.generator.refine_text(section.content, instruction.strip())
        self._replace_content(section, refined)
        return self.store.save(project)

    def apply_layout(self, project_id: str, section_id: str, layout: str) -> Project:
        """Reformat section content for a layout"""
        target = parse_layout(layout)
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        updated = self.generator.apply_layout(section.content, target)
        self._replace_content(section, updated)
        logger.info(f"Applied {target.value} layout to '{section.title}'")
        return self.store.save(project)

    def update_content(self, project_id: str, section_id: str, content: str) -> Project:
        """Manual edit of section content"""
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        if content != section.content:
            self._replace_content(section, content)
            if section.status == SectionStatus.PENDING:
                section.status = SectionStatus.COMPLETED
        return self.store.save(project)

    def undo(self, project_id: str, section_id: str) -> Project:
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        if not section.history:
            return project

        section.future.append(section.content)
        section.content = section.history.pop()
        return self.store.save(project)

    def redo(self, project_id: str, section_id: str) -> Project:
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        if not section.future:
            return project

        section.history.append(section.content)
        section.content = section.future.pop()
        return self.store.save(project)

    def set_feedback(self, project_id: str, section_id: str, feedback: Optional[Feedback]) -> Project:
        """Set like/dislike, giving the current value again clears it"""
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        section.feedback = None if feedback == section.feedback else feedback
        return self.store.save(project)

    def set_notes(self, project_id: str, section_id: str, notes: str) -> Project:
        project = self.get_project(project_id)
        section = self._get_section(project, section_id)

        section.notes = notes or None
        return self.store.save(project)

    def update_style(
        self,
        project_id: str,
        font: Optional[FontStyle] = None,
        template: Optional[Template] = None
    ) -> Project:
        """Change font and/or template, unset values are kept"""
        project = self.get_project(project_id)
        if font is not None:
            project.style.font = font
        if template is not None:
            project.style.template = template
        return self.store.save(project)
