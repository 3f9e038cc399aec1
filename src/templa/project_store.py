# json file storage for projects, one file per project
import json
import logging
import os
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .models import Project, Section, ProjectStyle, DocumentType, SectionStatus

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now().isoformat()


def new_section(title: str, index: int) -> Section:
    return Section(id=f"sec_{uuid.uuid4().hex[:8]}_{index}", title=title, status=SectionStatus.PENDING)


# stores projects as <id>.json files under a root directory
class ProjectStore:
    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, project_id: str) -> Path:
        # ids must be plain file stems inside the root
        if not project_id or Path(project_id).name != project_id:
            raise ValueError(f"Invalid project id: {project_id!r}")
        return self.root / f"{project_id}.json"

    def create_project(
        self,
        user_id: str,
        title: str,
        document_type: DocumentType,
        section_titles: List[str],
        style: Optional[ProjectStyle] = None
    ) -> Project:
        """Create and save a new project with pending sections"""
        project_id = f"proj_{uuid.uuid4().hex[:12]}"
        timestamp = _now()

        project = Project(
            id=project_id,
            user_id=user_id,
            title=title,
            type=document_type,
            style=style or ProjectStyle(),
            sections=[new_section(section_title, idx) for idx, section_title in enumerate(section_titles)],
            created_at=timestamp,
            updated_at=timestamp
        )
        self.save(project)
        logger.info(f"Created project {project_id} with {len(project.sections)} sections")
        return project

    def save(self, project: Project) -> Project:
        """Write a project, replacing the previous file in one step"""
        project.updated_at = _now()
        path = self._path(project.id)

        fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=f".{project.id}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(project.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug(f"Saved project {project.id} to {path}")
        return project

    # json, unicode and pydantic validation errors are all ValueErrors
    def _load(self, path: Path) -> Project:
        with open(path, 'r', encoding='utf-8') as f:
            return Project.model_validate(json.load(f))

    def get(self, project_id: str) -> Optional[Project]:
        """Load a project, None when it does not exist"""
        path = self._path(project_id)
        if not path.exists():
            return None
        return self._load(path)

    def list_projects(self, user_id: Optional[str] = None) -> List[Project]:
        """List projects newest first, optionally for one user"""
        projects = []
        for path in self.root.glob("*.json"):
            try:
                project = self._load(path)
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Skipping unreadable project file {path.name}: {str(e)}")
                continue

            if user_id is None or project.user_id == user_id:
                projects.append(project)

        projects.sort(key=lambda p: p.updated_at, reverse=True)
        return projects

    def delete(self, project_id: str) -> bool:
        """Delete a project, False when it did not exist"""
        path = self._path(project_id)
        if not path.exists():
            return False

        path.unlink()
        logger.info(f"Deleted project {project_id}")
        return True
