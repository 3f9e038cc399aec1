# fastapi web api for projects, rendering and export
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, Response
from fastapi.middleware.cors import CORSMiddleware
import logging
import time
from typing import Optional

from .config import Config
from .export_service import ExportService, content_disposition
from .html_renderer import HtmlRenderer
from .models import (
    Project, ProjectResponse, CreateProjectRequest, OutlineRequest, UpdateSectionRequest,
    RefineRequest, ApplyLayoutRequest, FeedbackRequest, NotesRequest,
    StyleUpdateRequest, RenderRequest, AddSectionRequest, RenameSectionRequest, MoveSectionRequest
)
from .project_service import ProjectService, ProjectNotFoundError, SectionNotFoundError
from .project_store import ProjectStore

# configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# initialize fastapi application
app = FastAPI(
    title="Templa API",
    description="Generate, edit and export AI-written documents and slide decks",
    version=Config.APP_VERSION
)

# add cors middleware to allow cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# initialize services, tests swap project_service for one with a fake llm
project_service = ProjectService(ProjectStore(Config.DATA_DIR))
export_service = ExportService()
html_renderer = HtmlRenderer()


def _respond(message: str, project: Project, start_time: float) -> dict:
    response = ProjectResponse(
        success=True,
        message=message,
        project=project,
        processing_time=time.time() - start_time
    )
    try:
        return response.model_dump(mode="json")
    except AttributeError:
        return response.dict()


# run a project operation and map service errors onto http errors
def _run(action: str, operation, *args, **kwargs):
    try:
        return operation(*args, **kwargs)
    except HTTPException:
        raise
    except (ProjectNotFoundError, SectionNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error {action}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed: {str(e)}")


# ============================================================================
# PROJECTS
# ============================================================================

@app.post("/outline")
def preview_outline(request: OutlineRequest):
    """Suggest a title and outline to edit before creating the project"""
    if not request.topic.strip():
        raise HTTPException(status_code=400, detail="Topic must not be empty")
    if request.section_count < 1:
        raise HTTPException(status_code=400, detail="section_count must be at least 1")

    preview = _run(
        "previewing outline", project_service.preview_outline,
        request.topic.strip(), request.type, request.section_count
    )
    return preview.model_dump(mode="json")


@app.post("/projects")
def create_project(request: CreateProjectRequest):
    """Create a project from a topic, with an edited outline or one generated now"""
    start_time = time.time()
    if not request.topic.strip():
        raise HTTPException(status_code=400, detail="Topic must not be empty")
    if request.outline is None and request.section_count < 1:
        raise HTTPException(status_code=400, detail="section_count must be at least 1")

    project = _run(
        "creating project", project_service.create_project,
        request.user_id, request.topic.strip(), request.type, request.section_count, request.style,
        request.title, request.outline
    )
    return _respond("Project created", project, start_time)


@app.get("/projects")
def list_projects(user_id: Optional[str] = None):
    """List projects, newest first"""
    projects = _run("listing projects", project_service.list_projects, user_id)
    return {
        "projects": [p.model_dump(mode="json") for p in projects],
        "total": len(projects)
    }


@app.get("/projects/{project_id}")
def get_project(project_id: str):
    start_time = time.time()
    project = _run("loading project", project_service.get_project, project_id)
    return _respond("Project loaded", project, start_time)


@app.delete("/projects/{project_id}")
def delete_project(project_id: str):
    _run("deleting project", project_service.delete_project, project_id)
    return {"success": True, "message": f"Project {project_id} deleted"}


@app.patch("/projects/{project_id}/style")
def update_style(project_id: str, request: StyleUpdateRequest):
    start_time = time.time()
    project = _run("updating style", project_service.update_style, project_id, request.font, request.template)
    return _respond("Style updated", project, start_time)


# ============================================================================
# SECTIONS
# ============================================================================

@app.post("/projects/{project_id}/sections")
def add_section(project_id: str, request: AddSectionRequest):
    start_time = time.time()
    project = _run("adding section", project_service.add_section, project_id, request.title, request.index)
    return _respond("Section added", project, start_time)


@app.delete("/projects/{project_id}/sections/{section_id}")
def remove_section(project_id: str, section_id: str):
    start_time = time.time()
    project = _run("removing section", project_service.remove_section, project_id, section_id)
    return _respond("Section removed", project, start_time)


@app.patch("/projects/{project_id}/sections/{section_id}")
def rename_section(project_id: str, section_id: str, request: RenameSectionRequest):
    start_time = time.time()
    project = _run("renaming section", project_service.rename_section, project_id, section_id, request.title)
    return _respond("Section renamed", project, start_time)


@app.post("/projects/{project_id}/sections/{section_id}/move")
def move_section(project_id: str, section_id: str, request: MoveSectionRequest):
    start_time = time.time()
    project = _run("moving section", project_service.move_section, project_id, section_id, request.direction)
    return _respond("Section moved", project, start_time)


@app.post("/projects/{project_id}/sections/{section_id}/generate")
def generate_section(project_id: str, section_id: str):
    """Generate content for one section with the AI"""
    start_time = time.time()
    project = _run("generating section", project_service.generate_section, project_id, section_id)
    return _respond("Section generated", project, start_time)


@app.post("/projects/{project_id}/sections/{section_id}/refine")
def refine_section(project_id: str, section_id: str, request: RefineRequest):
    start_time = time.time()
    project = _run("refining section", project_service.refine_section, project_id, section_id, request.instruction)
    return _respond("Section refined", project, start_time)


@app.post("/projects/{project_id}/sections/{section_id}/layout")
def apply_layout(project_id: str, section_id: str, request: ApplyLayoutRequest):
    start_time = time.time()
    project = _run("applying layout", project_service.apply_layout, project_id, section_id, request.layout)
    return _respond("Layout applied", project, start_time)


@app.put("/projects/{project_id}/sections/{section_id}")
def update_section(project_id: str, section_id: str, request: UpdateSectionRequest):
    """Save a manual edit"""
    start_time = time.time()
    project = _run("updating section", project_service.update_content, project_id, section_id, request.content)
    return _respond("Section updated", project, start_time)


@app.post("/projects/{project_id}/sections/{section_id}/undo")
def undo_section(project_id: str, section_id: str):
    start_time = time.time()
    project = _run("undoing edit", project_service.undo, project_id, section_id)
    return _respond("Undo applied", project, start_time)


@app.post("/projects/{project_id}/sections/{section_id}/redo")
def redo_section(project_id: str, section_id: str):
    start_time = time.time()
    project = _run("redoing edit", project_service.redo, project_id, section_id)
    return _respond("Redo applied", project, start_time)


@app.post("/projects/{project_id}/sections/{section_id}/feedback")
def set_feedback(project_id: str, section_id: str, request: FeedbackRequest):
    start_time = time.time()
    project = _run("saving feedback", project_service.set_feedback, project_id, section_id, request.feedback)
    return _respond("Feedback saved", project, start_time)


@app.post("/projects/{project_id}/sections/{section_id}/notes")
def set_notes(project_id: str, section_id: str, request: NotesRequest):
    start_time = time.time()
    project = _run("saving notes", project_service.set_notes, project_id, section_id, request.notes)
    return _respond("Notes saved", project, start_time)


# ============================================================================
# RENDERING AND EXPORT
# ============================================================================

@app.get("/projects/{project_id}/export")
def export_project(project_id: str, format: Optional[str] = Query(None)):
    """Download the project as docx, pptx or html"""
    project = _run("loading project", project_service.get_project, project_id)
    result = _run("exporting project", export_service.export, project, format)

    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": content_disposition(result.filename)}
    )


@app.get("/projects/{project_id}/preview", response_class=HTMLResponse)
def preview_project(project_id: str):
    project = _run("loading project", project_service.get_project, project_id)
    return HTMLResponse(content=html_renderer.render_project(project))


@app.post("/render")
def render_content(request: RenderRequest):
    """Render raw section content to an html fragment"""
    html = _run("rendering content", html_renderer.render_content, request.content, request.is_slide)
    return {"html": html}


@app.get("/api")
async def api_info():
    """API information endpoint"""
    return {
        "message": "Templa API",
        "version": Config.APP_VERSION,
        "endpoints": {
            "outline": "/outline",
            "projects": "/projects",
            "sections": "/projects/{project_id}/sections/{section_id}",
            "export": "/projects/{project_id}/export",
            "preview": "/projects/{project_id}/preview",
            "render": "/render",
            "health": "/health"
        }
    }


# simple health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "templa"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
