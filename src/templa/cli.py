import typer
import os
from pathlib import Path
from typing import List, Optional
import logging
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import Config
from .export_service import ExportService
from .html_renderer import HtmlRenderer
from .layout_parser import parse_content
from .llm_service import get_llm_service
from .models import DocumentType, Project
from .project_service import ProjectService
from .project_store import ProjectStore

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize Typer app
app = typer.Typer(
    name="templa",
    help="Generate, edit and export AI-written documents and slide decks",
    add_completion=False
)

# Initialize console for rich output
console = Console()


def get_service(data_dir: Optional[str] = None) -> ProjectService:
    return ProjectService(ProjectStore(data_dir or Config.DATA_DIR))


def load_project(service: ProjectService, project_id: str) -> Project:
    project = service.store.get(project_id)
    if project is None:
        console.print(f"[red]Error: Project not found: {project_id}[/red]")
        raise typer.Exit(1)
    return project


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")):
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@app.command()
def outline(
    topic: str = typer.Argument(..., help="What the document or presentation is about"),
    document_type: DocumentType = typer.Option(DocumentType.DOCX, "--type", "-t", case_sensitive=False, help="DOCX or PPTX"),
    sections: int = typer.Option(5, "--sections", "-s", help="Number of sections for documents")
):
    """Preview the suggested title and outline without saving a project"""
    with console.status("Generating title and outline..."):
        preview = get_service().preview_outline(topic, document_type, sections)

    console.print(f"\n[bold blue]{preview.title}[/bold blue]")
    for index, section_title in enumerate(preview.sections, 1):
        console.print(f"  {index}. {section_title}")
    console.print("\n[dim]Edit the list and pass it to: templa create TOPIC --title ... --outline ... --outline ...[/dim]")


@app.command()
def create(
    topic: str = typer.Argument(..., help="What the document or presentation is about"),
    document_type: DocumentType = typer.Option(DocumentType.DOCX, "--type", "-t", case_sensitive=False, help="DOCX or PPTX"),
    sections: int = typer.Option(5, "--sections", "-s", help="Number of sections for documents"),
    title: Optional[str] = typer.Option(None, "--title", help="Project title, generated when omitted"),
    outline_titles: Optional[List[str]] = typer.Option(None, "--outline", help="Section title, repeat for each section"),
    user: str = typer.Option("local", "--user", help="Owner of the project"),
    generate: bool = typer.Option(False, "--generate", "-g", help="Generate content for every section"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Directory holding project files")
):
    """Create a project from a topic"""
    try:
        service = get_service(data_dir)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("Generating title and outline...", total=None)
            project = service.create_project(
                user, topic, document_type, sections, title=title, outline=outline_titles or None
            )

            if generate:
                for index, section in enumerate(project.sections, 1):
                    progress.update(task, description=f"Writing section {index}/{len(project.sections)}: {section.title}")
                    project = service.generate_section(project.id, section.id)

    except Exception as e:
        console.print(f"[red]Error creating project: {str(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Created project {project.id}: {project.title}[/green]")
    display_sections(project)


@app.command("list")
def list_projects(
    user: Optional[str] = typer.Option(None, "--user", help="Only show projects of this user"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Directory holding project files")
):
    """List saved projects"""
    projects = get_service(data_dir).list_projects(user)
    if not projects:
        console.print("[yellow]No projects found[/yellow]")
        return

    table = Table(title="Projects")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Type", style="magenta")
    table.add_column("Sections", justify="right")
    table.add_column("Updated", style="dim")

    for project in projects:
        table.add_row(project.id, project.title, project.type.value, str(len(project.sections)), project.updated_at[:19].replace("T", " "))

    console.print(table)


@app.command()
def show(
    project_id: str = typer.Argument(..., help="Project id"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Directory holding project files")
):
    """Show the sections of a project"""
    project = load_project(get_service(data_dir), project_id)

    console.print(f"\n[bold blue]{project.title}[/bold blue]")
    console.print(f"[dim]Type: {project.type.value}[/dim]")
    console.print(f"[dim]Style: {project.style.font.value} / {project.style.template.value}[/dim]")
    console.print(f"[dim]Updated: {project.updated_at}[/dim]\n")
    display_sections(project)


def edit_project(operation, *args):
    """Run a section edit and show the result, lookup and value errors exit with 1"""
    try:
        project = operation(*args)
    except (LookupError, ValueError) as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise typer.Exit(1)
    display_sections(project)


@app.command("add-section")
def add_section(
    project_id: str = typer.Argument(..., help="Project id"),
    title: str = typer.Argument("New Section", help="Title of the new section"),
    index: Optional[int] = typer.Option(None, "--index", "-i", help="Position, appended when omitted"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Directory holding project files")
):
    """Add a pending section to a project"""
    edit_project(get_service(data_dir).add_section, project_id, title, index)


@app.command("remove-section")
def remove_section(
    project_id: str = typer.Argument(..., help="Project id"),
    section_id: str = typer.Argument(..., help="Section id"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Directory holding project files")
):
    edit_project(get_service(data_dir).remove_section, project_id, section_id)


@app.command("rename-section")
def rename_section(
    project_id: str = typer.Argument(..., help="Project id"),
    section_id: str = typer.Argument(..., help="Section id"),
    title: str = typer.Argument(..., help="New section title"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Directory holding project files")
):
    edit_project(get_service(data_dir).rename_section, project_id, section_id, title)


@app.command("move-section")
def move_section(
    project_id: str = typer.Argument(..., help="Project id"),
    section_id: str = typer.Argument(..., help="Section id"),
    up: bool = typer.Option(False, "--up", help="Move one place up instead of down"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Directory holding project files")
):
    """Move a section one place down, or up with --up"""
    edit_project(get_service(data_dir).move_section, project_id, section_id, -1 if up else 1)


@app.command()
def export(
    project_id: str = typer.Argument(..., help="Project id"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="docx, pptx or html, defaults to the project type"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output directory"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Directory holding project files")
):
    """Export a project to a file"""
    project = load_project(get_service(data_dir), project_id)

    try:
        path = ExportService().save(project, output or Config.EXPORT_DIR, fmt)
    except Exception as e:
        console.print(f"[red]Error exporting project: {str(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Exported to: {path}[/green]")


@app.command()
def render(
    content_file: str = typer.Argument(..., help="Text file with section content"),
    slide: bool = typer.Option(False, "--slide", help="Render at slide text sizes")
):
    """Render section content to an html fragment"""
    if not os.path.exists(content_file):
        console.print(f"[red]Error: File not found: {content_file}[/red]")
        raise typer.Exit(1)

    content = Path(content_file).read_text(encoding="utf-8")
    typer.echo(HtmlRenderer().render_content(content, is_slide=slide))


def display_sections(project: Project):
    """Display the sections with their layout and item counts"""
    table = Table(title=f"Sections ({len(project.sections)})")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Status", style="cyan")
    table.add_column("Layout", style="magenta")
    table.add_column("Items", justify="right")

    for index, section in enumerate(project.sections, 1):
        parsed = parse_content(section.content)
        table.add_row(str(index), section.id, section.title, section.status.value, parsed.layout.value, str(len(parsed.items)))

    console.print(table)


@app.command()
def check():
    """Show the configuration and test the Gemini connection"""
    console.print(Config.display())

    try:
        Config.validate()
        connected = get_llm_service().test_connection()
    except ValueError as e:
        console.print(f"[red]{str(e)}[/red]")
        raise typer.Exit(1)

    if not connected:
        console.print("[red]✗ Gemini is not reachable, generation will use fallbacks[/red]")
        raise typer.Exit(1)

    console.print("[green]✓ Gemini is reachable[/green]")


@app.command()
def serve(
    host: str = typer.Option(Config.HOST, "--host", help="Host to bind the server to"),
    port: int = typer.Option(Config.PORT, "--port", help="Port to bind the server to")
):
    """Start the FastAPI server"""

    console.print(f"[green]Starting server on {host}:{port}[/green]")

    import uvicorn
    uvicorn.run("src.templa.api:app", host=host, port=port, reload=Config.DEBUG)


if __name__ == "__main__":
    app()
