"""
tests for the typer command line
"""

import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

sys.path.insert(0, str(Path(__file__).parent))

from src.templa import cli, llm_service
from src.templa.config import Config
from src.templa.models import DocumentType

runner = CliRunner()


@pytest.fixture
def offline(monkeypatch):
    # without an api key every generation step uses its fallback
    monkeypatch.setattr(Config, "GEMINI_API_KEY", "")
    monkeypatch.setattr(llm_service, "llm_service", None)


def test_create_list_show_export(tmp_path, offline):
    data_dir = str(tmp_path / "projects")

    result = runner.invoke(cli.app, ["create", "Coffee", "--type", "pptx", "--sections", "2", "--data-dir", data_dir])
    assert result.exit_code == 0, result.output
    assert "Untitled Project" in result.output

    store_files = list((tmp_path / "projects").glob("*.json"))
    assert len(store_files) == 1
    project_id = store_files[0].stem

    result = runner.invoke(cli.app, ["list", "--data-dir", data_dir])
    assert result.exit_code == 0
    assert project_id in result.output

    result = runner.invoke(cli.app, ["show", project_id, "--data-dir", data_dir])
    assert result.exit_code == 0
    assert "Section 1" in result.output

    out_dir = tmp_path / "out"
    result = runner.invoke(cli.app, ["export", project_id, "--format", "html", "--output", str(out_dir), "--data-dir", data_dir])
    assert result.exit_code == 0
    assert (out_dir / "Untitled_Project.html").exists()


def test_created_project_type(tmp_path, offline):
    data_dir = tmp_path / "projects"
    runner.invoke(cli.app, ["create", "Tea", "--type", "PPTX", "--data-dir", str(data_dir)])

    service = cli.get_service(str(data_dir))
    assert service.list_projects()[0].type == DocumentType.PPTX


def test_show_missing_project(tmp_path):
    result = runner.invoke(cli.app, ["show", "proj_missing", "--data-dir", str(tmp_path)])
    assert result.exit_code == 1


def test_export_unknown_format(tmp_path, offline):
    data_dir = str(tmp_path / "projects")
    runner.invoke(cli.app, ["create", "Tea", "--data-dir", data_dir])
    project_id = next((tmp_path / "projects").glob("*.json")).stem

    result = runner.invoke(cli.app, ["export", project_id, "--format", "pdf", "--output", str(tmp_path), "--data-dir", data_dir])
    assert result.exit_code == 1


def test_render(tmp_path):
    content_file = tmp_path / "section.txt"
    content_file.write_text("[LAYOUT: WORKFLOW]\n- Plan\n- Ship", encoding="utf-8")

    result = runner.invoke(cli.app, ["render", str(content_file), "--slide"])
    assert result.exit_code == 0
    assert "tp-layout-workflow" in result.output

    assert runner.invoke(cli.app, ["render", str(tmp_path / "missing.txt")]).exit_code == 1


def test_check_without_api_key(offline):
    result = runner.invoke(cli.app, ["check"])
    assert result.exit_code == 1
    assert "GEMINI_API_KEY is not set" in result.output


def test_outline_preview_offline(offline):
    result = runner.invoke(cli.app, ["outline", "Tea", "--sections", "2"])
    assert result.exit_code == 0, result.output
    assert "Untitled Project" in result.output
    assert "2. Section 2" in result.output


def test_create_with_outline_and_section_edits(tmp_path, offline):
    data_dir = str(tmp_path / "projects")
    result = runner.invoke(cli.app, [
        "create", "Tea", "--title", "Tea Guide", "--outline", "Intro", "--outline", "Brewing", "--data-dir", data_dir
    ])
    assert result.exit_code == 0, result.output

    service = cli.get_service(data_dir)
    project = service.list_projects()[0]
    assert project.title == "Tea Guide"
    assert [s.title for s in project.sections] == ["Intro", "Brewing"]
    intro, brewing = (s.id for s in project.sections)

    assert runner.invoke(cli.app, ["add-section", project.id, "Serving", "--data-dir", data_dir]).exit_code == 0
    assert runner.invoke(cli.app, ["rename-section", project.id, intro, "Welcome", "--data-dir", data_dir]).exit_code == 0
    assert runner.invoke(cli.app, ["move-section", project.id, brewing, "--up", "--data-dir", data_dir]).exit_code == 0
    assert runner.invoke(cli.app, ["remove-section", project.id, intro, "--data-dir", data_dir]).exit_code == 0

    assert [s.title for s in service.get_project(project.id).sections] == ["Brewing", "Serving"]

    result = runner.invoke(cli.app, ["remove-section", project.id, "sec_missing", "--data-dir", data_dir])
    assert result.exit_code == 1
