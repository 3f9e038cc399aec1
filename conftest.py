"""
shared fixtures: fake ai backends and a temporary project store
"""

import os
import sys
import tempfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

# keep the api module's default store out of the working directory
os.environ.setdefault("TEMPLA_DATA_DIR", str(Path(tempfile.gettempdir()) / "templa-test-projects"))

from src.templa.content_generator import ensure_layout_tag
from src.templa.models import DocumentType
from src.templa.project_service import ProjectService
from src.templa.project_store import ProjectStore


class FakeLLM:
    """Stands in for GeminiLLMService, returns canned replies in order"""

    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    def generate_text(self, prompt, system_instruction=None, response_schema=None, temperature=0.7, max_tokens=2048):
        self.calls.append({
            "prompt": prompt,
            "system_instruction": system_instruction,
            "response_schema": response_schema,
        })
        if self.error:
            raise self.error
        return self.responses.pop(0) if self.responses else ""


class FakeGenerator:
    """Deterministic ContentGenerator replacement"""

    def __init__(self):
        self.fail_sections = False

    def generate_title(self, topic):
        return f"{topic} Plan"

    def generate_outline(self, topic, document_type, count=5):
        return [f"Part {i}" for i in range(1, count + 1)]

    def generate_section_content(self, topic, section_title, document_type, context=None):
        if self.fail_sections:
            raise RuntimeError("model unavailable")
        if document_type == DocumentType.PPTX:
            return f"[LAYOUT: GRID]\n- {section_title} one\n- {section_title} two"
        return f"## {section_title}\nText about **{topic}**."

    def refine_text(self, content, instruction):
        return f"{content}\n- {instruction}"

    def apply_layout(self, content, layout):
        return ensure_layout_tag(content, layout)


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def store(tmp_path):
    return ProjectStore(tmp_path / "projects")


@pytest.fixture
def service(store, fake_generator):
    return ProjectService(store, fake_generator)
