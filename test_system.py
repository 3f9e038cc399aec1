#!/usr/bin/env python3
"""
test script for templa
tests all components to make sure everything works correctly
"""

import sys
import tempfile
from pathlib import Path

# add the project root to python path so we can import the src.templa modules
sys.path.insert(0, str(Path(__file__).parent))

SAMPLE_PPTX_CONTENT = """[LAYOUT: TIMELINE]
- 2019: Founded in a garage
- 2021: **Series A** funding
- 2024: Global launch"""

SAMPLE_DOCX_CONTENT = """## Market Overview
The market is growing **fast**.

| Region | Growth |
|---|---|
| EU | 12% |
| US | 9% |

- Strong demand
- Few competitors"""


def make_project(document_type_name="PPTX"):
    from src.templa.models import Project, Section, DocumentType, SectionStatus

    document_type = DocumentType(document_type_name)
    content = SAMPLE_PPTX_CONTENT if document_type == DocumentType.PPTX else SAMPLE_DOCX_CONTENT
    return Project(
        id="proj_system",
        user_id="local",
        title="System Test Project",
        type=document_type,
        sections=[
            Section(id="sec_1", title="Our Journey", content=content, status=SectionStatus.COMPLETED),
            Section(id="sec_2", title="Empty Section"),
        ],
        created_at="2025-01-01T00:00:00",
        updated_at="2025-01-01T00:00:00"
    )


def test_imports():
    """test if all modules can be imported"""
    print("🔍 Testing imports...")

    from src.templa.llm_service import GeminiLLMService, get_llm_service
    from src.templa.layout_parser import Layout, parse_content
    from src.templa.themes import get_theme_styles, calculate_layout_metrics
    from src.templa.html_renderer import HtmlRenderer
    from src.templa.docx_exporter import DocxExporter
    from src.templa.slide_generator import SlideGenerator
    from src.templa.pptx_exporter import PptxExporter
    from src.templa.export_service import ExportService
    from src.templa.content_generator import ContentGenerator
    from src.templa.project_store import ProjectStore
    from src.templa.project_service import ProjectService
    from src.templa.models import Project, Section, Slide, SlideDeck
    print("✅ All imports successful")


def test_layout_parsing():
    """test layout tag detection and item extraction"""
    print("\n🔍 Testing layout parsing...")

    from src.templa.layout_parser import Layout, parse_content

    parsed = parse_content(SAMPLE_PPTX_CONTENT)
    assert parsed.layout == Layout.TIMELINE
    assert len(parsed.items) == 3
    print(f"✅ Layout parsing successful: {parsed.layout.value} with {len(parsed.items)} items")


def test_html_rendering():
    """test on-screen html rendering"""
    print("\n🔍 Testing html rendering...")

    from src.templa.html_renderer import HtmlRenderer

    html = HtmlRenderer().render_project(make_project("DOCX"))
    assert html.startswith("<!DOCTYPE html>")
    assert "<table" in html
    print(f"✅ HTML rendering successful: {len(html)} characters")


def test_slide_generation():
    """test slide deck generation"""
    print("\n🔍 Testing slide generation...")

    from src.templa.slide_generator import SlideGenerator

    generator = SlideGenerator()
    slide_deck = generator.generate_slide_deck(make_project("PPTX"))
    assert len(slide_deck.slides) == 3

    # show some stats
    stats = generator.get_slide_statistics(slide_deck)
    print(f"✅ Slide generation successful: {stats['total_slides']} slides created")
    print(f"   • Total shapes: {stats['total_shapes']}")
    print(f"   • Layouts: {stats['layouts']}")


def test_exports():
    """test docx, pptx and html export"""
    print("\n🔍 Testing exports...")

    from src.templa.export_service import ExportService

    service = ExportService()
    for document_type_name, fmt in (("DOCX", "docx"), ("PPTX", "pptx"), ("PPTX", "html")):
        result = service.export(make_project(document_type_name), fmt)
        assert result.filename == f"System_Test_Project.{fmt}"
        assert len(result.content) > 0
        print(f"✅ {fmt} export successful: {len(result.content)} bytes")


def test_project_store():
    """test saving and loading projects"""
    print("\n🔍 Testing project store...")

    from src.templa.project_store import ProjectStore

    with tempfile.TemporaryDirectory() as tmp_dir:
        store = ProjectStore(tmp_dir)
        store.save(make_project())
        loaded = store.get("proj_system")
        assert loaded is not None
        assert loaded.sections[0].content == SAMPLE_PPTX_CONTENT
        print(f"✅ Project store successful: {len(store.list_projects())} project saved")


def test_gemini_connection():
    """test if gemini is reachable, skipped without an api key"""
    print("\n🔍 Testing Gemini connection...")

    from src.templa.config import Config
    from src.templa.llm_service import GeminiLLMService

    if not Config.GEMINI_API_KEY:
        print("ℹ️  GEMINI_API_KEY not set, skipping connection test")
        print("   Add it to your environment or a .env file")
        return

    if GeminiLLMService().test_connection():
        print("✅ Gemini is reachable")
    else:
        print("⚠️  Gemini test failed, generation will use fallbacks")


def main():
    """run all tests"""
    print("🚀 Templa - System Test")
    print("=" * 50)

    # list of all tests to run
    tests = [
        ("Import Test", test_imports),
        ("Layout Parsing", test_layout_parsing),
        ("HTML Rendering", test_html_rendering),
        ("Slide Generation", test_slide_generation),
        ("Exports", test_exports),
        ("Project Store", test_project_store),
        ("Gemini Connection", test_gemini_connection),
    ]

    results = []

    # run each test and collect results
    for test_name, test_func in tests:
        try:
            test_func()
            results.append((test_name, True))
        except Exception as e:
            print(f"❌ {test_name} failed: {str(e)}")
            results.append((test_name, False))

    # show summary of all tests
    print("\n" + "=" * 50)
    print("📊 TEST SUMMARY")
    print("=" * 50)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for test_name, result in results:
        status = "✅ PASS" if result else "❌ FAIL"
        print(f"{status} {test_name}")

    print(f"\nOverall: {passed}/{total} tests passed")

    if passed == total:
        print("\n🎉 All tests passed! The system is ready to use.")
        print("\n📋 Next steps:")
        print("1. Start the server: python main.py")
        print("2. Create a project: templa create \"Your topic\" --type PPTX --generate")
    else:
        print(f"\n⚠️  {total - passed} tests failed. Please fix the issues above.")

    return passed == total


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
