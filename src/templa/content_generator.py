# generates titles, outlines and section content with the llm, with fallbacks
import json
import logging
import re
from typing import List, Optional

from .layout_parser import Layout, detect_layout, LAYOUT_TAG_PATTERN
from .llm_service import get_llm_service
from .models import DocumentType

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Untitled Project"
FALLBACK_CONTENT = "Error generating content."

# beats of the narrative arc used for presentation outlines
PRESENTATION_ARC = [
    "Title Slide",
    "The Problem Statement",
    "Why It Matters (Impact)",
    "Current Landscape & Gaps",
    "Our Solution",
    "How It Works",
    "Validation & Results",
    "Business Impact & ROI",
    "Future Roadmap",
    "Conclusion",
]

OUTLINE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "sections": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "List of section headers or slide titles"
        }
    },
    "required": ["sections"]
}

LAYOUT_NAMES = " | ".join(f"[LAYOUT: {layout.value}]" for layout in Layout)


# strip markdown code fences the model sometimes wraps json in
def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()
    return text


# generates project text through the llm service
class ContentGenerator:
    # llm service is created lazily so the class works without an api key until used
    def __init__(self, llm_service=None):
        self._llm_service = llm_service

    @property
    def llm_service(self):
        if self._llm_service is None:
            self._llm_service = get_llm_service()
        return self._llm_service

    def generate_title(self, topic: str) -> str:
        """Generate a short title for the topic"""
        prompt = (
            f'Based on this topic: "{topic}", write a short professional title of 3-6 words. '
            "Return only the title text, without quotes or html."
        )
        try:
            title = self.llm_service.generate_text(prompt, temperature=0.5)
            title = re.sub(r'<[^>]*>', '', title).strip().strip('"\'').strip()
            return title or FALLBACK_TITLE
        except Exception as e:
            logger.error(f"Title generation failed: {str(e)}")
            return FALLBACK_TITLE

    def generate_outline(self, topic: str, document_type: DocumentType, count: int = 5) -> List[str]:
        """Generate section or slide titles, falls back to numbered sections"""
        if document_type == DocumentType.PPTX:
            beats = "\n".join(f"{i}. {beat}" for i, beat in enumerate(PRESENTATION_ARC, start=1))
            system_instruction = (
                "You plan business presentations. Follow this narrative arc, one slide per beat, "
                f"with titles of 2-6 words specific to the topic:\n{beats}"
            )
        else:
            system_instruction = (
                f"You plan professional business documents. Propose {count} section titles, "
                "covering the usual business sections where they fit the topic."
            )
        system_instruction += ' Return a JSON object {"sections": [...]} of strings.'

        try:
            response = self.llm_service.generate_text(
                f"Create an outline for: {topic}.",
                system_instruction=system_instruction,
                response_schema=OUTLINE_SCHEMA,
                temperature=0.4
            )
            data = json.loads(_strip_code_fences(response) or '{"sections": []}')
            sections = [str(s).strip() for s in data.get("sections", []) if str(s).strip()]
            if not sections:
                raise ValueError("outline response has no sections")
            logger.info(f"✓ Generated outline with {len(sections)} sections")
            return sections
        except Exception as e:
            logger.error(f"Outline generation failed: {str(e)}")
            return [f"Section {i}" for i in range(1, count + 1)]

    def generate_section_content(
        self,
        topic: str,
        section_title: str,
        document_type: DocumentType,
        context: Optional[str] = None
    ) -> str:
        """Write the body of one section"""
        if document_type == DocumentType.PPTX:
            prompt = (
                f"Topic: {topic}\nSlide: {section_title}\n\n"
                "Write the content of one 16:9 slide.\n"
                f"Line 1 must be exactly one layout tag out of: {LAYOUT_NAMES}.\n"
                "Then at most 5 bullet points of at most 10 words each, no paragraphs, no html."
            )
        else:
            prompt = (
                f"Topic: {topic}\nSection title: {section_title}\n\n"
                "Write this section of a business document in markdown: short paragraphs, "
                "bullets only for lists, '##' for subsections, no html, "
                "and do not repeat the section title."
            )
        if context:
            prompt += f"\n\nContext: {context}"

        try:
            return self.llm_service.generate_text(prompt)
        except Exception as e:
            logger.error(f"Content generation failed for '{section_title}': {str(e)}")
            return FALLBACK_CONTENT

    def refine_text(self, content: str, instruction: str) -> str:
        """Rewrite content following a user instruction, unchanged on failure"""
        prompt = (
            f'Original content:\n"""\n{content}\n"""\n\n'
            f'Instruction: "{instruction}"\n\n'
            "Rewrite the content following the instruction. Markdown tables and layout tags "
            f"({LAYOUT_NAMES}) may be used. No html. Return only the rewritten text."
        )
        try:
            return self.llm_service.generate_text(prompt) or content
        except Exception as e:
            logger.error(f"Refine text failed: {str(e)}")
            return content

    def apply_layout(self, content: str, layout: Layout) -> str:
        """Reformat content for a layout, the result always starts with its tag"""
        tag = f"[LAYOUT: {layout.value}]"
        prompt = (
            f'Original:\n"""\n{content}\n"""\n\n'
            f"Reformat this content to fit {tag}. Keep it concise, "
            f"no markdown inside lines. Start the output with {tag}."
        )
        try:
            result = self.llm_service.generate_text(prompt) or content
        except Exception as e:
            logger.error(f"Apply layout failed: {str(e)}")
            result = content

        return ensure_layout_tag(result, layout)


def ensure_layout_tag(content: str, layout: Layout) -> str:
    """Make content start with the tag for layout, replacing other layout tags"""
    tag = f"[LAYOUT: {layout.value}]"
    if content.lstrip().startswith(tag) and detect_layout(content) == layout:
        return content
    body = LAYOUT_TAG_PATTERN.sub('', content).strip()
    return f"{tag}\n{body}" if body else tag
