"""
Text preprocessing for document analysis.

Handles semantic cleaning (unicode normalization, quote/dash folding) and
section detection for resumes, job descriptions and policies.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Optional

from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)


# Common section headers in HR documents
SECTION_HEADERS = {
    "contact": [
        "contact", "contact information", "personal information",
        "personal details", "contact details",
    ],
    "summary": [
        "summary", "professional summary", "profile", "objective",
        "career objective", "about me", "about", "overview",
        "professional profile", "executive summary", "purpose",
    ],
    "experience": [
        "experience", "work experience", "employment history",
        "professional experience", "work history", "employment",
        "career history", "professional background",
    ],
    "education": [
        "education", "educational background", "academic background",
        "academic qualifications", "degrees",
    ],
    "skills": [
        "skills", "technical skills", "core competencies",
        "competencies", "areas of expertise", "expertise",
        "key skills", "professional skills", "technologies", "tools",
    ],
    "responsibilities": [
        "responsibilities", "key responsibilities", "duties",
        "what you'll do", "the role", "role overview",
    ],
    "requirements": [
        "requirements", "qualifications", "required qualifications",
        "preferred qualifications", "what we're looking for", "who you are",
    ],
    "policy": [
        "scope", "policy", "procedure", "procedures", "guidelines",
        "eligibility", "effective date",
    ],
    "certifications": [
        "certifications", "certificates", "licenses", "credentials",
    ],
    "references": [
        "references", "referees",
    ],
}


@dataclass
class TextSection:
    """A detected section in the document."""

    section_type: str
    title: str
    content: str
    confidence: float = 1.0


@dataclass
class PreprocessedText:
    """Result of text preprocessing."""

    original_text: str
    cleaned_text: str
    sections: list[TextSection] = field(default_factory=list)
    word_count: int = 0
    warnings: list[str] = field(default_factory=list)


class TextPreprocessor:
    """
    Preprocessor for document text.

    Handles cleaning, normalization, and section detection.
    """

    def preprocess(self, text: str) -> PreprocessedText:
        """
        Preprocess document text.

        Args:
            text: Normalized extracted text

        Returns:
            PreprocessedText with cleaned content and detected sections
        """
        warnings = []

        cleaned = self._clean_text(text)
        sections = self._detect_sections(cleaned)
        word_count = len(cleaned.split())

        if word_count < 50:
            warnings.append("Very short text - may be incomplete extraction")

        return PreprocessedText(
            original_text=text,
            cleaned_text=cleaned,
            sections=sections,
            word_count=word_count,
            warnings=warnings,
        )

    def _clean_text(self, text: str) -> str:
        """Clean and normalize text."""
        if not text:
            return ""

        # Normalize unicode
        text = unicodedata.normalize("NFKC", text)

        # Replace common problematic characters
        replacements = {
            "\u2018": "'",  # Left single quote
            "\u2019": "'",  # Right single quote
            "\u201c": '"',  # Left double quote
            "\u201d": '"',  # Right double quote
            "\u2013": "-",  # En dash
            "\u2014": "-",  # Em dash
            "\u2026": "...",  # Ellipsis
            "\u00ad": "",  # Soft hyphen
            "\ufeff": "",  # BOM
            "\u200b": "",  # Zero-width space
        }

        for old, new in replacements.items():
            text = text.replace(old, new)

        # Remove control characters (except newlines and tabs)
        text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)

        # Remove excessive spaces within lines
        text = re.sub(r"[ \t]{2,}", " ", text)

        return text.strip()

    def _detect_sections(self, text: str) -> list[TextSection]:
        """Detect sections in the document text."""
        sections = []

        current_section: Optional[TextSection] = None
        content_lines: list[str] = []

        for line in text.split("\n"):
            line_stripped = line.strip()
            section_type = self._identify_section_header(line_stripped)

            if section_type:
                if current_section:
                    current_section.content = "\n".join(content_lines).strip()
                    if current_section.content:
                        sections.append(current_section)

                current_section = TextSection(
                    section_type=section_type,
                    title=line_stripped,
                    content="",
                )
                content_lines = []
            else:
                content_lines.append(line)

        # Don't forget the last section
        if current_section:
            current_section.content = "\n".join(content_lines).strip()
            if current_section.content:
                sections.append(current_section)

        return sections

    def _identify_section_header(self, line: str) -> Optional[str]:
        """
        Identify if a line is a section header.

        Returns the section type or None.
        """
        if not line or len(line) > 40:
            return None

        clean_line = line.lower().strip()
        clean_line = re.sub(r"^[\d\.\-\*\u2022:#]+\s*", "", clean_line)
        clean_line = re.sub(r"\s*[:]\s*$", "", clean_line)
        clean_line = clean_line.strip()

        for section_type, headers in SECTION_HEADERS.items():
            for header in headers:
                if clean_line == header:
                    return section_type

        return None

    def get_section_content(
        self, preprocessed: PreprocessedText, section_type: str
    ) -> Optional[str]:
        """Get content of all sections of one type, joined."""
        parts = [s.content for s in preprocessed.sections if s.section_type == section_type]
        return "\n".join(parts) if parts else None
