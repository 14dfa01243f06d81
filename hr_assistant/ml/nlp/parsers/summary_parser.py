"""
Extractive summary parser.

Uses a summary/profile section when the document has one, otherwise the
leading sentences of the body.
"""

import re
from dataclasses import dataclass
from typing import Optional

from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)

SENTENCE_SPLIT_PATTERN = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9\"'(])")


def split_sentences(text: str) -> list[str]:
    """Split text into sentences on terminal punctuation and line breaks."""
    sentences = []
    for block in re.split(r"\n+", text):
        block = block.strip()
        if block:
            sentences.extend(s.strip() for s in SENTENCE_SPLIT_PATTERN.split(block) if s.strip())
    return sentences


def truncate_text(text: str, max_chars: int) -> str:
    """Cut at a word boundary and mark the cut with an ellipsis."""
    if len(text) <= max_chars:
        return text
    cut = text[: max_chars - 3].rsplit(" ", 1)[0].rstrip(" ,;:")
    return f"{cut}..."


@dataclass
class SummaryParseResult:
    """Result of summary parsing."""

    text: str = ""
    source: str = "none"  # "section", "lead" or "none"
    confidence: float = 0.0


class SummaryParser:
    """Builds a bounded extractive summary."""

    # Short lines without punctuation are headers, names or contact lines
    MIN_SENTENCE_WORDS = 5

    def __init__(self, max_chars: int = 600, max_sentences: int = 3):
        self.max_chars = max_chars
        self.max_sentences = max_sentences

    def parse(self, text: str, summary_section: Optional[str] = None) -> SummaryParseResult:
        """Summarize ``text``, preferring an explicit summary section."""
        if summary_section and summary_section.strip():
            cleaned = re.sub(r"\s+", " ", summary_section.strip())
            return SummaryParseResult(
                text=truncate_text(cleaned, self.max_chars),
                source="section",
                confidence=0.9 if len(cleaned) > 50 else 0.5,
            )

        sentences = [
            s for s in split_sentences(text)
            if len(s.split()) >= self.MIN_SENTENCE_WORDS
        ]
        if not sentences:
            # Very short documents: fall back to the first non-empty lines
            sentences = [line.strip() for line in text.split("\n") if line.strip()]
        if not sentences:
            return SummaryParseResult()

        summary = " ".join(sentences[: self.max_sentences])
        summary = re.sub(r"\s+", " ", summary)

        return SummaryParseResult(
            text=truncate_text(summary, self.max_chars),
            source="lead",
            confidence=0.7 if len(summary) > 50 else 0.4,
        )
