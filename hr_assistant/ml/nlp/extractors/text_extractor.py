"""
Uploaded file to normalized text.

``TextExtractor`` validates the upload, picks a format extractor by MIME
type and whitespace-normalizes the result. It performs no semantic
cleaning; that is left to analysis.
"""

import asyncio
import re
from dataclasses import dataclass, field
from typing import Optional

from hr_assistant.core.errors import ExtractionFailed, UnsupportedFormat, ValidationError
from hr_assistant.utils.config import get_settings
from hr_assistant.utils.logger import LoggerMixin

from .extractor_factory import ExtractorFactory, resolve_mime_type

_LINE_BREAKS = re.compile(r"\r\n?|[\v\f\u2028\u2029]")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")
_HORIZONTAL_SPACE = re.compile(r"[ \t\u00a0\u1680\u2000-\u200a\u202f\u205f\u3000]+")
_BLANK_LINES = re.compile(r"\n{3,}")


def normalize_whitespace(text: str) -> str:
    """
    Normalize line endings and whitespace runs.

    Line endings become ``\\n``, horizontal runs become one space, lines are
    trimmed and consecutive blank lines collapse to one. Other characters
    are left untouched.
    """
    text = _LINE_BREAKS.sub("\n", text)
    text = _CONTROL_CHARS.sub("", text)
    text = _HORIZONTAL_SPACE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()


@dataclass
class NormalizedText:
    """Whitespace-normalized text of one upload plus extraction details."""

    text: str
    mime_type: str
    page_count: int = 1
    metadata: dict = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def char_count(self) -> int:
        return len(self.text)


class TextExtractor(LoggerMixin):
    """Converts raw uploaded bytes into normalized text."""

    def __init__(
        self,
        factory: Optional[ExtractorFactory] = None,
        max_file_size_bytes: Optional[int] = None,
    ) -> None:
        settings = get_settings().extraction
        self.factory = factory or ExtractorFactory(min_pdf_text_chars=settings.min_pdf_text_chars)
        self.max_file_size_bytes = max_file_size_bytes or settings.max_file_size_bytes

    def extract(
        self,
        file_bytes: bytes,
        declared_mime_type: Optional[str],
        filename: Optional[str] = None,
    ) -> NormalizedText:
        """
        Extract normalized text from an uploaded file.

        Raises:
            UnsupportedFormat: No extractor for the (resolved) MIME type
            ValidationError: Empty or oversized upload
            ExtractionFailed: Container cannot be parsed or yields no text
        """
        mime_type = resolve_mime_type(declared_mime_type, filename)
        extractor = self.factory.get_extractor(mime_type)
        if extractor is None:
            raise UnsupportedFormat(mime_type or (declared_mime_type or ""))

        if not file_bytes:
            raise ValidationError("Uploaded file is empty")
        if len(file_bytes) > self.max_file_size_bytes:
            limit_mb = self.max_file_size_bytes / (1024 * 1024)
            raise ValidationError(f"File size exceeds the {limit_mb:.0f} MB limit")

        name = filename or "document"
        result = extractor.extract_from_bytes(file_bytes, name)
        text = normalize_whitespace(result.text)
        if not text:
            raise ExtractionFailed("no text after normalization", extractor=extractor.name)

        for warning in result.warnings:
            self.logger.debug(f"{name}: {warning}")
        self.logger.info(
            f"Extracted {len(text)} chars from {name} ({mime_type}, {result.page_count} page(s))"
        )

        return NormalizedText(
            text=text,
            mime_type=mime_type,
            page_count=result.page_count,
            metadata=result.metadata,
            warnings=result.warnings,
        )

    async def extract_async(
        self,
        file_bytes: bytes,
        declared_mime_type: Optional[str],
        filename: Optional[str] = None,
    ) -> NormalizedText:
        """Run ``extract`` in a worker thread so parsing does not block the loop."""
        return await asyncio.to_thread(self.extract, file_bytes, declared_mime_type, filename)
