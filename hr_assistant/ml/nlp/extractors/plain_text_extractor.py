"""
Plain text and Markdown extractor.
"""

import codecs

from hr_assistant.utils.constants import MIME_MARKDOWN, MIME_TEXT
from hr_assistant.utils.logger import get_logger

from .base import BaseExtractor, ExtractionResult

logger = get_logger(__name__)

# latin-1 decodes any byte sequence, so it must stay last
FALLBACK_ENCODINGS = ("utf-8", "cp1252", "latin-1")


class PlainTextExtractor(BaseExtractor):
    """Extractor for plain text documents."""

    name = "plain_text"

    @property
    def supported_mime_types(self) -> tuple[str, ...]:
        return (MIME_TEXT, MIME_MARKDOWN)

    def extract_from_bytes(self, content: bytes, filename: str = "document.txt") -> ExtractionResult:
        """Decode text bytes, trying encodings in order."""
        text, used_encoding = self._decode(content)

        if not text.strip():
            raise self._fail("file contains no text")

        # Estimate page count (roughly 3000 chars per page)
        page_count = max(1, len(text) // 3000)

        return ExtractionResult(
            text=text,
            page_count=page_count,
            metadata={
                "extractor": "plain_text",
                "encoding": used_encoding,
            },
        )

    def _decode(self, content: bytes) -> tuple[str, str]:
        if content.startswith(codecs.BOM_UTF8):
            return content.decode("utf-8-sig"), "utf-8-sig"
        if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
            try:
                return content.decode("utf-16"), "utf-16"
            except UnicodeDecodeError as e:
                raise self._fail(f"invalid UTF-16 text: {e}") from e

        for encoding in FALLBACK_ENCODINGS:
            try:
                return content.decode(encoding), encoding
            except UnicodeDecodeError:
                logger.debug(f"Text is not valid {encoding}, trying next encoding")
                continue

        raise self._fail("could not decode text")
