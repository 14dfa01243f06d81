"""
PDF document text extractor.

Uses multiple extraction methods for robust text extraction:
1. pdfplumber - Primary method, good for structured text
2. pypdf - Fallback method, also used when pdfplumber cannot open the file
"""

import io
from typing import BinaryIO

import pdfplumber
from pypdf import PdfReader

from hr_assistant.utils.constants import MIME_PDF
from hr_assistant.utils.logger import get_logger

from .base import BaseExtractor, ExtractionResult

logger = get_logger(__name__)


class PDFExtractor(BaseExtractor):
    """Extractor for PDF documents."""

    name = "pdf"

    def __init__(self, min_text_chars: int = 50) -> None:
        self.min_text_chars = min_text_chars

    @property
    def supported_mime_types(self) -> tuple[str, ...]:
        return (MIME_PDF,)

    def extract_from_bytes(self, content: bytes, filename: str = "document.pdf") -> ExtractionResult:
        """Extract text from PDF bytes."""
        if not content.lstrip().startswith(b"%PDF"):
            raise self._fail("missing PDF header")

        file_obj = io.BytesIO(content)
        warnings: list[str] = []

        # Try pdfplumber first (better for structured documents)
        try:
            text, page_count, metadata = self._extract_with_pdfplumber(file_obj)
        except Exception as e:
            logger.debug(f"pdfplumber could not read {filename}: {e}")
            warnings.append(f"pdfplumber failed: {e}")
            text, page_count, metadata = "", 0, {}

        if len(text.strip()) > self.min_text_chars:
            return ExtractionResult(text=text, page_count=page_count, metadata=metadata, warnings=warnings)

        # Fallback to pypdf
        warnings.append("pdfplumber extraction yielded limited text, trying pypdf")
        file_obj.seek(0)
        try:
            fallback_text, fallback_pages, fallback_meta = self._extract_with_pypdf(file_obj)
        except Exception as e:
            if text.strip():
                logger.warning(f"pypdf failed on {filename}, keeping pdfplumber text: {e}")
                return ExtractionResult(text=text, page_count=page_count, metadata=metadata, warnings=warnings)
            raise self._fail(f"malformed PDF: {e}") from e

        if len(fallback_text.strip()) < len(text.strip()):
            fallback_text, fallback_pages, fallback_meta = text, page_count, metadata

        if not fallback_text.strip():
            raise self._fail("no extractable text (PDF may be image-based or encrypted)")

        return ExtractionResult(
            text=fallback_text,
            page_count=fallback_pages,
            metadata=fallback_meta,
            warnings=warnings,
        )

    def _extract_with_pdfplumber(self, file_obj: BinaryIO) -> tuple[str, int, dict]:
        """Extract text using pdfplumber."""
        text_parts = []
        metadata: dict = {"extractor": "pdfplumber"}

        with pdfplumber.open(file_obj) as pdf:
            page_count = len(pdf.pages)
            metadata["page_count"] = page_count

            if pdf.metadata:
                metadata["pdf_metadata"] = {
                    k: v for k, v in pdf.metadata.items()
                    if v and isinstance(v, str)
                }

            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)

        return "\n\n".join(text_parts), page_count, metadata

    def _extract_with_pypdf(self, file_obj: BinaryIO) -> tuple[str, int, dict]:
        """Extract text using pypdf."""
        text_parts = []
        metadata: dict = {"extractor": "pypdf"}

        reader = PdfReader(file_obj)
        page_count = len(reader.pages)
        metadata["page_count"] = page_count

        if reader.metadata:
            metadata["pdf_metadata"] = {
                k: str(v) for k, v in reader.metadata.items()
                if v and k.startswith("/")
            }

        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)

        return "\n\n".join(text_parts), page_count, metadata
