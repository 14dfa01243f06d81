"""
Factory for selecting document extractors by MIME type.
"""

from pathlib import Path
from typing import Optional

from hr_assistant.utils.constants import EXTENSION_TO_MIME, MIME_OCTET_STREAM
from hr_assistant.utils.logger import get_logger

from .base import BaseExtractor
from .docx_extractor import DOCXExtractor
from .pdf_extractor import PDFExtractor
from .plain_text_extractor import PlainTextExtractor

logger = get_logger(__name__)


def resolve_mime_type(declared_mime_type: Optional[str], filename: Optional[str] = None) -> str:
    """
    Normalize a declared MIME type.

    Parameters such as ``; charset=utf-8`` are dropped. When the declared type
    is missing or ``application/octet-stream`` the filename extension decides.
    """
    mime_type = (declared_mime_type or "").split(";", 1)[0].strip().lower()
    if (not mime_type or mime_type == MIME_OCTET_STREAM) and filename:
        mime_type = EXTENSION_TO_MIME.get(Path(filename).suffix.lower(), mime_type)
    return mime_type


class ExtractorFactory:
    """
    Registry of format extractors.

    Automatically selects the appropriate extractor based on MIME type.
    """

    def __init__(self, extractors: Optional[list[BaseExtractor]] = None, min_pdf_text_chars: int = 50) -> None:
        self._extractors = extractors or [
            PDFExtractor(min_text_chars=min_pdf_text_chars),
            DOCXExtractor(),
            PlainTextExtractor(),
        ]

    def get_extractor(self, mime_type: str) -> Optional[BaseExtractor]:
        """
        Get the appropriate extractor for a MIME type.

        Returns:
            Appropriate extractor or None if no extractor supports the type
        """
        for extractor in self._extractors:
            if extractor.can_extract(mime_type):
                return extractor

        logger.warning(f"No extractor found for MIME type: {mime_type or 'unknown'}")
        return None

    def get_supported_mime_types(self) -> list[str]:
        """Get list of all supported MIME types."""
        mime_types = []
        for extractor in self._extractors:
            mime_types.extend(extractor.supported_mime_types)
        return mime_types

    def is_supported(self, mime_type: str) -> bool:
        """Check if a MIME type is supported."""
        return any(extractor.can_extract(mime_type) for extractor in self._extractors)
