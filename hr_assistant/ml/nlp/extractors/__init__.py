"""
File content extractors for various document formats.

Supports extraction of text from PDF, DOCX and plain text uploads.
"""

from .base import BaseExtractor, ExtractionResult
from .pdf_extractor import PDFExtractor
from .docx_extractor import DOCXExtractor
from .plain_text_extractor import PlainTextExtractor
from .extractor_factory import ExtractorFactory, resolve_mime_type
from .text_extractor import NormalizedText, TextExtractor, normalize_whitespace

__all__ = [
    "BaseExtractor",
    "ExtractionResult",
    "PDFExtractor",
    "DOCXExtractor",
    "PlainTextExtractor",
    "ExtractorFactory",
    "resolve_mime_type",
    "NormalizedText",
    "TextExtractor",
    "normalize_whitespace",
]
