"""
DOCX document text extractor.

Uses python-docx. Legacy binary .doc files are not handled here.
"""

import io

from docx import Document

from hr_assistant.utils.constants import MIME_DOCX
from hr_assistant.utils.logger import get_logger

from .base import BaseExtractor, ExtractionResult

logger = get_logger(__name__)


class DOCXExtractor(BaseExtractor):
    """Extractor for Word XML packages (.docx)."""

    name = "docx"

    @property
    def supported_mime_types(self) -> tuple[str, ...]:
        return (MIME_DOCX,)

    def extract_from_bytes(self, content: bytes, filename: str = "document.docx") -> ExtractionResult:
        """Extract text from DOCX bytes."""
        # A Word XML package is a zip archive
        if not content.startswith(b"PK"):
            raise self._fail("not a Word XML package (missing zip signature)")

        try:
            doc = Document(io.BytesIO(content))
        except Exception as e:
            logger.warning(f"python-docx could not open {filename}: {e}")
            raise self._fail(f"malformed DOCX: {e}") from e

        result = self._process_document(doc)
        if result.is_empty:
            raise self._fail("document contains no text (only images or empty)")
        return result

    def _process_document(self, doc) -> ExtractionResult:
        """Process a python-docx Document object."""
        text_parts = []
        metadata: dict = {"extractor": "python-docx"}

        props = doc.core_properties
        metadata["document_properties"] = {
            "author": props.author,
            "title": props.title,
            "subject": props.subject,
            "created": str(props.created) if props.created else None,
            "modified": str(props.modified) if props.modified else None,
        }

        for paragraph in doc.paragraphs:
            text = paragraph.text.strip()
            if text:
                text_parts.append(text)

        # Tables are flattened row by row
        table_texts = []
        for table in doc.tables:
            for row in table.rows:
                row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if row_text:
                    table_texts.append(" | ".join(row_text))

        if table_texts:
            text_parts.append("")
            text_parts.extend(table_texts)

        # Count sections as "pages" (approximate)
        section_count = len(doc.sections) if doc.sections else 1
        metadata["table_rows"] = len(table_texts)

        return ExtractionResult(
            text="\n".join(text_parts),
            page_count=section_count,
            metadata=metadata,
        )
