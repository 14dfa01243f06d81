"""
Base extractor class for document text extraction.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from hr_assistant.core.errors import ExtractionFailed


@dataclass
class ExtractionResult:
    """Raw text pulled out of one document container."""

    text: str
    page_count: int = 1
    metadata: dict = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def word_count(self) -> int:
        """Count words in extracted text."""
        return len(self.text.split())

    @property
    def char_count(self) -> int:
        """Count characters in extracted text."""
        return len(self.text)

    @property
    def is_empty(self) -> bool:
        """Check if extraction resulted in empty text."""
        return len(self.text.strip()) == 0


class BaseExtractor(ABC):
    """
    Abstract base class for document text extractors.

    Implementations either return text or raise ``ExtractionFailed``;
    they never return an empty result as if it were a success.
    """

    name: str = "base"

    @property
    @abstractmethod
    def supported_mime_types(self) -> tuple[str, ...]:
        """Return tuple of MIME types this extractor handles."""
        pass

    def can_extract(self, mime_type: str) -> bool:
        """Check if this extractor can handle the given MIME type."""
        return mime_type in self.supported_mime_types

    @abstractmethod
    def extract_from_bytes(self, content: bytes, filename: str = "document") -> ExtractionResult:
        """
        Extract text content from document bytes.

        Args:
            content: Raw bytes of the document
            filename: Original filename (for logging and metadata)

        Returns:
            ExtractionResult containing the extracted text and metadata

        Raises:
            ExtractionFailed: If the container cannot be parsed or holds no text
        """
        pass

    def _fail(self, reason: str) -> ExtractionFailed:
        return ExtractionFailed(reason, extractor=self.name)
