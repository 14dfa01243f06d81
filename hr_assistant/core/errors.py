"""
Error taxonomy for the document pipeline.

Every failure a caller can observe is a ``PipelineError`` subclass carrying a
stable ``kind`` string, so transports can map errors without string matching.
"""

from typing import Any, Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    kind: str = "PipelineError"

    def __init__(
        self,
        message: str,
        document_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.document_id = document_id
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Caller-facing error payload."""
        payload: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.document_id:
            payload["document_id"] = self.document_id
        if self.details:
            payload["details"] = self.details
        return payload


class UnsupportedFormat(PipelineError):
    """Raised when a declared MIME type has no extractor."""

    kind = "UnsupportedFormat"

    def __init__(self, mime_type: str, **kwargs):
        self.mime_type = mime_type
        super().__init__(f"Unsupported document type: {mime_type or 'unknown'}", **kwargs)


class ExtractionFailed(PipelineError):
    """Raised when a supported container cannot be parsed or yields no text."""

    kind = "ExtractionFailed"

    def __init__(self, reason: str, extractor: Optional[str] = None, **kwargs):
        self.reason = reason
        self.extractor = extractor
        super().__init__(f"Text extraction failed: {reason}", **kwargs)


class AnalysisFailed(PipelineError):
    """Raised when input is empty or every requested sub-extraction failed."""

    kind = "AnalysisFailed"

    def __init__(self, message: str, failures: Optional[dict[str, str]] = None, **kwargs):
        self.failures = failures or {}
        super().__init__(message, **kwargs)


class EmbeddingFailed(PipelineError):
    """Raised when a single embedding could not be computed or stored."""

    kind = "EmbeddingFailed"


class GenerationFailed(PipelineError):
    """Raised when the generation provider errors or times out."""

    kind = "GenerationFailed"


class NotFound(PipelineError):
    """Raised for unknown document ids."""

    kind = "NotFound"

    def __init__(self, document_id: str, **kwargs):
        super().__init__(f"Document {document_id} not found", document_id=document_id, **kwargs)


class ValidationError(PipelineError):
    """Raised when required input is missing or out of bounds."""

    kind = "ValidationError"
