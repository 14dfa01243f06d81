"""
Question answering over stored documents.

Components:
- ContextAssembler: Bounded excerpts from the top retrieval hits
- ResponseGenerator: Grounded answer generation
- QueryAnswerer: Validation, retrieval, generation and query logging
"""

from .context_assembler import ContextAssembler
from .response_generator import (
    QueryAnswerer,
    ResponseGenerator,
    format_context,
)

__all__ = [
    "ContextAssembler",
    "QueryAnswerer",
    "ResponseGenerator",
    "format_context",
]
