"""
Context assembly for grounded answers.

Turns the top retrieval hits for a question into bounded excerpts. The
assembled context lives only for the duration of one answer call.
"""

from typing import Optional

from hr_assistant.core.retrieval import RetrievalEngine
from hr_assistant.data.models import (
    ContextSnippet,
    ConversationContext,
    Document,
    RetrievalQuery,
    SearchFilters,
)
from hr_assistant.ml.nlp.parsers import truncate_text
from hr_assistant.utils.config import GenerationSettings, get_settings
from hr_assistant.utils.logger import LoggerMixin


class ContextAssembler(LoggerMixin):
    """Retrieves supporting documents and cuts them into excerpts."""

    def __init__(
        self,
        retrieval: RetrievalEngine,
        settings: Optional[GenerationSettings] = None,
    ):
        self.retrieval = retrieval
        self.settings = settings or get_settings().generation

    async def assemble(
        self,
        query: str,
        owner_id: Optional[str] = None,
        filters: Optional[SearchFilters] = None,
    ) -> ConversationContext:
        """Build the context for one question."""
        result = await self.retrieval.search(
            RetrievalQuery(
                text=query,
                owner_id=owner_id,
                filters=filters or SearchFilters(),
                top_k=self.settings.context_top_k,
            ),
            log_query=False,
        )

        snippets = []
        for hit in result.hits:
            document = await self.retrieval.store.get(hit.document_id)
            if document is None:
                continue
            text = self.build_excerpt(document)
            if text:
                snippets.append(
                    ContextSnippet(
                        document_id=hit.document_id,
                        title=hit.title,
                        text=text,
                        score=hit.score,
                    )
                )

        self.logger.debug(f"Assembled {len(snippets)} context snippets")
        return ConversationContext(query=query, snippets=snippets)

    def build_excerpt(self, document: Document) -> str:
        """Summary followed by leading content, bounded to ``excerpt_chars``."""
        parts = []
        summary = document.analysis.summary if document.analysis else None
        if summary:
            parts.append(summary)
        if document.content:
            parts.append(document.content)
        return truncate_text("\n\n".join(parts).strip(), self.settings.excerpt_chars)
