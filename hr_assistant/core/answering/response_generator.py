"""
Grounded answer generation.

``ResponseGenerator`` prompts the generation model with the assembled
context; ``QueryAnswerer`` ties retrieval, generation and query logging
together for one question.
"""

import asyncio
import time
from typing import Optional

from hr_assistant.core.errors import GenerationFailed, ValidationError
from hr_assistant.data.models import (
    ConversationContext,
    GeneratedAnswer,
    QueryLogEntry,
    SearchFilters,
)
from hr_assistant.data.repositories import DocumentStore
from hr_assistant.ml.llm import LLMClient
from hr_assistant.ml.llm.prompts import ANSWER_SYSTEM_PROMPT, answer_messages
from hr_assistant.utils.config import GenerationSettings, get_settings
from hr_assistant.utils.constants import NO_CONTEXT_MARKER, AuditAction, QueryKind
from hr_assistant.utils.logger import LoggerMixin, audit_log

from .context_assembler import ContextAssembler

MAX_QUERY_CHARS = 2000


def format_context(context: ConversationContext) -> str:
    """Render snippets as a numbered block, or the no-context marker."""
    if context.is_empty:
        return NO_CONTEXT_MARKER
    blocks = [
        f"[{i}] {snippet.title} (id: {snippet.document_id})\n{snippet.text}"
        for i, snippet in enumerate(context.snippets, start=1)
    ]
    return "\n\n".join(blocks)


class ResponseGenerator(LoggerMixin):
    """Generates an answer from a question and its context."""

    def __init__(
        self,
        llm_client: Optional[LLMClient],
        settings: Optional[GenerationSettings] = None,
    ):
        self.llm_client = llm_client
        self.settings = settings or get_settings().generation

    @property
    def total_timeout(self) -> float:
        # Covers every retry attempt of the client
        return self.settings.timeout_seconds * (self.settings.max_retries + 1)

    async def generate(self, query: str, context: ConversationContext) -> GeneratedAnswer:
        """
        Generate an answer.

        Raises:
            GenerationFailed: If no provider is configured, or it errors
                or times out
        """
        if self.llm_client is None:
            raise GenerationFailed("No generation provider configured (set LLM_API_KEY)")

        messages = answer_messages(query, format_context(context))
        try:
            answer = await asyncio.wait_for(
                self.llm_client.complete(messages, system=ANSWER_SYSTEM_PROMPT),
                timeout=self.total_timeout,
            )
        except asyncio.TimeoutError as e:
            raise GenerationFailed(f"Generation timed out after {self.total_timeout}s") from e
        except Exception as e:
            raise GenerationFailed(f"Generation provider error: {e}") from e

        answer = (answer or "").strip()
        if not answer:
            raise GenerationFailed("Generation provider returned an empty answer")

        return GeneratedAnswer(
            query=query,
            answer=answer,
            grounded=not context.is_empty,
            sources=[snippet.document_id for snippet in context.snippets],
            model=self.llm_client.model,
        )


class QueryAnswerer(LoggerMixin):
    """Answers one question from stored documents."""

    def __init__(
        self,
        assembler: ContextAssembler,
        generator: ResponseGenerator,
        store: DocumentStore,
    ):
        self.assembler = assembler
        self.generator = generator
        self.store = store

    async def answer(
        self,
        query: str,
        owner_id: Optional[str] = None,
        filters: Optional[SearchFilters] = None,
    ) -> GeneratedAnswer:
        """
        Retrieve context for ``query`` and generate a grounded answer.

        Raises:
            ValidationError: If the query is blank or too long
            GenerationFailed: If the provider fails
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Query is required")
        if len(query) > MAX_QUERY_CHARS:
            raise ValidationError(f"Query exceeds {MAX_QUERY_CHARS} characters")

        start_time = time.time()
        context = await self.assembler.assemble(query, owner_id=owner_id, filters=filters)
        if context.is_empty:
            self.logger.info("No supporting documents found for question")

        answer = await self.generator.generate(query, context)
        duration_ms = int((time.time() - start_time) * 1000)

        audit_log(
            AuditAction.ANSWER_GENERATED.value,
            {
                "owner_id": owner_id,
                "grounded": answer.grounded,
                "sources": len(answer.sources),
                "model": answer.model,
            },
            audit_type="QUERY",
        )

        entry = QueryLogEntry(
            kind=QueryKind.ANSWER,
            owner_id=owner_id,
            query=query,
            filters=filters.model_dump(mode="json", exclude_defaults=True) if filters else {},
            result_count=len(context.snippets),
            document_ids=answer.sources,
            response_text=answer.answer,
            duration_ms=duration_ms,
        )
        try:
            await self.store.log_query(entry)
        except Exception as e:
            self.logger.warning(f"Failed to log answered query: {e}")

        return answer
