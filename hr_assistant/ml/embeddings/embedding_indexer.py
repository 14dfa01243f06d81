"""
Versioned embedding index over stored documents.

Computes embeddings for document content, persists them as a single
``EmbeddingRecord`` per document, and backfills missing or stale records
in bounded, partially-successful batches.
"""

import asyncio
from typing import Optional

import numpy as np

from hr_assistant.core.errors import EmbeddingFailed, PipelineError
from hr_assistant.data.models import (
    BackfillError,
    BackfillReport,
    Document,
    EmbeddingRecord,
    EmbedOutcome,
    compute_content_hash,
    utc_now,
)
from hr_assistant.data.repositories import DocumentStore
from hr_assistant.utils.config import EmbeddingSettings, get_settings
from hr_assistant.utils.constants import AuditAction
from hr_assistant.utils.logger import LoggerMixin, audit_log

from .embedding_model import EmbeddingProvider


class EmbeddingIndexer(LoggerMixin):
    """
    Keeps document embeddings current for the configured model and version.

    The caller must not run concurrent embed calls for the same document id.
    """

    def __init__(
        self,
        store: DocumentStore,
        provider: EmbeddingProvider,
        settings: Optional[EmbeddingSettings] = None,
    ):
        self.store = store
        self.provider = provider
        self.settings = settings or get_settings().embedding

    @property
    def model_id(self) -> str:
        return self.provider.model_id

    @property
    def version(self) -> str:
        return self.settings.version

    async def embed(self, text: str) -> np.ndarray:
        """
        Embed a text with the configured provider.

        Args:
            text: Text to embed, truncated to ``max_chars``

        Returns:
            Vector of the provider's dimension

        Raises:
            EmbeddingFailed: On empty input, provider error, timeout or
                wrong dimension
        """
        text = (text or "")[: self.settings.max_chars]
        if not text.strip():
            raise EmbeddingFailed("Cannot embed empty text")

        try:
            vector = await asyncio.wait_for(
                self.provider.embed(text),
                timeout=self.settings.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingFailed(
                f"Embedding timed out after {self.settings.timeout_seconds}s"
            ) from e
        except PipelineError:
            raise
        except Exception as e:
            raise EmbeddingFailed(f"Embedding provider error: {e}") from e

        vector = np.asarray(vector, dtype=np.float32).reshape(-1)
        if vector.shape[0] != self.provider.dimension:
            raise EmbeddingFailed(
                f"Embedding dimension {vector.shape[0]} does not match "
                f"expected {self.provider.dimension}"
            )
        return vector

    def is_stale(self, document: Document) -> bool:
        """True when the document has no record, or one for another model, version or content."""
        return document.needs_embedding(self.model_id, self.version)

    async def embed_document(self, document: Document, force: bool = False) -> EmbedOutcome:
        """
        Compute and persist the embedding of one document.

        Does nothing when the stored record is current, unless ``force``.
        """
        if not force and not self.is_stale(document):
            self.logger.debug(f"Embedding for {document.id} is current, skipping")
            return EmbedOutcome(
                document_id=document.id,
                already_current=True,
                record=document.embedding,
            )

        if not document.has_content:
            raise EmbeddingFailed("Document has no extracted content", document_id=document.id)

        try:
            vector = await self.embed(document.content)
        except EmbeddingFailed as e:
            e.document_id = document.id
            raise

        computed_at = utc_now()
        # Never move computed_at backwards
        if document.embedding and document.embedding.computed_at > computed_at:
            computed_at = document.embedding.computed_at

        record = EmbeddingRecord(
            vector=vector.tolist(),
            model_id=self.model_id,
            version=self.version,
            dimension=int(vector.shape[0]),
            content_hash=document.content_hash or compute_content_hash(document.content),
            computed_at=computed_at,
        )

        written = await self.store.save_embedding(document.id, record)
        if not written:
            self.logger.info(f"A newer embedding for {document.id} is already stored")
            return EmbedOutcome(document_id=document.id, already_current=True)

        audit_log(
            AuditAction.EMBEDDING_WRITTEN.value,
            {
                "document_id": document.id,
                "model_id": record.model_id,
                "version": record.version,
                "dimension": record.dimension,
            },
            audit_type="EMBEDDING",
        )
        return EmbedOutcome(document_id=document.id, record=record)

    async def _process_candidate(
        self,
        document: Document,
        semaphore: asyncio.Semaphore,
    ) -> tuple[str, Optional[str]]:
        """Embed one candidate; returns (outcome, failure reason)."""
        async with semaphore:
            try:
                outcome = await self.embed_document(document)
            except PipelineError as e:
                reason = e.message
            except Exception as e:
                self.logger.exception(f"Unexpected error embedding {document.id}")
                reason = f"Unexpected error: {e}"
            else:
                return ("skipped" if outcome.already_current else "updated"), None

            try:
                await self.store.record_embedding_failure(document.id, reason)
            except Exception as e:
                self.logger.warning(f"Could not record embedding failure for {document.id}: {e}")
            return "error", reason

    async def backfill_batch(
        self,
        candidates: list[Document],
        limit: Optional[int] = None,
    ) -> BackfillReport:
        """
        Embed up to ``limit`` candidates independently.

        Per-document failures are recorded on the document and in the
        report; they never abort the batch.
        """
        limit = self.settings.backfill_limit if limit is None else limit
        batch = candidates[: max(limit, 0)]
        semaphore = asyncio.Semaphore(max(self.settings.concurrency, 1))

        results = await asyncio.gather(
            *(self._process_candidate(doc, semaphore) for doc in batch)
        )

        report = BackfillReport()
        for doc, (status, reason) in zip(batch, results):
            if status == "updated":
                report.updated_ids.append(doc.id)
            elif status == "skipped":
                report.skipped_ids.append(doc.id)
            else:
                report.errors.append(BackfillError(document_id=doc.id, reason=reason or ""))

        if report.errors:
            self.logger.warning(
                f"Backfill finished with {len(report.errors)} failures out of {len(batch)}"
            )
        return report

    async def backfill(
        self,
        owner_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> BackfillReport:
        """Fetch missing or stale documents and embed them."""
        limit = self.settings.backfill_limit if limit is None else limit
        candidates = await self.store.find_embedding_candidates(
            model_id=self.model_id,
            version=self.version,
            owner_id=owner_id,
            limit=limit,
        )
        self.logger.info(f"Backfill found {len(candidates)} candidates")

        report = await self.backfill_batch(candidates, limit)
        audit_log(
            AuditAction.BACKFILL_RUN.value,
            {
                "owner_id": owner_id,
                "updated": len(report.updated_ids),
                "errors": len(report.errors),
                "skipped": len(report.skipped_ids),
            },
            audit_type="EMBEDDING",
        )
        return report
