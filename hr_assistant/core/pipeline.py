"""
Document pipeline.

Caller-facing operations over the extraction, analysis, embedding,
retrieval and answering components. Every operation takes its
dependencies from the pipeline instance, so tests can run the whole flow
against an in-memory store and fake providers.
"""

import asyncio
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from hr_assistant.core.answering import ContextAssembler, QueryAnswerer, ResponseGenerator
from hr_assistant.core.errors import (
    AnalysisFailed,
    EmbeddingFailed,
    NotFound,
    PipelineError,
    ValidationError,
)
from hr_assistant.core.retrieval import RetrievalEngine
from hr_assistant.data.models import (
    AnalysisOptions,
    AnalysisResult,
    BackfillReport,
    Document,
    EmbedOutcome,
    GeneratedAnswer,
    RetrievalQuery,
    RetrievalResult,
    SearchFilters,
    compute_content_hash,
)
from hr_assistant.data.repositories import DocumentStore
from hr_assistant.ml.embeddings import EmbeddingIndexer, EmbeddingProvider, get_embedding_provider
from hr_assistant.ml.llm import LLMClient, get_llm_client
from hr_assistant.ml.nlp import DocumentAnalyzer, TextExtractor, resolve_mime_type
from hr_assistant.utils.config import AppSettings, get_settings
from hr_assistant.utils.constants import AuditAction, DocumentStatus
from hr_assistant.utils.logger import LoggerMixin, audit_log


class DocumentPipeline(LoggerMixin):
    """
    Entry point for document ingestion, analysis, indexing and querying.

    Ingestion lifecycle: ``pending`` on upload, ``processing`` once text is
    extracted, ``completed`` after analysis and embedding have each been
    attempted, or ``error`` when extraction or a later store write fails.
    """

    def __init__(
        self,
        store: DocumentStore,
        extractor: TextExtractor,
        analyzer: DocumentAnalyzer,
        indexer: EmbeddingIndexer,
        retrieval: RetrievalEngine,
        answerer: QueryAnswerer,
        settings: Optional[AppSettings] = None,
    ):
        self.store = store
        self.extractor = extractor
        self.analyzer = analyzer
        self.indexer = indexer
        self.retrieval = retrieval
        self.answerer = answerer
        self.settings = settings or get_settings()

    async def get_document(self, document_id: str) -> Document:
        """Fetch a document or raise NotFound."""
        document = await self.store.get(document_id)
        if document is None:
            raise NotFound(document_id)
        return document

    async def analyze_document(
        self,
        file_bytes: bytes,
        mime_type: Optional[str],
        options: Optional[AnalysisOptions] = None,
        filename: Optional[str] = None,
    ) -> AnalysisResult:
        """Extract and analyze an upload without storing anything."""
        extracted = await self.extractor.extract_async(file_bytes, mime_type, filename)
        return await self.analyzer.analyze(extracted.text, filename or "document", options)

    async def ingest_document(
        self,
        file_bytes: bytes,
        mime_type: Optional[str],
        filename: str,
        owner_id: str,
        options: Optional[AnalysisOptions] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Document:
        """
        Store an upload and run it through extraction, analysis and embedding.

        Analysis and embedding run concurrently; a failure in either is
        recorded on the document and does not fail the ingest.

        Raises:
            UnsupportedFormat, ValidationError, ExtractionFailed: The
                document is kept with status ``error`` and the reason
            Exception: A store write after extraction failed; the document
                is moved to ``error`` before the exception propagates
        """
        if not owner_id:
            raise ValidationError("owner_id is required")

        document = Document(
            owner_id=owner_id,
            filename=filename,
            title=Path(filename).stem,
            mime_type=resolve_mime_type(mime_type, filename) or (mime_type or ""),
            file_size_bytes=len(file_bytes or b""),
            metadata=metadata or {},
        )
        await self.store.create(document)
        self.logger.info(f"Created document {document.id} for {filename}")

        try:
            extracted = await self.extractor.extract_async(file_bytes, mime_type, filename)
        except PipelineError as e:
            await self.store.update_status(document.id, DocumentStatus.ERROR, e.message)
            audit_log(
                AuditAction.DOCUMENT_FAILED.value,
                {"document_id": document.id, "filename": filename, "kind": e.kind},
            )
            e.document_id = document.id
            raise

        try:
            await self.store.save_content(
                document.id,
                extracted.text,
                compute_content_hash(extracted.text),
                metadata={"page_count": extracted.page_count, **extracted.metadata},
            )
            await self.store.update_status(document.id, DocumentStatus.PROCESSING)

            stored = await self.get_document(document.id)
            await asyncio.gather(
                self._analyze_stored(stored, options),
                self._embed_stored(stored),
            )

            await self.store.update_status(document.id, DocumentStatus.COMPLETED)
        except Exception as e:
            reason = e.message if isinstance(e, PipelineError) else str(e)
            self.logger.exception(f"Processing failed for {document.id}")
            await self.store.update_status(
                document.id, DocumentStatus.ERROR, f"Processing failed: {reason}"
            )
            audit_log(
                AuditAction.DOCUMENT_FAILED.value,
                {"document_id": document.id, "filename": filename, "kind": "processing"},
            )
            raise

        audit_log(
            AuditAction.DOCUMENT_INGESTED.value,
            {
                "document_id": document.id,
                "filename": filename,
                "mime_type": extracted.mime_type,
                "chars": extracted.char_count,
            },
        )
        return await self.get_document(document.id)

    async def _analyze_stored(self, document: Document, options: Optional[AnalysisOptions]) -> None:
        """Analyze stored content and persist the result; failures are recorded, not raised."""
        options = options or AnalysisOptions()
        try:
            analysis = await self.analyzer.analyze(document.content, document.filename, options)
        except AnalysisFailed as e:
            self.logger.warning(f"Analysis failed for {document.id}: {e.message}")
            analysis = AnalysisResult(failures=e.failures or {"analysis": e.message}, options=options)
        except Exception as e:
            self.logger.exception(f"Unexpected analysis error for {document.id}")
            analysis = AnalysisResult(failures={"analysis": str(e)}, options=options)
        await self.store.save_analysis(document.id, analysis)

    async def _embed_stored(self, document: Document) -> None:
        """Embed stored content; failures are recorded on the document."""
        try:
            await self.indexer.embed_document(document)
        except PipelineError as e:
            self.logger.warning(f"Embedding failed for {document.id}: {e.message}")
            await self.store.record_embedding_failure(document.id, e.message)
        except Exception as e:
            self.logger.exception(f"Unexpected embedding error for {document.id}")
            await self.store.record_embedding_failure(document.id, str(e))

    async def reanalyze_document(
        self,
        document_id: str,
        options: Optional[AnalysisOptions] = None,
    ) -> AnalysisResult:
        """Recompute and replace only the analysis facet."""
        document = await self.get_document(document_id)
        if not document.has_content:
            raise ValidationError("Document has no extracted content", document_id=document_id)

        analysis = await self.analyzer.analyze(document.content, document.filename, options)
        await self.store.save_analysis(document_id, analysis)
        return analysis

    async def embed_document(self, document_id: str, force: bool = False) -> EmbedOutcome:
        """
        Compute the embedding of one stored document.

        Raises:
            NotFound: Unknown document id
            EmbeddingFailed: The failure is also recorded on the document
        """
        document = await self.get_document(document_id)
        try:
            return await self.indexer.embed_document(document, force=force)
        except EmbeddingFailed as e:
            await self.store.record_embedding_failure(document_id, e.message)
            raise

    async def backfill_embeddings(
        self,
        owner_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> BackfillReport:
        """Embed documents with missing or stale embeddings."""
        if limit is not None and limit < 1:
            raise ValidationError("limit must be positive")
        return await self.indexer.backfill(owner_id=owner_id, limit=limit)

    async def search(
        self,
        query: str = "",
        filters: Optional[SearchFilters | dict[str, Any]] = None,
        owner_id: Optional[str] = None,
        top_k: Optional[int] = None,
    ) -> RetrievalResult:
        """Rank stored documents for a query and filters."""
        try:
            retrieval_query = RetrievalQuery(
                text=query or "",
                filters=filters or SearchFilters(),
                owner_id=owner_id,
                top_k=top_k,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid search request: {e}") from e
        return await self.retrieval.search(retrieval_query)

    async def answer(
        self,
        query: str,
        owner_id: Optional[str] = None,
        filters: Optional[SearchFilters] = None,
    ) -> GeneratedAnswer:
        """Answer a question from stored documents."""
        return await self.answerer.answer(query, owner_id=owner_id, filters=filters)

    def preview(self, document: Document) -> str:
        """Leading slice of the content for display."""
        return document.preview(self.settings.retrieval.preview_chars)


def build_pipeline(
    store: Optional[DocumentStore] = None,
    settings: Optional[AppSettings] = None,
    embedding_provider: Optional[EmbeddingProvider] = None,
    llm_client: Optional[LLMClient] = None,
) -> DocumentPipeline:
    """
    Wire a pipeline from configuration.

    Args:
        store: Document store; defaults to the MongoDB repository
        settings: Application settings; defaults to the global settings
        embedding_provider: Overrides the configured embedding provider
        llm_client: Overrides the configured generation client
    """
    settings = settings or get_settings()
    if store is None:
        from hr_assistant.data.repositories import DocumentRepository

        store = DocumentRepository()

    provider = embedding_provider or get_embedding_provider(settings)
    client = llm_client if llm_client is not None else get_llm_client(settings.generation)

    retrieval = RetrievalEngine(
        store,
        provider,
        settings=settings.retrieval,
        embedding_timeout=settings.embedding.timeout_seconds,
        embedding_max_chars=settings.embedding.max_chars,
    )
    answerer = QueryAnswerer(
        ContextAssembler(retrieval, settings.generation),
        ResponseGenerator(client, settings.generation),
        store,
    )

    return DocumentPipeline(
        store=store,
        extractor=TextExtractor(
            max_file_size_bytes=settings.extraction.max_file_size_bytes,
        ),
        analyzer=DocumentAnalyzer(settings.analysis, llm_client=client),
        indexer=EmbeddingIndexer(store, provider, settings.embedding),
        retrieval=retrieval,
        answerer=answerer,
        settings=settings,
    )
