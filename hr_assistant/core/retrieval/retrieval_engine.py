"""
Hybrid document retrieval.

Ranks stored documents against a free-text query by combining a lexical
signal (term coverage, phrase and field hits) with semantic similarity of
stored embeddings, after applying structured filters. Results are
recomputed on every call and ordered deterministically.
"""

import asyncio
import re
import time
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

import numpy as np

from hr_assistant.data.models import (
    Document,
    MatchSignals,
    QueryLogEntry,
    RetrievalHit,
    RetrievalQuery,
    RetrievalResult,
)
from hr_assistant.data.repositories import DocumentStore
from hr_assistant.ml.embeddings import EmbeddingProvider, cosine_similarity
from hr_assistant.ml.nlp.parsers import split_sentences, tokenize, truncate_text
from hr_assistant.utils.config import RetrievalSettings, get_settings
from hr_assistant.utils.constants import AuditAction, QueryKind
from hr_assistant.utils.logger import LoggerMixin, audit_log

# Lexical score composition
COVERAGE_WEIGHT = 0.7
PHRASE_BONUS = 0.15
FIELD_HIT_WEIGHT = 0.15

HIGHLIGHT_MAX_CHARS = 240


@dataclass
class ScoredDocument:
    """Intermediate scoring state for one candidate."""

    document: Document
    lexical: float = 0.0
    semantic: Optional[float] = None
    matched_terms: list[str] = field(default_factory=list)

    def combined(self, lexical_weight: float, semantic_weight: float) -> float:
        if self.semantic is None:
            return self.lexical
        total = lexical_weight + semantic_weight
        return (lexical_weight * self.lexical + semantic_weight * self.semantic) / total


class RetrievalEngine(LoggerMixin):
    """
    Ranks documents for a query.

    Scoring:
    - Lexical: share of query terms found in the document, plus bonuses
      for the whole phrase and for hits on keywords/skills
    - Semantic: cosine similarity of query and document embeddings, only
      for records from the configured model and dimension
    - Final: weighted mean of both, or lexical alone without a usable vector

    A document without a usable vector keeps its raw lexical score, so
    while backfill is incomplete it can outrank an embedded document with
    the same lexical match whose cosine similarity is below its lexical
    score. Backfill removes the imbalance.

    Candidates are read from the store one page of ``candidate_limit``
    documents at a time, already filtered, until every match has been
    scored.
    """

    def __init__(
        self,
        store: DocumentStore,
        embedding_provider: Optional[EmbeddingProvider] = None,
        settings: Optional[RetrievalSettings] = None,
        embedding_timeout: Optional[float] = None,
        embedding_max_chars: Optional[int] = None,
    ):
        app_settings = get_settings()
        self.store = store
        self.embedding_provider = embedding_provider
        self.settings = settings or app_settings.retrieval
        self.embedding_timeout = embedding_timeout or app_settings.embedding.timeout_seconds
        self.embedding_max_chars = embedding_max_chars or app_settings.embedding.max_chars

    async def search(self, query: RetrievalQuery, log_query: bool = True) -> RetrievalResult:
        """
        Run a query against the store.

        Args:
            query: Query text, filters, owner scope and result size
            log_query: Persist a query-log entry for this search

        Returns:
            RetrievalResult with hits ordered by score, recency, then id
        """
        start_time = time.time()
        top_k = query.top_k or self.settings.top_k
        text = (query.text or "").strip()

        query_terms = list(dict.fromkeys(tokenize(text)))
        scored: list[tuple[float, ScoredDocument]] = []
        query_vector: Optional[np.ndarray] = None
        embedding_attempted = False
        total_candidates = 0

        async for doc in self._iter_candidates(query):
            total_candidates += 1
            if not text:
                # Filter-only query: every match, ordered by recency
                scored.append((0.0, ScoredDocument(document=doc)))
                continue

            if not embedding_attempted and self._usable_vector(doc):
                embedding_attempted = True
                query_vector = await self._embed_query(text)

            entry = self._score_lexical(doc, text, query_terms)
            if query_vector is not None and self._usable_vector(doc):
                entry.semantic = round(cosine_similarity(query_vector, doc.embedding.vector), 4)

            eligible = entry.lexical > 0 or (
                entry.semantic is not None and entry.semantic >= self.settings.semantic_threshold
            )
            if eligible:
                score = entry.combined(self.settings.lexical_weight, self.settings.semantic_weight)
                scored.append((round(score, 4), entry))

        # Stable sorts: id ascending, then score and recency descending
        scored.sort(key=lambda item: item[1].document.id)
        scored.sort(
            key=lambda item: (item[0], item[1].document.updated_at, item[1].document.uploaded_at),
            reverse=True,
        )

        hits = [self._build_hit(score, entry, query_terms) for score, entry in scored[:top_k]]
        result = RetrievalResult(
            query=text,
            hits=hits,
            total_candidates=total_candidates,
            semantic_enabled=query_vector is not None,
        )

        duration_ms = int((time.time() - start_time) * 1000)
        self.logger.debug(
            f"Search returned {len(hits)} of {total_candidates} candidates in {duration_ms}ms"
        )
        audit_log(
            AuditAction.SEARCH_PERFORMED.value,
            {
                "owner_id": query.owner_id,
                "query_chars": len(text),
                "result_count": len(hits),
                "semantic": result.semantic_enabled,
            },
            audit_type="QUERY",
        )

        if log_query:
            await self._log_search(query, result, duration_ms)

        return result

    async def _iter_candidates(self, query: RetrievalQuery) -> AsyncIterator[Document]:
        page_size = self.settings.candidate_limit
        skip = 0
        while True:
            page = await self.store.find_search_candidates(
                query.filters,
                owner_id=query.owner_id,
                skip=skip,
                limit=page_size,
            )
            for document in page:
                yield document
            if len(page) < page_size:
                return
            skip += page_size

    def _usable_vector(self, document: Document) -> bool:
        record = document.embedding
        if record is None or self.embedding_provider is None:
            return False
        return (
            record.model_id == self.embedding_provider.model_id
            and record.dimension == self.embedding_provider.dimension
            and len(record.vector) == record.dimension
        )

    async def _embed_query(self, text: str) -> Optional[np.ndarray]:
        """Embed the query; any failure degrades the search to lexical only."""
        try:
            vector = await asyncio.wait_for(
                self.embedding_provider.embed(text[: self.embedding_max_chars]),
                timeout=self.embedding_timeout,
            )
        except asyncio.TimeoutError:
            self.logger.warning("Query embedding timed out, using lexical ranking only")
            return None
        except Exception as e:
            self.logger.warning(f"Query embedding failed, using lexical ranking only: {e}")
            return None

        vector = np.asarray(vector, dtype=np.float32).reshape(-1)
        if vector.shape[0] != self.embedding_provider.dimension:
            self.logger.warning(
                f"Query embedding has dimension {vector.shape[0]}, "
                f"expected {self.embedding_provider.dimension}; using lexical ranking only"
            )
            return None
        return vector

    def _score_lexical(self, document: Document, text: str, query_terms: list[str]) -> ScoredDocument:
        entry = ScoredDocument(document=document)
        if not query_terms:
            return entry

        analysis = document.analysis
        field_values: list[str] = []
        parts = [document.title, document.filename, document.content]
        if analysis:
            field_values = analysis.keywords + analysis.skills
            parts.extend(field_values)
            if analysis.summary:
                parts.append(analysis.summary)

        doc_terms = set(tokenize(" ".join(parts)))
        field_terms = set(tokenize(" ".join(field_values)))

        matched = [term for term in query_terms if term in doc_terms]
        if not matched:
            return entry

        coverage = len(matched) / len(query_terms)
        field_ratio = sum(1 for term in matched if term in field_terms) / len(query_terms)

        phrase = 0.0
        if len(query_terms) > 1:
            normalized_query = " ".join(text.lower().split())
            haystack = " ".join(document.content.lower().split())
            if normalized_query in haystack:
                phrase = 1.0

        entry.lexical = round(
            min(1.0, COVERAGE_WEIGHT * coverage + PHRASE_BONUS * phrase + FIELD_HIT_WEIGHT * field_ratio),
            4,
        )
        entry.matched_terms = matched
        return entry

    def _highlights(self, document: Document, query_terms: list[str]) -> list[str]:
        """Sentences mentioning a query term, in document order."""
        if not query_terms or self.settings.max_highlights <= 0:
            return []

        pattern = re.compile(
            r"(?<![\w])(" + "|".join(re.escape(t) for t in query_terms) + r")(?![\w])",
            re.IGNORECASE,
        )
        highlights = []
        for sentence in split_sentences(document.content):
            if pattern.search(sentence):
                highlights.append(truncate_text(sentence, HIGHLIGHT_MAX_CHARS))
                if len(highlights) >= self.settings.max_highlights:
                    break
        return highlights

    def _build_hit(self, score: float, entry: ScoredDocument, query_terms: list[str]) -> RetrievalHit:
        doc = entry.document
        return RetrievalHit(
            document_id=doc.id,
            title=doc.title or doc.filename,
            filename=doc.filename,
            score=score,
            signals=MatchSignals(
                lexical=entry.lexical,
                semantic=entry.semantic,
                matched_terms=entry.matched_terms,
                used_semantic=entry.semantic is not None,
            ),
            preview=doc.preview(self.settings.preview_chars),
            highlights=self._highlights(doc, entry.matched_terms or query_terms),
            uploaded_at=doc.uploaded_at,
            updated_at=doc.updated_at,
        )

    async def _log_search(self, query: RetrievalQuery, result: RetrievalResult, duration_ms: int) -> None:
        entry = QueryLogEntry(
            kind=QueryKind.SEARCH,
            owner_id=query.owner_id,
            query=result.query,
            filters=query.filters.model_dump(mode="json", exclude_defaults=True),
            result_count=len(result.hits),
            document_ids=result.document_ids,
            duration_ms=duration_ms,
        )
        try:
            await self.store.log_query(entry)
        except Exception as e:
            self.logger.warning(f"Failed to log search query: {e}")
