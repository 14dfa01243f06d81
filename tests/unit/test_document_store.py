"""
Tests for hr_assistant.data.repositories.document_store — the in-memory
DocumentStore contract used by the pipeline tests and ``--memory`` mode,
plus the MongoDB translation of search filters.
"""

from datetime import datetime, timedelta

import pytest

from hr_assistant.core.errors import NotFound
from hr_assistant.data.models import AnalysisResult, QueryLogEntry, SearchFilters, utc_now
from hr_assistant.data.repositories.document_repository import build_filter_query
from hr_assistant.utils.constants import DocumentStatus, QueryKind

from conftest import days_ago


# ── Reads ───────────────────────────────────────────────────────────────────


class TestReads:
    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, store):
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_returned_copies_are_detached(self, store, make_document):
        doc = await store.create(make_document(metadata={"team": "people"}))

        fetched = await store.get(doc.id)
        fetched.metadata["team"] = "changed"

        assert (await store.get(doc.id)).metadata["team"] == "people"

    @pytest.mark.asyncio
    async def test_list_newest_first_and_scoped(self, store, make_document):
        old = await store.create(make_document(uploaded_at=days_ago(5)))
        new = await store.create(make_document(uploaded_at=days_ago(1)))
        await store.create(make_document(owner_id="owner-2"))

        documents = await store.list_documents(owner_id="owner-1")

        assert [d.id for d in documents] == [new.id, old.id]

    @pytest.mark.asyncio
    async def test_list_limit(self, store, make_document):
        for i in range(3):
            await store.create(make_document(uploaded_at=days_ago(i)))
        assert len(await store.list_documents(limit=2)) == 2


# ── Facet writes ────────────────────────────────────────────────────────────


class TestFacetWrites:
    @pytest.mark.asyncio
    async def test_unknown_id_raises(self, store):
        with pytest.raises(NotFound):
            await store.update_status("missing", DocumentStatus.COMPLETED)

    @pytest.mark.asyncio
    async def test_save_content_merges_metadata(self, store, make_document):
        doc = await store.create(make_document(metadata={"team": "people"}))

        await store.save_content(doc.id, "new text", "hash", metadata={"page_count": 2})

        stored = await store.get(doc.id)
        assert stored.content == "new text"
        assert stored.metadata == {"team": "people", "page_count": 2}
        assert stored.content_updated_at is not None

    @pytest.mark.asyncio
    async def test_status_with_reason(self, store, make_document):
        doc = await store.create(make_document())

        await store.update_status(doc.id, DocumentStatus.ERROR, "bad file")

        stored = await store.get(doc.id)
        assert stored.status == DocumentStatus.ERROR
        assert stored.error_reason == "bad file"

    @pytest.mark.asyncio
    async def test_analysis_replaced_whole(self, store, make_document):
        doc = await store.create(make_document(analysis=AnalysisResult(skills=["React"], summary="Old")))

        await store.save_analysis(doc.id, AnalysisResult(skills=["Python"]))

        stored = await store.get(doc.id)
        assert stored.analysis.skills == ["Python"]
        assert stored.analysis.summary is None

    @pytest.mark.asyncio
    async def test_write_counts(self, store, make_document):
        doc = await store.create(make_document())
        await store.update_status(doc.id, DocumentStatus.PROCESSING)
        await store.update_status(doc.id, DocumentStatus.COMPLETED)
        assert store.write_counts[doc.id] == 2


class TestSaveEmbedding:
    @pytest.mark.asyncio
    async def test_write_clears_failure(self, store, make_document, make_embedding):
        doc = await store.create(make_document())
        await store.record_embedding_failure(doc.id, "timeout")

        assert await store.save_embedding(doc.id, await make_embedding(doc.content))

        stored = await store.get(doc.id)
        assert stored.embedding_error is None
        assert stored.is_embedded

    @pytest.mark.asyncio
    async def test_older_record_rejected(self, store, make_document, make_embedding):
        now = utc_now()
        doc = await store.create(make_document())
        await store.save_embedding(doc.id, await make_embedding(doc.content, computed_at=now))

        written = await store.save_embedding(
            doc.id, await make_embedding("stale text", computed_at=now - timedelta(minutes=1))
        )

        assert not written
        assert (await store.get(doc.id)).embedding.computed_at == now

    @pytest.mark.asyncio
    async def test_same_timestamp_accepted(self, store, make_document, make_embedding):
        now = utc_now()
        doc = await store.create(make_document())
        await store.save_embedding(doc.id, await make_embedding(doc.content, computed_at=now))

        assert await store.save_embedding(doc.id, await make_embedding(doc.content, computed_at=now, version="v2"))

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_record(self, store, make_document, make_embedding):
        doc = await store.create(make_document(embedding=await make_embedding("older text")))

        await store.record_embedding_failure(doc.id, "provider down")

        stored = await store.get(doc.id)
        assert stored.embedding is not None
        assert stored.embedding_error == "provider down"


# ── find_embedding_candidates() ─────────────────────────────────────────────


class TestEmbeddingCandidates:
    @pytest.mark.asyncio
    async def test_only_missing_or_stale(self, store, make_document, make_embedding):
        missing = await store.create(make_document(content="missing"))
        stale = await store.create(make_document(content="stale", embedding=await make_embedding("stale", version="v0")))
        await store.create(make_document(content="current", embedding=await make_embedding("current")))

        candidates = await store.find_embedding_candidates("fake-embedding", "v1")

        assert {d.id for d in candidates} == {missing.id, stale.id}

    @pytest.mark.asyncio
    async def test_never_attempted_first(self, store, make_document):
        attempted = await store.create(make_document(content="attempted", uploaded_at=days_ago(9)))
        fresh = await store.create(make_document(content="fresh", uploaded_at=days_ago(1)))
        await store.record_embedding_failure(attempted.id, "timeout")

        candidates = await store.find_embedding_candidates("fake-embedding", "v1")

        assert [d.id for d in candidates] == [fresh.id, attempted.id]

    @pytest.mark.asyncio
    async def test_least_recently_attempted_next(self, store, make_document):
        recent = await store.create(make_document(content="recent", embedding_attempted_at=days_ago(1)))
        older = await store.create(make_document(content="older", embedding_attempted_at=days_ago(5)))

        candidates = await store.find_embedding_candidates("fake-embedding", "v1")

        assert [d.id for d in candidates] == [older.id, recent.id]

    @pytest.mark.asyncio
    async def test_error_status_excluded(self, store, make_document):
        await store.create(make_document(status=DocumentStatus.ERROR))
        assert await store.find_embedding_candidates("fake-embedding", "v1") == []

    @pytest.mark.asyncio
    async def test_scope_and_limit(self, store, make_document):
        for i in range(3):
            await store.create(make_document(content=f"doc {i}", uploaded_at=days_ago(i)))
        await store.create(make_document(owner_id="owner-2"))

        candidates = await store.find_embedding_candidates("fake-embedding", "v1", owner_id="owner-1", limit=2)

        assert len(candidates) == 2
        assert all(d.owner_id == "owner-1" for d in candidates)


class TestQueryLog:
    @pytest.mark.asyncio
    async def test_entries_appended(self, store):
        await store.log_query(QueryLogEntry(kind=QueryKind.SEARCH, query="a"))
        await store.log_query(QueryLogEntry(kind=QueryKind.ANSWER, query="b"))
        assert [e.query for e in store.query_logs] == ["a", "b"]


# ── find_search_candidates() ────────────────────────────────────────────────


class TestSearchCandidates:
    @pytest.mark.asyncio
    async def test_filtered_then_paged_newest_first(self, store, make_document):
        policies = [
            await store.create(
                make_document(
                    content=f"policy {i}",
                    analysis=AnalysisResult(document_type="policy"),
                    uploaded_at=days_ago(i),
                )
            )
            for i in range(3)
        ]
        await store.create(make_document(content="resume", analysis=AnalysisResult(document_type="resume")))
        filters = SearchFilters(document_types=["policy"])

        first = await store.find_search_candidates(filters, limit=2)
        second = await store.find_search_candidates(filters, skip=2, limit=2)

        assert [d.id for d in first] == [policies[0].id, policies[1].id]
        assert [d.id for d in second] == [policies[2].id]

    @pytest.mark.asyncio
    async def test_owner_scope(self, store, make_document):
        mine = await store.create(make_document(owner_id="owner-1"))
        await store.create(make_document(owner_id="owner-2"))

        candidates = await store.find_search_candidates(SearchFilters(), owner_id="owner-1")

        assert [d.id for d in candidates] == [mine.id]


class TestMongoFilterQuery:
    def test_empty_filters(self):
        assert build_filter_query(SearchFilters()) == {}

    def test_all_filters_translated(self):
        filters = SearchFilters(
            skills=["React", "C++"],
            keywords=["remote"],
            experience_levels=["Senior"],
            document_types=["resume"],
            statuses=["Completed"],
            mime_types=["text/plain"],
            uploaded_after="2024-01-01T02:00:00+02:00",
            uploaded_before=datetime(2024, 6, 1),
            metadata={"department": "people"},
        )

        query = build_filter_query(filters, owner_id="owner-1")

        assert query == {
            "owner_id": "owner-1",
            "status": {"$in": ["completed"]},
            "mime_type": {"$in": ["text/plain"]},
            "uploaded_at": {"$gte": datetime(2024, 1, 1), "$lte": datetime(2024, 6, 1)},
            "metadata.department": "people",
            "analysis.experience_level": {"$in": ["senior"]},
            "analysis.document_type": {"$in": ["resume"]},
            "$and": [
                {"analysis.skills": {"$regex": "^React$", "$options": "i"}},
                {"analysis.skills": {"$regex": r"^C\+\+$", "$options": "i"}},
                {"analysis.keywords": {"$regex": "^remote$", "$options": "i"}},
            ],
        }
