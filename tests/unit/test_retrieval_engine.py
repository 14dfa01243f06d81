"""
Tests for hr_assistant.core.retrieval — filtering, hybrid ranking,
deterministic ordering, lexical fallback and query logging.
"""

from datetime import datetime

import pytest

from hr_assistant.core.retrieval import RetrievalEngine, matches_filters
from hr_assistant.data.models import AnalysisResult, RetrievalQuery, SearchFilters
from hr_assistant.utils.config import RetrievalSettings
from hr_assistant.utils.constants import DocumentStatus, QueryKind

from conftest import (
    FailingEmbeddingProvider,
    FakeEmbeddingProvider,
    JOB_TEXT,
    POLICY_TEXT,
    RESUME_TEXT,
    days_ago,
)


RESUME_ANALYSIS = AnalysisResult(
    summary="Senior frontend engineer building React applications.",
    skills=["React", "TypeScript", "GraphQL", "Docker"],
    keywords=["React", "frontend", "recruiting"],
    experience_level="senior",
    document_type="resume",
)
POLICY_ANALYSIS = AnalysisResult(
    keywords=["remote", "policy", "stipends"],
    document_type="policy",
)
JOB_ANALYSIS = AnalysisResult(
    skills=["Python", "Kubernetes", "PostgreSQL"],
    keywords=["backend", "Python"],
    experience_level="mid",
    document_type="job_description",
)


async def _seed(store, make_document, make_embedding, embed=True):
    """Store a resume, a policy and a job description, oldest first."""
    docs = {}
    for i, (name, text, analysis) in enumerate(
        [
            ("resume", RESUME_TEXT, RESUME_ANALYSIS),
            ("policy", POLICY_TEXT, POLICY_ANALYSIS),
            ("job", JOB_TEXT, JOB_ANALYSIS),
        ]
    ):
        docs[name] = await store.create(
            make_document(
                content=text,
                filename=f"{name}.txt",
                analysis=analysis,
                embedding=await make_embedding(text) if embed else None,
                uploaded_at=days_ago(3 - i),
            )
        )
    return docs


def _query(text="", **kwargs) -> RetrievalQuery:
    filters = kwargs.pop("filters", None) or SearchFilters()
    return RetrievalQuery(text=text, filters=filters, **kwargs)


@pytest.fixture
def engine(store, embedding_provider):
    return RetrievalEngine(store, embedding_provider, RetrievalSettings())


# ── matches_filters() ───────────────────────────────────────────────────────


class TestMatchesFilters:
    def test_empty_filters_match(self, make_document):
        assert matches_filters(make_document(), SearchFilters())

    def test_skills_require_all(self, make_document):
        doc = make_document(analysis=RESUME_ANALYSIS)
        assert matches_filters(doc, SearchFilters(skills=["react", "DOCKER"]))
        assert not matches_filters(doc, SearchFilters(skills=["React", "Kubernetes"]))

    def test_levels_are_one_of(self, make_document):
        doc = make_document(analysis=RESUME_ANALYSIS)
        assert matches_filters(doc, SearchFilters(experience_levels=["mid", "senior"]))
        assert not matches_filters(doc, SearchFilters(experience_levels=["junior"]))

    def test_analysis_filter_needs_analysis(self, make_document):
        assert not matches_filters(make_document(), SearchFilters(document_types=["resume"]))

    def test_status_filter(self, make_document):
        doc = make_document(status=DocumentStatus.ERROR)
        assert matches_filters(doc, SearchFilters(statuses=["error"]))
        assert not matches_filters(doc, SearchFilters(statuses=["completed"]))

    def test_date_range(self, make_document):
        doc = make_document(uploaded_at=days_ago(5))
        assert matches_filters(doc, SearchFilters(uploaded_after=days_ago(6), uploaded_before=days_ago(4)))
        assert not matches_filters(doc, SearchFilters(uploaded_after=days_ago(4)))

    def test_aware_bounds_normalized_to_utc(self, make_document):
        filters = SearchFilters(uploaded_after="2024-05-26T02:00:00+02:00")

        assert filters.uploaded_after == datetime(2024, 5, 26)
        assert filters.uploaded_after.tzinfo is None
        assert matches_filters(make_document(uploaded_at=days_ago(5)), filters)
        assert not matches_filters(make_document(uploaded_at=days_ago(7)), filters)

    def test_metadata_equality(self, make_document):
        doc = make_document(metadata={"department": "engineering"})
        assert matches_filters(doc, SearchFilters(metadata={"department": "engineering"}))
        assert not matches_filters(doc, SearchFilters(metadata={"department": "sales"}))

    def test_all_constraints_combined(self, make_document):
        doc = make_document(analysis=RESUME_ANALYSIS, metadata={"department": "engineering"})
        filters = SearchFilters(skills=["React"], metadata={"department": "sales"})
        assert not matches_filters(doc, filters)


# ── Ranking ─────────────────────────────────────────────────────────────────


class TestRanking:
    @pytest.mark.asyncio
    async def test_most_relevant_first(self, engine, store, make_document, make_embedding):
        docs = await _seed(store, make_document, make_embedding)

        result = await engine.search(_query("React engineer"))

        assert result.hits[0].document_id == docs["resume"].id
        assert result.semantic_enabled
        assert result.hits[0].signals.used_semantic
        assert "react" in result.hits[0].signals.matched_terms

    @pytest.mark.asyncio
    async def test_deterministic(self, engine, store, make_document, make_embedding):
        await _seed(store, make_document, make_embedding)

        first = await engine.search(_query("remote engineer policy"))
        second = await engine.search(_query("remote engineer policy"))

        assert first.document_ids == second.document_ids
        assert [h.score for h in first.hits] == [h.score for h in second.hits]

    @pytest.mark.asyncio
    async def test_scores_bounded_and_descending(self, engine, store, make_document, make_embedding):
        await _seed(store, make_document, make_embedding)

        result = await engine.search(_query("python engineer remote"))

        scores = [hit.score for hit in result.hits]
        assert scores == sorted(scores, reverse=True)
        assert all(0.0 <= s <= 1.0 for s in scores)

    @pytest.mark.asyncio
    async def test_unrelated_query_without_vectors(self, engine, store, make_document, make_embedding):
        await _seed(store, make_document, make_embedding, embed=False)

        result = await engine.search(_query("zebra"))

        assert result.hits == []
        assert result.total_candidates == 3
        assert not result.semantic_enabled

    @pytest.mark.asyncio
    async def test_ties_broken_by_recency_then_id(self, engine, store, make_document):
        older = await store.create(make_document(content="Payroll calendar", uploaded_at=days_ago(9)))
        first = await store.create(make_document(content="Payroll calendar", uploaded_at=days_ago(2)))
        second = await store.create(make_document(content="Payroll calendar", uploaded_at=days_ago(2)))

        result = await engine.search(_query("payroll"))

        assert result.document_ids == sorted([first.id, second.id]) + [older.id]

    @pytest.mark.asyncio
    async def test_top_k(self, engine, store, make_document, make_embedding):
        await _seed(store, make_document, make_embedding)

        result = await engine.search(_query("", top_k=2))

        assert len(result.hits) == 2

    @pytest.mark.asyncio
    async def test_owner_scope(self, engine, store, make_document):
        mine = await store.create(make_document(content="Payroll calendar", owner_id="owner-1"))
        await store.create(make_document(content="Payroll calendar", owner_id="owner-2"))

        result = await engine.search(_query("payroll", owner_id="owner-1"))

        assert result.document_ids == [mine.id]


class TestEmptyQuery:
    @pytest.mark.asyncio
    async def test_returns_all_by_recency(self, engine, store, make_document, make_embedding):
        docs = await _seed(store, make_document, make_embedding)

        result = await engine.search(_query(""))

        assert result.document_ids == [docs["job"].id, docs["policy"].id, docs["resume"].id]
        assert all(hit.score == 0.0 for hit in result.hits)

    @pytest.mark.asyncio
    async def test_filters_only(self, engine, store, make_document, make_embedding):
        docs = await _seed(store, make_document, make_embedding)

        result = await engine.search(_query("", filters=SearchFilters(document_types=["policy", "resume"])))

        assert result.document_ids == [docs["policy"].id, docs["resume"].id]

    @pytest.mark.asyncio
    async def test_no_query_embedding(self, engine, store, embedding_provider, make_document, make_embedding):
        await _seed(store, make_document, make_embedding)
        embedding_provider.calls.clear()

        await engine.search(_query(""))

        assert embedding_provider.calls == []


class TestFilteredSearch:
    @pytest.mark.asyncio
    async def test_skill_filter(self, engine, store, make_document, make_embedding):
        docs = await _seed(store, make_document, make_embedding)

        result = await engine.search(_query("engineer", filters=SearchFilters(skills=["python"])))

        assert result.document_ids == [docs["job"].id]
        assert result.total_candidates == 1

    @pytest.mark.asyncio
    async def test_conflicting_filters_return_nothing(self, engine, store, make_document, make_embedding):
        await _seed(store, make_document, make_embedding)

        filters = SearchFilters(skills=["React"], document_types=["policy"])
        result = await engine.search(_query("", filters=filters))

        assert result.hits == []

    @pytest.mark.asyncio
    async def test_aware_date_filter(self, engine, store, make_document, make_embedding):
        docs = await _seed(store, make_document, make_embedding)

        filters = SearchFilters(uploaded_after="2024-05-29T12:00:00Z")
        result = await engine.search(_query("", filters=filters))

        assert result.document_ids == [docs["job"].id, docs["policy"].id]


class TestCandidatePaging:
    @pytest.fixture
    def small_pages(self, store):
        return RetrievalEngine(store, None, RetrievalSettings(candidate_limit=2))

    async def _seed_payroll(self, store, make_document, count=5):
        for i in range(count):
            await store.create(make_document(content="Payroll runs monthly.", uploaded_at=days_ago(i)))

    @pytest.mark.asyncio
    async def test_older_match_beyond_first_page(self, small_pages, store, make_document):
        old = await store.create(
            make_document(content="Parental leave policy covers sixteen weeks.", uploaded_at=days_ago(30))
        )
        await self._seed_payroll(store, make_document)

        result = await small_pages.search(_query("parental leave"))

        assert result.document_ids == [old.id]
        assert result.total_candidates == 6

    @pytest.mark.asyncio
    async def test_filter_only_query_sees_every_match(self, small_pages, store, make_document):
        await self._seed_payroll(store, make_document)

        result = await small_pages.search(_query(""))

        assert len(result.hits) == 5
        assert result.total_candidates == 5

    @pytest.mark.asyncio
    async def test_filters_applied_before_paging(self, small_pages, store, make_document):
        policy = await store.create(
            make_document(
                content="Parental leave policy covers sixteen weeks.",
                analysis=POLICY_ANALYSIS,
                uploaded_at=days_ago(30),
            )
        )
        await self._seed_payroll(store, make_document)

        result = await small_pages.search(_query("", filters=SearchFilters(document_types=["policy"])))

        assert result.document_ids == [policy.id]
        assert result.total_candidates == 1


# ── Semantic fallback ───────────────────────────────────────────────────────


class TestLexicalFallback:
    @pytest.mark.asyncio
    async def test_provider_failure_degrades_to_lexical(self, store, make_document, make_embedding):
        docs = await _seed(store, make_document, make_embedding)
        provider = FailingEmbeddingProvider()
        engine = RetrievalEngine(store, provider, RetrievalSettings())

        result = await engine.search(_query("React engineer"))

        assert provider.calls == ["React engineer"]
        assert not result.semantic_enabled
        assert result.hits[0].document_id == docs["resume"].id
        assert docs["policy"].id not in result.document_ids
        assert all(hit.signals.semantic is None for hit in result.hits)

    @pytest.mark.asyncio
    async def test_other_model_vectors_ignored(self, store, make_document, make_embedding):
        await _seed(store, make_document, make_embedding)
        provider = FakeEmbeddingProvider(model_id="another-model")
        engine = RetrievalEngine(store, provider, RetrievalSettings())

        result = await engine.search(_query("React engineer"))

        assert provider.calls == []
        assert not result.semantic_enabled

    @pytest.mark.asyncio
    async def test_unembedded_document_keeps_lexical_score(self, engine, store, make_document, make_embedding):
        text = "Payroll runs monthly."
        embedded = await store.create(make_document(content=text, embedding=await make_embedding(text)))
        pending = await store.create(make_document(content=text))

        result = await engine.search(_query("payroll"))

        hits = {hit.document_id: hit for hit in result.hits}
        assert hits[embedded.id].signals.used_semantic
        assert not hits[pending.id].signals.used_semantic
        assert hits[pending.id].score == hits[pending.id].signals.lexical

    @pytest.mark.asyncio
    async def test_no_provider(self, store, make_document, make_embedding):
        docs = await _seed(store, make_document, make_embedding)
        engine = RetrievalEngine(store, None, RetrievalSettings())

        result = await engine.search(_query("stipends"))

        assert result.document_ids == [docs["policy"].id]


# ── Hit contents ────────────────────────────────────────────────────────────


class TestHits:
    @pytest.mark.asyncio
    async def test_highlights_and_preview(self, store, make_document, make_embedding):
        docs = await _seed(store, make_document, make_embedding, embed=False)
        engine = RetrievalEngine(store, None, RetrievalSettings(preview_chars=40))

        result = await engine.search(_query("stipends"))

        hit = result.hits[0]
        assert hit.document_id == docs["policy"].id
        assert hit.highlights == ["Equipment stipends are reimbursed quarterly."]
        assert len(hit.preview) <= 40
        assert hit.title == "policy"

    @pytest.mark.asyncio
    async def test_highlights_disabled(self, store, make_document):
        await store.create(make_document(content="Payroll runs monthly."))
        engine = RetrievalEngine(store, None, RetrievalSettings(max_highlights=0))

        result = await engine.search(_query("payroll"))

        assert result.hits[0].highlights == []


# ── Query log ───────────────────────────────────────────────────────────────


class TestQueryLog:
    @pytest.mark.asyncio
    async def test_search_logged(self, engine, store, make_document, make_embedding):
        await _seed(store, make_document, make_embedding)

        result = await engine.search(_query("React", owner_id="owner-1", filters=SearchFilters(skills=["React"])))

        assert len(store.query_logs) == 1
        entry = store.query_logs[0]
        assert entry.kind == QueryKind.SEARCH
        assert entry.query == "React"
        assert entry.owner_id == "owner-1"
        assert entry.filters == {"skills": ["React"]}
        assert entry.document_ids == result.document_ids
        assert entry.result_count == len(result.hits)

    @pytest.mark.asyncio
    async def test_logging_can_be_skipped(self, engine, store, make_document, make_embedding):
        await _seed(store, make_document, make_embedding)

        await engine.search(_query("React"), log_query=False)

        assert store.query_logs == []

    @pytest.mark.asyncio
    async def test_log_failure_does_not_fail_search(self, engine, store, make_document, monkeypatch):
        await store.create(make_document(content="Payroll runs monthly."))

        async def broken_log(entry):
            raise RuntimeError("log collection unavailable")

        monkeypatch.setattr(store, "log_query", broken_log)

        result = await engine.search(_query("payroll"))

        assert len(result.hits) == 1
