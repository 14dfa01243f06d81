"""
Shared test fixtures for the HR assistant test suite.

Sets environment variables before any hr_assistant imports so settings
load without a database or API key, then provides deterministic fake
providers, an in-memory store and document factories.
"""

import os

# === Set environment BEFORE any hr_assistant imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "hr_assistant_test")
os.environ["LOG_FILE_OUTPUT"] = "false"
os.environ["LOG_CONSOLE_OUTPUT"] = "false"
os.environ.pop("LLM_API_KEY", None)

import re
import zlib
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Union

import numpy as np
import pytest

from hr_assistant.core.pipeline import DocumentPipeline, build_pipeline
from hr_assistant.data.models import (
    AnalysisResult,
    Document,
    EmbeddingRecord,
    compute_content_hash,
)
from hr_assistant.data.repositories import InMemoryDocumentStore
from hr_assistant.utils.config import AppSettings, get_settings
from hr_assistant.utils.constants import DocumentStatus


RESUME_TEXT = """Jane Doe
jane@example.com | (555) 123-4567
San Francisco, CA

Summary
Senior frontend engineer with 8 years of experience building React applications for hiring platforms.

Experience
Senior Software Engineer, Acme Corp, Jan 2018 - Present
Led the React migration of the recruiting dashboard and mentored four engineers.

Skills
React, TypeScript, GraphQL, Docker

Education
B.S. Computer Science, State University
"""

POLICY_TEXT = """Remote Work Policy

Scope
This policy applies to all full-time employees.

Guidelines
Employees must agree a remote schedule with their manager. Equipment stipends are reimbursed quarterly.
Compliance with the security handbook is required when working from home.
"""

JOB_TEXT = """Job Description: Backend Engineer

Responsibilities
Design Python services and maintain Kubernetes deployments.

Requirements
3+ years of Python experience. Familiarity with PostgreSQL is preferred.
"""


# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------


class FakeEmbeddingProvider:
    """
    Deterministic bag-of-words embeddings.

    Texts sharing words get similar vectors. Any text containing
    ``fail_marker`` raises, to simulate a provider error.
    """

    def __init__(self, dimension: int = 64, model_id: str = "fake-embedding", fail_marker: str = "CORRUPT"):
        self.dimension = dimension
        self.model_id = model_id
        self.fail_marker = fail_marker
        self.calls: list[str] = []

    async def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        if self.fail_marker and self.fail_marker in text:
            raise RuntimeError("provider rejected input")

        vector = np.zeros(self.dimension, dtype=np.float32)
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            vector[zlib.crc32(word.encode()) % self.dimension] += 1.0
        norm = np.linalg.norm(vector)
        return vector / norm if norm else vector


class FailingEmbeddingProvider(FakeEmbeddingProvider):
    """Provider whose every call fails."""

    async def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        raise RuntimeError("embedding service unavailable")


class ScriptedLLMClient:
    """
    LLM client returning scripted responses.

    ``responses`` is either a list consumed in order, a single string, or a
    callable receiving (messages, system). Exceptions in the list are raised.
    """

    def __init__(
        self,
        responses: Union[str, list[Any], Callable[..., str]] = "Scripted answer.",
        model: str = "scripted-model",
    ):
        self.responses = responses
        self.model = model
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        self.calls.append({"messages": messages, "system": system, "json_mode": json_mode})
        if callable(self.responses):
            return self.responses(messages, system)
        if isinstance(self.responses, list):
            response = self.responses.pop(0)
            if isinstance(response, BaseException):
                raise response
            return response
        return self.responses


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> AppSettings:
    return get_settings()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def embedding_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def llm_client() -> ScriptedLLMClient:
    return ScriptedLLMClient()


@pytest.fixture
def pipeline(store, embedding_provider, llm_client) -> DocumentPipeline:
    return build_pipeline(
        store=store,
        embedding_provider=embedding_provider,
        llm_client=llm_client,
    )


@pytest.fixture
def make_document():
    """Factory that returns a callable to build Document models."""

    def _factory(
        content: str = RESUME_TEXT,
        owner_id: str = "owner-1",
        filename: str = "document.txt",
        title: Optional[str] = None,
        status: DocumentStatus = DocumentStatus.COMPLETED,
        analysis: Optional[AnalysisResult] = None,
        embedding: Optional[EmbeddingRecord] = None,
        uploaded_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        **kwargs,
    ) -> Document:
        uploaded_at = uploaded_at or datetime(2024, 1, 1, 12, 0, 0)
        return Document(
            owner_id=owner_id,
            filename=filename,
            title=title if title is not None else filename.rsplit(".", 1)[0],
            mime_type="text/plain",
            file_size_bytes=len(content.encode()),
            content=content,
            content_hash=compute_content_hash(content) if content else None,
            status=status,
            analysis=analysis,
            embedding=embedding,
            uploaded_at=uploaded_at,
            created_at=uploaded_at,
            updated_at=updated_at or uploaded_at,
            **kwargs,
        )

    return _factory


@pytest.fixture
def make_embedding(embedding_provider):
    """Factory for EmbeddingRecords computed with the fake provider."""

    async def _factory(
        content: str,
        model_id: Optional[str] = None,
        version: str = "v1",
        computed_at: Optional[datetime] = None,
    ) -> EmbeddingRecord:
        vector = await embedding_provider.embed(content)
        return EmbeddingRecord(
            vector=vector.tolist(),
            model_id=model_id or embedding_provider.model_id,
            version=version,
            dimension=embedding_provider.dimension,
            content_hash=compute_content_hash(content),
            computed_at=computed_at or datetime(2024, 1, 2),
        )

    return _factory


def days_ago(days: int) -> datetime:
    return datetime(2024, 6, 1) - timedelta(days=days)
