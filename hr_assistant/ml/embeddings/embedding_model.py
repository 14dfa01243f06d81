"""
Embedding providers for generating text embeddings.

Local sentence-transformers models and the hosted OpenAI embeddings API
share the ``EmbeddingProvider`` interface, so the indexer and the search
engine never care which one is configured.
"""

import asyncio
from typing import Optional, Protocol

import numpy as np
from openai import AsyncOpenAI

from hr_assistant.utils.config import AppSettings, get_settings
from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)

OPENAI_MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class EmbeddingProvider(Protocol):
    """Interface of an embedding provider."""

    model_id: str
    dimension: int

    async def embed(self, text: str) -> np.ndarray:
        """Generate a normalized embedding for a single text."""
        ...


def normalize_vector(vector: np.ndarray) -> np.ndarray:
    """L2-normalize a vector; zero vectors are returned unchanged."""
    norm = np.linalg.norm(vector)
    if norm == 0:
        return vector
    return vector / norm


def cosine_similarity(embedding1, embedding2) -> float:
    """
    Cosine similarity between two embeddings, clipped to [0, 1].

    Returns 0.0 on dimension mismatch or zero vectors.
    """
    a = np.asarray(embedding1, dtype=np.float32)
    b = np.asarray(embedding2, dtype=np.float32)
    if a.shape != b.shape or a.size == 0:
        return 0.0

    denom = float(np.linalg.norm(a) * np.linalg.norm(b))
    if denom == 0.0:
        return 0.0

    sim = float(np.dot(a, b)) / denom
    # Clip to valid range (numerical precision issues)
    return float(np.clip(sim, 0.0, 1.0))


class SentenceTransformerProvider:
    """
    Wrapper for sentence-transformers embedding models.

    The model is loaded lazily on first use and encoding runs in a worker
    thread so it never blocks the event loop.
    """

    def __init__(
        self,
        model_name: str,
        dimension: int,
        device: str = "cpu",
        batch_size: int = 32,
    ):
        """
        Initialize the embedding model.

        Args:
            model_name: Name of the sentence-transformers model to use.
            dimension: Expected output dimension.
            device: Device to run model on ('cpu', 'cuda', 'mps').
            batch_size: Encoding batch size.
        """
        self.model_id = model_name
        self.dimension = dimension
        self.device = device
        self.batch_size = batch_size

        self._model = None

    def _load_model(self) -> None:
        """Lazy load the embedding model."""
        if self._model is not None:
            return

        from sentence_transformers import SentenceTransformer

        logger.info(f"Loading embedding model: {self.model_id}")
        self._model = SentenceTransformer(self.model_id, device=self.device)
        logger.info(f"Embedding model loaded on device: {self.device}")

    def encode(self, texts: str | list[str]) -> np.ndarray:
        """
        Generate normalized embeddings for text(s).

        Returns an array of shape (n_texts, dimension), or (dimension,)
        for a single string.
        """
        self._load_model()

        single_input = isinstance(texts, str)
        if single_input:
            texts = [texts]

        embeddings = self._model.encode(
            texts,
            batch_size=self.batch_size,
            show_progress_bar=False,
            normalize_embeddings=True,
            convert_to_numpy=True,
        )

        if single_input:
            return embeddings[0]
        return embeddings

    async def embed(self, text: str) -> np.ndarray:
        return await asyncio.to_thread(self.encode, text)


class OpenAIEmbeddingProvider:
    """
    OpenAI-based embedding provider.

    Uses text-embedding-3-small by default (1536 dimensions).
    """

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimension: Optional[int] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 30.0,
    ):
        self.model_id = model
        self.dimension = dimension or OPENAI_MODEL_DIMENSIONS.get(model, 1536)
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout_seconds)

    async def embed(self, text: str) -> np.ndarray:
        response = await self._client.embeddings.create(input=text, model=self.model_id)
        vector = np.array(response.data[0].embedding, dtype=np.float32)
        return normalize_vector(vector)


def get_embedding_provider(settings: Optional[AppSettings] = None) -> EmbeddingProvider:
    """Build the configured embedding provider."""
    settings = settings or get_settings()
    cfg = settings.embedding

    if cfg.provider == "openai":
        api_key = settings.generation.api_key
        if api_key is None or not api_key.get_secret_value():
            raise ValueError("EMBEDDING_PROVIDER=openai requires LLM_API_KEY to be set")
        model = cfg.model if cfg.model.startswith("text-embedding") else "text-embedding-3-small"
        return OpenAIEmbeddingProvider(
            api_key=api_key.get_secret_value(),
            model=model,
            dimension=OPENAI_MODEL_DIMENSIONS.get(model, cfg.dimension),
            base_url=settings.generation.base_url,
            timeout_seconds=cfg.timeout_seconds,
        )

    return SentenceTransformerProvider(
        model_name=cfg.model,
        dimension=cfg.dimension,
        device=cfg.device,
        batch_size=cfg.batch_size,
    )
