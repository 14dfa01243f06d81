"""
Document embedding and the versioned embedding index.

Components:
- EmbeddingProvider: Interface over sentence-transformers and OpenAI models
- EmbeddingIndexer: Computes, persists and backfills document embeddings
"""

from .embedding_model import (
    EmbeddingProvider,
    OpenAIEmbeddingProvider,
    SentenceTransformerProvider,
    cosine_similarity,
    get_embedding_provider,
    normalize_vector,
)

from .embedding_indexer import EmbeddingIndexer

__all__ = [
    # Providers
    "EmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "SentenceTransformerProvider",
    "cosine_similarity",
    "get_embedding_provider",
    "normalize_vector",
    # Indexer
    "EmbeddingIndexer",
]
