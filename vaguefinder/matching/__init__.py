"""Matching module."""

from vaguefinder.matching.embeddings import (
    EmbeddingProvider,
    LocalEmbeddingProvider,
    OllamaEmbeddingProvider,
    OpenAIEmbeddingProvider,
    create_provider,
)
from vaguefinder.matching.similarity import cosine_similarity
from vaguefinder.matching.cache import EmbeddingCache
from vaguefinder.matching.ranker import TopKRanker
from vaguefinder.matching.orchestrator import ComparisonOrchestrator

__all__ = [
    "EmbeddingProvider",
    "LocalEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "create_provider",
    "cosine_similarity",
    "EmbeddingCache",
    "TopKRanker",
    "ComparisonOrchestrator",
]
