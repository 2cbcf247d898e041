"""Embedding providers."""

from vaguefinder.config import Settings
from vaguefinder.matching.embeddings.base import EmbeddingProvider, ProgressCallback
from vaguefinder.matching.embeddings.local import LocalEmbeddingProvider
from vaguefinder.matching.embeddings.ollama import OllamaEmbeddingProvider
from vaguefinder.matching.embeddings.openai import OpenAIEmbeddingProvider
from vaguefinder.models.enums import ProviderType


def create_provider(settings: Settings) -> EmbeddingProvider:
    """Build the embedding provider selected in settings."""
    if settings.provider == ProviderType.OLLAMA:
        return OllamaEmbeddingProvider(
            model=settings.ollama_model,
            base_url=settings.ollama_base_url,
        )
    if settings.provider == ProviderType.OPENAI:
        return OpenAIEmbeddingProvider(
            model=settings.openai_model,
            api_key=settings.openai_api_key or None,
        )
    return LocalEmbeddingProvider(
        model_name=settings.model_name,
        device=settings.device,
    )


__all__ = [
    "EmbeddingProvider",
    "ProgressCallback",
    "LocalEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "create_provider",
]
