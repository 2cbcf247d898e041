"""OpenAI embedding provider."""

import os
from typing import Any

from vaguefinder.matching.embeddings.base import EmbeddingProvider, ProgressCallback
from vaguefinder.errors import ProviderLoadError
from vaguefinder.models.enums import LoadStatus
from vaguefinder.models.progress import ProgressSnapshot


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    Embedding provider using OpenAI's API.

    Requires OPENAI_API_KEY environment variable or an explicit key.
    """

    name = "openai"

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: str | None = None,
    ):
        super().__init__()
        self.model = model
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self._client: Any = None

    async def load(self, on_progress: ProgressCallback | None = None) -> None:
        """Create the API client."""
        if self._loaded:
            return

        if not self.api_key:
            raise ProviderLoadError(
                "Unable to load model: no OpenAI API key configured",
                details={"model": self.model},
            )
        try:
            from openai import AsyncOpenAI
        except ImportError as e:
            raise ProviderLoadError(
                "OpenAI package not installed. "
                "Install with: pip install 'vaguefinder[openai]'",
                details={"model": self.model},
            ) from e

        self._client = AsyncOpenAI(api_key=self.api_key)
        self._loaded = True
        self._emit(on_progress, ProgressSnapshot(
            status=LoadStatus.READY,
            resource_name=self.model,
            progress_fraction=1.0,
        ))

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding using OpenAI API."""
        response = await self._client.embeddings.create(
            model=self.model,
            input=text,
        )
        return self._normalize(response.data[0].embedding)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
        await super().aclose()
