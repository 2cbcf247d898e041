"""Ollama embedding provider for local LLM embeddings."""

import json
import logging

import httpx

from vaguefinder.matching.embeddings.base import EmbeddingProvider, ProgressCallback
from vaguefinder.errors import ProviderLoadError
from vaguefinder.models.enums import LoadStatus
from vaguefinder.models.progress import ProgressSnapshot

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider(EmbeddingProvider):
    """
    Local embedding provider using Ollama.

    Ollama runs models locally with GPU acceleration.
    Install Ollama from: https://ollama.ai

    Recommended embedding models:
    - nomic-embed-text (good quality, 768 dim)
    - mxbai-embed-large (high quality, 1024 dim)
    - all-minilm (fast, 384 dim)
    """

    name = "ollama"

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: str = "http://localhost:11434",
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Ollama embedding provider.

        Args:
            model: Ollama embedding model name.
            base_url: Ollama server URL.
            client: Optional preconfigured HTTP client.
        """
        super().__init__()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=60.0)
        return self._client

    async def is_available(self) -> bool:
        """Check if the Ollama server is running and the model is present."""
        client = self._get_client()
        response = await client.get(f"{self.base_url}/api/tags")
        response.raise_for_status()
        models = response.json().get("models", [])
        return any(m.get("name", "").startswith(self.model) for m in models)

    async def pull_model(self, on_progress: ProgressCallback | None = None) -> None:
        """Pull the embedding model, streaming download progress."""
        client = self._get_client()
        async with client.stream(
            "POST",
            f"{self.base_url}/api/pull",
            json={"name": self.model, "stream": True},
            timeout=None,  # Models can take a long time to download
        ) as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                self._emit(on_progress, self._parse_pull_line(json.loads(line)))

    def _parse_pull_line(self, data: dict) -> ProgressSnapshot:
        if "error" in data:
            raise ProviderLoadError(
                f"Ollama failed to pull {self.model}: {data['error']}",
                details={"model": self.model},
            )

        total = data.get("total")
        completed = data.get("completed")
        if total:
            return ProgressSnapshot(
                status=LoadStatus.PROGRESS,
                resource_name=self.model,
                resource_file=data.get("digest"),
                progress_fraction=min((completed or 0) / total, 1.0),
                bytes_loaded=completed or 0,
                bytes_total=total,
            )

        status = data.get("status", "")
        return ProgressSnapshot(
            status=LoadStatus.DONE if status == "success" else LoadStatus.DOWNLOAD,
            resource_name=self.model,
            resource_file=data.get("digest"),
        )

    async def load(self, on_progress: ProgressCallback | None = None) -> None:
        """Make sure the server is reachable and the model is pulled."""
        if self._loaded:
            return

        self._emit(on_progress, ProgressSnapshot(
            status=LoadStatus.INITIATE,
            resource_name=self.model,
        ))
        try:
            if not await self.is_available():
                logger.info("Pulling %s from Ollama", self.model)
                await self.pull_model(on_progress)
        except ProviderLoadError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderLoadError(
                f"Unable to load model {self.model} due to {e}",
                details={"model": self.model, "base_url": self.base_url},
            ) from e

        self._loaded = True
        self._emit(on_progress, ProgressSnapshot(
            status=LoadStatus.READY,
            resource_name=self.model,
            progress_fraction=1.0,
        ))
        logger.info("Ollama model %s ready at %s", self.model, self.base_url)

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding using Ollama's local API."""
        client = self._get_client()
        response = await client.post(
            f"{self.base_url}/api/embeddings",
            json={"model": self.model, "prompt": text},
        )
        response.raise_for_status()
        return self._normalize(response.json()["embedding"])

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        await super().aclose()
