"""Public handle tying a provider, its load progress and the comparison sweeps together."""

import asyncio
import logging
from collections.abc import Sequence

from vaguefinder.config import Settings
from vaguefinder.errors import ProviderLoadError
from vaguefinder.matching.embeddings import EmbeddingProvider, create_provider
from vaguefinder.matching.orchestrator import Candidate, ComparisonOrchestrator
from vaguefinder.models.comparison import CacheEntry, ComparisonResult, PairResult
from vaguefinder.models.progress import ProgressSnapshot
from vaguefinder.progress import ProgressObserver, ProgressTracker

logger = logging.getLogger(__name__)


class VagueFinder:
    """
    Ranks and compares short texts by semantic closeness.

    Each instance owns its provider and progress channel, so several
    independent finders can live in one process. Call `load()` before
    any comparison.

    Example:
        async with VagueFinder(provider) as finder:
            await finder.load()
            result = await finder.top_k("a sentence about cats", items, 3)
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        embed_timeout: float | None = 30.0,
        load_timeout: float | None = 600.0,
    ):
        self.provider = provider
        self.load_timeout = load_timeout
        self.progress = ProgressTracker()
        self.orchestrator = ComparisonOrchestrator(provider, embed_timeout=embed_timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "VagueFinder":
        """Build a finder with the provider and timeouts from settings."""
        return cls(
            create_provider(settings),
            embed_timeout=settings.embed_timeout,
            load_timeout=settings.load_timeout,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    @property
    def is_loaded(self) -> bool:
        return self.provider.is_loaded

    async def load(self) -> None:
        """
        Load the embedding provider.

        Safe to call again after a failure.

        Raises:
            ProviderLoadError: If the provider cannot be initialized in time.
        """
        logger.debug("Loading %s provider", self.provider.name)
        try:
            await asyncio.wait_for(
                self.provider.load(on_progress=self.progress.update),
                timeout=self.load_timeout,
            )
        except asyncio.TimeoutError as e:
            raise ProviderLoadError(
                f"Unable to load model: timed out after {self.load_timeout}s",
                details={"provider": self.provider.name, "timeout": self.load_timeout},
            ) from e
        except ProviderLoadError:
            raise
        except Exception as e:
            raise ProviderLoadError(
                f"Unable to load model due to {e}",
                details={"provider": self.provider.name},
            ) from e

    def get_progress(self) -> ProgressSnapshot | None:
        """Latest load progress snapshot, or None before loading starts."""
        return self.progress.latest

    def subscribe(self, observer: ProgressObserver):
        """Receive every future progress snapshot. Returns an unsubscribe callable."""
        return self.progress.subscribe(observer)

    async def compare_two(self, text_a: str, text_b: str) -> PairResult:
        """Similarity between two texts."""
        return await self.orchestrator.pairwise(text_a, text_b)

    async def compare_to_many(
        self,
        text: str,
        items: Sequence[Candidate],
        items_precached: bool = False,
    ) -> ComparisonResult:
        """Score each item against `text`, in input order."""
        return await self.orchestrator.one_to_many(text, items, candidates_precached=items_precached)

    async def rank_all(self, text: str, items: Sequence[Candidate]) -> ComparisonResult:
        """Score each item against `text`, most similar first."""
        return await self.orchestrator.one_to_many_sorted(text, items)

    async def precompute(self, items: Sequence[str]) -> list[CacheEntry]:
        """Embed items once for reuse with `compare_to_cached` and `rank_cached`."""
        return await self.orchestrator.precompute(items)

    async def compare_to_cached(self, text: str, cached_items: Sequence[Candidate]) -> ComparisonResult:
        """Score precomputed items against `text`, in input order."""
        return await self.orchestrator.one_to_many_cached(text, cached_items)

    async def rank_cached(self, text: str, cached_items: Sequence[Candidate]) -> ComparisonResult:
        """Score precomputed items against `text`, most similar first."""
        return await self.orchestrator.one_to_many_cached_sorted(text, cached_items)

    async def top_k(self, text: str, items: Sequence[str], k: int) -> ComparisonResult:
        """The `k` items most similar to `text`, most similar first."""
        return await self.orchestrator.get_top(text, items, k)

    async def aclose(self) -> None:
        """Release the provider."""
        await self.provider.aclose()
        self.progress.reset()
