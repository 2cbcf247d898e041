"""One-to-one and one-to-many comparison sweeps."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

from vaguefinder.matching.embeddings.base import EmbeddingProvider
from vaguefinder.errors import (
    EmbeddingError,
    EmbeddingTimeoutError,
    InvalidCacheEntryError,
    InvalidKError,
    ModelNotLoadedError,
)
from vaguefinder.matching.cache import EmbeddingCache
from vaguefinder.matching.ranker import TopKRanker
from vaguefinder.matching.similarity import cosine_similarity
from vaguefinder.models.comparison import (
    CacheEntry,
    ComparisonResult,
    PairResult,
    ScoredCandidate,
)

logger = logging.getLogger(__name__)

Candidate = Union[str, CacheEntry, Mapping[str, Any]]


def _sorted_desc(results: list[ScoredCandidate]) -> list[ScoredCandidate]:
    # sorted() is stable with reverse=True, equal scores keep input order
    return sorted(results, key=lambda r: r.score, reverse=True)


class ComparisonOrchestrator:
    """
    Drives comparisons against a single embedding provider.

    The reference ("left-hand") text of a sweep is embedded once, on the
    first candidate, and reused for every other candidate. Candidates are
    processed strictly one after another.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        embed_timeout: float | None = 30.0,
    ):
        """
        Initialize the orchestrator.

        Args:
            provider: Loaded (or soon to be loaded) embedding provider.
            embed_timeout: Seconds to wait for each embedding, None for no limit.
                Expiry stops the wait, not the provider: a thread-backed provider
                (LocalEmbeddingProvider) keeps encoding in its worker thread, so a
                retry right after EmbeddingTimeoutError may overlap the stalled call.
        """
        self.provider = provider
        self.embed_timeout = embed_timeout
        self.cache = EmbeddingCache(self.embed)

    def _require_loaded(self) -> None:
        if not self.provider.is_loaded:
            raise ModelNotLoadedError()

    async def embed(self, text: str) -> list[float]:
        """Embed one text, bounded by the configured timeout."""
        try:
            return await asyncio.wait_for(self.provider.embed(text), timeout=self.embed_timeout)
        except asyncio.TimeoutError as e:
            raise EmbeddingTimeoutError(
                f"Embedding timed out after {self.embed_timeout}s",
                details={"text": text, "timeout": self.embed_timeout},
            ) from e
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(
                f"Unable to embed text due to {e}",
                details={"text": text},
            ) from e

    async def _classify(
        self,
        text_a: str,
        text_b: str,
        embedding_a: list[float] | None = None,
        embedding_b: list[float] | None = None,
    ) -> tuple[float, list[float]]:
        """Score two texts, returning the score and the left-hand embedding."""
        vec_a = await self.cache.materialize(text_a, embedding_a)
        vec_b = await self.cache.materialize(text_b, embedding_b)
        return cosine_similarity(vec_a, vec_b), vec_a

    async def pairwise(
        self,
        text_a: str,
        text_b: str,
        embedding_a: list[float] | None = None,
        embedding_b: list[float] | None = None,
    ) -> PairResult:
        """
        Compare two texts.

        Either side may be supplied precomputed; missing sides are embedded.
        """
        self._require_loaded()
        score, _ = await self._classify(text_a, text_b, embedding_a, embedding_b)
        return PairResult(text_a=text_a, text_b=text_b, score=score)

    def _split(self, item: Candidate, index: int) -> tuple[str, list[float] | None]:
        """
        Return (text, carried embedding) for a raw string or cache entry.

        Raises:
            InvalidCacheEntryError: If a non-string item has no usable text.
        """
        if isinstance(item, str):
            return item, None
        if isinstance(item, CacheEntry):
            candidate_text, embedding = item.text, item.embedding
        elif isinstance(item, Mapping):
            candidate_text, embedding = item.get("text"), item.get("embedding")
        else:
            candidate_text, embedding = None, None

        if not isinstance(candidate_text, str) or not candidate_text:
            raise InvalidCacheEntryError(
                "Each cached item must have a text property",
                details={"property": "text", "index": index},
            )
        # Any sequence of floats is accepted, numpy arrays included
        if embedding is None or len(embedding) == 0:
            return candidate_text, None
        return candidate_text, [float(x) for x in embedding]

    async def one_to_many(
        self,
        text: str,
        candidates: Sequence[Candidate],
        candidates_precached: bool = False,
    ) -> ComparisonResult:
        """
        Score every candidate against `text`, preserving input order.

        Args:
            text: Reference text.
            candidates: Raw strings or {text, embedding} entries. Never mutated.
            candidates_precached: Use embeddings carried by the entries.

        Returns:
            Reference text with one scored candidate per input element.
        """
        self._require_loaded()
        return await self._sweep(
            text,
            candidates,
            candidates_precached,
            reference_dimension_check=candidates_precached,
        )

    async def _sweep(
        self,
        text: str,
        candidates: Sequence[Candidate],
        candidates_precached: bool,
        reference_dimension_check: bool = False,
    ) -> ComparisonResult:
        pairs = [self._split(item, i) for i, item in enumerate(candidates)]
        reference: list[float] | None = None
        results = []

        for candidate_text, carried in pairs:
            supplied = carried if candidates_precached else None
            if reference is None:
                reference = await self.embed(text)
                if reference_dimension_check:
                    self._check_dimensions(pairs, len(reference))
            score, _ = await self._classify(text, candidate_text, reference, supplied)
            results.append(ScoredCandidate(text=candidate_text, score=score))

        logger.debug("Scored %d candidates against %r", len(results), text)
        return ComparisonResult(text=text, results=results)

    async def one_to_many_sorted(
        self,
        text: str,
        candidates: Sequence[Candidate],
    ) -> ComparisonResult:
        """Like `one_to_many`, sorted by score descending."""
        result = await self.one_to_many(text, candidates, candidates_precached=False)
        return ComparisonResult(text=result.text, results=_sorted_desc(result.results))

    async def precompute(self, texts: Sequence[str]) -> list[CacheEntry]:
        """Embed each text, producing entries for the cached comparisons."""
        self._require_loaded()
        entries = []
        for text in texts:
            entries.append(CacheEntry(text=text, embedding=await self.embed(text)))
        return entries

    def _validate_entries(self, entries: Sequence[Candidate]) -> None:
        for index, item in enumerate(entries):
            if not isinstance(item, (CacheEntry, Mapping)):
                raise InvalidCacheEntryError(
                    "Each cached item must have a text property",
                    details={"property": "text", "index": index},
                )
            _, carried = self._split(item, index)
            if carried is None:
                raise InvalidCacheEntryError(
                    "Each cached item must have an embedding property",
                    details={"property": "embedding", "index": index},
                )

    def _check_dimensions(self, pairs: list[tuple[str, list[float] | None]], dimension: int) -> None:
        for index, (candidate_text, carried) in enumerate(pairs):
            if carried is not None and len(carried) != dimension:
                raise InvalidCacheEntryError(
                    f"Cached embedding for {candidate_text!r} has {len(carried)} "
                    f"dimensions, expected {dimension}",
                    details={"property": "embedding", "index": index},
                )

    async def one_to_many_cached(
        self,
        text: str,
        entries: Sequence[Candidate],
    ) -> ComparisonResult:
        """
        Score precomputed entries against `text`.

        Raises:
            InvalidCacheEntryError: If an entry lacks its text or a usable embedding.
        """
        self._require_loaded()
        self._validate_entries(entries)
        return await self._sweep(text, entries, True, reference_dimension_check=True)

    async def one_to_many_cached_sorted(
        self,
        text: str,
        entries: Sequence[Candidate],
    ) -> ComparisonResult:
        """Like `one_to_many_cached`, sorted by score descending."""
        result = await self.one_to_many_cached(text, entries)
        return ComparisonResult(text=result.text, results=_sorted_desc(result.results))

    async def get_top(
        self,
        text: str,
        candidates: Sequence[str],
        k: int,
    ) -> ComparisonResult:
        """
        Return the `k` candidates most similar to `text`, best first.

        Streams scores into a bounded ranker instead of sorting every score.
        `k` is clamped to the number of candidates.

        Raises:
            InvalidKError: If `k` is not positive.
        """
        self._require_loaded()
        if k <= 0:
            raise InvalidKError(k)

        k = min(k, len(candidates))
        if k == 0:
            return ComparisonResult(text=text)

        logger.debug("Keeping top %d of %d candidates", k, len(candidates))
        candidate_texts = [self._split(c, i)[0] for i, c in enumerate(candidates)]
        ranker = TopKRanker(k)
        reference: list[float] | None = None
        for candidate_text in candidate_texts:
            score, reference = await self._classify(text, candidate_text, reference)
            ranker.add_node(ScoredCandidate(text=candidate_text, score=score))

        return ComparisonResult(text=text, results=ranker.to_list())
