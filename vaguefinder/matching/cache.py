"""Caller-managed embedding reuse."""

from typing import Awaitable, Callable

Embedder = Callable[[str], Awaitable[list[float]]]


class EmbeddingCache:
    """
    Decides per text whether to reuse a supplied embedding or embed afresh.
    
    Never stores anything itself: the caller opts in on every call by
    passing a precomputed vector.
    """
    
    def __init__(self, embed: Embedder):
        self._embed = embed
    
    async def materialize(self, text: str, supplied: list[float] | None = None) -> list[float]:
        """Return `supplied` verbatim when present, otherwise embed `text`."""
        if supplied is not None:
            return supplied
        return await self._embed(text)
