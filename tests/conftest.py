"""Shared test fixtures."""

import asyncio

import numpy as np
import pytest

from vaguefinder.matching.embeddings.base import EmbeddingProvider
from vaguefinder.finder import VagueFinder
from vaguefinder.models.enums import LoadStatus
from vaguefinder.models.progress import ProgressSnapshot


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic bag-of-words provider that records every call."""
    
    name = "fake"
    
    def __init__(self, dimension: int = 64, loaded: bool = False, delay: float = 0.0):
        super().__init__()
        self._dimension = dimension
        self._loaded = loaded
        self.delay = delay
        self.vocabulary: dict[str, int] = {}
        self.calls: list[str] = []
        self.load_calls = 0
    
    async def load(self, on_progress=None):
        self.load_calls += 1
        self._emit(on_progress, ProgressSnapshot(
            status=LoadStatus.PROGRESS,
            resource_name="fake-model",
            resource_file="weights.bin",
            progress_fraction=0.5,
            bytes_loaded=50,
            bytes_total=100,
        ))
        self._loaded = True
        self._emit(on_progress, ProgressSnapshot(status=LoadStatus.READY, resource_name="fake-model"))
    
    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        vec = np.zeros(self._dimension)
        for token in text.lower().split():
            index = self.vocabulary.setdefault(token, len(self.vocabulary) % self._dimension)
            vec[index] += 1.0
        norm = np.linalg.norm(vec)
        return (vec / norm if norm else vec).tolist()


class FailingEmbeddingProvider(FakeEmbeddingProvider):
    """Provider whose embed call always fails."""
    
    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        raise RuntimeError("backend exploded")


@pytest.fixture
def provider():
    return FakeEmbeddingProvider(loaded=True)


@pytest.fixture
def unloaded_provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def finder(provider):
    return VagueFinder(provider)


@pytest.fixture
def sample_items():
    return ["a sentence about cats", "a sentence about dogs", "unrelated gibberish xyz"]
