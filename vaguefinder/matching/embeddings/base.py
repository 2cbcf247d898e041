"""Embedding provider interface."""

from abc import ABC, abstractmethod
from typing import Callable

import numpy as np

from vaguefinder.models.progress import ProgressSnapshot

ProgressCallback = Callable[[ProgressSnapshot], None]


class EmbeddingProvider(ABC):
    """Abstract base for embedding providers."""
    
    name: str = "provider"
    
    def __init__(self):
        self._loaded = False
        self._dimension: int | None = None
    
    @property
    def is_loaded(self) -> bool:
        return self._loaded
    
    @property
    def dimension(self) -> int | None:
        """Vector length, known once the provider has produced an embedding."""
        return self._dimension
    
    @abstractmethod
    async def load(self, on_progress: ProgressCallback | None = None) -> None:
        """
        Prepare the provider for embedding.
        
        Args:
            on_progress: Receives progress snapshots while loading.
            
        Raises:
            ProviderLoadError: If the provider cannot be initialized.
        """
        ...
    
    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """
        Generate a mean-pooled, L2-normalized embedding for one text.
        
        Args:
            text: Text to embed.
            
        Returns:
            Embedding vector.
        """
        ...
    
    async def aclose(self) -> None:
        """Release any resources held by the provider."""
        self._loaded = False
    
    def _emit(self, on_progress: ProgressCallback | None, snapshot: ProgressSnapshot) -> None:
        if on_progress is not None:
            on_progress(snapshot)
    
    def _normalize(self, vector) -> list[float]:
        """L2-normalize a raw vector and remember its dimension."""
        v = np.asarray(vector, dtype=np.float64)
        norm = np.linalg.norm(v)
        if norm > 0:
            v = v / norm
        self._dimension = int(v.shape[0])
        return v.tolist()
