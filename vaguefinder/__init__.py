"""VagueFinder - rank and compare short texts by semantic closeness."""

from vaguefinder.errors import (
    EmbeddingError,
    EmbeddingTimeoutError,
    InvalidCacheEntryError,
    InvalidKError,
    ModelNotLoadedError,
    ProviderLoadError,
    VagueFinderError,
)
from vaguefinder.finder import VagueFinder
from vaguefinder.models import (
    CacheEntry,
    ComparisonResult,
    LoadStatus,
    PairResult,
    ProgressSnapshot,
    ProviderType,
    ScoredCandidate,
)

__version__ = "0.1.0"

__all__ = [
    "VagueFinder",
    "VagueFinderError",
    "ProviderLoadError",
    "ModelNotLoadedError",
    "InvalidCacheEntryError",
    "InvalidKError",
    "EmbeddingError",
    "EmbeddingTimeoutError",
    "CacheEntry",
    "ComparisonResult",
    "LoadStatus",
    "PairResult",
    "ProgressSnapshot",
    "ProviderType",
    "ScoredCandidate",
]
