"""VagueFinder data models."""

from vaguefinder.models.enums import LoadStatus, ProviderType
from vaguefinder.models.comparison import (
    CacheEntry,
    ComparisonResult,
    PairResult,
    ScoredCandidate,
)
from vaguefinder.models.progress import ProgressSnapshot

__all__ = [
    "LoadStatus",
    "ProviderType",
    "CacheEntry",
    "ComparisonResult",
    "PairResult",
    "ScoredCandidate",
    "ProgressSnapshot",
]
