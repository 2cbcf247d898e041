"""Comparison and cache models."""

from pydantic import BaseModel, Field


class ScoredCandidate(BaseModel):
    """A candidate text scored against a reference text."""
    
    text: str
    score: float


class CacheEntry(BaseModel):
    """Caller-owned pairing of a text with its precomputed embedding."""
    
    text: str
    embedding: list[float] = Field(default_factory=list)


class PairResult(BaseModel):
    """Similarity between two texts."""
    
    text_a: str
    text_b: str
    score: float


class ComparisonResult(BaseModel):
    """Reference text with its scored candidates."""
    
    text: str
    results: list[ScoredCandidate] = Field(default_factory=list)
    
    def texts(self) -> list[str]:
        """Candidate texts in result order."""
        return [r.text for r in self.results]
