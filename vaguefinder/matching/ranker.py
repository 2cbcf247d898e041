"""Bounded top-K ranking."""

from vaguefinder.errors import InvalidKError
from vaguefinder.models.comparison import ScoredCandidate


class TopKRanker:
    """
    Keeps the K highest-scoring candidates seen so far, best first.
    
    Candidates are inserted by a linear scan from the head, so each insert
    costs O(K). A candidate goes in front of the first entry with a strictly
    lower score, which keeps earlier arrivals ahead on equal scores. When the
    list grows past capacity the tail is dropped.
    """
    
    def __init__(self, capacity: int):
        if capacity <= 0:
            raise InvalidKError(capacity)
        self.capacity = capacity
        self._items: list[ScoredCandidate] = []
    
    def __len__(self) -> int:
        return len(self._items)
    
    @property
    def is_full(self) -> bool:
        return len(self._items) >= self.capacity
    
    def _insert_index(self, score: float) -> int:
        for i, item in enumerate(self._items):
            if item.score < score:
                return i
        return len(self._items)
    
    def add_node(self, candidate: ScoredCandidate) -> None:
        """Insert a candidate at its ranked position, evicting the tail if over capacity."""
        if not self._items:
            self._items.append(candidate)
            return
        
        # Full and no better than the current minimum
        if self.is_full and candidate.score <= self._items[-1].score:
            return
        
        self._items.insert(self._insert_index(candidate.score), candidate)
        if len(self._items) > self.capacity:
            self._items.pop()
    
    def to_list(self) -> list[ScoredCandidate]:
        """Snapshot of the ranking, highest score first."""
        return [ScoredCandidate(text=c.text, score=c.score) for c in self._items]
