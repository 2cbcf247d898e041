"""Load progress channel owned by a VagueFinder handle."""

import logging
from typing import Callable

from vaguefinder.models.progress import ProgressSnapshot

logger = logging.getLogger(__name__)

ProgressObserver = Callable[[ProgressSnapshot], None]


class ProgressTracker:
    """
    Keeps the latest load progress snapshot and fans updates out to observers.
    
    Pollers read `latest`; push-style consumers register with `subscribe`.
    No freshness guarantee beyond "last update received".
    """
    
    def __init__(self):
        self._latest: ProgressSnapshot | None = None
        self._observers: list[ProgressObserver] = []
    
    @property
    def latest(self) -> ProgressSnapshot | None:
        return self._latest
    
    def subscribe(self, observer: ProgressObserver) -> Callable[[], None]:
        """
        Register an observer for future updates.
        
        Returns:
            A callable that removes the observer again.
        """
        self._observers.append(observer)
        
        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)
        
        return unsubscribe
    
    def update(self, snapshot: ProgressSnapshot) -> None:
        """Record a snapshot and notify observers."""
        self._latest = snapshot
        logger.debug(
            "load progress: %s %s %s",
            snapshot.status.value,
            snapshot.resource_file or "",
            snapshot.progress_fraction if snapshot.progress_fraction is not None else "",
        )
        for observer in list(self._observers):
            observer(snapshot)
    
    def reset(self) -> None:
        self._latest = None
