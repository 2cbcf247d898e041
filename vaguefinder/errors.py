"""Exceptions raised by VagueFinder."""


class VagueFinderError(Exception):
    """Base exception for VagueFinder errors."""
    
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ProviderLoadError(VagueFinderError):
    """The embedding provider failed to initialize."""


class ModelNotLoadedError(VagueFinderError):
    """An operation ran before the provider finished loading."""
    
    def __init__(self, message: str = "Model has not been loaded, call VagueFinder.load() first"):
        super().__init__(message)


class InvalidCacheEntryError(VagueFinderError):
    """A cached item is missing its text or carries an unusable embedding."""


class InvalidKError(VagueFinderError):
    """A non-positive number of results was requested."""
    
    def __init__(self, k: int):
        super().__init__(f"k must be greater than 0, got {k}", details={"k": k})
        self.k = k


class EmbeddingError(VagueFinderError):
    """The provider failed while embedding a text."""


class EmbeddingTimeoutError(EmbeddingError):
    """The provider did not answer within the configured timeout."""
