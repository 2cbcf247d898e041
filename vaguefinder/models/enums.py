"""Enumeration types for VagueFinder."""

from enum import Enum


class LoadStatus(str, Enum):
    """Stage of a provider load reported on the progress channel."""
    INITIATE = "initiate"
    DOWNLOAD = "download"
    PROGRESS = "progress"
    DONE = "done"
    READY = "ready"


class ProviderType(str, Enum):
    """Embedding backends that can be built from configuration."""
    LOCAL = "local"
    OLLAMA = "ollama"
    OPENAI = "openai"
