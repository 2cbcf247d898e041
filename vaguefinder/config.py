"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from vaguefinder.models.enums import ProviderType


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    model_config = SettingsConfigDict(
        env_prefix="VAGUEFINDER_",
        env_file=".env",
        extra="ignore",
        protected_namespaces=(),
    )
    
    provider: ProviderType = ProviderType.LOCAL
    
    # Local model settings
    model_name: str = "thenlper/gte-small"
    device: str = "cpu"
    
    # Ollama settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "nomic-embed-text"
    
    # OpenAI settings
    openai_api_key: str = ""
    openai_model: str = "text-embedding-3-small"
    
    # Timeouts in seconds, None waits forever
    embed_timeout: float | None = 30.0
    load_timeout: float | None = 600.0
    
    log_level: str = "WARNING"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_settings(path: Path | None = None, **overrides: Any) -> Settings:
    """
    Build settings from the environment, a YAML file, then explicit overrides.
    
    Later sources win. Overrides set to None are ignored.
    """
    data: dict[str, Any] = {}
    if path is not None:
        data.update(load_yaml(path))
    data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def load_items(path: Path) -> list[str]:
    """
    Load candidate texts from a file.
    
    YAML files must hold a list of strings. Anything else is read as
    plain text with one candidate per non-blank line.
    """
    if path.suffix in (".yaml", ".yml"):
        data = load_yaml(path)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a YAML list of texts")
        return [str(item) for item in data]
    
    with open(path) as f:
        return [line.strip() for line in f if line.strip()]
