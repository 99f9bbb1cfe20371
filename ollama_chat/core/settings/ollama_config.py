"""Inference endpoint configuration."""

from pydantic import BaseModel


class OllamaConfig(BaseModel, frozen=True):
    """Ollama endpoint settings."""

    base_url: str
    connect_timeout: float
