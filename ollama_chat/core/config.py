"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ollama_chat.core.settings import (
    AppConfig,
    ChatConfig,
    DatabaseConfig,
    OllamaConfig,
    ServerConfig,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.ollama.base_url).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(
        default="ollama-chat",
        description="Application name",
    )
    app_env: Literal["development", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Debug mode",
    )

    # Ollama
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the local Ollama server",
    )
    ollama_connect_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Connect timeout in seconds (reads are unbounded)",
    )

    # Database
    database_path: Path = Field(
        default=Path("./data/ollama-chat.db"),
        description="Path to the SQLite database file",
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements",
    )

    # Server
    host: str = Field(
        default="127.0.0.1",
        description="Local API host",
    )
    port: int = Field(
        default=8004,
        ge=1,
        le=65535,
        description="Local API port",
    )

    # Chat
    title_max_length: int = Field(
        default=40,
        ge=8,
        le=255,
        description="Maximum length of a title derived from the first message",
    )
    auto_title: bool = Field(
        default=False,
        description="Ask the model for a concise title for new sessions",
    )
    resume_last_session: bool = Field(
        default=False,
        description="Point the current session at the newest one on startup",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def ollama(self) -> OllamaConfig:
        """Inference endpoint configuration."""
        return OllamaConfig(
            base_url=self.ollama_base_url,
            connect_timeout=self.ollama_connect_timeout,
        )

    @cached_property
    def database(self) -> DatabaseConfig:
        """Database configuration."""
        return DatabaseConfig(path=self.database_path, echo=self.database_echo)

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
        )

    @cached_property
    def chat(self) -> ChatConfig:
        """Chat behaviour configuration."""
        return ChatConfig(
            title_max_length=self.title_max_length,
            auto_title=self.auto_title,
            resume_last_session=self.resume_last_session,
        )

    # --- Convenience properties (delegate to domain configs) ---

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development


# Global settings instance
settings = Settings()
