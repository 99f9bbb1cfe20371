"""Domain-specific configuration models."""

from ollama_chat.core.settings.app_config import AppConfig
from ollama_chat.core.settings.chat_config import ChatConfig
from ollama_chat.core.settings.database_config import DatabaseConfig
from ollama_chat.core.settings.ollama_config import OllamaConfig
from ollama_chat.core.settings.server_config import ServerConfig

__all__ = [
    "AppConfig",
    "ChatConfig",
    "DatabaseConfig",
    "OllamaConfig",
    "ServerConfig",
]
