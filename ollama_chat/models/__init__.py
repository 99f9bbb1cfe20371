"""ORM models."""

from ollama_chat.models.app_config import AppConfigEntry
from ollama_chat.models.chat_history import ChatHistoryEntry
from ollama_chat.models.chat_session import ChatSession

__all__ = ["AppConfigEntry", "ChatHistoryEntry", "ChatSession"]
