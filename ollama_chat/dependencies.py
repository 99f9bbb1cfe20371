"""Global dependencies for the application."""

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ollama_chat.core.config import Settings
from ollama_chat.repositories.preference_repo import PreferenceStore
from ollama_chat.repositories.session_repo import SessionStore
from ollama_chat.services.chat_commands import ChatCommands
from ollama_chat.services.generation_controller import GenerationController
from ollama_chat.services.ollama_client import OllamaClient
from ollama_chat.services.session_tracker import CurrentSessionTracker


def build_chat_commands(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    ollama_client: OllamaClient | None = None,
) -> ChatCommands:
    """Wire the command surface once at startup."""
    client = ollama_client or OllamaClient(
        base_url=settings.ollama.base_url,
        connect_timeout=settings.ollama.connect_timeout,
    )
    return ChatCommands(
        session_store=SessionStore(session_factory),
        preference_store=PreferenceStore(session_factory),
        tracker=CurrentSessionTracker(),
        controller=GenerationController(client),
        chat_config=settings.chat,
    )


def get_chat_commands(request: Request) -> ChatCommands:
    """Get the process-wide ChatCommands built during startup."""
    commands: ChatCommands | None = getattr(request.app.state, "chat_commands", None)
    if commands is None:
        raise RuntimeError("Chat commands not initialized")
    return commands
