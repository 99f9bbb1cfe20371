"""Pytest configuration and fixtures."""

import asyncio
import json
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ollama_chat.core.database import (
    build_session_factory,
    create_engine_for_url,
    init_db,
)
from ollama_chat.core.settings import ChatConfig
from ollama_chat.repositories.preference_repo import PreferenceStore
from ollama_chat.repositories.session_repo import SessionStore
from ollama_chat.services.chat_commands import ChatCommands
from ollama_chat.services.generation_controller import GenerationController
from ollama_chat.services.ollama_client import OllamaClient
from ollama_chat.services.session_tracker import CurrentSessionTracker

OLLAMA_TEST_URL = "http://ollama.test"


# --- Test DB (SQLite file per test) ---


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh database file with all tables."""
    engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(db_engine)


@pytest.fixture
def session_store(session_factory: async_sessionmaker[AsyncSession]) -> SessionStore:
    return SessionStore(session_factory)


@pytest.fixture
def preference_store(
    session_factory: async_sessionmaker[AsyncSession],
) -> PreferenceStore:
    return PreferenceStore(session_factory)


# --- Fake Ollama server ---


class FakeOllama:
    """In-process stand-in for the Ollama REST API.

    ``chat_gate`` and ``generate_gate`` can be cleared to hold /api/chat and
    /api/generate requests open until a test releases (or cancels) them.
    ``max_in_flight`` records the most generation requests seen at once.
    """

    def __init__(self) -> None:
        self.models: list[str] = ["llama3.2:1b", "qwen2.5:0.5b"]
        self.chat_chunks: list[str] = ["Hello", " there", "!"]
        self.title_response = "Greeting Conversation"
        self.tags_status = 200
        self.chat_status = 200
        self.chat_complete = True
        self.chat_gate = asyncio.Event()
        self.chat_gate.set()
        self.chat_started = asyncio.Event()
        self.generate_gate = asyncio.Event()
        self.generate_gate.set()
        self.generate_started = asyncio.Event()
        self.in_flight = 0
        self.max_in_flight = 0
        self.requests: list[httpx.Request] = []

    @property
    def chat_requests(self) -> list[dict[str, Any]]:
        return [
            json.loads(r.content) for r in self.requests if r.url.path == "/api/chat"
        ]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/tags":
            if self.tags_status != 200:
                return httpx.Response(self.tags_status, text="unavailable")
            return httpx.Response(
                200, json={"models": [{"name": name} for name in self.models]}
            )
        if request.url.path in ("/api/chat", "/api/generate"):
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                return await self._handle_generation(request.url.path)
            finally:
                self.in_flight -= 1
        return httpx.Response(404, json={"error": "not found"})

    async def _handle_generation(self, path: str) -> httpx.Response:
        if path == "/api/chat":
            self.chat_started.set()
            await self.chat_gate.wait()
            if self.chat_status != 200:
                return httpx.Response(self.chat_status, json={"error": "model not found"})
            return httpx.Response(
                200, content=self._ndjson(self.chat_chunks, self.chat_complete)
            )
        self.generate_started.set()
        await self.generate_gate.wait()
        return httpx.Response(200, json={"response": self.title_response, "done": True})

    @staticmethod
    def _ndjson(chunks: list[str], complete: bool = True) -> bytes:
        lines = [
            json.dumps({"message": {"role": "assistant", "content": c}, "done": False})
            for c in chunks
        ]
        if complete:
            lines.append(
                json.dumps({"message": {"role": "assistant", "content": ""}, "done": True})
            )
        return ("\n".join(lines) + "\n").encode()


@pytest.fixture
def fake_ollama() -> FakeOllama:
    return FakeOllama()


@pytest.fixture
async def ollama_client(fake_ollama: FakeOllama) -> AsyncGenerator[OllamaClient, None]:
    """OllamaClient wired to the fake server."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(fake_ollama.handle),
        base_url=OLLAMA_TEST_URL,
    )
    client = OllamaClient(base_url=OLLAMA_TEST_URL, http_client=http_client)
    yield client
    await client.aclose()


@pytest.fixture
def controller(ollama_client: OllamaClient) -> GenerationController:
    return GenerationController(ollama_client)


@pytest.fixture
def chat_config() -> ChatConfig:
    return ChatConfig(title_max_length=40, auto_title=False, resume_last_session=False)


@pytest.fixture
def tracker() -> CurrentSessionTracker:
    return CurrentSessionTracker()


@pytest.fixture
def commands(
    session_store: SessionStore,
    preference_store: PreferenceStore,
    tracker: CurrentSessionTracker,
    controller: GenerationController,
    chat_config: ChatConfig,
) -> ChatCommands:
    """Command surface over a real database and the fake server."""
    return ChatCommands(
        session_store=session_store,
        preference_store=preference_store,
        tracker=tracker,
        controller=controller,
        chat_config=chat_config,
    )


async def wait_for(event: asyncio.Event, timeout: float = 1.0) -> None:
    """Await an event with a test-friendly timeout."""
    await asyncio.wait_for(event.wait(), timeout=timeout)
