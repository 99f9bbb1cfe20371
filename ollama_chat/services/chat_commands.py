"""Command surface used by the presentation layer."""

import asyncio
from dataclasses import dataclass

import structlog

from ollama_chat.core.exceptions import InputValidationError, SessionNotFoundError
from ollama_chat.core.settings import ChatConfig
from ollama_chat.models.chat_history import ChatHistoryEntry
from ollama_chat.models.chat_session import ChatSession
from ollama_chat.repositories.preference_repo import SELECTED_MODEL_KEY, PreferenceStore
from ollama_chat.repositories.session_repo import SessionStore
from ollama_chat.services.chat_title_task import generate_session_title
from ollama_chat.services.generation_controller import GenerationController
from ollama_chat.services.ollama_client import ChatMessagePayload
from ollama_chat.services.session_tracker import CurrentSessionTracker
from ollama_chat.services.title_service import TitleService, derive_title

logger = structlog.get_logger()


@dataclass(frozen=True)
class ChatExchange:
    """Reply text and the session the exchange was recorded in."""

    response: str
    session_id: int


class ChatCommands:
    """Composes the stores, the session tracker and the generation controller.

    This is the only layer that validates session ids before moving the
    current-session pointer, and the only one that combines persistence with
    model calls in a single operation.
    """

    def __init__(
        self,
        session_store: SessionStore,
        preference_store: PreferenceStore,
        tracker: CurrentSessionTracker,
        controller: GenerationController,
        chat_config: ChatConfig,
    ) -> None:
        self._sessions = session_store
        self._preferences = preference_store
        self._tracker = tracker
        self._controller = controller
        self._config = chat_config
        self._title_service = TitleService(controller)
        self._background_tasks: set[asyncio.Task[None]] = set()

    # --- Sessions ---

    @property
    def current_session_id(self) -> int | None:
        return self._tracker.get()

    async def get_current_session(self) -> ChatSession:
        """Return the tracked session, creating an untitled one if needed."""
        session_id = self._tracker.get()
        if session_id is not None:
            session = await self._sessions.find_session(session_id)
            if session is not None:
                return session
        session = await self._sessions.create_session("")
        self._tracker.set(session.id)
        return session

    async def list_sessions(self) -> list[ChatSession]:
        return await self._sessions.list_sessions()

    async def switch_session(self, session_id: int) -> ChatSession:
        """Make an existing session current."""
        session = await self._sessions.find_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        self._tracker.set(session_id)
        return session

    def start_new_session(self) -> None:
        """Forget the current session; the next message starts a new one."""
        self._tracker.clear()

    async def delete_session(self, session_id: int) -> None:
        await self._sessions.delete_session(session_id)
        if self._tracker.get() == session_id:
            self._tracker.clear()

    async def rename_session(self, session_id: int, title: str) -> None:
        title = title.strip()
        if not title:
            raise InputValidationError("Session title must not be empty")
        await self._sessions.rename_session(session_id, title)

    async def load_history_for_current_session(self) -> list[ChatHistoryEntry]:
        session_id = self._tracker.get()
        if session_id is None:
            return []
        return await self._sessions.load_history(session_id)

    async def restore_last_session(self) -> int | None:
        """Point the tracker at the newest session, if there is one."""
        sessions = await self._sessions.list_sessions()
        if not sessions:
            return None
        self._tracker.set(sessions[0].id)
        logger.info("Resumed last session", session_id=sessions[0].id)
        return sessions[0].id

    # --- Models ---

    async def list_models(self) -> list[str]:
        return await self._controller.list_models()

    async def get_selected_model(self) -> str | None:
        return await self._preferences.get(SELECTED_MODEL_KEY)

    async def set_selected_model(self, model_name: str) -> None:
        model_name = model_name.strip()
        if not model_name:
            raise InputValidationError("Model name must not be empty")
        await self._preferences.set(SELECTED_MODEL_KEY, model_name)

    # --- Generation ---

    async def send_message(self, prompt: str) -> str:
        """Generate a reply to ``prompt``, record it and return the reply text."""
        exchange = await self.exchange(prompt)
        return exchange.response

    async def exchange(self, prompt: str) -> ChatExchange:
        """Generate a reply to ``prompt`` and record the exchange.

        Nothing is persisted and the current session is left alone unless
        the generation succeeds. A session created for the first message
        only becomes current if no other session was picked meanwhile.
        """
        if not prompt.strip():
            raise InputValidationError("Prompt must not be empty")
        model = await self.get_selected_model()
        if not model:
            raise InputValidationError("No model selected")

        session_id = self._tracker.get()
        history: list[ChatHistoryEntry] = []
        if session_id is not None:
            history = await self._sessions.load_history(session_id)

        # Title requests share the slot; the user's message goes first.
        await self._cancel_title_tasks()
        response = await self._controller.generate(
            prompt, model, history=_to_chat_messages(history)
        )

        title = derive_title(prompt, max_length=self._config.title_max_length)
        if session_id is None:
            session, _entry = await self._sessions.create_session_with_entry(
                title, prompt, response
            )
            session_id = session.id
            if self._tracker.get() is None:
                self._tracker.set(session_id)
            if self._config.auto_title:
                self._schedule_title(session_id, prompt, model, title)
        else:
            await self._sessions.append_history(
                session_id, prompt, response, fallback_title=title
            )
        return ChatExchange(response=response, session_id=session_id)

    def abort_generation(self) -> None:
        self._controller.abort()

    async def aclose(self) -> None:
        """Cancel pending title tasks and release the HTTP client."""
        await self._cancel_title_tasks()
        await self._controller.aclose()

    async def _cancel_title_tasks(self) -> None:
        tasks = list(self._background_tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _schedule_title(
        self, session_id: int, prompt: str, model: str, initial_title: str
    ) -> None:
        task = asyncio.create_task(
            generate_session_title(
                session_id=session_id,
                message=prompt,
                model=model,
                initial_title=initial_title,
                title_service=self._title_service,
                session_store=self._sessions,
            )
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)


def _to_chat_messages(history: list[ChatHistoryEntry]) -> list[ChatMessagePayload]:
    messages: list[ChatMessagePayload] = []
    for entry in history:
        messages.append({"role": "user", "content": entry.user_message})
        messages.append({"role": "assistant", "content": entry.model_response})
    return messages
