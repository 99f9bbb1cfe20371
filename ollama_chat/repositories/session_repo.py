"""Session store for chat sessions and their history."""

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ollama_chat.core.database import transaction
from ollama_chat.core.exceptions import SessionNotFoundError
from ollama_chat.models.chat_history import ChatHistoryEntry
from ollama_chat.models.chat_session import ChatSession

logger = structlog.get_logger()


class SessionStore:
    """Encapsulates chat session and history queries.

    Every public method runs in its own transaction, so callers never see
    a half-applied write. Returned rows are detached and safe to read after
    the call.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_session(self, title: str = "") -> ChatSession:
        """Create a new chat session."""
        async with transaction(self._session_factory) as session:
            chat_session = ChatSession(title=title)
            session.add(chat_session)
            await session.flush()
            await session.refresh(chat_session)
        logger.info("Session created", session_id=chat_session.id)
        return chat_session

    async def create_session_with_entry(
        self,
        title: str,
        user_message: str,
        model_response: str,
    ) -> tuple[ChatSession, ChatHistoryEntry]:
        """Create a session together with its first exchange."""
        async with transaction(self._session_factory) as session:
            chat_session = ChatSession(title=title)
            session.add(chat_session)
            await session.flush()
            entry = ChatHistoryEntry(
                session_id=chat_session.id,
                user_message=user_message,
                model_response=model_response,
            )
            session.add(entry)
            await session.flush()
            await session.refresh(chat_session)
            await session.refresh(entry)
        logger.info("Session created", session_id=chat_session.id)
        return chat_session, entry

    async def find_session(self, session_id: int) -> ChatSession | None:
        """Find a chat session by its primary key."""
        async with transaction(self._session_factory) as session:
            return await session.get(ChatSession, session_id)

    async def list_sessions(self) -> list[ChatSession]:
        """All sessions, newest first (created_at DESC, id DESC)."""
        async with transaction(self._session_factory) as session:
            result = await session.execute(
                select(ChatSession).order_by(
                    ChatSession.created_at.desc(),
                    ChatSession.id.desc(),
                )
            )
            return list(result.scalars().all())

    async def rename_session(self, session_id: int, title: str) -> None:
        """Update the title of an existing session."""
        async with transaction(self._session_factory) as session:
            result = await session.execute(
                update(ChatSession)
                .where(ChatSession.id == session_id)
                .values(title=title)
            )
            if result.rowcount == 0:
                raise SessionNotFoundError(session_id)
        logger.info("Session renamed", session_id=session_id)

    async def replace_title(
        self, session_id: int, title: str, expected_title: str
    ) -> bool:
        """Set ``title`` only if the session still has ``expected_title``.

        Returns False when the session is gone or was renamed meanwhile.
        """
        async with transaction(self._session_factory) as session:
            result = await session.execute(
                update(ChatSession)
                .where(
                    ChatSession.id == session_id,
                    ChatSession.title == expected_title,
                )
                .values(title=title)
            )
        return result.rowcount > 0

    async def delete_session(self, session_id: int) -> None:
        """Delete a session and all of its history in one transaction."""
        async with transaction(self._session_factory) as session:
            await session.execute(
                delete(ChatHistoryEntry).where(
                    ChatHistoryEntry.session_id == session_id
                )
            )
            result = await session.execute(
                delete(ChatSession).where(ChatSession.id == session_id)
            )
            if result.rowcount == 0:
                raise SessionNotFoundError(session_id)
        logger.info("Session deleted", session_id=session_id)

    async def append_history(
        self,
        session_id: int,
        user_message: str,
        model_response: str,
        fallback_title: str | None = None,
    ) -> ChatHistoryEntry:
        """Append one exchange to a session.

        The insert is guarded by the foreign key, so a session deleted
        concurrently yields SessionNotFoundError instead of an orphan row.
        When ``fallback_title`` is given, a session whose title is still
        empty receives it in the same transaction.
        """
        async with transaction(self._session_factory) as session:
            entry = ChatHistoryEntry(
                session_id=session_id,
                user_message=user_message,
                model_response=model_response,
            )
            session.add(entry)
            try:
                await session.flush()
            except IntegrityError as exc:
                raise SessionNotFoundError(session_id) from exc
            if fallback_title:
                await session.execute(
                    update(ChatSession)
                    .where(ChatSession.id == session_id, ChatSession.title == "")
                    .values(title=fallback_title)
                )
            await session.refresh(entry)
        return entry

    async def load_history(self, session_id: int) -> list[ChatHistoryEntry]:
        """Retrieve all entries for a session in chronological order."""
        async with transaction(self._session_factory) as session:
            result = await session.execute(
                select(ChatHistoryEntry)
                .where(ChatHistoryEntry.session_id == session_id)
                .order_by(ChatHistoryEntry.id.asc())
            )
            return list(result.scalars().all())
