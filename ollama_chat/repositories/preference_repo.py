"""Preference store for small key/value settings."""

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ollama_chat.core.database import transaction
from ollama_chat.models.app_config import AppConfigEntry

SELECTED_MODEL_KEY = "selected_model_name"


class PreferenceStore:
    """Reads and upserts rows of the app_config table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is unset."""
        async with transaction(self._session_factory) as session:
            result = await session.execute(
                select(AppConfigEntry.value).where(AppConfigEntry.key == key)
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        """Insert or overwrite a value; committed before returning."""
        stmt = insert(AppConfigEntry).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[AppConfigEntry.key],
            set_={"value": stmt.excluded.value},
        )
        async with transaction(self._session_factory) as session:
            await session.execute(stmt)
