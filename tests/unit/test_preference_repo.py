"""Unit tests for PreferenceStore."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ollama_chat.repositories.preference_repo import SELECTED_MODEL_KEY, PreferenceStore


class TestPreferenceStore:
    """Get/upsert behaviour of the app_config table."""

    @pytest.mark.asyncio
    async def test_get_unset_returns_none(self, preference_store: PreferenceStore) -> None:
        assert await preference_store.get(SELECTED_MODEL_KEY) is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, preference_store: PreferenceStore) -> None:
        await preference_store.set(SELECTED_MODEL_KEY, "llama3.2:1b")
        assert await preference_store.get(SELECTED_MODEL_KEY) == "llama3.2:1b"

    @pytest.mark.asyncio
    async def test_set_overwrites(self, preference_store: PreferenceStore) -> None:
        await preference_store.set(SELECTED_MODEL_KEY, "llama3.2:1b")
        await preference_store.set(SELECTED_MODEL_KEY, "qwen2.5:0.5b")
        assert await preference_store.get(SELECTED_MODEL_KEY) == "qwen2.5:0.5b"

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, preference_store: PreferenceStore) -> None:
        await preference_store.set("window_width", "1600")
        await preference_store.set(SELECTED_MODEL_KEY, "llama3.2:1b")

        assert await preference_store.get("window_width") == "1600"
        assert await preference_store.get(SELECTED_MODEL_KEY) == "llama3.2:1b"

    @pytest.mark.asyncio
    async def test_write_is_visible_to_new_store(
        self,
        preference_store: PreferenceStore,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        await preference_store.set(SELECTED_MODEL_KEY, "llama3.2:1b")

        other = PreferenceStore(session_factory)
        assert await other.get(SELECTED_MODEL_KEY) == "llama3.2:1b"
