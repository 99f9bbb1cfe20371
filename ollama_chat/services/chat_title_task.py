"""Background task for generating chat session titles."""

import structlog

from ollama_chat.core.exceptions import GenerationCancelledError
from ollama_chat.repositories.session_repo import SessionStore
from ollama_chat.services.title_service import TitleService

logger = structlog.get_logger()


async def generate_session_title(
    session_id: int,
    message: str,
    model: str,
    initial_title: str,
    title_service: TitleService,
    session_store: SessionStore,
) -> None:
    """Generate and persist a model-written title for a new session.

    Runs detached from the chat command so the reply is not held back by
    the extra model call. The title is only replaced while it still reads
    ``initial_title``; a user rename wins. The derived title stays in place
    on failure.
    """
    try:
        title = await title_service.generate_title(message, model)
        if not title:
            return
        replaced = await session_store.replace_title(session_id, title, initial_title)
        if not replaced:
            logger.info("Session title kept", session_id=session_id)
            return
        logger.info(
            "Session title generated",
            session_id=session_id,
            title=title,
        )
    except GenerationCancelledError:
        logger.info("Session title generation cancelled", session_id=session_id)
    except Exception:
        logger.exception(
            "Failed to generate session title",
            session_id=session_id,
        )
