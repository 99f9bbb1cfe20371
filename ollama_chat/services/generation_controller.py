"""Single-slot, cancellable generation against the Ollama server."""

import asyncio
from collections.abc import Coroutine, Sequence
from enum import Enum
from typing import Any

import structlog

from ollama_chat.core.exceptions import (
    GenerationBusyError,
    GenerationCancelledError,
)
from ollama_chat.services.ollama_client import ChatMessagePayload, OllamaClient

logger = structlog.get_logger()


class GenerationState(str, Enum):
    """Lifecycle of the generation slot."""

    IDLE = "idle"
    SENDING = "sending"


class GenerationController:
    """Allows at most one outstanding model request and lets it be aborted.

    Chat replies and title suggestions share the same slot. All methods
    must be called from the event loop that owns the controller. The busy
    check and the switch to SENDING happen without an intervening await,
    which makes the slot race-free on that loop.
    """

    def __init__(self, client: OllamaClient) -> None:
        self._client = client
        self._state = GenerationState.IDLE
        self._cancel_event: asyncio.Event | None = None

    @property
    def state(self) -> GenerationState:
        """IDLE, or SENDING while a model request holds the slot."""
        return self._state

    async def list_models(self) -> list[str]:
        """Models currently available on the inference server."""
        return await self._client.list_models()

    async def generate(
        self,
        prompt: str,
        model: str,
        history: Sequence[ChatMessagePayload] = (),
    ) -> str:
        """Send the prompt (after ``history``) and return the full reply.

        Raises:
            GenerationBusyError: another generation is in flight.
            GenerationCancelledError: ``abort`` was called meanwhile.
            UpstreamError: the server failed or answered garbage.
        """
        cancel_event = self._acquire_slot()
        messages = [*history, {"role": "user", "content": prompt}]
        logger.info("Generation started", model=model, history_messages=len(history))
        try:
            response = await self._run_until_cancelled(
                self._collect(model, messages), cancel_event
            )
        except GenerationCancelledError:
            logger.info("Generation cancelled", model=model)
            raise
        except Exception:
            logger.warning("Generation failed", model=model)
            raise
        finally:
            self._release_slot()

        logger.info("Generation completed", model=model, response_chars=len(response))
        return response

    def abort(self) -> None:
        """Signal the in-flight generation, if any."""
        if self._cancel_event is not None:
            self._cancel_event.set()

    async def suggest_title(self, prompt: str, model: str) -> str:
        """One-shot completion used for session titles.

        Holds the generation slot like ``generate`` and raises the same
        busy and cancellation errors.
        """
        cancel_event = self._acquire_slot()
        try:
            return await self._run_until_cancelled(
                self._client.generate_once(model, prompt), cancel_event
            )
        finally:
            self._release_slot()

    async def aclose(self) -> None:
        """Abort any pending request and close the HTTP client."""
        self.abort()
        await self._client.aclose()

    def _acquire_slot(self) -> asyncio.Event:
        if self._state is GenerationState.SENDING:
            raise GenerationBusyError()
        self._state = GenerationState.SENDING
        self._cancel_event = asyncio.Event()
        return self._cancel_event

    def _release_slot(self) -> None:
        self._cancel_event = None
        self._state = GenerationState.IDLE

    async def _collect(self, model: str, messages: list[ChatMessagePayload]) -> str:
        parts = [part async for part in self._client.stream_chat(model, messages)]
        return "".join(parts)

    @staticmethod
    async def _run_until_cancelled(
        coro: Coroutine[Any, Any, str], cancel_event: asyncio.Event
    ) -> str:
        request_task = asyncio.ensure_future(coro)
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait(
                {request_task, cancel_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in (request_task, cancel_task):
                if not task.done():
                    task.cancel()
            # Let the HTTP stream close before returning.
            await asyncio.gather(request_task, cancel_task, return_exceptions=True)

        if cancel_event.is_set():
            raise GenerationCancelledError()
        return request_task.result()
