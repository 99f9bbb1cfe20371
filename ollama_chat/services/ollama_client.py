"""HTTP client for the local Ollama inference server."""

import json
from collections.abc import AsyncIterator, Sequence
from typing import Any

import httpx
import structlog

from ollama_chat.core.exceptions import UpstreamError

logger = structlog.get_logger()

ChatMessagePayload = dict[str, str]


class OllamaClient:
    """Thin async wrapper over the Ollama REST API.

    Every transport, status and payload problem is raised as UpstreamError.
    """

    def __init__(
        self,
        base_url: str,
        connect_timeout: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(None, connect=connect_timeout),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def list_models(self) -> list[str]:
        """Return the names of locally available models."""
        try:
            response = await self._client.get("/api/tags")
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Failed to load models: {exc}") from exc
        _raise_for_status(response)

        try:
            models = response.json()["models"]
            return [str(model["name"]) for model in models]
        except (ValueError, KeyError, TypeError) as exc:
            raise UpstreamError("Malformed model list from Ollama") from exc

    async def stream_chat(
        self,
        model: str,
        messages: Sequence[ChatMessagePayload],
    ) -> AsyncIterator[str]:
        """Yield content fragments of a streamed /api/chat response.

        A stream that ends without a ``done`` line raises UpstreamError
        after the fragments received so far have been yielded.
        """
        payload = {"model": model, "messages": list(messages), "stream": True}
        try:
            async with self._client.stream("POST", "/api/chat", json=payload) as response:
                if response.is_error:
                    await response.aread()
                    _raise_for_status(response)
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    chunk = _parse_chunk(line)
                    content = chunk.get("message", {}).get("content")
                    if content:
                        yield str(content)
                    if chunk.get("done"):
                        return
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Failed to reach Ollama: {exc}") from exc
        raise UpstreamError("Ollama stream ended before completion")

    async def generate_once(self, model: str, prompt: str) -> str:
        """Run a non-streaming /api/generate request."""
        payload = {"model": model, "prompt": prompt, "stream": False}
        try:
            response = await self._client.post("/api/generate", json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Failed to reach Ollama: {exc}") from exc
        _raise_for_status(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("Malformed response from Ollama") from exc
        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise UpstreamError("Malformed response from Ollama")
        return data["response"]


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    detail = response.reason_phrase
    try:
        body = response.json()
        if isinstance(body, dict) and body.get("error"):
            detail = str(body["error"])
    except ValueError:
        pass
    raise UpstreamError(
        f"Ollama returned {response.status_code}: {detail}",
        upstream_status=response.status_code,
    )


def _parse_chunk(line: str) -> dict[str, Any]:
    try:
        chunk = json.loads(line)
    except ValueError as exc:
        raise UpstreamError("Malformed stream chunk from Ollama") from exc
    if not isinstance(chunk, dict):
        raise UpstreamError("Malformed stream chunk from Ollama")
    if chunk.get("error"):
        raise UpstreamError(f"Ollama error: {chunk['error']}")
    message = chunk.get("message", {})
    if not isinstance(message, dict):
        raise UpstreamError("Malformed stream chunk from Ollama")
    return chunk
