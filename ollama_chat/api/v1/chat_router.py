"""Chat API router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ollama_chat.dependencies import get_chat_commands
from ollama_chat.schemas.chat_schema import ChatRequest, ChatResponse
from ollama_chat.schemas.response_schema import (
    ERROR_RESPONSES,
    ApiResponse,
    success_response,
)
from ollama_chat.services.chat_commands import ChatCommands

router = APIRouter(
    prefix="/api/v1/chat",
    tags=["chat"],
    responses=ERROR_RESPONSES,
)

ChatCommandsDep = Annotated[ChatCommands, Depends(get_chat_commands)]


@router.post("", response_model=ApiResponse[ChatResponse])
async def send_message(request: ChatRequest, commands: ChatCommandsDep) -> dict:
    """Generate a reply and record the exchange in the current session."""
    exchange = await commands.exchange(request.message)
    return success_response(
        ChatResponse(message=exchange.response, session_id=exchange.session_id)
    )


@router.post("/abort", response_model=ApiResponse[None])
async def abort_generation(commands: ChatCommandsDep) -> dict:
    """Cancel the in-flight generation, if any."""
    commands.abort_generation()
    return success_response(None, message="Abort requested")
