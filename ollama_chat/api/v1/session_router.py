"""Chat session API router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ollama_chat.dependencies import get_chat_commands
from ollama_chat.schemas.response_schema import (
    ERROR_RESPONSES,
    ApiResponse,
    success_response,
)
from ollama_chat.schemas.session_schema import (
    HistoryEntryResponse,
    RenameSessionRequest,
    SessionResponse,
    SwitchSessionRequest,
)
from ollama_chat.services.chat_commands import ChatCommands

router = APIRouter(
    prefix="/api/v1/sessions",
    tags=["sessions"],
    responses=ERROR_RESPONSES,
)

ChatCommandsDep = Annotated[ChatCommands, Depends(get_chat_commands)]


@router.get("", response_model=ApiResponse[list[SessionResponse]])
async def list_sessions(commands: ChatCommandsDep) -> dict:
    """List all sessions, newest first."""
    sessions = await commands.list_sessions()
    return success_response([SessionResponse.model_validate(s) for s in sessions])


@router.get("/current", response_model=ApiResponse[SessionResponse])
async def get_current_session(commands: ChatCommandsDep) -> dict:
    """Return the current session, creating an untitled one if none is set."""
    session = await commands.get_current_session()
    return success_response(SessionResponse.model_validate(session))


@router.put("/current", response_model=ApiResponse[SessionResponse])
async def switch_session(
    request: SwitchSessionRequest,
    commands: ChatCommandsDep,
) -> dict:
    """Make an existing session current."""
    session = await commands.switch_session(request.session_id)
    return success_response(SessionResponse.model_validate(session))


@router.delete("/current", response_model=ApiResponse[None])
async def start_new_session(commands: ChatCommandsDep) -> dict:
    """Clear the current session so the next message starts a new one."""
    commands.start_new_session()
    return success_response(None, message="New session started")


@router.get(
    "/current/history",
    response_model=ApiResponse[list[HistoryEntryResponse]],
)
async def load_current_history(commands: ChatCommandsDep) -> dict:
    """Exchanges of the current session in chronological order."""
    entries = await commands.load_history_for_current_session()
    return success_response(
        [HistoryEntryResponse.model_validate(entry) for entry in entries]
    )


@router.patch("/{session_id}", response_model=ApiResponse[None])
async def rename_session(
    session_id: int,
    request: RenameSessionRequest,
    commands: ChatCommandsDep,
) -> dict:
    """Update the title of a session."""
    await commands.rename_session(session_id, request.title)
    return success_response(None, message="Title updated")


@router.delete("/{session_id}", response_model=ApiResponse[None])
async def delete_session(session_id: int, commands: ChatCommandsDep) -> dict:
    """Delete a session and its history."""
    await commands.delete_session(session_id)
    return success_response(None, message="Session deleted")
