"""Model listing and selection API router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ollama_chat.dependencies import get_chat_commands
from ollama_chat.schemas.chat_schema import (
    ModelListResponse,
    SelectedModelResponse,
    SelectModelRequest,
)
from ollama_chat.schemas.response_schema import (
    ERROR_RESPONSES,
    ApiResponse,
    success_response,
)
from ollama_chat.services.chat_commands import ChatCommands

router = APIRouter(
    prefix="/api/v1/models",
    tags=["models"],
    responses=ERROR_RESPONSES,
)

ChatCommandsDep = Annotated[ChatCommands, Depends(get_chat_commands)]


@router.get("", response_model=ApiResponse[ModelListResponse])
async def list_models(commands: ChatCommandsDep) -> dict:
    """Models currently available on the Ollama server."""
    models = await commands.list_models()
    return success_response(ModelListResponse(models=models))


@router.get("/selected", response_model=ApiResponse[SelectedModelResponse])
async def get_selected_model(commands: ChatCommandsDep) -> dict:
    """The persisted model selection."""
    name = await commands.get_selected_model()
    return success_response(SelectedModelResponse(name=name))


@router.put("/selected", response_model=ApiResponse[SelectedModelResponse])
async def set_selected_model(
    request: SelectModelRequest,
    commands: ChatCommandsDep,
) -> dict:
    """Persist the model used for new messages."""
    await commands.set_selected_model(request.name)
    return success_response(SelectedModelResponse(name=request.name.strip()))
