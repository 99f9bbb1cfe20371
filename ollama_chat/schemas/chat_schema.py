"""Chat and model selection API schemas."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Send-message request. Blank prompts are rejected by the command layer."""

    message: str


class ChatResponse(BaseModel):
    """Model reply together with the session it was recorded in."""

    message: str
    session_id: int | None


class ModelListResponse(BaseModel):
    """Models available on the inference server."""

    models: list[str] = Field(default_factory=list)


class SelectedModelResponse(BaseModel):
    """Currently selected model, if any."""

    name: str | None = None


class SelectModelRequest(BaseModel):
    """Request to change the selected model."""

    name: str = Field(..., min_length=1, max_length=255)
