"""Chat session and history API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SessionResponse(BaseModel):
    """Single chat session."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    created_at: datetime | None = None


class HistoryEntryResponse(BaseModel):
    """One recorded exchange within a session."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    session_id: int
    user_message: str
    model_response: str
    timestamp: datetime | None = None


class SwitchSessionRequest(BaseModel):
    """Request to make an existing session current."""

    session_id: int


class RenameSessionRequest(BaseModel):
    """Request to rename a session."""

    title: str = Field(..., min_length=1, max_length=255)
