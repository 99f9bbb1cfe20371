"""Chat behaviour configuration."""

from pydantic import BaseModel


class ChatConfig(BaseModel, frozen=True):
    """Session titling and startup settings."""

    title_max_length: int
    auto_title: bool
    resume_last_session: bool
