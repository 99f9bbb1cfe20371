"""Chat session database model."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ollama_chat.core.database import Base


class ChatSession(Base):
    """Persisted conversation thread. Only the title is mutable."""

    __tablename__ = "chat_sessions"
    __table_args__ = (
        Index("ix_chat_sessions_created_at_id", "created_at", "id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
