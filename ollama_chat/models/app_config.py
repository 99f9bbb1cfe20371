"""Key/value preference database model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ollama_chat.core.database import Base


class AppConfigEntry(Base):
    """Small scalar setting such as the selected model."""

    __tablename__ = "app_config"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
