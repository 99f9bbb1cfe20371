"""Database connection configuration."""

from pathlib import Path

from pydantic import BaseModel


class DatabaseConfig(BaseModel, frozen=True):
    """SQLite database settings."""

    path: Path
    echo: bool

    @property
    def async_url(self) -> str:
        """SQLAlchemy URL for the aiosqlite driver."""
        return f"sqlite+aiosqlite:///{self.path}"
