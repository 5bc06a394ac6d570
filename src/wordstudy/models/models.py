"""Database models for persisted progress."""
from sqlalchemy import Column, String, Text

from wordstudy.models.base import Base, TimestampMixin


class StoredProgress(Base, TimestampMixin):
    """Serialized progress mapping of one catalog, stored under its progress key."""

    __tablename__ = "stored_progress"

    key = Column(String, primary_key=True)  # e.g., "word-progress-Default"
    payload = Column(Text, nullable=False)  # JSON object keyed by word value

    def __repr__(self) -> str:
        return f"<StoredProgress key={self.key!r}>"
