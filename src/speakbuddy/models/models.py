"""Database models for the progress engine."""
from sqlalchemy import Column, String, Text

from speakbuddy.models.base import Base, TimestampMixin


class Document(Base, TimestampMixin):
    """One persisted JSON document, addressed by key."""

    __tablename__ = "documents"

    key = Column(String, primary_key=True)  # e.g., "speak_attendance_v1"
    payload = Column(Text, nullable=False)  # JSON text
