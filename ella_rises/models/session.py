"""Session model definitions."""

from sqlalchemy import Column, DateTime, String, Text
from ella_rises.database import Base


class SessionRecord(Base):
    """Server-side login state keyed by the id carried in the session cookie."""
    __tablename__ = "sessions"

    sid = Column(String, primary_key=True)
    sess = Column(Text, nullable=False)
    expired = Column(DateTime, nullable=False, index=True)
