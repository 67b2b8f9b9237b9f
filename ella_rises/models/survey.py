"""Survey model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from ella_rises.database import Base


class Survey(Base):
    """Represents a post-event survey response."""
    __tablename__ = "surveys"

    id = Column(Integer, primary_key=True)
    participant_id = Column(Integer, ForeignKey("participants.id"))
    event_id = Column(Integer, ForeignKey("events.id"))
    satisfaction_score = Column(Integer)
    usefulness_score = Column(Integer)
    recommendation_score = Column(Integer)
    comments = Column(Text)
    submitted_at = Column(String)
