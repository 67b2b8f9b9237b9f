"""Milestone model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String
from ella_rises.database import Base


class Milestone(Base):
    """Represents an achievement recorded for a participant."""
    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True)
    participant_id = Column(Integer, ForeignKey("participants.id"), index=True)
    title = Column(String)
    achieved_on = Column(String)
