"""Event model definitions."""

from sqlalchemy import Column, Integer, String, Text
from ella_rises.database import Base


class Event(Base):
    """Represents a workshop, summit or other program event."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    name = Column(String)
    event_type = Column(String)
    description = Column(Text)
    location = Column(String)
    start_time = Column(String)
    end_time = Column(String)
    capacity = Column(Integer)
