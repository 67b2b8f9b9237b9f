"""Participant model definitions."""

from sqlalchemy import Column, Integer, String
from ella_rises.database import Base


class Participant(Base):
    """Represents a girl enrolled in Ella Rises programs."""
    __tablename__ = "participants"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String)
    last_name = Column(String)
    email = Column(String, index=True)
    phone = Column(String)
    date_of_birth = Column(String)  # 'YYYY-MM-DD'
    city = Column(String)
    state = Column(String)
    zip = Column(String)
    school = Column(String)
    field_of_interest = Column(String)
