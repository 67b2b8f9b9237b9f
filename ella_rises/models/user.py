"""User model definitions."""

from sqlalchemy import Column, Integer, String
from ella_rises.database import Base


class User(Base):
    """Represents a staff account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    password = Column(String)
    role = Column(String)  # manager/staff
