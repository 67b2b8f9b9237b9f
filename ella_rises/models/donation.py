"""Donation model definitions."""

from sqlalchemy import Column, Integer, String
from ella_rises.database import Base


class Donation(Base):
    """Represents a gift received by the organization."""
    __tablename__ = "donations"

    id = Column(Integer, primary_key=True)
    donor_name = Column(String)
    donor_email = Column(String)
    amount = Column(String)
    donated_on = Column(String)
