"""
Waitlist signups.

The queue position is never stored: it is derived from (priority desc,
created_at asc) every time it is requested.
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON

from ..database import Base
from ..utils import generate_id, utcnow
from .enums import Experience, Status


class WaitlistEntry(Base):
    __tablename__ = "waitlist_entries"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=True)
    game_types = Column(JSON, nullable=False, default=list)
    experience = Column(String(20), nullable=False, default=Experience.BEGINNER.value)
    status = Column(String(20), nullable=False, default=Status.PENDING.value)
    source = Column(String(100), nullable=True, default="website")
    priority = Column(Integer, nullable=False, default=0)  # Higher goes first

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
