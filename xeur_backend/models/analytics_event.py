from sqlalchemy import Column, String, Text, DateTime, JSON

from ..database import Base
from ..utils import generate_id, utcnow


class AnalyticsEvent(Base):
    """
    Append-only tracking event.
    Correlated with the other tables only by event name (e.g. "waitlist_signup").
    """
    __tablename__ = "analytics_events"

    id = Column(String(36), primary_key=True, default=generate_id)
    event = Column(String(100), nullable=False, index=True)
    page = Column(String(500), nullable=True, index=True)
    data = Column(JSON, nullable=False, default=dict)
    user_agent = Column(Text, nullable=True)
    ip_address = Column(String(255), nullable=True, index=True)  # Best effort, from proxy headers
    timestamp = Column(DateTime, default=utcnow, nullable=False, index=True)
