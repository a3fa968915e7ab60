"""
Newsletter subscriptions.
One row per email: unsubscribing only flips is_active, re-subscribing
reactivates the same row.
"""
from sqlalchemy import Column, String, DateTime, Boolean, JSON

from ..database import Base
from ..utils import generate_id, utcnow


class NewsletterSubscription(Base):
    __tablename__ = "newsletter_subscriptions"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    preferences = Column(JSON, nullable=True)  # {"frequency": "monthly", "topics": [...]}
    source = Column(String(100), nullable=True, default="website")  # footer, popup, etc.

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
