from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..models.enums import DEFAULT_NEWSLETTER_TOPICS, NewsletterFrequency
from .common import CamelModel, EmailAddress


class NewsletterPreferences(CamelModel):
    frequency: NewsletterFrequency = NewsletterFrequency.MONTHLY
    topics: List[str] = Field(default_factory=lambda: list(DEFAULT_NEWSLETTER_TOPICS))


class NewsletterCreate(CamelModel):
    email: EmailAddress
    name: Optional[str] = Field(None, max_length=100)
    source: Optional[str] = Field(None, max_length=100)
    preferences: Optional[NewsletterPreferences] = None


class NewsletterUpdate(CamelModel):
    email: EmailAddress
    preferences: Optional[NewsletterPreferences] = None
    name: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class NewsletterOut(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    is_active: bool
    preferences: Optional[Dict[str, Any]] = None
    source: Optional[str] = None
    created_at: datetime
    updated_at: datetime
