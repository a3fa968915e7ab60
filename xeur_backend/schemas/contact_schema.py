from datetime import datetime
from typing import Optional

from pydantic import Field

from ..models.enums import ContactType
from .common import CamelModel, EmailAddress


class ContactCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailAddress
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)
    type: ContactType = ContactType.GENERAL


class ContactOut(CamelModel):
    id: str
    name: str
    email: str
    subject: str
    message: str
    type: str
    status: str
    response: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
