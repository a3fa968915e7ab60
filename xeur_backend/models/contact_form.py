from sqlalchemy import Column, String, Text, DateTime

from ..database import Base
from ..utils import generate_id, utcnow
from .enums import ContactType, Status


class ContactForm(Base):
    __tablename__ = "contact_forms"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default=ContactType.GENERAL.value, index=True)
    status = Column(String(20), nullable=False, default=Status.PENDING.value, index=True)

    # Admin reply
    response = Column(Text, nullable=True)
    responded_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
