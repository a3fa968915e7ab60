from sqlalchemy import Column, String, Text, DateTime

from ..database import Base
from ..utils import generate_id, utcnow
from .enums import Status


class InvestmentInquiry(Base):
    __tablename__ = "investment_inquiries"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    company = Column(String(200), nullable=True)
    position = Column(String(100), nullable=True)
    investment_size = Column(String(50), nullable=True)
    fund_type = Column(String(20), nullable=True, index=True)  # VC, Angel, Strategic, Family Office, Other
    timeline = Column(String(20), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=Status.PENDING.value, index=True)

    response = Column(Text, nullable=True)
    responded_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
