from datetime import datetime
from typing import Optional

from pydantic import Field

from ..models.enums import FundType, Timeline
from .common import CamelModel, EmailAddress


class InvestmentCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailAddress
    company: Optional[str] = Field(None, max_length=200)
    position: Optional[str] = Field(None, max_length=100)
    investment_size: Optional[str] = Field(None, max_length=50)
    message: str = Field(..., min_length=10, max_length=2000)
    fund_type: Optional[FundType] = None
    timeline: Optional[Timeline] = None


class InvestmentOut(CamelModel):
    id: str
    name: str
    email: str
    company: Optional[str] = None
    position: Optional[str] = None
    investment_size: Optional[str] = None
    fund_type: Optional[str] = None
    timeline: Optional[str] = None
    message: str
    status: str
    response: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
