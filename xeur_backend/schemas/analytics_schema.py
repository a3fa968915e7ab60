from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from .common import CamelModel


class AnalyticsEventIn(CamelModel):
    event: str = Field(..., min_length=1, max_length=100)
    page: Optional[str] = Field(None, max_length=500)
    data: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = Field(None, max_length=200)
    user_id: Optional[str] = Field(None, max_length=200)


class AnalyticsBatchIn(CamelModel):
    events: List[AnalyticsEventIn] = Field(..., min_length=1, max_length=100)


class AnalyticsEventOut(CamelModel):
    id: str
    event: str
    page: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    user_agent: Optional[str] = None
    timestamp: datetime
