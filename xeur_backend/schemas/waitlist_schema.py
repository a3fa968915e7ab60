from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from ..models.enums import Experience, Status
from ..utils import split_tags
from .common import CamelModel, EmailAddress


def _join_if_list(value: Any) -> Any:
    # The signup form may post the checkbox values as a list
    if isinstance(value, list):
        return ",".join(str(item) for item in value)
    return value


class WaitlistCreate(CamelModel):
    email: EmailAddress
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    game_types: str = Field(..., min_length=1)
    experience: Experience = Experience.BEGINNER
    source: Optional[str] = Field(None, max_length=100)

    @field_validator("game_types", mode="before")
    @classmethod
    def accept_list(cls, value):
        return _join_if_list(value)

    @field_validator("game_types")
    @classmethod
    def at_least_one_tag(cls, value: str) -> str:
        if not split_tags(value):
            raise ValueError("Please select at least one game type")
        return value


class WaitlistUpdate(CamelModel):
    """Partial update; only the fields present in the body are written."""
    email: EmailAddress
    name: Optional[str] = Field(None, max_length=100)
    game_types: Optional[List[str]] = None
    experience: Optional[Experience] = None
    status: Optional[Status] = None
    source: Optional[str] = Field(None, max_length=100)
    priority: Optional[int] = None

    @field_validator("game_types", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        if value is None:
            return value
        return split_tags(_join_if_list(value))


class WaitlistEntryOut(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    game_types: List[str] = []
    experience: str
    status: str
    source: Optional[str] = None
    priority: int
    created_at: datetime
    updated_at: datetime


class WaitlistStatusOut(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    status: str
    created_at: datetime
