from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email

from ..exceptions import ValidationFailed


def _check_email(value: str) -> str:
    # Validate only; the address is stored exactly as sent (no domain lowercasing)
    validate_email(value)
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email)]


class CamelModel(BaseModel):
    """
    Base schema: camelCase on the wire, snake_case in Python.
    Unknown keys are ignored, never rejected.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @classmethod
    def serialize(cls, obj: Any) -> Dict[str, Any]:
        """ORM row -> JSON-ready dict with camelCase keys."""
        return cls.model_validate(obj).model_dump(by_alias=True, mode="json")


class StatusUpdate(CamelModel):
    """Admin status change for contact forms and investment inquiries."""
    id: str = Field(..., min_length=1)
    status: Literal["PENDING", "RESPONDED", "ARCHIVED"]
    response: Optional[str] = Field(None, max_length=5000)


_email_adapter = TypeAdapter(EmailStr)


def parse_email_param(email: Optional[str]) -> str:
    """Validate an email received as a query parameter."""
    if not email or not email.strip():
        raise ValidationFailed(
            [{"field": "email", "message": "Email parameter is required"}],
            message="Email parameter is required",
        )
    try:
        _email_adapter.validate_python(email.strip())
    except PydanticValidationError:
        raise ValidationFailed(
            [{"field": "email", "message": "Invalid email format"}],
            message="Invalid email format",
        )
    return email.strip()


def parse_datetime_param(value: Optional[str], field: str) -> Optional[datetime]:
    """
    Parse an ISO 8601 query parameter into a naive UTC datetime.
    Returns None when the parameter is absent.
    """
    if value is None or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise ValidationFailed([{"field": field, "message": "Invalid date format"}])
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
