import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def utcnow() -> datetime:
    """Naive UTC timestamp, the format every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def success_response(data: Any = None, message: Optional[str] = None, status_code: int = 200) -> JSONResponse:
    """
    Envelope for successful responses: {success, data?, message?, timestamp}.
    """
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if message:
        body["message"] = message
    body["timestamp"] = iso_timestamp()
    return JSONResponse(content=body, status_code=status_code)


def error_response(message: str, status_code: int = 500, data: Any = None) -> JSONResponse:
    body: Dict[str, Any] = {"success": False}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    body["message"] = message
    body["timestamp"] = iso_timestamp()
    return JSONResponse(content=body, status_code=status_code)


def get_client_ip(request: Request) -> str:
    """
    Client IP as reported by the proxy.
    x-forwarded-for first, then x-real-ip, otherwise "unknown".
    """
    return (
        request.headers.get("x-forwarded-for")
        or request.headers.get("x-real-ip")
        or "unknown"
    )


@dataclass
class RequestContext:
    """Request metadata stored alongside analytics events."""

    user_agent: Optional[str] = None
    ip_address: str = "unknown"

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(
            user_agent=request.headers.get("user-agent"),
            ip_address=get_client_ip(request),
        )


def build_pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator does (0.5 goes up), not banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def split_tags(raw: str) -> List[str]:
    """
    Split a comma separated string into trimmed, unique, non-empty tags.

    Example: "rpg, puzzle ,rpg," -> ["rpg", "puzzle"]
    """
    tags: List[str] = []
    for part in (raw or "").split(","):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def generate_id() -> str:
    return str(uuid.uuid4())
