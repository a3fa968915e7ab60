from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..database import get_db
from ..schemas.common import parse_email_param
from ..schemas.waitlist_schema import WaitlistCreate, WaitlistUpdate
from ..services import waitlist_service
from ..services.notifier import Notifier, get_notifier
from ..utils import RequestContext, success_response

router = APIRouter(prefix="/waitlist", tags=["waitlist"])


@router.post("")
async def join_waitlist(
    payload: WaitlistCreate,
    request: Request,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
):
    data = await waitlist_service.create_waitlist_entry(
        db, notifier, payload, RequestContext.from_request(request)
    )
    return success_response(
        data,
        f"🎮 Welcome to {settings.brand_name}! Check your email for confirmation details.",
    )


@router.get("")
def get_waitlist_status(
    email: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Queue position of a signup, looked up by email."""
    return success_response(waitlist_service.get_waitlist_status(db, parse_email_param(email)))


@router.patch("")
def update_waitlist_entry(payload: WaitlistUpdate, db: Session = Depends(get_db)):
    data = waitlist_service.update_waitlist_entry(db, payload)
    return success_response(data, "Waitlist entry updated successfully")
