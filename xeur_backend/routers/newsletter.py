from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.common import parse_email_param
from ..schemas.newsletter_schema import NewsletterCreate, NewsletterUpdate
from ..services import newsletter_service
from ..services.notifier import Notifier, get_notifier
from ..utils import RequestContext, success_response

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


@router.post("")
async def subscribe(
    payload: NewsletterCreate,
    request: Request,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    data = await newsletter_service.create_subscription(
        db, notifier, payload, RequestContext.from_request(request)
    )
    if data["reactivated"]:
        message = "🌟 Welcome back! Your newsletter subscription has been reactivated."
    else:
        message = (
            "🌟 Thank you for subscribing! You'll receive regular updates on our "
            "platform development and AI gaming insights."
        )
    return success_response(data, message)


@router.get("")
def list_subscriptions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    active: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
):
    return success_response(newsletter_service.list_subscriptions(db, page, limit, active=active))


@router.delete("")
async def unsubscribe(
    request: Request,
    email: Optional[str] = Query(None),
    token: Optional[str] = Query(None),  # Accepted for link compatibility, not verified
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    data = await newsletter_service.unsubscribe(
        db, notifier, parse_email_param(email), RequestContext.from_request(request)
    )
    return success_response(data, "You have been successfully unsubscribed from our newsletter.")


@router.patch("")
def update_preferences(payload: NewsletterUpdate, db: Session = Depends(get_db)):
    data = newsletter_service.update_preferences(db, payload)
    return success_response(data, "Newsletter preferences updated successfully")
