"""
Newsletter subscriptions.

Unsubscribing never deletes the row; subscribing again with the same email
reactivates it and keeps its id.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import ConflictError, NotFoundError
from ..models.enums import EVENT_NEWSLETTER_SIGNUP, EVENT_NEWSLETTER_UNSUBSCRIBE
from ..models.newsletter_subscription import NewsletterSubscription
from ..schemas.newsletter_schema import (
    NewsletterCreate,
    NewsletterOut,
    NewsletterPreferences,
    NewsletterUpdate,
)
from ..utils import RequestContext, build_pagination
from . import email_templates
from .notifier import Notifier

logger = logging.getLogger(__name__)


def _find(db: Session, email: str) -> Optional[NewsletterSubscription]:
    return db.query(NewsletterSubscription).filter(NewsletterSubscription.email == email).first()


def _reactivate(subscription: NewsletterSubscription, payload: NewsletterCreate) -> None:
    subscription.is_active = True
    if payload.source:
        subscription.source = payload.source
    if payload.preferences is not None:
        # Only the keys the client actually sent replace the stored ones
        merged = dict(subscription.preferences or {})
        merged.update(payload.preferences.model_dump(mode="json", exclude_unset=True))
        subscription.preferences = merged


async def create_subscription(
    db: Session,
    notifier: Notifier,
    payload: NewsletterCreate,
    context: RequestContext,
) -> Dict[str, Any]:
    email = str(payload.email)
    settings = notifier.settings
    existing = _find(db, email)

    if existing and existing.is_active:
        raise ConflictError("Email is already subscribed to our newsletter")

    if existing:
        _reactivate(existing, payload)
        db.commit()
        db.refresh(existing)
        logger.info(f"✅ Newsletter subscription reactivated: {existing.id}")
        notifier.track_event(
            db,
            EVENT_NEWSLETTER_SIGNUP,
            "/newsletter",
            {"source": existing.source, "preferences": existing.preferences, "reactivated": True},
            context,
        )
        return {
            "id": existing.id,
            "email": existing.email,
            "preferences": existing.preferences,
            "reactivated": True,
        }

    preferences = payload.preferences or NewsletterPreferences()
    subscription = NewsletterSubscription(
        email=email,
        name=payload.name,
        is_active=True,
        preferences=preferences.model_dump(mode="json"),
        source=payload.source or "website",
    )
    db.add(subscription)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email is already subscribed to our newsletter")
    db.refresh(subscription)
    logger.info(f"✅ Newsletter subscription created: {subscription.id}")

    await notifier.send_email(
        subscription.email,
        email_templates.newsletter_welcome(settings.brand_name, subscription.name, subscription.preferences),
    )
    notifier.track_event(
        db,
        EVENT_NEWSLETTER_SIGNUP,
        "/newsletter",
        {"source": subscription.source, "preferences": subscription.preferences, "reactivated": False},
        context,
    )
    if settings.admin_email:
        await notifier.send_email(
            settings.admin_email,
            email_templates.newsletter_admin_notification(settings.brand_name, subscription),
        )

    return {
        "id": subscription.id,
        "email": subscription.email,
        "preferences": subscription.preferences,
        "reactivated": False,
    }


async def unsubscribe(db: Session, notifier: Notifier, email: str, context: RequestContext) -> Dict[str, Any]:
    subscription = _find(db, email)
    if not subscription or not subscription.is_active:
        raise NotFoundError("Email not found or already unsubscribed")

    subscription.is_active = False
    db.commit()
    logger.info(f"Newsletter subscription deactivated: {subscription.id}")

    await notifier.send_email(
        subscription.email,
        email_templates.newsletter_unsubscribed(notifier.settings.brand_name, subscription.name),
    )
    notifier.track_event(db, EVENT_NEWSLETTER_UNSUBSCRIBE, "/unsubscribe", {"email": email}, context)

    return {"email": email, "unsubscribed": True}


def update_preferences(db: Session, payload: NewsletterUpdate) -> Dict[str, Any]:
    subscription = _find(db, str(payload.email))
    if not subscription:
        raise NotFoundError("Newsletter subscription not found")

    fields = payload.model_fields_set
    if "preferences" in fields and payload.preferences is not None:
        subscription.preferences = payload.preferences.model_dump(mode="json")
    if "name" in fields:
        subscription.name = payload.name
    if "is_active" in fields and payload.is_active is not None:
        subscription.is_active = payload.is_active

    db.commit()
    db.refresh(subscription)
    return NewsletterOut.serialize(subscription)


def list_subscriptions(db: Session, page: int, limit: int, active: Optional[bool] = None) -> Dict[str, Any]:
    query = db.query(NewsletterSubscription)
    if active is not None:
        query = query.filter(NewsletterSubscription.is_active == active)

    total = query.count()
    rows = (
        query.order_by(desc(NewsletterSubscription.created_at))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    counts = dict(
        db.query(NewsletterSubscription.is_active, func.count(NewsletterSubscription.id))
        .group_by(NewsletterSubscription.is_active)
        .all()
    )
    return {
        "items": [NewsletterOut.serialize(r) for r in rows],
        "pagination": build_pagination(page, limit, total),
        "stats": {"active": counts.get(True, 0), "inactive": counts.get(False, 0)},
    }
