"""
Waitlist intake.

The queue position of an entry is 1 + the number of entries that go before
it: higher priority first, then earlier signup.
"""
import logging
from typing import Any, Dict

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import ConflictError, NotFoundError
from ..models.enums import EVENT_WAITLIST_SIGNUP
from ..models.waitlist_entry import WaitlistEntry
from ..schemas.waitlist_schema import WaitlistCreate, WaitlistEntryOut, WaitlistStatusOut, WaitlistUpdate
from ..utils import RequestContext, round_half_up, split_tags
from . import email_templates
from .notifier import Notifier

logger = logging.getLogger(__name__)

# Columns that cannot be cleared through a PATCH
NON_NULLABLE_FIELDS = {"game_types", "experience", "status", "priority"}


def get_queue_position(db: Session, entry: WaitlistEntry) -> int:
    ahead = (
        db.query(func.count(WaitlistEntry.id))
        .filter(
            or_(
                WaitlistEntry.priority > entry.priority,
                and_(
                    WaitlistEntry.priority == entry.priority,
                    WaitlistEntry.created_at < entry.created_at,
                ),
            )
        )
        .scalar()
    )
    return (ahead or 0) + 1


def _email_registered(db: Session, email: str) -> bool:
    return db.query(WaitlistEntry.id).filter(WaitlistEntry.email == email).first() is not None


def _find_by_email(db: Session, email: str) -> WaitlistEntry:
    entry = db.query(WaitlistEntry).filter(WaitlistEntry.email == email).first()
    if not entry:
        raise NotFoundError("Email not found in waitlist")
    return entry


async def create_waitlist_entry(
    db: Session,
    notifier: Notifier,
    payload: WaitlistCreate,
    context: RequestContext,
) -> Dict[str, Any]:
    email = str(payload.email)
    if _email_registered(db, email):
        raise ConflictError("Email already registered for waitlist")

    game_types = split_tags(payload.game_types)
    source = payload.source or "website"
    entry = WaitlistEntry(
        email=email,
        name=payload.name,
        game_types=game_types,
        experience=payload.experience.value,
        source=source,
        priority=0,
    )
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup with the same email
        db.rollback()
        raise ConflictError("Email already registered for waitlist")
    db.refresh(entry)
    logger.info(f"✅ Waitlist entry created: {entry.id}")

    position = get_queue_position(db, entry)
    settings = notifier.settings

    await notifier.send_email(
        entry.email,
        email_templates.waitlist_confirmation(settings.brand_name, entry.name, position, game_types),
    )
    notifier.track_event(
        db,
        EVENT_WAITLIST_SIGNUP,
        "/waitlist",
        {"gameTypes": game_types, "experience": entry.experience, "source": payload.source},
        context,
    )
    if settings.admin_email:
        await notifier.send_email(
            settings.admin_email,
            email_templates.waitlist_admin_notification(settings.brand_name, entry, position),
        )
    else:
        logger.info("ADMIN_EMAIL not configured, skipping waitlist admin notification")

    return {"id": entry.id, "email": entry.email, "position": position}


def get_waitlist_status(db: Session, email: str) -> Dict[str, Any]:
    entry = _find_by_email(db, email)
    position = get_queue_position(db, entry)
    total = db.query(func.count(WaitlistEntry.id)).scalar() or 0

    data = WaitlistStatusOut.serialize(entry)
    data.update(
        position=position,
        totalCount=total,
        percentile=int(round_half_up(position / total * 100)) if total else 0,
    )
    return data


def update_waitlist_entry(db: Session, payload: WaitlistUpdate) -> Dict[str, Any]:
    entry = _find_by_email(db, str(payload.email))

    changes = payload.model_dump(exclude_unset=True, exclude={"email"})
    for field, value in changes.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        if hasattr(value, "value"):
            value = value.value
        setattr(entry, field, value)

    db.commit()
    db.refresh(entry)
    logger.info(f"Waitlist entry updated: {entry.id} ({', '.join(changes) or 'no changes'})")
    return WaitlistEntryOut.serialize(entry)
