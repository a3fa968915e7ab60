import logging
from typing import Any, Dict, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..exceptions import NotFoundError
from ..models.contact_form import ContactForm
from ..models.enums import EVENT_CONTACT_SUBMIT, Status
from ..schemas.common import StatusUpdate
from ..schemas.contact_schema import ContactCreate, ContactOut
from ..utils import RequestContext, build_pagination, utcnow
from . import email_templates
from .notifier import Notifier

logger = logging.getLogger(__name__)


async def create_contact_form(
    db: Session,
    notifier: Notifier,
    payload: ContactCreate,
    context: RequestContext,
) -> ContactForm:
    contact = ContactForm(
        name=payload.name,
        email=str(payload.email),
        subject=payload.subject,
        message=payload.message,
        type=payload.type.value,
        status=Status.PENDING.value,
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    logger.info(f"✅ Contact form created: {contact.id} ({contact.type})")

    settings = notifier.settings
    await notifier.send_email(
        contact.email,
        email_templates.contact_confirmation(settings.brand_name, contact.name, contact.type, contact.subject),
    )
    # Team replies go straight to the submitter
    await notifier.send_email(
        settings.team_email_for(contact.type),
        email_templates.contact_team_notification(settings.brand_name, contact),
        reply_to=contact.email,
    )
    notifier.track_event(
        db,
        EVENT_CONTACT_SUBMIT,
        "/contact",
        {"type": contact.type, "subject": contact.subject, "messageLength": len(contact.message)},
        context,
    )
    return contact


async def update_contact_status(db: Session, notifier: Notifier, payload: StatusUpdate) -> Dict[str, Any]:
    contact = db.query(ContactForm).filter(ContactForm.id == payload.id).first()
    if not contact:
        raise NotFoundError("Contact not found")

    contact.status = payload.status
    contact.responded_at = utcnow() if payload.status == Status.RESPONDED.value else None
    if payload.response is not None:
        contact.response = payload.response

    db.commit()
    db.refresh(contact)
    logger.info(f"Contact {contact.id} marked as {contact.status}")

    if payload.status == Status.RESPONDED.value and payload.response:
        await notifier.send_email(
            contact.email,
            email_templates.contact_response(
                notifier.settings.brand_name, contact.name, contact.subject, payload.response
            ),
        )

    return ContactOut.serialize(contact)


def list_contacts(
    db: Session,
    page: int,
    limit: int,
    contact_type: Optional[str] = None,
    status: Optional[str] = None,
) -> Dict[str, Any]:
    query = db.query(ContactForm)
    if contact_type:
        query = query.filter(ContactForm.type == contact_type)
    if status:
        query = query.filter(ContactForm.status == status)

    total = query.count()
    contacts = (
        query.order_by(desc(ContactForm.created_at))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "items": [ContactOut.serialize(c) for c in contacts],
        "pagination": build_pagination(page, limit, total),
    }
