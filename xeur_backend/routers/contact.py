from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.enums import ContactType
from ..schemas.common import StatusUpdate
from ..schemas.contact_schema import ContactCreate
from ..services import contact_service
from ..services.notifier import Notifier, get_notifier
from ..utils import RequestContext, success_response

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("")
async def submit_contact(
    payload: ContactCreate,
    request: Request,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    contact = await contact_service.create_contact_form(
        db, notifier, payload, RequestContext.from_request(request)
    )
    return success_response(
        {"id": contact.id, "type": contact.type, "status": contact.status},
        f"📧 Thank you {contact.name}! We've received your {contact.type.lower()} inquiry "
        "and will respond within 24-48 hours.",
    )


@router.get("")
def list_contacts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    type: Optional[ContactType] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    data = contact_service.list_contacts(
        db, page, limit, contact_type=type.value if type else None, status=status
    )
    return success_response(data)


@router.patch("")
async def update_contact(
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    data = await contact_service.update_contact_status(db, notifier, payload)
    return success_response(data, "Contact updated successfully")
