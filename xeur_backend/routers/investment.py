from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.enums import FundType
from ..schemas.common import StatusUpdate
from ..schemas.investment_schema import InvestmentCreate
from ..services import investment_service
from ..services.notifier import Notifier, get_notifier
from ..utils import RequestContext, success_response

router = APIRouter(prefix="/investment", tags=["investment"])


@router.post("")
async def submit_inquiry(
    payload: InvestmentCreate,
    request: Request,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    inquiry = await investment_service.create_investment_inquiry(
        db, notifier, payload, RequestContext.from_request(request)
    )
    return success_response(
        {"id": inquiry.id, "status": inquiry.status, "company": inquiry.company},
        f"🚀 Thank you {inquiry.name}! We've received your investment inquiry and our "
        "investor relations team will contact you within 24 hours.",
    )


@router.get("")
def list_inquiries(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    fund_type: Optional[FundType] = Query(None, alias="fundType"),
    db: Session = Depends(get_db),
):
    data = investment_service.list_inquiries(
        db, page, limit, status=status, fund_type=fund_type.value if fund_type else None
    )
    return success_response(data)


@router.patch("")
async def update_inquiry(
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    data = await investment_service.update_investment_status(db, notifier, payload)
    return success_response(data, "Investment inquiry updated successfully")
