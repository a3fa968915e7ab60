import logging
from typing import Any, Dict, Optional

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from ..exceptions import NotFoundError
from ..models.enums import EVENT_INVESTMENT_INQUIRY, Status
from ..models.investment_inquiry import InvestmentInquiry
from ..schemas.common import StatusUpdate
from ..schemas.investment_schema import InvestmentCreate, InvestmentOut
from ..utils import RequestContext, build_pagination, utcnow
from . import email_templates, webhook_service
from .notifier import Notifier

logger = logging.getLogger(__name__)


async def create_investment_inquiry(
    db: Session,
    notifier: Notifier,
    payload: InvestmentCreate,
    context: RequestContext,
) -> InvestmentInquiry:
    inquiry = InvestmentInquiry(
        name=payload.name,
        email=str(payload.email),
        company=payload.company,
        position=payload.position,
        investment_size=payload.investment_size,
        fund_type=payload.fund_type.value if payload.fund_type else None,
        timeline=payload.timeline.value if payload.timeline else None,
        message=payload.message,
        status=Status.PENDING.value,
    )
    db.add(inquiry)
    db.commit()
    db.refresh(inquiry)
    logger.info(f"✅ Investment inquiry created: {inquiry.id}")

    settings = notifier.settings
    await notifier.send_email(
        inquiry.email,
        email_templates.investment_confirmation(settings.brand_name, inquiry.name, inquiry.company),
    )

    recipients = settings.investor_team_emails()
    sent = await notifier.send_bulk_email(
        recipients,
        email_templates.investment_team_notification(settings.brand_name, settings.site_url, inquiry),
    )
    logger.info(f"Investment inquiry {inquiry.id}: notified {sent}/{len(recipients)} team members")

    await notifier.post_webhook(
        webhook_service.build_investment_message(settings.brand_name, settings.site_url, inquiry)
    )
    notifier.track_event(
        db,
        EVENT_INVESTMENT_INQUIRY,
        "/investment",
        {
            "company": inquiry.company,
            "fundType": inquiry.fund_type,
            "investmentSize": inquiry.investment_size,
            "timeline": inquiry.timeline,
        },
        context,
    )
    return inquiry


async def update_investment_status(db: Session, notifier: Notifier, payload: StatusUpdate) -> Dict[str, Any]:
    inquiry = db.query(InvestmentInquiry).filter(InvestmentInquiry.id == payload.id).first()
    if not inquiry:
        raise NotFoundError("Investment inquiry not found")

    inquiry.status = payload.status
    inquiry.responded_at = utcnow() if payload.status == Status.RESPONDED.value else None
    if payload.response is not None:
        inquiry.response = payload.response

    db.commit()
    db.refresh(inquiry)
    logger.info(f"Investment inquiry {inquiry.id} marked as {inquiry.status}")

    if payload.status == Status.RESPONDED.value and payload.response:
        await notifier.send_email(
            inquiry.email,
            email_templates.investment_response(
                notifier.settings.brand_name, inquiry.name, inquiry.company, payload.response
            ),
        )

    return InvestmentOut.serialize(inquiry)


def list_inquiries(
    db: Session,
    page: int,
    limit: int,
    status: Optional[str] = None,
    fund_type: Optional[str] = None,
) -> Dict[str, Any]:
    query = db.query(InvestmentInquiry)
    if status:
        query = query.filter(InvestmentInquiry.status == status)
    if fund_type:
        query = query.filter(InvestmentInquiry.fund_type == fund_type)

    total = query.count()
    inquiries = (
        query.order_by(desc(InvestmentInquiry.created_at))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    status_counts = dict(
        db.query(InvestmentInquiry.status, func.count(InvestmentInquiry.id))
        .group_by(InvestmentInquiry.status)
        .all()
    )
    by_fund_type = (
        db.query(InvestmentInquiry.fund_type, func.count(InvestmentInquiry.id))
        .group_by(InvestmentInquiry.fund_type)
        .all()
    )
    return {
        "items": [InvestmentOut.serialize(i) for i in inquiries],
        "pagination": build_pagination(page, limit, total),
        "stats": {
            "pending": status_counts.get(Status.PENDING.value, 0),
            "responded": status_counts.get(Status.RESPONDED.value, 0),
            "byFundType": [{"fundType": fund, "count": count} for fund, count in by_fund_type],
        },
    }
