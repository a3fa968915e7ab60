import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import ValidationFailed
from ..schemas.analytics_schema import AnalyticsBatchIn, AnalyticsEventIn, AnalyticsEventOut
from ..schemas.common import parse_datetime_param
from ..services import analytics_service
from ..services.analytics_service import EventFilters
from ..utils import RequestContext, success_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analytics", tags=["analytics"])

GROUPINGS = {
    "event": "event_stats",
    "page": "page_stats",
    "day": "daily_stats",
    "hour": "hourly_stats",
}


def _event_payload(event: AnalyticsEventIn) -> dict:
    # Session and user ids travel inside the event data
    data = dict(event.data or {})
    if event.session_id:
        data.setdefault("sessionId", event.session_id)
    if event.user_id:
        data.setdefault("userId", event.user_id)
    return {"event": event.event, "page": event.page, "data": data}


@router.post("")
def track_event(payload: AnalyticsEventIn, request: Request, db: Session = Depends(get_db)):
    event = _event_payload(payload)
    row = analytics_service.record_event(
        db, event["event"], event["page"], event["data"], RequestContext.from_request(request)
    )
    return success_response(
        {"id": row.id, "event": row.event, "timestamp": row.timestamp},
        "Analytics event tracked successfully",
    )


@router.patch("")
def track_batch(payload: AnalyticsBatchIn, request: Request, db: Session = Depends(get_db)):
    """Store up to 100 events in one transaction."""
    events = [_event_payload(e) for e in payload.events]
    created = analytics_service.record_events(db, events, RequestContext.from_request(request))
    return success_response(
        {"created": created, "events": len(events)},
        f"Successfully tracked {created} analytics events",
    )


@router.get("")
def query_events(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    event: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    group_by: Optional[str] = Query(None, alias="groupBy"),
    db: Session = Depends(get_db),
):
    if group_by is not None and group_by not in GROUPINGS:
        logger.warning(f"[Analytics] Rejected groupBy={group_by!r}")
        raise ValidationFailed(
            [{"field": "groupBy", "message": "Invalid groupBy parameter"}],
            message="Invalid groupBy parameter",
        )

    filters = EventFilters(
        start=parse_datetime_param(start_date, "startDate"),
        end=parse_datetime_param(end_date, "endDate"),
        event=event,
        page=page,
    )

    if group_by in ("event", "page"):
        data = analytics_service.group_by_field(db, group_by, filters, limit)
        return success_response({"type": GROUPINGS[group_by], "data": data})
    if group_by in ("day", "hour"):
        data = analytics_service.bucket_events(db, group_by, filters, limit)
        return success_response({"type": GROUPINGS[group_by], "data": data})

    events, total = analytics_service.list_events(db, filters, limit)
    return success_response(
        {
            "type": "raw_events",
            "events": [AnalyticsEventOut.serialize(e) for e in events],
            "total": total,
            "filters": {"startDate": start_date, "endDate": end_date, "event": event, "page": page},
        }
    )


@router.put("")
def dashboard(days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    """Dashboard summary for the last `days` days."""
    return success_response(analytics_service.dashboard_summary(db, days))
