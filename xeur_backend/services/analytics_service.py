"""
Analytics storage and reporting.

Raw events are append-only. Reporting runs grouped counts in SQL; the
time-bucketed aggregation picks a grouping expression per database dialect
(date_trunc on PostgreSQL, strftime on SQLite).
"""
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, literal_column
from sqlalchemy.orm import Query, Session

from ..models.analytics_event import AnalyticsEvent
from ..models.enums import (
    EVENT_CONTACT_SUBMIT,
    EVENT_INVESTMENT_INQUIRY,
    EVENT_NEWSLETTER_SIGNUP,
    EVENT_WAITLIST_SIGNUP,
)
from ..utils import RequestContext, iso_timestamp, round_half_up, utcnow

logger = logging.getLogger(__name__)

TOP_LIMIT = 10
TRAFFIC_SAMPLE_SIZE = 1000


@dataclass
class EventFilters:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    event: Optional[str] = None
    page: Optional[str] = None


def _build_event(event: str, page: Optional[str], data: Optional[Dict[str, Any]], context: RequestContext) -> AnalyticsEvent:
    return AnalyticsEvent(
        event=event,
        page=page,
        data=dict(data or {}),
        user_agent=context.user_agent,
        ip_address=context.ip_address,
        timestamp=utcnow(),
    )


def record_event(
    db: Session,
    event: str,
    page: Optional[str],
    data: Optional[Dict[str, Any]],
    context: RequestContext,
) -> AnalyticsEvent:
    """Insert one analytics row and commit."""
    row = _build_event(event, page, data, context)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def record_events(db: Session, events: List[Dict[str, Any]], context: RequestContext) -> int:
    """Insert a batch in a single transaction; returns the number of rows written."""
    rows = [_build_event(e["event"], e.get("page"), e.get("data"), context) for e in events]
    db.add_all(rows)
    db.commit()
    logger.info(f"[Analytics] Batch of {len(rows)} events stored")
    return len(rows)


def _apply_filters(query: Query, filters: EventFilters) -> Query:
    if filters.start is not None:
        query = query.filter(AnalyticsEvent.timestamp >= filters.start)
    if filters.end is not None:
        query = query.filter(AnalyticsEvent.timestamp <= filters.end)
    if filters.event:
        query = query.filter(AnalyticsEvent.event == filters.event)
    if filters.page:
        query = query.filter(AnalyticsEvent.page == filters.page)
    return query


def list_events(db: Session, filters: EventFilters, limit: int):
    """Newest events matching the filters, plus the total count of matches."""
    query = _apply_filters(db.query(AnalyticsEvent), filters)
    total = query.count()
    events = query.order_by(desc(AnalyticsEvent.timestamp)).limit(limit).all()
    return events, total


def group_by_field(db: Session, field: str, filters: EventFilters, limit: int) -> List[Dict[str, Any]]:
    """Counts per event name or per page, highest count first."""
    column = getattr(AnalyticsEvent, field)
    count = func.count(AnalyticsEvent.id)
    query = db.query(column, count)
    query = _apply_filters(query, filters)
    if field == "page":
        query = query.filter(AnalyticsEvent.page.isnot(None))
    rows = query.group_by(column).order_by(desc(count), column).limit(limit).all()
    return [{field: value, "count": total} for value, total in rows]


def _bucket_expression(dialect: str, granularity: str):
    column = AnalyticsEvent.timestamp
    if granularity == "day":
        return func.date(column)
    if dialect == "postgresql":
        return func.date_trunc(literal_column("'hour'"), column)
    return func.strftime(literal_column("'%Y-%m-%d %H:00:00'"), column)


def _bucket_label(value: Any, granularity: str) -> str:
    # PostgreSQL hands back date/datetime objects, SQLite plain strings
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:00:00") if granularity == "hour" else value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def bucket_events(db: Session, granularity: str, filters: EventFilters, limit: int) -> List[Dict[str, Any]]:
    """
    Events per day or per hour, newest bucket first.

    Each bucket carries the number of events and the number of distinct
    client IPs seen in it.
    """
    if granularity not in ("day", "hour"):
        raise ValueError(f"Unsupported granularity: {granularity}")

    bucket = _bucket_expression(db.get_bind().dialect.name, granularity)
    query = db.query(
        bucket.label("bucket"),
        func.count(AnalyticsEvent.id),
        func.count(func.distinct(AnalyticsEvent.ip_address)),
    )
    query = _apply_filters(query, filters)
    rows = query.group_by(bucket).order_by(desc(bucket)).limit(limit).all()

    key = "date" if granularity == "day" else "hour"
    return [
        {key: _bucket_label(value, granularity), "count": count, "uniqueVisitors": visitors}
        for value, count, visitors in rows
    ]


def _count_between(db: Session, start: datetime, end: Optional[datetime] = None, inclusive_end: bool = True) -> int:
    query = db.query(func.count(AnalyticsEvent.id)).filter(AnalyticsEvent.timestamp >= start)
    if end is not None:
        query = query.filter(AnalyticsEvent.timestamp <= end if inclusive_end else AnalyticsEvent.timestamp < end)
    return query.scalar() or 0


def _visitors_between(db: Session, start: datetime, end: Optional[datetime] = None, inclusive_end: bool = True) -> int:
    query = db.query(func.count(func.distinct(AnalyticsEvent.ip_address))).filter(AnalyticsEvent.timestamp >= start)
    if end is not None:
        query = query.filter(AnalyticsEvent.timestamp <= end if inclusive_end else AnalyticsEvent.timestamp < end)
    return query.scalar() or 0


def growth_rate(current: int, previous: int) -> float:
    """Percentage change rounded to two decimals; 0 when there is no baseline."""
    if previous <= 0:
        return 0
    return round_half_up(((current - previous) / previous) * 100, 2)


def _traffic_sources(db: Session, start: datetime, now: datetime) -> List[Dict[str, Any]]:
    rows = (
        db.query(AnalyticsEvent.data)
        .filter(AnalyticsEvent.timestamp >= start, AnalyticsEvent.timestamp <= now)
        .order_by(desc(AnalyticsEvent.timestamp))
        .limit(TRAFFIC_SAMPLE_SIZE)
        .all()
    )
    sources = Counter()
    for (data,) in rows:
        source = data.get("source") if isinstance(data, dict) else None
        sources[str(source) if source else "direct"] += 1
    return [{"source": source, "count": count} for source, count in sources.most_common(TOP_LIMIT)]


def dashboard_summary(db: Session, days: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Summary over the last `days` days compared with the `days` before them.
    """
    now = now or utcnow()
    start = now - timedelta(days=days)
    previous_start = start - timedelta(days=days)
    window = EventFilters(start=start, end=now)

    total_events = _count_between(db, start, now)
    unique_visitors = _visitors_between(db, start, now)
    recent_activity = _count_between(db, now - timedelta(hours=24), now)

    previous_events = _count_between(db, previous_start, start, inclusive_end=False)
    previous_visitors = _visitors_between(db, previous_start, start, inclusive_end=False)

    conversions = {}
    for key, event_name in (
        ("waitlist", EVENT_WAITLIST_SIGNUP),
        ("contact", EVENT_CONTACT_SUBMIT),
        ("newsletter", EVENT_NEWSLETTER_SIGNUP),
        ("investment", EVENT_INVESTMENT_INQUIRY),
    ):
        conversions[key] = (
            db.query(func.count(AnalyticsEvent.id))
            .filter(
                AnalyticsEvent.event == event_name,
                AnalyticsEvent.timestamp >= start,
                AnalyticsEvent.timestamp <= now,
            )
            .scalar()
            or 0
        )

    return {
        "period": f"{days} days",
        "summary": {
            "totalEvents": total_events,
            "uniqueVisitors": unique_visitors,
            "recentActivity": recent_activity,
            "eventGrowth": growth_rate(total_events, previous_events),
            "visitorGrowth": growth_rate(unique_visitors, previous_visitors),
        },
        "topEvents": group_by_field(db, "event", window, TOP_LIMIT),
        "topPages": group_by_field(db, "page", window, TOP_LIMIT),
        "conversions": conversions,
        "trafficSources": _traffic_sources(db, start, now),
        "generatedAt": iso_timestamp(),
    }
