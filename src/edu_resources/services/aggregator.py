from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from edu_resources.core.time import as_utc, month_key, shift_month, utcnow
from edu_resources.models.content import STATUS_DRAFT, STATUS_PUBLISH, ContentItem
from edu_resources.models.events import ActionType, ResourceEvent
from edu_resources.models.resource import ResourceMeta


@dataclass(frozen=True)
class TrackingSummary:
    views: int = 0
    downloads: int = 0


@dataclass(frozen=True)
class TopViewedRow:
    resource_id: int
    view_count: int
    # None when the content item was deleted after the events were logged.
    title: Optional[str]


def month_keys(months: int, now: datetime | None = None) -> list[str]:
    """The `months` most recent "YYYY-MM" keys ending at the current month, oldest first."""

    months = int(months)
    if months <= 0:
        return []
    now = as_utc(now or utcnow())
    keys = []
    for back in range(months - 1, -1, -1):
        y, m = shift_month(now.year, now.month, -back)
        keys.append(f"{y:04d}-{m:02d}")
    return keys


class Aggregator:
    """Read-only analytics over the event log, resource meta and content."""

    def __init__(self, session: Session):
        self.session = session

    def tracking_summary(self) -> TrackingSummary:
        rows = self.session.exec(
            select(ResourceEvent.action_type, func.count(ResourceEvent.id)).group_by(ResourceEvent.action_type)
        ).all()
        counts = {action: int(n) for action, n in rows}
        return TrackingSummary(
            views=counts.get(ActionType.VIEW.value, 0),
            downloads=counts.get(ActionType.DOWNLOAD.value, 0),
        )

    def top_viewed(self, limit: int = 5) -> list[TopViewedRow]:
        limit = max(1, int(limit))
        view_count = func.count(ResourceEvent.id).label("view_count")
        stmt = (
            select(ResourceEvent.resource_id, view_count, ContentItem.title)
            .join(ContentItem, ContentItem.id == ResourceEvent.resource_id, isouter=True)
            .where(ResourceEvent.action_type == ActionType.VIEW.value)
            .group_by(ResourceEvent.resource_id, ContentItem.title)
            .order_by(view_count.desc(), ResourceEvent.resource_id.asc())
            .limit(limit)
        )
        return [
            TopViewedRow(resource_id=int(rid), view_count=int(n), title=title)
            for rid, n, title in self.session.exec(stmt).all()
        ]

    def published_per_month(self, months: int = 6, now: datetime | None = None) -> dict[str, int]:
        """Published content per calendar month, gap-filled with zeros.

        Buckets are UTC months. The result always has exactly `months` keys in
        chronological order, ending at the current month; `months` <= 0 gives {}.
        """

        keys = month_keys(months, now)
        if not keys:
            return {}
        y, m = (int(p) for p in keys[0].split("-"))
        window_start = datetime(y, m, 1, tzinfo=timezone.utc)

        created = self.session.exec(
            select(ContentItem.created_at)
            .where(ContentItem.status == STATUS_PUBLISH)
            .where(ContentItem.created_at >= window_start)
        ).all()
        counter: Counter[str] = Counter(month_key(as_utc(dt)) for dt in created if dt is not None)

        return {k: counter.get(k, 0) for k in keys}

    def content_status_counts(self) -> dict[str, int]:
        rows = self.session.exec(select(ContentItem.status, func.count(ContentItem.id)).group_by(ContentItem.status)).all()
        counts = {status: int(n) for status, n in rows}
        return {
            "published": counts.get(STATUS_PUBLISH, 0),
            "draft": counts.get(STATUS_DRAFT, 0),
        }

    def dashboard(self, *, top_limit: int = 5, months: int = 6) -> dict:
        total_meta = self.session.exec(select(func.count()).select_from(ResourceMeta)).one()
        statuses = self.content_status_counts()
        return {
            "total_meta_records": int(total_meta),
            "published": statuses["published"],
            "draft": statuses["draft"],
            "tracking": asdict(self.tracking_summary()),
            "top_viewed": [asdict(r) for r in self.top_viewed(top_limit)],
            "published_per_month": self.published_per_month(months),
        }
