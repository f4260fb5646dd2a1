"""
Audit/visit recorder.

Two independent append-only streams:
- visits: one row per resolution outcome (exact/template/default/miss)
- link events: one row per create/update/delete of a link

plus the aggregate readers the dashboard uses. Like the link store, writes
only flush; the caller commits.
"""

import logging
from typing import List, Optional

from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

from golinks_app.config import settings
from golinks_app.models import IgnoredMiss, LinkEvent, LinkEventType, MatchKind, Visit
from golinks_app.schemas.audit import LinkStats, MissStat

logger = logging.getLogger(__name__)


class AuditRecorder:
    """Owns Visit, IgnoredMiss and LinkEvent rows"""

    def __init__(self, db: Session):
        self.db = db

    # --- Writers ---

    def record_visit(
        self,
        domain: str,
        slug: str,
        matched_key: Optional[str],
        outcome: MatchKind
    ) -> Visit:
        visit = Visit(
            domain=domain,
            slug=slug,
            matched_key=matched_key,
            outcome=MatchKind(outcome).value,
        )
        self.db.add(visit)
        self.db.flush()
        return visit

    def record_event(
        self,
        domain: str,
        key: str,
        event_type: LinkEventType,
        destination: Optional[str],
        default_destination: Optional[str] = None
    ) -> LinkEvent:
        event = LinkEvent(
            domain=domain,
            key=key,
            event_type=LinkEventType(event_type).value,
            destination=destination,
            default_destination=default_destination,
        )
        self.db.add(event)
        self.db.flush()
        logger.info("Link %s %s/%s", event.event_type, domain, key)
        return event

    def ignore_miss(self, domain: str, slug: str) -> IgnoredMiss:
        """
        Hide (domain, slug) from the miss report from now on.

        Visit history is left untouched and resolution is unaffected.
        Ignoring twice is a no-op.
        """
        marker = self.db.query(IgnoredMiss).filter(
            IgnoredMiss.domain == domain,
            IgnoredMiss.slug == slug
        ).first()
        if marker is not None:
            return marker

        marker = IgnoredMiss(domain=domain, slug=slug)
        self.db.add(marker)
        self.db.flush()
        logger.info("Ignoring misses for %s/%s", domain, slug)
        return marker

    # --- Operator actions on the audit trail ---

    def list_recent_events(self, limit: Optional[int] = None) -> List[LinkEvent]:
        """Most recent link events first"""
        if limit is None:
            limit = settings.recent_events_limit
        return self.db.query(LinkEvent).order_by(
            LinkEvent.id.desc()
        ).limit(limit).all()

    def delete_event(self, event_id: int) -> bool:
        event = self.db.get(LinkEvent, event_id)
        if event is None:
            return False
        self.db.delete(event)
        self.db.flush()
        return True

    def clear_events(self) -> int:
        """Delete every link event, returning how many were removed"""
        removed = self.db.query(LinkEvent).delete(synchronize_session=False)
        self.db.flush()
        logger.info("Cleared %d link events", removed)
        return removed

    # --- Aggregate readers ---

    def link_stats(self, domain: Optional[str] = None) -> List[LinkStats]:
        """Visit totals per matched link, with a per-outcome breakdown"""

        def count_of(kind: MatchKind):
            return func.sum(case((Visit.outcome == kind.value, 1), else_=0))

        query = self.db.query(
            Visit.domain,
            Visit.matched_key,
            func.count(Visit.id),
            count_of(MatchKind.EXACT),
            count_of(MatchKind.TEMPLATE),
            count_of(MatchKind.DEFAULT),
        ).filter(Visit.matched_key.isnot(None))
        if domain:
            query = query.filter(Visit.domain == domain)

        rows = query.group_by(Visit.domain, Visit.matched_key).order_by(
            Visit.domain.asc(), Visit.matched_key.asc()
        ).all()

        return [
            LinkStats(
                domain=row_domain,
                key=key,
                total=total,
                exact=exact or 0,
                template=template or 0,
                default=default or 0,
            )
            for row_domain, key, total, exact, template, default in rows
        ]

    def miss_stats(self, limit: Optional[int] = None) -> List[MissStat]:
        """
        Most frequent misses, excluding ignored (domain, slug) pairs.

        Ordered by count descending, then domain and slug ascending.
        """
        if limit is None:
            limit = settings.miss_report_limit

        count = func.count(Visit.id).label("count")
        rows = (
            self.db.query(Visit.domain, Visit.slug, count)
            .outerjoin(
                IgnoredMiss,
                and_(IgnoredMiss.domain == Visit.domain, IgnoredMiss.slug == Visit.slug)
            )
            .filter(Visit.outcome == MatchKind.MISS.value, IgnoredMiss.id.is_(None))
            .group_by(Visit.domain, Visit.slug)
            .order_by(count.desc(), Visit.domain.asc(), Visit.slug.asc())
            .limit(limit)
            .all()
        )
        return [MissStat(domain=row_domain, slug=slug, count=total) for row_domain, slug, total in rows]

    def visit_count(self, domain: str, slug: str, outcome: Optional[MatchKind] = None) -> int:
        """Raw number of recorded visits for (domain, slug), ignores included"""
        query = self.db.query(func.count(Visit.id)).filter(
            Visit.domain == domain,
            Visit.slug == slug
        )
        if outcome is not None:
            query = query.filter(Visit.outcome == MatchKind(outcome).value)
        return query.scalar()
