from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from golinks_app.models import Domain, IgnoredMiss, Link, LinkEvent, LinkEventType
from golinks_app.schemas.audit import LinkStats, MissStat
from golinks_app.schemas.link import DomainResponse, LinkResponse
from golinks_app.services.link_store import LinkStore, UpsertResult, normalize_domain
from golinks_app.services.recorder import AuditRecorder
from golinks_app.services.slug import normalize_slug

logger = logging.getLogger(__name__)


class LinkService:
    """
    Mutation surface for the admin API, with store and recorder injected.

    Every mutation and its audit event are committed together; on any error
    the whole unit is rolled back so readers never see a half-applied rule.
    Validation errors (InvalidKey, InvalidDestination, DomainRejected) are
    raised before anything is written and are left for the caller to report.
    """

    def __init__(
        self,
        db: Session,
        store: Optional[LinkStore] = None,
        recorder: Optional[AuditRecorder] = None
    ):
        self.db = db
        self.store = store or LinkStore(db)
        self.recorder = recorder or AuditRecorder(db)

    def _commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Commit failed")
            raise

    # --- Links ---

    def save_link(
        self,
        domain: str,
        key: str,
        destination: str,
        default_destination: Optional[str] = None
    ) -> UpsertResult:
        """Upsert a link and record a create or update event"""
        domain = normalize_domain(domain)
        key = normalize_slug(key)
        destination = destination.strip()
        default_destination = (default_destination or "").strip() or None

        try:
            result = self.store.upsert(domain, key, destination, default_destination)
            self.recorder.record_event(
                domain,
                key,
                LinkEventType.CREATE if result.created else LinkEventType.UPDATE,
                destination,
                default_destination,
            )
        except Exception:
            self.db.rollback()
            raise
        self._commit()
        self.db.refresh(result.link)
        return result

    def delete_link(self, domain: str, key: str) -> Optional[LinkResponse]:
        """
        Delete a link and record a delete event.

        Returns:
            The deleted link's previous state, or None if there was nothing
            to delete (no event is recorded then)
        """
        domain = normalize_domain(domain)
        key = normalize_slug(key)

        try:
            previous = self.store.remove(domain, key)
            if previous is None:
                return None
            self.recorder.record_event(
                domain,
                key,
                LinkEventType.DELETE,
                previous.destination,
                previous.default_destination,
            )
        except Exception:
            self.db.rollback()
            raise
        self._commit()
        return previous

    def get_link(self, domain: str, key: str) -> Optional[Link]:
        return self.store.get(domain, normalize_slug(key))

    def list_links(self, domain: Optional[str] = None) -> List[Link]:
        return self.store.list_links(domain)

    # --- Domains ---

    def register_domain(self, name: str) -> Domain:
        try:
            domain = self.store.register_domain(name)
        except Exception:
            self.db.rollback()
            raise
        self._commit()
        return domain

    def list_domains(self) -> List[DomainResponse]:
        return self.store.list_domains()

    # --- Visits and audit trail ---

    def ignore_miss(self, domain: str, slug: str) -> IgnoredMiss:
        marker = self.recorder.ignore_miss(normalize_domain(domain), normalize_slug(slug))
        self._commit()
        return marker

    def link_stats(self, domain: Optional[str] = None) -> List[LinkStats]:
        return self.recorder.link_stats(normalize_domain(domain) if domain else None)

    def miss_stats(self, limit: Optional[int] = None) -> List[MissStat]:
        return self.recorder.miss_stats(limit)

    def list_recent_events(self, limit: Optional[int] = None) -> List[LinkEvent]:
        return self.recorder.list_recent_events(limit)

    def delete_event(self, event_id: int) -> bool:
        deleted = self.recorder.delete_event(event_id)
        self._commit()
        return deleted

    def clear_events(self) -> int:
        removed = self.recorder.clear_events()
        self._commit()
        return removed
