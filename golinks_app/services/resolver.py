"""
Resolution engine: (domain, path) -> Redirect | NotFound.

Precedence, first applicable rule wins:
1. empty slug -> NotFound, nothing recorded
2. exact literal key
3. template keys in ascending key order, first match with a non-empty
   expanded destination
4. template roots in the same order, first with a default destination
5. NotFound (recorded as a miss)
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from golinks_app.models import MatchKind
from golinks_app.schemas.resolution import NotFound, Outcome, Redirect
from golinks_app.services.link_store import LinkStore, normalize_domain
from golinks_app.services.recorder import AuditRecorder
from golinks_app.services.slug import normalize_slug
from golinks_app.services.template_matcher_factory import TemplateMatcherFactory, TemplateMatcherType
from golinks_app.services.templates import expand_destination, template_root

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """
    Stateless over the link store; the only side effect is the visit record.

    Each call runs in the session's own transaction and commits the visit.
    Storage errors roll back and propagate: the request fails, the process
    does not, and nothing is retried.
    """

    def __init__(
        self,
        db: Session,
        store: Optional[LinkStore] = None,
        recorder: Optional[AuditRecorder] = None,
        matcher_type: Optional[TemplateMatcherType] = None
    ):
        self.db = db
        self.store = store or LinkStore(db)
        self.recorder = recorder or AuditRecorder(db)
        self.matcher_type = matcher_type

    def resolve(self, domain: str, raw_path: str) -> Outcome:
        domain = normalize_domain(domain)
        slug = normalize_slug(raw_path)
        if not slug:
            return NotFound(domain=domain, slug="")

        try:
            outcome = self._match(domain, slug)
            self.recorder.record_visit(domain, slug, outcome.matched_key, outcome.kind)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Resolution of %s/%s failed", domain, slug)
            raise

        if isinstance(outcome, NotFound):
            logger.debug("Miss %s/%s", domain, slug)
        return outcome

    def _match(self, domain: str, slug: str) -> Outcome:
        exact = self.store.find_exact(domain, slug)
        if exact is not None:
            return Redirect(
                domain=domain,
                slug=slug,
                destination=exact.destination,
                kind=MatchKind.EXACT,
                matched_key=exact.key,
            )

        templates = self.store.list_templates(domain)

        for link in templates:
            matcher = TemplateMatcherFactory.create(link.key, self.matcher_type)
            if matcher is None:
                continue
            values = matcher.match(slug)
            if values is None:
                continue
            destination = expand_destination(link.destination, values)
            if destination:
                return Redirect(
                    domain=domain,
                    slug=slug,
                    destination=destination,
                    kind=MatchKind.TEMPLATE,
                    matched_key=link.key,
                )

        for link in templates:
            root = template_root(link.key)
            if root is None:
                continue
            if slug == root and link.default_destination:
                return Redirect(
                    domain=domain,
                    slug=slug,
                    destination=link.default_destination,
                    kind=MatchKind.DEFAULT,
                    matched_key=link.key,
                )

        return NotFound(domain=domain, slug=slug)
