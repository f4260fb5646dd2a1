"""
Link store: durable (domain, key) -> rule mapping plus domain registration.

The store validates before it writes and only flushes; committing is left to
the caller so that a mutation and its audit event land in one transaction.
"""

import logging
import re
from typing import List, NamedTuple, Optional

from pydantic import HttpUrl, TypeAdapter, ValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from golinks_app.config import settings
from golinks_app.exceptions import DomainRejected, InvalidDestination
from golinks_app.models import Domain, Link
from golinks_app.schemas.link import DomainResponse, LinkResponse
from golinks_app.services.slug import validate_key
from golinks_app.services.templates import is_template_key

logger = logging.getLogger(__name__)

DOMAIN_NAME = re.compile(r"^[a-z0-9-]+$")
HTTP_URL = TypeAdapter(HttpUrl)


class UpsertResult(NamedTuple):
    link: Link
    created: bool


def normalize_domain(name: Optional[str]) -> str:
    """Domains compare lowercase; blank means the default domain"""
    name = (name or "").strip().lower()
    return name or settings.default_domain


def validate_destination(url: str, label: str = "URL") -> None:
    """
    Require an absolute http(s) URL.

    Placeholders such as {section} are allowed anywhere, they are only
    substituted at resolution time. Only the check uses the parsed URL;
    callers store the string exactly as given.

    Raises:
        InvalidDestination: unparseable, relative, another scheme or no host
    """
    if re.search(r"\s", url):
        raise InvalidDestination(f"{label} cannot contain spaces.")
    try:
        parsed = HTTP_URL.validate_python(url)
    except ValidationError:
        raise InvalidDestination(f"{label} must be http or https.") from None
    if not (parsed.host or "").strip("."):
        raise InvalidDestination(f"{label} must include a host name.")


class LinkStore:
    """
    Owns Domain and Link rows.

    Invariants:
    - (domain, key) is unique; key is case-sensitive, domain lowercase
    - is_template is always derived from the key
    - invalid input is rejected before anything is written
    """

    def __init__(self, db: Session, admin_prefix: Optional[str] = None):
        self.db = db
        self.admin_prefix = admin_prefix

    # --- Domains ---

    def register_domain(self, name: str) -> Domain:
        """
        Register a domain; registering an existing one returns it unchanged.

        Raises:
            DomainRejected: name has characters outside [a-z0-9-]
        """
        name = (name or "").strip().lower()
        if not DOMAIN_NAME.match(name):
            raise DomainRejected("Domain may only contain letters, digits and hyphens.")

        domain = self.get_domain(name)
        if domain is not None:
            return domain

        domain = Domain(name=name)
        self.db.add(domain)
        self.db.flush()
        logger.info("Registered domain %s", name)
        return domain

    def get_domain(self, name: str) -> Optional[Domain]:
        return self.db.query(Domain).filter(Domain.name == normalize_domain(name)).first()

    def ensure_default_domain(self) -> Domain:
        return self.register_domain(settings.default_domain)

    def list_domains(self) -> List[DomainResponse]:
        """All domains with their link counts, by name"""
        rows = (
            self.db.query(Domain, func.count(Link.id))
            .outerjoin(Link, Link.domain == Domain.name)
            .group_by(Domain.id)
            .order_by(Domain.name.asc())
            .all()
        )
        return [
            DomainResponse(name=domain.name, link_count=count, created_at=domain.created_at)
            for domain, count in rows
        ]

    # --- Links ---

    def upsert(
        self,
        domain: str,
        key: str,
        destination: str,
        default_destination: Optional[str] = None
    ) -> UpsertResult:
        """
        Insert or replace the link for (domain, key).

        Updates keep the row (and its created_at) and replace destination,
        default_destination and is_template.

        Returns:
            UpsertResult with created=True for a fresh insert

        Raises:
            InvalidKey, InvalidDestination, DomainRejected
        """
        domain = normalize_domain(domain)
        validate_key(key, self.admin_prefix)
        validate_destination(destination)
        if default_destination:
            validate_destination(default_destination, "Default URL")
        else:
            default_destination = None
        if self.get_domain(domain) is None:
            raise DomainRejected(f"Domain {domain!r} is not registered.")

        template_flag = is_template_key(key)

        link = self.get(domain, key)
        if link is not None:
            self._apply(link, destination, default_destination, template_flag)
            self.db.flush()
            return UpsertResult(link=link, created=False)

        link = Link(
            domain=domain,
            key=key,
            destination=destination,
            default_destination=default_destination,
            is_template=template_flag,
        )
        self.db.add(link)
        try:
            self.db.flush()
        except IntegrityError:
            # Lost an insert race on (domain, key): take the update path once
            self.db.rollback()
            link = self.get(domain, key)
            if link is None:
                raise
            self._apply(link, destination, default_destination, template_flag)
            self.db.flush()
            return UpsertResult(link=link, created=False)

        return UpsertResult(link=link, created=True)

    @staticmethod
    def _apply(link: Link, destination: str, default_destination: Optional[str], template_flag: bool) -> None:
        link.destination = destination
        link.default_destination = default_destination
        link.is_template = template_flag

    def remove(self, domain: str, key: str) -> Optional[LinkResponse]:
        """
        Delete the link for (domain, key).

        Returns:
            The link's state before deletion, or None if it did not exist
        """
        link = self.get(domain, key)
        if link is None:
            return None
        previous = LinkResponse.model_validate(link)
        self.db.delete(link)
        self.db.flush()
        return previous

    def get(self, domain: str, key: str) -> Optional[Link]:
        return self.db.query(Link).filter(
            Link.domain == normalize_domain(domain),
            Link.key == key
        ).first()

    def find_exact(self, domain: str, key: str) -> Optional[Link]:
        """Literal (non-template) link for (domain, key)"""
        return self.db.query(Link).filter(
            Link.domain == normalize_domain(domain),
            Link.key == key,
            Link.is_template == False  # noqa: E712
        ).first()

    def list_templates(self, domain: str) -> List[Link]:
        """Template links of a domain, ascending by raw key"""
        templates = self.db.query(Link).filter(
            Link.domain == normalize_domain(domain),
            Link.is_template == True  # noqa: E712
        ).all()
        # Code point order regardless of the database collation
        return sorted(templates, key=lambda link: link.key)

    def list_links(self, domain: Optional[str] = None) -> List[Link]:
        query = self.db.query(Link)
        if domain:
            query = query.filter(Link.domain == normalize_domain(domain))
        return query.order_by(Link.domain.asc(), Link.key.asc()).all()
