from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, UniqueConstraint, Index
from sqlalchemy.sql import func
from golinks_app.database.connection import Base


class Link(Base):
    """
    A go link: (domain, key) -> destination.

    `key` is either a literal slug ("meet") or a template with {name}
    placeholders ("docs/{section}"). The column is called "slug" in the
    table to keep the SQL free of keyword quoting.
    """
    __tablename__ = "links"
    __table_args__ = (
        UniqueConstraint("domain", "slug", name="uq_links_domain_slug"),
        Index("ix_links_domain_template", "domain", "is_template"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    domain = Column(String(63), ForeignKey("domains.name"), nullable=False)
    key = Column("slug", String, nullable=False)
    destination = Column(String, nullable=False)
    # Only meaningful for templates: used when the bare root is visited
    default_destination = Column(String, nullable=True)
    is_template = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
