from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.sql import func
from golinks_app.database.connection import Base


class Visit(Base):
    """
    Append-only record of one resolution outcome.

    `matched_key` is NULL for misses. Rows are never updated or deleted;
    ignoring a miss adds an IgnoredMiss row instead.
    """
    __tablename__ = "visits"
    __table_args__ = (
        Index("ix_visits_domain_slug", "domain", "slug"),
        Index("ix_visits_domain_matched_key", "domain", "matched_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(63), nullable=False)
    slug = Column(String, nullable=False)
    matched_key = Column(String, nullable=True)
    outcome = Column(String(16), nullable=False)  # MatchKind value
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class IgnoredMiss(Base):
    """Standing exclusion of a (domain, slug) pair from the miss report"""
    __tablename__ = "ignored_misses"
    __table_args__ = (
        Index("uq_ignored_misses_domain_slug", "domain", "slug", unique=True),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(63), nullable=False)
    slug = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
