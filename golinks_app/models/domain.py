from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from golinks_app.database.connection import Base


class Domain(Base):
    """
    Tenant namespace selected by the inbound hostname.

    Domains are only created by explicit registration (plus the seeded
    default) and are never deleted automatically, not even when their
    last link is removed.
    """
    __tablename__ = "domains"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(63), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
