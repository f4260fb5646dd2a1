from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from golinks_app.database.connection import Base


class LinkEvent(Base):
    """
    Audit trail entry, one per successful create/update/delete of a Link.

    Destinations are copied at event time so the trail survives deletes.
    """
    __tablename__ = "link_events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    domain = Column(String(63), nullable=False)
    key = Column("slug", String, nullable=False)
    event_type = Column(String(16), nullable=False)  # LinkEventType value
    destination = Column(String, nullable=True)
    default_destination = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
