"""
FastAPI dependencies for dependency injection.

Every request gets its own database session; the services built on top of
it are cheap and created per request, so tests can swap the session via
app.dependency_overrides[get_db].
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from golinks_app.database.connection import get_db
from golinks_app.services.link_service import LinkService
from golinks_app.services.link_store import LinkStore
from golinks_app.services.resolver import ResolutionEngine


def get_link_store(db: Session = Depends(get_db)) -> LinkStore:
    return LinkStore(db)


def get_link_service(db: Session = Depends(get_db)) -> LinkService:
    """
    Get LinkService with its session injected.

    Controllers depend on the service, the service on store and recorder.
    """
    return LinkService(db=db)


def get_resolution_engine(db: Session = Depends(get_db)) -> ResolutionEngine:
    return ResolutionEngine(db=db)
