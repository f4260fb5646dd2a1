from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from golinks_app.config import settings
from golinks_app.dependencies import get_link_service
from golinks_app.exceptions import GoLinksError
from golinks_app.schemas.audit import IgnoreMissRequest, LinkEventResponse, LinkStats, MissStat
from golinks_app.schemas.link import DomainCreate, DomainResponse, LinkResponse, LinkUpsert
from golinks_app.services.link_service import LinkService

router = APIRouter(tags=["admin"])


def _rejected(error: GoLinksError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=error.message)


# --- Links ---

@router.post("/links", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
def save_link(
    link_data: LinkUpsert,
    response: Response,
    link_service: LinkService = Depends(get_link_service)
):
    """Create or replace a link (201 when created, 200 when updated)"""
    try:
        result = link_service.save_link(
            link_data.domain,
            link_data.key,
            link_data.destination,
            link_data.default_destination,
        )
    except GoLinksError as e:
        raise _rejected(e)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result.link


@router.get("/links", response_model=List[LinkResponse])
def list_links(
    domain: Optional[str] = None,
    link_service: LinkService = Depends(get_link_service)
):
    return link_service.list_links(domain)


@router.get("/links/{domain}/{key:path}", response_model=LinkResponse)
def get_link(
    domain: str,
    key: str,
    link_service: LinkService = Depends(get_link_service)
):
    link = link_service.get_link(domain, key)
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )
    return link


@router.delete("/links/{domain}/{key:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link(
    domain: str,
    key: str,
    link_service: LinkService = Depends(get_link_service)
):
    if link_service.delete_link(domain, key) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )


# --- Domains ---

@router.post("/domains", response_model=DomainResponse, status_code=status.HTTP_201_CREATED)
def register_domain(
    domain_data: DomainCreate,
    link_service: LinkService = Depends(get_link_service)
):
    try:
        domain = link_service.register_domain(domain_data.name)
    except GoLinksError as e:
        raise _rejected(e)
    return DomainResponse(name=domain.name, created_at=domain.created_at)


@router.get("/domains", response_model=List[DomainResponse])
def list_domains(link_service: LinkService = Depends(get_link_service)):
    return link_service.list_domains()


# --- Stats ---

@router.get("/stats/links", response_model=List[LinkStats])
def link_stats(
    domain: Optional[str] = None,
    link_service: LinkService = Depends(get_link_service)
):
    return link_service.link_stats(domain)


@router.get("/stats/misses", response_model=List[MissStat])
def miss_stats(
    limit: int = Query(default=settings.miss_report_limit, ge=1, le=500),
    link_service: LinkService = Depends(get_link_service)
):
    return link_service.miss_stats(limit)


@router.post("/misses/ignore", status_code=status.HTTP_204_NO_CONTENT)
def ignore_miss(
    miss: IgnoreMissRequest,
    link_service: LinkService = Depends(get_link_service)
):
    link_service.ignore_miss(miss.domain, miss.slug)


# --- Link events ---

@router.get("/events", response_model=List[LinkEventResponse])
def list_events(
    limit: int = Query(default=settings.recent_events_limit, ge=1, le=500),
    link_service: LinkService = Depends(get_link_service)
):
    return link_service.list_recent_events(limit)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: int,
    link_service: LinkService = Depends(get_link_service)
):
    if not link_service.delete_event(event_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found"
        )


@router.delete("/events", status_code=status.HTTP_204_NO_CONTENT)
def clear_events(link_service: LinkService = Depends(get_link_service)):
    link_service.clear_events()
