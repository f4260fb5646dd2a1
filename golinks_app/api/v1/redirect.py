import logging

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import RedirectResponse
from urllib.parse import quote

from golinks_app.config import settings
from golinks_app.dependencies import get_link_store, get_resolution_engine
from golinks_app.schemas.resolution import Redirect
from golinks_app.services.hosts import domain_for_host
from golinks_app.services.link_store import LinkStore
from golinks_app.services.resolver import ResolutionEngine
from golinks_app.services.slug import is_admin_path, normalize_slug

logger = logging.getLogger(__name__)

router = APIRouter(tags=["redirect"])


@router.get("/{path:path}")
def redirect_to_destination(
    path: str,
    request: Request,
    engine: ResolutionEngine = Depends(get_resolution_engine),
    store: LinkStore = Depends(get_link_store)
):
    """
    Resolve go/<path> for the request's host and redirect.

    - no slug: redirect to the admin index
    - admin prefix: plain 404, never resolved or recorded
    - no matching rule: 404 pointing at where the link can be created
    """
    if is_admin_path(normalize_slug(path)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    domain = domain_for_host(request.headers.get("host"), store)
    outcome = engine.resolve(domain, path)

    if isinstance(outcome, Redirect):
        logger.debug("%s/%s -> %s (%s)", domain, outcome.slug, outcome.destination, outcome.kind.value)
        return RedirectResponse(url=outcome.destination, status_code=status.HTTP_302_FOUND)

    if not outcome.slug:
        return RedirectResponse(url=f"/{settings.admin_prefix}/", status_code=status.HTTP_302_FOUND)

    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "message": "No link matches this slug",
            "domain": outcome.domain,
            "slug": outcome.slug,
            "create_url": f"/{settings.admin_prefix}/api/v1/links/{outcome.domain}/{quote(outcome.slug)}",
        }
    )
