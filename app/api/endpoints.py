"""
FastAPI Endpoints for URL Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request parsing (Pydantic models)
- HTTP responses
- Delegating to service layer

Service exceptions are not caught here: the application-level handler in
app.main renders every URLShortenerException as {"error": ...} with the
status code the exception carries.

Design Principles:
- Thin endpoints: all business logic lives in services
- The catch-all redirect route is registered last so /api/* wins
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse

from app.api.dependencies import (
    get_link_registry,
    get_redirect_service,
    get_url_service,
)
from app.api.schemas import (
    ErrorResponse,
    LinkResponse,
    ShortenRequest,
    ShortenResponse,
    StatsResponse,
)
from app.core.exceptions import ShortCodeNotFoundError
from app.core.setting import settings
from app.db.models import Link
from app.services.link_registry import LinkRegistry
from app.services.redirect_service import RedirectService
from app.services.url_service import URLShorteningService, build_short_url

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def to_link_response(link: Link) -> LinkResponse:
    return LinkResponse(
        id=link.id,
        short_code=link.short_code,
        short_url=build_short_url(settings.BASE_URL, link.short_code),
        original_url=link.original_url,
        click_count=link.click_count,
        created_at=link.created_at,
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create a short URL",
    description="Takes a long URL (and optionally a custom code) and returns a shortened version"
)
async def create_short_url(
    body: ShortenRequest,
    url_service: URLShorteningService = Depends(get_url_service),
) -> ShortenResponse:
    result = await url_service.shorten(body.url, custom_code=body.custom_code)
    return ShortenResponse(
        short_code=result.short_code,
        short_url=result.short_url,
        original_url=result.original_url
    )


@router.get(
    "/api/links",
    response_model=List[LinkResponse],
    summary="List all short URLs",
    description="Returns every stored link, newest first"
)
async def list_links(
    registry: LinkRegistry = Depends(get_link_registry),
) -> List[LinkResponse]:
    links = await registry.list_all()
    return [to_link_response(link) for link in links]


@router.get(
    "/api/links/{short_code}",
    response_model=LinkResponse,
    responses=ERROR_RESPONSES,
    summary="Get one short URL"
)
async def get_link(
    short_code: str,
    registry: LinkRegistry = Depends(get_link_registry),
) -> LinkResponse:
    link = await registry.find_by_code(short_code)
    return to_link_response(link)


@router.delete(
    "/api/links/{short_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
    summary="Delete a short URL"
)
async def delete_link(
    short_code: str,
    registry: LinkRegistry = Depends(get_link_registry),
) -> Response:
    deleted = await registry.delete(short_code)
    if not deleted:
        raise ShortCodeNotFoundError(short_code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/api/stats",
    response_model=StatsResponse,
    summary="Get aggregate statistics",
    description="Total number of links and total clicks across all links"
)
async def get_stats(
    registry: LinkRegistry = Depends(get_link_registry),
) -> StatsResponse:
    stats = await registry.stats()
    return StatsResponse(total_links=stats.total_links, total_clicks=stats.total_clicks)


@router.get(
    "/{short_code}",
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    responses=ERROR_RESPONSES,
    summary="Redirect to original URL",
    description="Takes a short code and redirects to the original long URL"
)
async def redirect_to_url(
    short_code: str,
    redirect_service: RedirectService = Depends(get_redirect_service),
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    The click is counted in the background after the lookup; the
    response does not wait for it.
    """
    original_url = await redirect_service.resolve(short_code)
    return RedirectResponse(
        url=original_url,
        status_code=status.HTTP_301_MOVED_PERMANENTLY
    )
