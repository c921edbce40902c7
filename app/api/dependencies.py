"""
FastAPI Dependencies

Wires the core services to a request. The observer and the click tracker
are built once at startup and kept on app.state; everything else is built
per request around the request's database session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.observability import ServiceObserver
from app.db.session import get_session
from app.services.click_tracker import ClickTracker
from app.services.link_registry import LinkRegistry
from app.services.redirect_service import RedirectService
from app.services.url_service import URLShorteningService


def get_observer(request: Request) -> ServiceObserver:
    return request.app.state.observer


def get_click_tracker(request: Request) -> ClickTracker:
    return request.app.state.click_tracker


def get_link_registry(session: AsyncSession = Depends(get_session)) -> LinkRegistry:
    return LinkRegistry(session)


def get_url_service(
    registry: LinkRegistry = Depends(get_link_registry),
    observer: ServiceObserver = Depends(get_observer),
) -> URLShorteningService:
    return URLShorteningService(registry, observer=observer)


def get_redirect_service(
    registry: LinkRegistry = Depends(get_link_registry),
    click_tracker: ClickTracker = Depends(get_click_tracker),
    observer: ServiceObserver = Depends(get_observer),
) -> RedirectService:
    return RedirectService(registry, click_tracker, observer=observer)
