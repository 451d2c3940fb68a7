"""
FastAPI Endpoints for URL Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request parsing and field validation
- Mapping conflicts to the right envelope for the caller
- Pagination headers
- Delegating to service layer

Errors raised here or in the services are ShortyError subclasses and are
rendered by the handlers in shorty.api.errors.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shorty.api.deps import (
    LinkPayload,
    get_app_settings,
    get_link_service,
    get_link_validator,
    get_range_spec,
    get_visit_service,
    get_visitor,
    parse_link_id,
    read_link_payload,
)
from shorty.api.schemas import LinkOut, VisitOut
from shorty.core.exceptions import FieldValidationError, NotFoundError, ShortNameConflictError
from shorty.core.monitoring import report_exception
from shorty.core.pagination import RangeSpec, paginate
from shorty.core.setting import EnvSettingsOptions, Settings
from shorty.core.validators import LinkValidator
from shorty.db.session import get_session
from shorty.services.link_service import LinkService
from shorty.services.redirect_service import REDIRECT_STATUS, RedirectService
from shorty.services.visit_service import VisitorInfo, VisitService

LINKS_RESOURCE = "links"
VISITS_RESOURCE = "link_visits"

router = APIRouter()
api_router = APIRouter(prefix="/api")


@router.get("/ping", response_class=PlainTextResponse, tags=["Health"])
async def ping() -> str:
    """Liveness probe."""
    return "pong"


@router.get("/debug/sentry", response_class=PlainTextResponse, include_in_schema=False)
async def debug_sentry(settings: Settings = Depends(get_app_settings)) -> PlainTextResponse:
    """Send a test error to Sentry. Not served in production."""
    if settings.ENV_SETTING == EnvSettingsOptions.production:
        raise NotFoundError()

    report_exception(RuntimeError("test error from /debug/sentry"))
    return PlainTextResponse("sent to sentry", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get(
    "/r/{short_name}",
    status_code=REDIRECT_STATUS,
    summary="Redirect to original URL",
    description="Looks up a short name, records the visit and redirects to the original URL",
    tags=["Redirect"],
)
async def redirect_by_short_name(
    short_name: str,
    visitor: VisitorInfo = Depends(get_visitor),
    session: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short name.

    Raises:
        NotFoundError: If the short name is blank or unknown
    """
    original_url = await RedirectService(session).follow(short_name, visitor)
    return RedirectResponse(url=original_url, status_code=REDIRECT_STATUS)


@api_router.get(
    "/links",
    response_model=list[LinkOut],
    summary="List links",
    description="Returns links ordered by id, optionally windowed by a [from,to] range",
    tags=["Links"],
)
async def list_links(
    response: Response,
    range_spec: Optional[RangeSpec] = Depends(get_range_spec),
    service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_app_settings),
) -> list[LinkOut]:
    page = await paginate(
        LINKS_RESOURCE,
        range_spec,
        count=service.count_links,
        fetch_all=service.list_links,
        fetch_range=service.list_links_range,
    )
    response.headers["Content-Range"] = page.content_range
    return [LinkOut.from_link(link, settings.public_base_url) for link in page.items]


@api_router.post(
    "/links",
    response_model=LinkOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short link",
    description="Accepts JSON or an HTML form; generates a short name when none is given",
    tags=["Links"],
)
async def create_link(
    payload: LinkPayload = Depends(read_link_payload),
    validator: LinkValidator = Depends(get_link_validator),
    service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_app_settings),
) -> LinkOut:
    """
    Create a new link.

    A taken short_name is a 409 for JSON clients and a 422 field error
    for form submissions, so forms can show it next to the input.
    """
    errors = validator.validate(payload.original_url, payload.short_name)
    if errors:
        raise FieldValidationError(errors)

    short_name = (payload.short_name or "").strip()
    try:
        link = await service.create_link(payload.original_url.strip(), short_name or None)
    except ShortNameConflictError as e:
        if payload.from_form:
            raise e.as_field_error()
        raise

    return LinkOut.from_link(link, settings.public_base_url)


@api_router.get(
    "/links/{link_id}",
    response_model=LinkOut,
    summary="Get a link",
    tags=["Links"],
)
async def get_link(
    link_id: int = Depends(parse_link_id),
    service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_app_settings),
) -> LinkOut:
    link = await service.get_link(link_id)
    return LinkOut.from_link(link, settings.public_base_url)


@api_router.put(
    "/links/{link_id}",
    response_model=LinkOut,
    summary="Update a link",
    description="Replaces both original_url and short_name",
    tags=["Links"],
)
async def update_link(
    link_id: int = Depends(parse_link_id),
    payload: LinkPayload = Depends(read_link_payload),
    validator: LinkValidator = Depends(get_link_validator),
    service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_app_settings),
) -> LinkOut:
    errors = validator.validate(payload.original_url, payload.short_name, short_name_required=True)
    if errors:
        raise FieldValidationError(errors)

    try:
        link = await service.update_link(
            link_id, payload.original_url.strip(), payload.short_name.strip()
        )
    except ShortNameConflictError as e:
        if payload.from_form:
            raise e.as_field_error()
        raise

    return LinkOut.from_link(link, settings.public_base_url)


@api_router.delete(
    "/links/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a link and its visits",
    tags=["Links"],
)
async def delete_link(
    link_id: int = Depends(parse_link_id),
    service: LinkService = Depends(get_link_service),
) -> Response:
    await service.delete_link(link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@api_router.get(
    "/link_visits",
    response_model=list[VisitOut],
    summary="List visits",
    description="Returns recorded redirects ordered by id, optionally windowed by a [from,to] range",
    tags=["Visits"],
)
async def list_link_visits(
    response: Response,
    range_spec: Optional[RangeSpec] = Depends(get_range_spec),
    service: VisitService = Depends(get_visit_service),
) -> list[VisitOut]:
    page = await paginate(
        VISITS_RESOURCE,
        range_spec,
        count=service.count_visits,
        fetch_all=service.list_visits,
        fetch_range=service.list_visits_range,
    )
    response.headers["Content-Range"] = page.content_range
    return [VisitOut.model_validate(visit) for visit in page.items]
