"""
FastAPI dependencies shared by the endpoints.

The validator and settings are read from app.state, where create_app()
stores them, so each app instance (and each test app) carries its own.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Query, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from shorty.api.errors import validation_error_fields
from shorty.api.schemas import LinkIn
from shorty.core.exceptions import FieldValidationError, InvalidRequestError
from shorty.core.pagination import MAX_INT64, RangeSpec, parse_range
from shorty.core.setting import Settings
from shorty.core.validators import LinkValidator
from shorty.db.session import get_session
from shorty.services.link_service import LinkService
from shorty.services.visit_service import VisitorInfo, VisitService

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@dataclass(frozen=True)
class LinkPayload:
    """A parsed link body and where it came from."""

    original_url: str
    short_name: Optional[str]
    from_form: bool = False


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_link_validator(request: Request) -> LinkValidator:
    return request.app.state.link_validator


def get_link_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> LinkService:
    return LinkService(
        session,
        code_length=settings.SHORT_CODE_LENGTH,
        max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
    )


def get_visit_service(session: AsyncSession = Depends(get_session)) -> VisitService:
    return VisitService(session)


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Handles proxies and load balancers by checking X-Forwarded-For header.

    Returns:
        IP address as string, empty when unknown
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else ""


def get_visitor(request: Request) -> VisitorInfo:
    return VisitorInfo(
        ip=get_client_ip(request),
        user_agent=request.headers.get("User-Agent", ""),
        referer=request.headers.get("Referer", ""),
    )


def get_range_spec(
    range_param: Optional[str] = Query(default=None, alias="range"),
    range_header: Optional[str] = Header(default=None, alias="Range"),
) -> Optional[RangeSpec]:
    """Read the range from the query string, falling back to the Range header."""
    if range_param is not None and range_param.strip():
        return parse_range(range_param)
    return parse_range(range_header)


def parse_link_id(link_id: str) -> int:
    """Path ids must be positive 64-bit integers."""
    try:
        value = int(link_id)
    except ValueError:
        raise InvalidRequestError("invalid id")
    if not 0 < value <= MAX_INT64:
        raise InvalidRequestError("invalid id")
    return value


async def read_link_payload(request: Request) -> LinkPayload:
    """
    Parse a link body sent as JSON or as an HTML form.

    Raises:
        InvalidRequestError: If the body cannot be parsed or is not an object
        FieldValidationError: If a field has the wrong type
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    from_form = content_type in FORM_CONTENT_TYPES

    if from_form:
        form = await request.form()
        data = dict(form.items())
    else:
        try:
            data = await request.json()
        except ValueError:
            raise InvalidRequestError()

    if not isinstance(data, dict):
        raise InvalidRequestError()

    try:
        link_in = LinkIn.model_validate(data)
    except ValidationError as exc:
        raise FieldValidationError(validation_error_fields(exc))

    return LinkPayload(
        original_url=link_in.original_url,
        short_name=link_in.short_name,
        from_form=from_form,
    )
