"""
FastAPI Endpoints for the Redirect Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request parsing (Pydantic models, secret alias normalization)
- Rate limiting
- Error handling and HTTP responses
- Delegating to service layer

Route order matters: the API routes are registered before the catch-all
GET /{path}, which resolves slugs and otherwise falls through to the
static front-end bundle.
"""

import logging
import os
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.api.schemas import CreateRedirectRequest, RedirectRecord, UpdateRedirectRequest
from app.core.exceptions import (
    DatabaseError,
    ForbiddenError,
    ForbiddenOrNotFoundError,
    InvalidQROptionsError,
    InvalidURLError,
    MissingSecretError,
    MissingURLError,
    SlugNotFoundError,
)
from app.core.rate_limit import RATE_LIMITS, limiter
from app.core.setting import settings
from app.core.validators import pick_secret, sanitize_slug
from app.db.session import get_session
from app.services.background_tasks import increment_clicks_background
from app.services.owner_service import OwnerService
from app.services.qr_service import QROptions, render_qr
from app.services.redirect_service import RedirectService
from app.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)

router = APIRouter()

static_files = StaticFiles(directory=settings.STATIC_DIR, html=True, check_dir=False)


def get_origin(request: Request) -> str:
    """
    Public origin for short and manage URLs.

    BASE_URL wins when configured (e.g. behind a proxy); otherwise the
    origin the client used.
    """
    if settings.BASE_URL:
        return settings.BASE_URL.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"


def require_slug(slug: Optional[str]) -> str:
    slug = (slug or "").strip()
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing slug")
    return slug


def build_qr_response(payload: bytes, options: QROptions, download: bool) -> Response:
    headers = {}
    if download:
        headers["Content-Disposition"] = f'attachment; filename="qrcode.{options.format}"'
    return Response(content=payload, media_type=options.media_type, headers=headers)


def parse_qr_options(color: str, style: str, ecc: str, size: int, fmt: str) -> QROptions:
    try:
        return QROptions(
            color=color,
            style=style.lower(),
            error_correction=ecc.upper(),
            size=size,
            format=fmt.lower(),
        )
    except InvalidQROptionsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


async def render_qr_or_400(data: Optional[str], options: QROptions) -> bytes:
    try:
        return await run_in_threadpool(render_qr, data, options)
    except InvalidQROptionsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "/api/url",
    response_model=RedirectRecord,
    summary="Create a short link",
    description="Takes a destination URL and returns the slug, short URL and owner secret"
)
@limiter.limit(RATE_LIMITS["create"])
async def create_redirect(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: Optional[CreateRedirectRequest] = None,
    session: AsyncSession = Depends(get_session)
) -> RedirectRecord:
    """
    Create a new short link.

    Returns:
        RedirectRecord with slug, shortUrl, secret, manageUrl and clicks = 0
    """
    try:
        url_service = URLShorteningService(session)
        redirect = await url_service.create_redirect(body.url if body else None)
        return RedirectRecord.from_model(redirect, get_origin(request))

    except (MissingURLError, InvalidURLError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except DatabaseError as e:
        logger.error(str(e), exc_info=e.original_error)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating redirect"
        )


@router.get("/api/url", include_in_schema=False)
@router.get("/api/url/", include_in_schema=False)
async def read_redirect_without_slug() -> None:
    require_slug(None)


@router.patch("/api/url", include_in_schema=False)
@router.patch("/api/url/", include_in_schema=False)
async def update_redirect_without_slug() -> None:
    require_slug(None)


@router.get(
    "/api/url/{slug}",
    response_model=RedirectRecord,
    summary="Read a short link (owner)",
    description="Returns the full record, including clicks, when the owner secret matches"
)
@limiter.limit(RATE_LIMITS["read"])
async def read_redirect(
    slug: str,
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> RedirectRecord:
    """
    Get a short link for its owner.

    The secret is accepted as ?secret=, ?token=, ?ownerToken= or ?adminToken=.

    Raises:
        HTTPException 400: If slug is blank
        HTTPException 401: If no secret was presented
        HTTPException 403: If the secret is wrong
        HTTPException 404: If the slug doesn't exist
    """
    slug = require_slug(slug)
    secret = pick_secret(request.query_params)

    try:
        owner_service = OwnerService(session)
        redirect = await owner_service.get_redirect(slug, secret)
        return RedirectRecord.from_model(redirect, get_origin(request))

    except MissingSecretError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except SlugNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")


@router.patch(
    "/api/url/{slug}",
    response_model=RedirectRecord,
    summary="Update a short link (owner)",
    description="Changes the destination URL when slug and owner secret match"
)
@limiter.limit(RATE_LIMITS["update"])
async def update_redirect(
    slug: str,
    request: Request,
    body: Optional[UpdateRedirectRequest] = None,
    session: AsyncSession = Depends(get_session)
) -> RedirectRecord:
    """
    Change the destination of a short link.

    Raises:
        HTTPException 400: If slug is blank or the URL is missing/invalid
        HTTPException 401: If no secret was presented
        HTTPException 403: If slug and secret matched no record
    """
    slug = require_slug(slug)
    body = body or UpdateRedirectRequest()

    try:
        owner_service = OwnerService(session)
        redirect = await owner_service.update_redirect(slug, body.secret, body.url)
        return RedirectRecord.from_model(redirect, get_origin(request))

    except MissingSecretError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except (MissingURLError, InvalidURLError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ForbiddenOrNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except DatabaseError as e:
        logger.error(str(e), exc_info=e.original_error)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating redirect"
        )


@router.get(
    "/api/qr",
    summary="Render a QR code",
    description="Encodes arbitrary text as a styled PNG or SVG QR code (SVG supports the square and dots styles only)",
    response_class=Response,
)
@limiter.limit(RATE_LIMITS["qr"])
async def render_text_qr(
    request: Request,
    data: Optional[str] = Query(default=None, max_length=2048),
    color: str = "#000000",
    style: str = "square",
    ecc: str = "M",
    size: int = 1024,
    fmt: str = Query(default="png", alias="format"),
    download: bool = False,
) -> Response:
    options = parse_qr_options(color, style, ecc, size, fmt)
    payload = await render_qr_or_400(data, options)
    return build_qr_response(payload, options, download)


@router.get(
    "/api/url/{slug}/qr",
    summary="Render the QR code of a short link",
    response_class=Response,
)
@limiter.limit(RATE_LIMITS["qr"])
async def render_short_link_qr(
    slug: str,
    request: Request,
    color: str = "#000000",
    style: str = "square",
    ecc: str = "M",
    size: int = 1024,
    fmt: str = Query(default="png", alias="format"),
    download: bool = False,
    session: AsyncSession = Depends(get_session)
) -> Response:
    options = parse_qr_options(color, style, ecc, size, fmt)

    redirect = await URLShorteningService(session).get_redirect(require_slug(slug))
    if redirect is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    short_url = f"{get_origin(request)}/{redirect.slug}"
    payload = await render_qr_or_400(short_url, options)
    return build_qr_response(payload, options, download)


@router.get(
    "/{path:path}",
    include_in_schema=False,
    status_code=status.HTTP_302_FOUND,
)
@limiter.limit(RATE_LIMITS["redirect"])
async def resolve_path(
    path: str,
    request: Request,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session)
) -> Response:
    """
    Redirect a short link, or serve the front-end bundle.

    The last path segment is the slug candidate. A known slug gets a 302
    and its click is counted after the response is sent. Anything else is
    handed to static file serving.
    """
    slug = sanitize_slug(path.rstrip("/").rsplit("/", 1)[-1])

    if slug:
        redirect_service = RedirectService(session)
        destination = await redirect_service.get_redirect_url(slug)

        if destination:
            background_tasks.add_task(increment_clicks_background, slug=slug)
            return RedirectResponse(url=destination, status_code=status.HTTP_302_FOUND)

    asset_path = os.path.normpath(os.path.join(*path.split("/")))
    return await static_files.get_response(asset_path, request.scope)
