"""Preview-mode entry and exit.

Editors reach ``/api/preview`` from the CMS with a derived key; a valid key
sets a signed preview cookie that switches page-props requests to draft
content.  Redirect targets are restricted to same-site paths.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from pageprops.config import Settings, get_settings
from pageprops.services.preview import (
    PREVIEW_COOKIE,
    PREVIEW_MAX_AGE,
    generate_preview_key,
    issue_preview_token,
    safe_redirect_target,
    validate_preview,
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/api", tags=["Preview"])


@router.get("/preview", summary="Enter preview mode")
@limiter.limit("10/minute")
async def enter_preview(
    request: Request,
    agilitypreviewkey: Optional[str] = Query(default=None),
    slug: Optional[str] = Query(default=None),
    agility_preview_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
):
    """Validate the preview key, set the preview cookie and redirect to *slug*."""
    result = await validate_preview(agilitypreviewkey or agility_preview_key, slug, settings)
    if result.error:
        return PlainTextResponse(result.message or "", status_code=401)

    target = safe_redirect_target(slug)
    if target is None:
        logger.warning("Rejected off-site preview redirect to %s", slug)
        return PlainTextResponse("Invalid slug.", status_code=400)

    logger.info("Preview mode enabled", extra={"slug": target})

    response = RedirectResponse(url=target, status_code=307)
    response.set_cookie(
        PREVIEW_COOKIE,
        issue_preview_token(settings),
        max_age=PREVIEW_MAX_AGE,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/exit-preview", summary="Leave preview mode")
async def exit_preview(slug: Optional[str] = Query(default=None)):
    target = safe_redirect_target(slug)
    if target is None:
        return PlainTextResponse("Invalid slug.", status_code=400)

    response = RedirectResponse(url=target, status_code=307)
    response.delete_cookie(PREVIEW_COOKIE)
    return response


@router.get("/preview-key", summary="Show the preview key (development only)")
async def preview_key(settings: Settings = Depends(get_settings)) -> dict:
    if not settings.is_development:
        raise HTTPException(status_code=404, detail="Not Found")
    return {"previewKey": generate_preview_key(settings.security_key)}
