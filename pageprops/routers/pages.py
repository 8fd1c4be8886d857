"""Page-props and static-path endpoints consumed by the front-end renderer."""

import logging
from functools import lru_cache
from typing import Optional

import httpx
from fastapi import APIRouter, Cookie, Depends, HTTPException

from pageprops.config import Settings, get_settings
from pageprops.models.page import PageContext, PageProps, PathsResponse
from pageprops.modules.registry import ModuleRegistry, default_registry
from pageprops.services.page_props import get_page_props, get_paths
from pageprops.services.preview import PREVIEW_COOKIE, verify_preview_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Pages"])


@lru_cache
def get_registry() -> ModuleRegistry:
    return default_registry()


@router.get(
    "/page-props",
    response_model=PageProps,
    summary="Resolve the home page into render-ready props",
)
@router.get(
    "/page-props/{path:path}",
    response_model=PageProps,
    summary="Resolve a sitemap path into render-ready props",
    description=(
        "Looks *path* up in the synced sitemap, loads the page, runs each "
        "module's data hook and returns the page, its sanitised template name "
        "and the global header props.\n\n"
        "Preview mode (draft content, forced sync) is used only when the request "
        "carries a valid signed preview cookie issued by `/api/preview`."
    ),
)
async def page_props(
    path: str = "",
    preview_cookie: Optional[str] = Cookie(default=None, alias=PREVIEW_COOKIE),
    settings: Settings = Depends(get_settings),
    registry: ModuleRegistry = Depends(get_registry),
) -> PageProps:
    slug = [segment for segment in path.split("/") if segment] or None
    context = PageContext(slug=slug, preview=verify_preview_token(preview_cookie, settings))

    try:
        props = await get_page_props(context, settings, registry)
    except httpx.HTTPStatusError as exc:
        logger.error("CMS returned HTTP %s while syncing: %s", exc.response.status_code, exc)
        raise HTTPException(
            status_code=502, detail=f"CMS returned HTTP {exc.response.status_code}."
        )
    except (httpx.RequestError, OSError) as exc:
        logger.error("Error resolving page props for /%s: %s", path, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    if props.page is None:
        raise HTTPException(status_code=404, detail=f"Page '/{path}' not found.")

    return props


@router.get(
    "/paths",
    response_model=PathsResponse,
    summary="List every sitemap path for static generation",
)
async def paths(settings: Settings = Depends(get_settings)) -> PathsResponse:
    try:
        return PathsResponse(paths=await get_paths(settings))
    except httpx.HTTPStatusError as exc:
        logger.error("CMS returned HTTP %s while syncing: %s", exc.response.status_code, exc)
        raise HTTPException(
            status_code=502, detail=f"CMS returned HTTP {exc.response.status_code}."
        )
    except (httpx.RequestError, OSError) as exc:
        logger.error("Error enumerating paths: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
