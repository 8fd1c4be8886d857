"""Page-props resolution: request path -> everything a page template needs.

Pipeline:
1. Pick preview or live mode (and the matching API key).
2. Sync first when previewing, so drafts are current.
3. Resolve the path against the sitemap (``/`` means the first page).
4. Load the page, then enrich each zone's modules through the registry.
5. Resolve the global header once and assemble :class:`PageProps`.

Missing data (unknown path, missing page, unregistered module) is logged and
degrades the result; store and sync failures propagate to the caller.
"""

import logging
import re
from typing import Dict, List, Optional

from pageprops.config import Settings
from pageprops.models.page import Page, PageContext, PageProps, ResolvedModule, ResolvedPage
from pageprops.models.sitemap import SitemapEntry
from pageprops.modules.global_header import get_global_header_props
from pageprops.modules.registry import ModuleContext, ModuleRegistry
from pageprops.services.store import FileSystemStore
from pageprops.services.sync import SyncClientFactory, get_sync_client

logger = logging.getLogger(__name__)

_TEMPLATE_NAME_RE = re.compile(r"[^0-9a-zA-Z]")


def build_path(slug: Optional[List[str]]) -> str:
    """Join slug segments into a sitemap path (``['a', 'b']`` -> ``/a/b``)."""
    if not slug:
        return "/"
    return "".join("/" + segment for segment in slug)


def sanitize_template_name(template_name: str) -> str:
    """Reduce a CMS template name to a component-safe identifier."""
    return _TEMPLATE_NAME_RE.sub("", template_name)


async def _resolve_zones(
    page: Page,
    registry: ModuleRegistry,
    store: FileSystemStore,
    settings: Settings,
    page_in_sitemap: Optional[SitemapEntry],
) -> Dict[str, List[ResolvedModule]]:
    zones: Dict[str, List[ResolvedModule]] = {}

    for zone_name, module_items in page.zones.items():
        modules: List[ResolvedModule] = []

        for module_item in module_items:
            descriptor = registry.resolve(module_item.module)
            if descriptor is None:
                logger.error(
                    'No renderer registered for module "%s". Cannot render module.',
                    module_item.module,
                )
                continue

            if descriptor.get_custom_props is not None:
                logger.info("Fetching custom props for module %s", module_item.module)
                module_data = await descriptor.get_custom_props(
                    ModuleContext(
                        item=module_item.item,
                        agility=store,
                        language_code=settings.language_code,
                        channel_name=settings.channel_name,
                        page_in_sitemap=page_in_sitemap,
                    )
                )
                if module_data is not None:
                    module_item.item["customData"] = module_data

            modules.append(ResolvedModule(module_name=module_item.module, item=module_item.item))

        zones[zone_name] = modules

    return zones


async def get_page_props(
    context: PageContext,
    settings: Settings,
    registry: ModuleRegistry,
    client_factory: SyncClientFactory = get_sync_client,
) -> PageProps:
    """Resolve the page at ``context.slug`` into render-ready props.

    Raises:
        httpx.HTTPError: if the preview sync fails.
        OSError: if the local store cannot be read.
    """
    is_preview = context.preview or settings.is_development
    api_key = settings.api_preview_key if is_preview else settings.api_fetch_key

    sync_client = client_factory(settings, is_preview=is_preview, api_key=api_key)
    store = sync_client.store

    path = build_path(context.slug)

    # Live mode relies on the scheduled sync; preview must see the latest drafts
    if is_preview:
        await sync_client.run_sync()

    logger.info("Getting page props for '%s'", path)

    sitemap = await store.get_sitemap(settings.channel_name, settings.language_code)

    page_in_sitemap = sitemap.get(path)
    if path == "/":
        page_in_sitemap = next(iter(sitemap.values()), None)

    page: Optional[Page] = None
    if page_in_sitemap is not None:
        page = await store.get_page(page_in_sitemap.page_id, settings.language_code)
    else:
        logger.error("Page [%s] not found in sitemap.", path)

    resolved_page: Optional[ResolvedPage] = None
    page_template_name: Optional[str] = None

    if page is None:
        if page_in_sitemap is not None:
            logger.error("Page [%s] not found in store.", path)
    else:
        page_template_name = sanitize_template_name(page.template_name)
        zones = await _resolve_zones(page, registry, store, settings, page_in_sitemap)
        resolved_page = ResolvedPage(**page.model_dump(exclude={"zones"}), zones=zones)

    global_header_props = await get_global_header_props(
        ModuleContext(
            item={},
            agility=store,
            language_code=settings.language_code,
            channel_name=settings.channel_name,
        )
    )

    return PageProps(
        sitemap_node=page_in_sitemap,
        page=resolved_page,
        page_template_name=page_template_name,
        global_header_props=global_header_props,
        language_code=settings.language_code,
        channel_name=settings.channel_name,
        is_preview=context.preview,
    )


async def get_paths(
    settings: Settings,
    client_factory: SyncClientFactory = get_sync_client,
) -> List[str]:
    """Return every sitemap path, always from a freshly synced live store."""
    logger.info("Fetching sitemap for path enumeration")

    sync_client = client_factory(settings, is_preview=False, api_key=settings.api_fetch_key)
    await sync_client.run_sync()

    sitemap = await sync_client.store.get_sitemap(settings.channel_name, settings.language_code)
    return list(sitemap.keys())
