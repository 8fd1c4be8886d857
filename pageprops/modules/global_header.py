"""Site-wide header data, resolved once per page alongside the zones."""

import logging
from typing import Optional

from pageprops.modules.registry import ModuleContext

logger = logging.getLogger(__name__)

_GLOBAL_HEADER_REFERENCE_NAME = "globalheader"


async def get_global_header_props(context: ModuleContext) -> Optional[dict]:
    items = await context.agility.get_content_list(
        _GLOBAL_HEADER_REFERENCE_NAME, context.language_code
    )
    if not items:
        logger.warning("No global header content found in list '%s'", _GLOBAL_HEADER_REFERENCE_NAME)

    sitemap = await context.agility.get_sitemap(context.channel_name, context.language_code)

    # Top-level, menu-visible pages only
    links = [
        {"title": node.menu_text or node.title or node.name, "path": path}
        for path, node in sitemap.items()
        if node.visible.menu and path.count("/") == 1
    ]

    return {
        "globalHeader": items[0] if items else None,
        "sitemap": links,
    }
