"""Posts listing: resolves every post in the ``posts`` list to a link.

Each post's URL comes from the sitemap node whose ``contentID`` matches the
post (dynamic page items), so posts that are not routable are skipped.
"""

import logging
from typing import List, Optional

from pageprops.modules.registry import ModuleContext, ModuleDescriptor

logger = logging.getLogger(__name__)

_POSTS_REFERENCE_NAME = "posts"


async def get_custom_props(context: ModuleContext) -> Optional[dict]:
    sitemap = await context.agility.get_sitemap(context.channel_name, context.language_code)
    url_by_content_id = {}
    for path, node in sitemap.items():
        if node.content_id:
            url_by_content_id[node.content_id] = path

    raw_posts = await context.agility.get_content_list(_POSTS_REFERENCE_NAME, context.language_code)

    posts: List[dict] = []
    for post in raw_posts:
        content_id = post.get("contentID")
        url = url_by_content_id.get(content_id)
        if not url:
            logger.debug("Post %s has no sitemap URL, skipping", content_id)
            continue
        fields = post.get("fields") or {}
        image = fields.get("image") or {}
        posts.append(
            {
                "contentID": content_id,
                "title": fields.get("title", ""),
                "date": fields.get("date"),
                "url": url,
                "excerpt": fields.get("excerpt", ""),
                "imageSrc": image.get("url"),
                "imageAlt": image.get("label"),
            }
        )

    return {"posts": posts}


DESCRIPTOR = ModuleDescriptor(name="PostsListing", get_custom_props=get_custom_props)
