"""Content sync: pulls sitemap, pages and shared lists into the local store."""

import logging
from typing import Callable, List, Optional

import httpx
from starlette.concurrency import run_in_threadpool

from pageprops.config import Settings
from pageprops.services.store import FileSystemStore

logger = logging.getLogger(__name__)

_LIST_PAGE_SIZE = 50
_CONTENT_LINK_DEPTH = 2


class AgilitySyncClient:
    """Handle on the CMS sync plus the local store it fills.

    ``run_sync`` refreshes the store from the Fetch (live) or Preview REST
    API; ``store`` is what the page-props pipeline reads from.
    """

    def __init__(
        self,
        *,
        guid: str,
        api_key: str,
        is_preview: bool,
        languages: List[str],
        channels: List[str],
        store: FileSystemStore,
        base_url: str,
        content_lists: Optional[List[str]] = None,
        timeout: float = 15,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.guid = guid
        self.api_key = api_key
        self.is_preview = is_preview
        self.languages = languages
        self.channels = channels
        self.store = store
        self.content_lists = content_lists or []
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def api_url(self) -> str:
        api_type = "preview" if self.is_preview else "fetch"
        return f"{self._base_url}/{self.guid}/{api_type}"

    async def run_sync(self) -> None:
        """Refresh every configured language/channel into the store.

        Raises:
            httpx.HTTPError: on network errors or non-success responses.
        """
        logger.info(
            "Syncing %s content for %s",
            "preview" if self.is_preview else "live",
            self.guid,
        )
        async with httpx.AsyncClient(
            base_url=self.api_url,
            headers={"APIKey": self.api_key},
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            for language_code in self.languages:
                for channel_name in self.channels:
                    await self._sync_sitemap(client, language_code, channel_name)
                for reference_name in self.content_lists:
                    await self._sync_content_list(client, language_code, reference_name)

    async def _sync_sitemap(
        self, client: httpx.AsyncClient, language_code: str, channel_name: str
    ) -> None:
        resp = await client.get(f"/{language_code}/sitemap/flat/{channel_name}")
        resp.raise_for_status()
        sitemap = resp.json() or {}
        await run_in_threadpool(self.store.save_sitemap, channel_name, language_code, sitemap)

        synced: set = set()
        for node in sitemap.values():
            page_id = node.get("pageID")
            # Folders carry a non-positive pageID; redirects share the target's page
            if not page_id or page_id <= 0 or page_id in synced:
                continue
            synced.add(page_id)
            await self._sync_page(client, language_code, page_id)

    async def _sync_page(self, client: httpx.AsyncClient, language_code: str, page_id: int) -> None:
        resp = await client.get(
            f"/{language_code}/page/{page_id}",
            params={"contentLinkDepth": _CONTENT_LINK_DEPTH},
        )
        # The sitemap may list pages that are not yet published in this mode
        if resp.status_code == 404:
            logger.warning("Page %d listed in sitemap but not found (%s)", page_id, language_code)
            return
        resp.raise_for_status()
        await run_in_threadpool(self.store.save_page, page_id, language_code, resp.json())

    async def _sync_content_list(
        self, client: httpx.AsyncClient, language_code: str, reference_name: str
    ) -> None:
        items: List[dict] = []
        skip = 0
        while True:
            resp = await client.get(
                f"/{language_code}/list/{reference_name}",
                params={"take": _LIST_PAGE_SIZE, "skip": skip},
            )
            if resp.status_code == 404:
                logger.warning("Content list '%s' not found (%s)", reference_name, language_code)
                return
            resp.raise_for_status()
            payload = resp.json() or {}
            batch = payload.get("items") or []
            items.extend(batch)
            skip += len(batch)
            if not batch or skip >= int(payload.get("totalCount", 0)):
                break

        await run_in_threadpool(self.store.save_content_list, reference_name, language_code, items)


SyncClientFactory = Callable[..., AgilitySyncClient]


def get_sync_client(settings: Settings, *, is_preview: bool, api_key: str) -> AgilitySyncClient:
    """Build a sync client whose cache is isolated by mode (preview vs. live)."""
    return AgilitySyncClient(
        guid=settings.guid,
        api_key=api_key,
        is_preview=is_preview,
        languages=[settings.language_code],
        channels=[settings.channel_name],
        store=FileSystemStore(settings.cache_path(is_preview)),
        base_url=settings.api_base_url,
        content_lists=settings.sync_content_lists,
        timeout=settings.api_timeout,
    )
