"""File-system cache of synced CMS content.

Layout under *root_path*::

    <language>/sitemap/<channel>.json     flat sitemap, path -> node
    <language>/page/<pageID>.json         one page with its zones
    <language>/list/<referenceName>.json  one shared content list
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from pageprops.models.page import Page
from pageprops.models.sitemap import SitemapEntry

logger = logging.getLogger(__name__)


class FileSystemStore:
    def __init__(self, root_path: Path) -> None:
        self.root_path = Path(root_path)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_sitemap(self, channel_name: str, language_code: str) -> Dict[str, SitemapEntry]:
        """Return the flat sitemap in CMS order, or ``{}`` if never synced."""
        raw = await run_in_threadpool(self._read, self._sitemap_file(channel_name, language_code))
        if raw is None:
            return {}
        return {path: SitemapEntry.model_validate(node) for path, node in raw.items()}

    async def get_page(self, page_id: int, language_code: str) -> Optional[Page]:
        raw = await run_in_threadpool(self._read, self._page_file(page_id, language_code))
        if raw is None:
            return None
        return Page.model_validate(raw)

    async def get_content_list(self, reference_name: str, language_code: str) -> List[dict]:
        raw = await run_in_threadpool(self._read, self._list_file(reference_name, language_code))
        return raw or []

    async def get_content_item(self, content_id: int, language_code: str) -> Optional[dict]:
        """Find a content item by ID across every synced list."""
        return await run_in_threadpool(self._find_content_item, content_id, language_code)

    def _find_content_item(self, content_id: int, language_code: str) -> Optional[dict]:
        list_dir = self.root_path / language_code / "list"
        if not list_dir.is_dir():
            return None
        for list_file in sorted(list_dir.glob("*.json")):
            for item in self._read(list_file) or []:
                if item.get("contentID") == content_id:
                    return item
        return None

    # ------------------------------------------------------------------
    # Writes (used by the sync client)
    # ------------------------------------------------------------------

    def save_sitemap(self, channel_name: str, language_code: str, sitemap: Dict[str, Any]) -> None:
        self._write(self._sitemap_file(channel_name, language_code), sitemap)

    def save_page(self, page_id: int, language_code: str, page: Dict[str, Any]) -> None:
        self._write(self._page_file(page_id, language_code), page)

    def save_content_list(self, reference_name: str, language_code: str, items: List[dict]) -> None:
        self._write(self._list_file(reference_name, language_code), items)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _sitemap_file(self, channel_name: str, language_code: str) -> Path:
        return self.root_path / language_code / "sitemap" / f"{channel_name}.json"

    def _page_file(self, page_id: int, language_code: str) -> Path:
        return self.root_path / language_code / "page" / f"{page_id}.json"

    def _list_file(self, reference_name: str, language_code: str) -> Path:
        return self.root_path / language_code / "list" / f"{reference_name.lower()}.json"

    @staticmethod
    def _read(path: Path) -> Any:
        if not path.is_file():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write(path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so concurrent readers never see a partial file
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)
        logger.debug("Cached %s", path)
