from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field

from pageprops.models.base import CamelModel
from pageprops.models.sitemap import SitemapEntry


class ModuleItem(CamelModel):
    """A module placed in a content zone.

    ``item`` is the raw content item and stays a plain mutable dict so the
    resolver can attach ``customData`` to it.
    """

    module: str
    item: Dict[str, Any] = Field(default_factory=dict)


class Page(CamelModel):
    model_config = ConfigDict(extra="allow")

    page_id: int = Field(alias="pageID")
    name: str = ""
    title: Optional[str] = None
    template_name: str = ""
    zones: Dict[str, List[ModuleItem]] = Field(default_factory=dict)


class ResolvedModule(CamelModel):
    module_name: str
    item: Dict[str, Any]


class ResolvedPage(CamelModel):
    """A :class:`Page` whose zones hold only modules with a known renderer."""

    model_config = ConfigDict(extra="allow")

    page_id: int = Field(alias="pageID")
    name: str = ""
    title: Optional[str] = None
    template_name: str = ""
    zones: Dict[str, List[ResolvedModule]] = Field(default_factory=dict)


class PageContext(CamelModel):
    """Request context for page-props resolution."""

    slug: Optional[List[str]] = None
    preview: bool = False


class PageProps(CamelModel):
    sitemap_node: Optional[SitemapEntry] = None
    page: Optional[ResolvedPage] = None
    page_template_name: Optional[str] = None
    global_header_props: Optional[Dict[str, Any]] = None
    language_code: str
    channel_name: str
    is_preview: bool


class PathsResponse(CamelModel):
    paths: List[str]
