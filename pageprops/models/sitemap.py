from typing import Optional

from pydantic import ConfigDict, Field

from pageprops.models.base import CamelModel


class SitemapVisibility(CamelModel):
    menu: bool = True
    sitemap: bool = True


class SitemapEntry(CamelModel):
    """One node of the flat sitemap, keyed elsewhere by its normalised path."""

    model_config = ConfigDict(extra="allow")

    page_id: int = Field(alias="pageID")
    content_id: Optional[int] = Field(default=None, alias="contentID")
    name: str = ""
    path: str = ""
    title: Optional[str] = None
    menu_text: Optional[str] = None
    visible: SitemapVisibility = Field(default_factory=SitemapVisibility)
    is_folder: bool = False
    redirect: Optional[dict] = None
