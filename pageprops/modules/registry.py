"""Module-type registry.

Every content module the CMS can place in a zone has a descriptor here.
A descriptor may carry a ``get_custom_props`` hook that fetches extra data
for the module before rendering; modules without one render from their
content item alone.
"""

from typing import Any, Awaitable, Callable, Dict, Iterable, List, NamedTuple, Optional

from pageprops.models.sitemap import SitemapEntry
from pageprops.services.store import FileSystemStore


class ModuleContext(NamedTuple):
    item: Dict[str, Any]
    agility: FileSystemStore
    language_code: str
    channel_name: str
    page_in_sitemap: Optional[SitemapEntry] = None


CustomPropsFn = Callable[[ModuleContext], Awaitable[Optional[dict]]]


class ModuleDescriptor(NamedTuple):
    name: str
    get_custom_props: Optional[CustomPropsFn] = None


class ModuleRegistry:
    """Name-indexed lookup from CMS module type to its descriptor."""

    def __init__(self, descriptors: Iterable[ModuleDescriptor] = ()) -> None:
        self._descriptors: Dict[str, ModuleDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ModuleDescriptor) -> None:
        self._descriptors[descriptor.name] = descriptor

    def resolve(self, name: str) -> Optional[ModuleDescriptor]:
        return self._descriptors.get(name)

    def names(self) -> List[str]:
        return list(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors


def default_registry() -> ModuleRegistry:
    """Registry of the module types this site ships renderers for."""
    from pageprops.modules import jumbotron, post_details, posts_listing, rich_text_area

    return ModuleRegistry(
        [
            rich_text_area.DESCRIPTOR,
            posts_listing.DESCRIPTOR,
            post_details.DESCRIPTOR,
            jumbotron.DESCRIPTOR,
        ]
    )
