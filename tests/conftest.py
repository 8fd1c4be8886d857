"""Shared fixtures: settings, a seeded on-disk store and a fake sync client."""

import pytest

from pageprops.config import Settings
from pageprops.services.store import FileSystemStore

LANG = "en-us"
CHANNEL = "website"

SITEMAP = {
    "/home": {
        "pageID": 2,
        "name": "home",
        "path": "/home",
        "title": "Home",
        "menuText": "Home",
        "visible": {"menu": True, "sitemap": True},
    },
    "/blog": {
        "pageID": 3,
        "name": "blog",
        "path": "/blog",
        "title": "Blog",
        "menuText": "Blog",
        "visible": {"menu": True, "sitemap": True},
    },
    "/blog/first-post": {
        "pageID": 4,
        "contentID": 101,
        "name": "first-post",
        "path": "/blog/first-post",
        "title": "First Post",
        "visible": {"menu": False, "sitemap": True},
    },
}

HOME_PAGE = {
    "pageID": 2,
    "name": "home",
    "title": "Home",
    "templateName": "One Column Template",
    "zones": {
        "MainContentZone": [
            {"module": "Jumbotron", "item": {"contentID": 10, "fields": {"title": "Welcome"}}},
            {"module": "RichTextArea", "item": {"contentID": 11, "fields": {"textblob": "<p>Hi</p>"}}},
        ]
    },
}

BLOG_PAGE = {
    "pageID": 3,
    "name": "blog",
    "title": "Blog",
    "templateName": "Blog-Post!",
    "zones": {
        "MainContentZone": [
            {"module": "PostsListing", "item": {"contentID": 20, "fields": {}}},
        ]
    },
}

POSTS = [
    {"contentID": 101, "fields": {"title": "First Post", "date": "2024-01-01", "excerpt": "Intro"}},
    {"contentID": 102, "fields": {"title": "Unrouted Post"}},
]

GLOBAL_HEADER = [{"contentID": 1, "fields": {"siteName": "Demo Site"}}]


class FakeSyncClient:
    def __init__(self, store, is_preview, api_key):
        self.store = store
        self.is_preview = is_preview
        self.api_key = api_key
        self.sync_calls = 0

    async def run_sync(self):
        self.sync_calls += 1


class FakeClientFactory:
    """Stands in for ``get_sync_client`` and records every client it builds."""

    def __init__(self, store):
        self.store = store
        self.clients = []

    def __call__(self, settings, *, is_preview, api_key):
        client = FakeSyncClient(self.store, is_preview, api_key)
        self.clients.append(client)
        return client

    @property
    def last(self):
        return self.clients[-1]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        guid="abc-u",
        api_fetch_key="fetch-key",
        api_preview_key="preview-key",
        language_code=LANG,
        channel_name=CHANNEL,
        security_key="abc123",
        environment="production",
        cache_root=tmp_path / "cache",
    )


@pytest.fixture
def store(tmp_path):
    fs_store = FileSystemStore(tmp_path / "store")
    fs_store.save_sitemap(CHANNEL, LANG, SITEMAP)
    fs_store.save_page(2, LANG, HOME_PAGE)
    fs_store.save_page(3, LANG, BLOG_PAGE)
    fs_store.save_content_list("posts", LANG, POSTS)
    fs_store.save_content_list("globalheader", LANG, GLOBAL_HEADER)
    return fs_store


@pytest.fixture
def client_factory(store):
    return FakeClientFactory(store)
