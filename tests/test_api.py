"""Tests for the HTTP surface: page props, paths and preview entry/exit.

Services are replaced with lightweight mocks so no CMS or cache is touched.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from pageprops.config import get_settings
from pageprops.main import app
from pageprops.models.page import PageProps, ResolvedModule, ResolvedPage
from pageprops.models.sitemap import SitemapEntry
from pageprops.services.preview import (
    PREVIEW_COOKIE,
    generate_preview_key,
    issue_preview_token,
    verify_preview_token,
)

client = TestClient(app)


@pytest.fixture(autouse=True)
def override_settings(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.limiter._storage.reset()
    client.cookies.clear()
    yield
    app.dependency_overrides.clear()


def _props(page=True, is_preview=False):
    resolved = ResolvedPage(
        page_id=2,
        name="home",
        template_name="Main",
        zones={"MainContentZone": [ResolvedModule(module_name="Jumbotron", item={"contentID": 10})]},
    )
    return PageProps(
        sitemap_node=SitemapEntry(page_id=2, name="home", path="/home"),
        page=resolved if page else None,
        page_template_name="Main" if page else None,
        global_header_props={"globalHeader": None, "sitemap": []},
        language_code="en-us",
        channel_name="website",
        is_preview=is_preview,
    )


# ---------------------------------------------------------------------------
# Page props
# ---------------------------------------------------------------------------

class TestPagePropsEndpoint:
    def test_root_path_has_no_slug(self):
        mock = AsyncMock(return_value=_props())
        with patch("pageprops.routers.pages.get_page_props", new=mock):
            resp = client.get("/api/page-props")

        assert resp.status_code == 200
        context = mock.call_args.args[0]
        assert context.slug is None
        assert context.preview is False

    def test_nested_path_becomes_slug(self):
        mock = AsyncMock(return_value=_props())
        with patch("pageprops.routers.pages.get_page_props", new=mock):
            resp = client.get("/api/page-props/blog/first-post")

        assert resp.status_code == 200
        assert mock.call_args.args[0].slug == ["blog", "first-post"]

    def test_response_uses_camel_case(self):
        with patch("pageprops.routers.pages.get_page_props", new=AsyncMock(return_value=_props())):
            data = client.get("/api/page-props/home").json()

        for field in (
            "sitemapNode", "page", "pageTemplateName", "globalHeaderProps",
            "languageCode", "channelName", "isPreview",
        ):
            assert field in data, f"Missing field: {field}"
        assert data["page"]["pageID"] == 2
        assert data["page"]["zones"]["MainContentZone"][0]["moduleName"] == "Jumbotron"

    def test_preview_query_flag_alone_is_ignored(self):
        mock = AsyncMock(return_value=_props())
        with patch("pageprops.routers.pages.get_page_props", new=mock):
            resp = client.get("/api/page-props/home", params={"preview": "true"})

        assert resp.status_code == 200
        assert mock.call_args.args[0].preview is False

    def test_forged_preview_cookie_is_ignored(self):
        mock = AsyncMock(return_value=_props())
        client.cookies.set(PREVIEW_COOKIE, "forged")
        with patch("pageprops.routers.pages.get_page_props", new=mock):
            client.get("/api/page-props/home")

        assert mock.call_args.args[0].preview is False

    def test_cookie_signed_with_other_secret_is_ignored(self, settings):
        other = settings.model_copy(update={"security_key": "someone-else"})
        mock = AsyncMock(return_value=_props())
        client.cookies.set(PREVIEW_COOKIE, issue_preview_token(other))
        with patch("pageprops.routers.pages.get_page_props", new=mock):
            client.get("/api/page-props/home")

        assert mock.call_args.args[0].preview is False

    def test_signed_preview_cookie_enables_preview(self, settings):
        mock = AsyncMock(return_value=_props(is_preview=True))
        client.cookies.set(PREVIEW_COOKIE, issue_preview_token(settings))
        with patch("pageprops.routers.pages.get_page_props", new=mock):
            client.get("/api/page-props/home")

        assert mock.call_args.args[0].preview is True

    def test_cookie_from_preview_endpoint_enables_preview(self, settings):
        client.get(
            "/api/preview",
            params={"agilitypreviewkey": generate_preview_key(settings.security_key), "slug": "/home"},
            follow_redirects=False,
        )
        mock = AsyncMock(return_value=_props(is_preview=True))
        with patch("pageprops.routers.pages.get_page_props", new=mock):
            client.get("/api/page-props/home")

        assert mock.call_args.args[0].preview is True

    def test_missing_page_returns_404(self):
        with patch(
            "pageprops.routers.pages.get_page_props", new=AsyncMock(return_value=_props(page=False))
        ):
            resp = client.get("/api/page-props/nope")

        assert resp.status_code == 404

    def test_sync_http_error_returns_502(self):
        response = httpx.Response(401, request=httpx.Request("GET", "https://api.example.test"))
        exc = httpx.HTTPStatusError("unauthorized", request=response.request, response=response)
        with patch("pageprops.routers.pages.get_page_props", new=AsyncMock(side_effect=exc)):
            resp = client.get("/api/page-props/home")

        assert resp.status_code == 502
        assert "401" in resp.json()["detail"]

    def test_network_error_returns_502(self):
        exc = httpx.ConnectError("connection refused")
        with patch("pageprops.routers.pages.get_page_props", new=AsyncMock(side_effect=exc)):
            resp = client.get("/api/page-props/home")

        assert resp.status_code == 502


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

class TestPathsEndpoint:
    def test_returns_paths(self):
        with patch(
            "pageprops.routers.pages.get_paths", new=AsyncMock(return_value=["/home", "/blog"])
        ):
            resp = client.get("/api/paths")

        assert resp.status_code == 200
        assert resp.json() == {"paths": ["/home", "/blog"]}

    def test_sync_failure_returns_502(self):
        exc = httpx.ReadTimeout("timed out")
        with patch("pageprops.routers.pages.get_paths", new=AsyncMock(side_effect=exc)):
            resp = client.get("/api/paths")

        assert resp.status_code == 502


# ---------------------------------------------------------------------------
# Preview entry / exit
# ---------------------------------------------------------------------------

class TestPreviewEndpoint:
    def _key(self, settings):
        return generate_preview_key(settings.security_key)

    def test_valid_key_sets_cookie_and_redirects(self, settings):
        resp = client.get(
            "/api/preview",
            params={"agilitypreviewkey": self._key(settings), "slug": "/blog"},
            follow_redirects=False,
        )

        assert resp.status_code == 307
        assert resp.headers["location"] == "/blog"
        assert PREVIEW_COOKIE in resp.headers["set-cookie"]

    def test_key_in_header(self, settings):
        resp = client.get(
            "/api/preview",
            params={"slug": "blog"},
            headers={"Agility-Preview-Key": self._key(settings)},
            follow_redirects=False,
        )

        assert resp.status_code == 307
        assert resp.headers["location"] == "/blog"

    def test_missing_slug_redirects_to_root(self, settings):
        resp = client.get(
            "/api/preview",
            params={"agilitypreviewkey": self._key(settings)},
            follow_redirects=False,
        )

        assert resp.headers["location"] == "/"

    def test_missing_key_returns_401(self):
        resp = client.get("/api/preview", params={"slug": "/"}, follow_redirects=False)

        assert resp.status_code == 401
        assert "Missing" in resp.text

    def test_invalid_key_returns_401(self):
        resp = client.get(
            "/api/preview",
            params={"agilitypreviewkey": "wrong", "slug": "/"},
            follow_redirects=False,
        )

        assert resp.status_code == 401
        assert "Invalid" in resp.text
        assert "set-cookie" not in resp.headers

    def test_cookie_value_is_signed(self, settings):
        resp = client.get(
            "/api/preview",
            params={"agilitypreviewkey": self._key(settings), "slug": "/"},
            follow_redirects=False,
        )

        assert f"{PREVIEW_COOKIE}=1;" not in resp.headers["set-cookie"]
        assert verify_preview_token(resp.cookies[PREVIEW_COOKIE], settings) is True

    @pytest.mark.parametrize(
        "slug",
        ["//evil.example", "https://evil.example/", "/\\evil.example", "javascript:alert(1)"],
    )
    def test_off_site_slug_rejected(self, settings, slug):
        resp = client.get(
            "/api/preview",
            params={"agilitypreviewkey": self._key(settings), "slug": slug},
            follow_redirects=False,
        )

        assert resp.status_code == 400
        assert "location" not in resp.headers
        assert "set-cookie" not in resp.headers


class TestExitPreviewEndpoint:
    def test_clears_cookie_and_redirects(self):
        resp = client.get("/api/exit-preview", params={"slug": "/blog"}, follow_redirects=False)

        assert resp.status_code == 307
        assert resp.headers["location"] == "/blog"
        assert PREVIEW_COOKIE in resp.headers["set-cookie"]

    def test_off_site_slug_rejected(self):
        resp = client.get(
            "/api/exit-preview", params={"slug": "//evil.example"}, follow_redirects=False
        )

        assert resp.status_code == 400
        assert "location" not in resp.headers


class TestPreviewKeyEndpoint:
    def test_hidden_outside_development(self):
        assert client.get("/api/preview-key").status_code == 404

    def test_available_in_development(self, settings):
        app.dependency_overrides[get_settings] = lambda: settings.model_copy(
            update={"environment": "development"}
        )
        resp = client.get("/api/preview-key")

        assert resp.status_code == 200
        assert resp.json() == {"previewKey": generate_preview_key(settings.security_key)}


class TestHealthCheck:
    def test_root(self):
        assert client.get("/").json() == {"message": "Hello from Pageprops"}
