"""
Tests for the site routes: compile, preview, publish, and published-file serving.

Storage is mocked; everything else runs the real compiler.
"""

import json
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

from backend.models.website import WebsiteIn
from backend.services.r2 import r2_service


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestCompile:
    """POST /api/sites/compile"""

    async def test_compile_returns_every_page(self, client: AsyncClient, website_payload):
        response = await client.post("/api/sites/compile", json=website_payload)
        assert response.status_code == 200
        data = response.json()
        assert data["websiteId"] == "acme"
        assert [p["path"] for p in data["pages"]] == ["/", "/about"]
        assert data["robots"].startswith("User-agent: *")
        assert data["manifest"]["name"] == "Acme"

    async def test_compile_uses_public_url(self, client: AsyncClient, website_payload):
        data = (await client.post("/api/sites/compile", json=website_payload)).json()
        home = data["pages"][0]
        assert home["seo"]["canonical"] == "https://sites.test/"
        assert 'var DEFAULT_API_BASE = "https://api.sites.test";' in data["globalJS"]

    async def test_compile_reports_islands(self, client: AsyncClient, website_payload):
        data = (await client.post("/api/sites/compile", json=website_payload)).json()
        islands = data["pages"][0]["dynamicComponents"]
        assert [(i["id"], i["type"], i["apiEndpoint"]) for i in islands] == [("posts", "blog-list", "/api/blog/posts")]

    async def test_content_may_be_posted_as_object(self, client: AsyncClient, website_payload):
        data = (await client.post("/api/sites/compile", json=website_payload)).json()
        about = data["pages"][1]
        assert "About us" in about["html"]
        assert about["warnings"] == []

    async def test_invalid_website_id_is_rejected(self, client: AsyncClient, website_payload):
        website_payload["id"] = "../etc"
        response = await client.post("/api/sites/compile", json=website_payload)
        assert response.status_code == 422

    async def test_bad_content_compiles_with_warning(self, client: AsyncClient, website_payload):
        website_payload["pages"][1]["content"] = "{not json"
        data = (await client.post("/api/sites/compile", json=website_payload)).json()
        about = data["pages"][1]
        assert [w["code"] for w in about["warnings"]] == ["content_parse_error"]
        assert about["dynamicComponents"] == []

    async def test_deeply_nested_content_compiles_with_warning(self, client: AsyncClient, website_payload):
        website_payload["pages"][1]["content"] = "[" * 100000
        response = await client.post("/api/sites/compile", json=website_payload)
        assert response.status_code == 200
        about = response.json()["pages"][1]
        assert [w["code"] for w in about["warnings"]] == ["content_parse_error"]


class TestPreview:
    """POST /api/sites/preview"""

    async def test_preview_home(self, client: AsyncClient, website_payload):
        response = await client.post("/api/sites/preview", json=website_payload)
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "<title>Acme Home</title>" in response.text
        assert 'id="component-hero"' in response.text

    async def test_preview_by_path(self, client: AsyncClient, website_payload):
        response = await client.post("/api/sites/preview", params={"path": "/about"}, json=website_payload)
        assert response.status_code == 200
        assert "<title>About</title>" in response.text

    async def test_preview_missing_page(self, client: AsyncClient, website_payload):
        response = await client.post("/api/sites/preview", params={"path": "/nope"}, json=website_payload)
        assert response.status_code == 404


class TestPublish:
    """POST /api/sites/publish"""

    async def test_publish_uploads_every_file(self, client: AsyncClient, website_payload):
        upload = AsyncMock(return_value=[])
        with patch.object(r2_service, "upload_site_files", upload):
            response = await client.post("/api/sites/publish", json=website_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["website_id"] == "acme"
        assert data["url"] == "https://sites.test/sites/acme/"
        assert "index.html" in data["files"]
        assert "about/index.html" in data["files"]
        assert "sitemap.xml" in data["files"]

        upload.assert_awaited_once()
        website_id, files = upload.await_args.args
        assert website_id == "acme"
        assert list(files) == data["files"]

    async def test_publish_without_storage_credentials(self, client: AsyncClient, website_payload):
        upload = AsyncMock(side_effect=RuntimeError("R2_ENDPOINT, R2_ACCESS_KEY and R2_SECRET_KEY are required"))
        with patch.object(r2_service, "upload_site_files", upload):
            response = await client.post("/api/sites/publish", json=website_payload)
        assert response.status_code == 503


class TestServePublished:
    """GET /sites/{website_id}/{path}"""

    async def test_serves_file_with_cache_headers(self, client: AsyncClient):
        fetch = AsyncMock(return_value=(b"<html>hi</html>", "text/html"))
        with patch.object(r2_service, "get_published_file", fetch):
            response = await client.get("/sites/acme/about")

        assert response.status_code == 200
        assert response.text == "<html>hi</html>"
        assert response.headers["content-type"].startswith("text/html")
        assert "max-age=300" in response.headers["cache-control"]
        assert response.headers["etag"].startswith('"')
        assert response.headers["x-content-type-options"] == "nosniff"
        fetch.assert_awaited_once_with("acme", "about")

    async def test_serves_assets_with_their_content_type(self, client: AsyncClient):
        fetch = AsyncMock(return_value=(b"body{}", "text/css"))
        with patch.object(r2_service, "get_published_file", fetch):
            response = await client.get("/sites/acme/css/global.css")
        assert response.headers["content-type"].startswith("text/css")
        fetch.assert_awaited_once_with("acme", "css/global.css")

    async def test_conditional_request(self, client: AsyncClient):
        fetch = AsyncMock(return_value=(b"<html>hi</html>", "text/html"))
        with patch.object(r2_service, "get_published_file", fetch):
            first = await client.get("/sites/acme/")
            second = await client.get("/sites/acme/", headers={"If-None-Match": first.headers["etag"]})
        assert second.status_code == 304
        assert second.content == b""

    async def test_missing_file(self, client: AsyncClient):
        with patch.object(r2_service, "get_published_file", AsyncMock(return_value=None)):
            response = await client.get("/sites/acme/missing")
        assert response.status_code == 404


class TestWebsiteModel:
    def test_to_engine_serializes_object_content(self, website_payload):
        website = WebsiteIn.model_validate(website_payload).to_engine()
        about = website.pages[1]
        assert isinstance(about.content, str)
        assert json.loads(about.content)["components"][0]["type"] == "text"
        assert website.pages[0].meta_title == "Acme Home"

    def test_null_content_is_empty(self, website_payload):
        website_payload["pages"][1]["content"] = None
        website = WebsiteIn.model_validate(website_payload).to_engine()
        assert website.pages[1].content == ""
