"""
Pytest configuration and fixtures for the site builder service tests.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("PUBLIC_URL", "https://sites.test")
os.environ.setdefault("API_BASE_URL", "https://api.sites.test")
os.environ.setdefault("R2_ENDPOINT", "https://r2.test")
os.environ.setdefault("R2_ACCESS_KEY", "test-access-key")
os.environ.setdefault("R2_SECRET_KEY", "test-secret-key")
os.environ.setdefault("COMPILE_MAX_WORKERS", "2")

import json  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from backend.main import app  # noqa: E402


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def website_payload():
    """A two-page website as the page store sends it."""
    return {
        "id": "acme",
        "name": "Acme",
        "description": "Acme makes things",
        "language": "en",
        "pages": [
            {
                "id": "home",
                "name": "Home",
                "slug": "/",
                "metaTitle": "Acme Home",
                "content": json.dumps(
                    {
                        "components": [
                            {"id": "hero", "type": "hero", "props": {"title": "Welcome"}},
                            {"id": "posts", "type": "blog-list", "props": {"title": "News"}},
                        ]
                    }
                ),
            },
            {
                "id": "about",
                "name": "About",
                "slug": "about",
                "content": {"components": [{"id": "t1", "type": "text", "props": {"content": "About us"}}]},
            },
        ],
    }
