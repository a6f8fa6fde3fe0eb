"""Site routes — compile, preview, publish, and serve published files."""

from __future__ import annotations

import hashlib
import logging

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response

from backend.models.website import PublishResponse, WebsiteIn
from backend.services.publisher import compile_website, publish_website
from backend.services.r2 import r2_service

router = APIRouter(tags=["sites"])
logger = logging.getLogger(__name__)

# Cache-Control TTL: 5 minutes for stale-while-revalidate, 1 hour shared cache
_CACHE_CONTROL = "public, max-age=300, s-maxage=3600, stale-while-revalidate=86400"


@router.post("/api/sites/compile")
async def compile_site_route(req: WebsiteIn) -> JSONResponse:
    """Compile a website and return every generated artifact as JSON."""
    site = await compile_website(req.to_engine())
    return JSONResponse(content=site.to_dict())


@router.post("/api/sites/preview", response_class=HTMLResponse)
async def preview_page(req: WebsiteIn, path: str = "/") -> HTMLResponse:
    """
    Compile a website and return the HTML document of one page.

    404 if no page of the site has that path.
    """
    site = await compile_website(req.to_engine())
    page = site.page_for(path)
    if page is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    return HTMLResponse(content=page.html)


@router.post("/api/sites/publish", status_code=200)
async def publish_site(req: WebsiteIn) -> PublishResponse:
    """
    Compile a website and upload every file to the published bucket.
    """
    try:
        result = await publish_website(req.to_engine())
    except RuntimeError as e:
        logger.error("publish of website %s failed: %s", req.id, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    return PublishResponse(
        website_id=result.website_id,
        url=result.url,
        files=result.files,
        warnings=result.warnings,
    )


@router.get("/sites/{website_id}/{path:path}")
async def serve_published_file(website_id: str, path: str, request: Request) -> Response:
    """
    Serve one file of a published site.

    In production, this is served directly from R2/CDN.
    This route exists for local development.

    Cache headers:
    - Cache-Control: public, 5-min browser TTL, 1-hour CDN TTL, 24h stale-while-revalidate
    - ETag: MD5 of the file content for conditional requests
    """
    try:
        found = await r2_service.get_published_file(website_id, path)
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e

    if found is None:
        return HTMLResponse(
            content="<html><body><h1>404 — Page not found</h1></body></html>",
            status_code=404,
        )

    body, content_type = found
    etag = f'"{hashlib.md5(body, usedforsecurity=False).hexdigest()}"'
    headers = {
        "Cache-Control": _CACHE_CONTROL,
        "ETag": etag,
        "X-Content-Type-Options": "nosniff",
    }
    if request.headers.get("if-none-match") == etag:
        return Response(status_code=304, headers=headers)

    return Response(content=body, media_type=f"{content_type}; charset=utf-8", headers=headers)
