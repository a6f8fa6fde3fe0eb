"""
Publish pipeline: compile a website and push every file to the published bucket.

Compilation is CPU-bound and pure, so it runs in a worker thread; the upload
is IO and stays on the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from backend.config import settings
from backend.services.r2 import r2_service
from engine.compiler.site import compile_site, site_files
from engine.compiler.types import CompileOptions, GeneratedSite, Website

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishResult:
    website_id: str
    url: str
    files: list[str]
    warnings: int


async def compile_website(website: Website, options: CompileOptions | None = None) -> GeneratedSite:
    """Compile off the event loop."""
    return await asyncio.to_thread(compile_site, website, options or settings.compile_options())


async def publish_website(website: Website, options: CompileOptions | None = None) -> PublishResult:
    """
    Compile the site and upload it under `{website_id}/`.

    Storage errors propagate after the R2 service's own retries; nothing is
    partially reported as published.
    """
    site = await compile_website(website, options)
    files = site_files(site)
    warnings = sum(len(page.warnings) for page in site.pages)
    if warnings:
        logger.warning("website %s compiled with %d warning(s)", website.id, warnings)

    await r2_service.upload_site_files(website.id, files)

    url = f"{settings.PUBLIC_URL}/sites/{website.id}/"
    logger.info("published website %s (%d files) at %s", website.id, len(files), url)
    return PublishResult(website_id=website.id, url=url, files=list(files), warnings=warnings)
