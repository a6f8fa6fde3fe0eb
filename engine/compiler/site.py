"""
Site Compiler — Site Compiler

compile_site(website, options?) → GeneratedSite

Compiles every page (independently; optionally on a thread pool) and derives
the site-wide artifacts: global CSS, the hydration runtime as global JS, PWA
manifest, sitemap, robots.txt and the service worker.

The only clock read in the compiler is the sitemap lastmod. Pass
`compiled_at` to pin it.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

from engine.compiler.components.base import escape
from engine.compiler.hydration import runtime_script
from engine.compiler.page import compile_page
from engine.compiler.types import (
    CompileOptions,
    GeneratedPage,
    GeneratedSite,
    Page,
    SiteFile,
    SitemapEntry,
    Website,
)

logger = logging.getLogger(__name__)

SHORT_NAME_LENGTH = 12
ROOT_PRIORITY = 1.0
PAGE_PRIORITY = 0.8
CRAWL_DELAY = 1

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compile_site(
    website: Website,
    options: CompileOptions | None = None,
    *,
    compiled_at: datetime | None = None,
) -> GeneratedSite:
    """
    Compile all pages of a website plus its site-wide files.
    Pages with a repeated id or path are skipped (first one wins).
    """
    opts = options or CompileOptions()
    pages = _unique_pages(website)
    generated = _compile_pages(pages, website, opts)

    manifest = build_manifest(website, opts)
    sitemap = build_sitemap(generated, opts, compiled_at or datetime.now(timezone.utc))
    robots = build_robots(opts)
    worker = build_service_worker(website)

    assets = (
        SiteFile("manifest.json", json.dumps(manifest, indent=2, ensure_ascii=False), "application/json"),
        SiteFile("sitemap.xml", sitemap_xml(sitemap), "application/xml"),
        SiteFile("robots.txt", robots, "text/plain"),
        SiteFile("sw.js", worker, "application/javascript"),
    )

    logger.info("compiled site %s: %d page(s)", website.id, len(generated))
    return GeneratedSite(
        website_id=website.id,
        pages=tuple(generated),
        global_css=build_global_css(website),
        global_js=runtime_script(website.name, opts.api_url),
        service_worker=worker,
        assets=assets,
        manifest=manifest,
        sitemap=sitemap,
        robots=robots,
    )


def site_files(site: GeneratedSite) -> dict[str, SiteFile]:
    """
    Every deployable file, keyed by relative path:
      index.html, {slug}/index.html, css/global.css, js/global.js,
      css/page-{id}.css, js/page-{id}.js, manifest.json, sitemap.xml,
      robots.txt, sw.js
    """
    files: dict[str, SiteFile] = {}

    def add(path: str, content: str, content_type: str) -> None:
        files[path] = SiteFile(path, content, content_type)

    for page in site.pages:
        add(html_file_path(page.path), page.html, "text/html")
    add("css/global.css", site.global_css, "text/css")
    add("js/global.js", site.global_js, "application/javascript")
    for page in site.pages:
        add(f"css/page-{page.asset_id}.css", page.css, "text/css")
        add(f"js/page-{page.asset_id}.js", page.js, "application/javascript")
    for asset in site.assets:
        files[asset.path] = asset
    return files


def html_file_path(path: str) -> str:
    """'/' → 'index.html', '/about' → 'about/index.html'."""
    segments = [s for s in path.split("/") if s and s not in (".", "..")]
    return "/".join([*segments, "index.html"])


# ---------------------------------------------------------------------------
# Site-wide artifacts
# ---------------------------------------------------------------------------


def build_manifest(website: Website, options: CompileOptions) -> dict[str, Any]:
    name = website.name or "Untitled Site"
    return {
        "name": name,
        "short_name": name[:SHORT_NAME_LENGTH],
        "description": website.description or "",
        "start_url": "/",
        "display": "standalone",
        "background_color": options.background_color,
        "theme_color": options.theme_color,
        "icons": [
            {"src": "/icon-192.png", "sizes": "192x192", "type": "image/png"},
            {"src": "/icon-512.png", "sizes": "512x512", "type": "image/png"},
        ],
        "categories": ["business", "productivity"],
        "lang": website.language or "en",
    }


def build_sitemap(
    pages: list[GeneratedPage],
    options: CompileOptions,
    compiled_at: datetime,
) -> tuple[SitemapEntry, ...]:
    lastmod = compiled_at.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return tuple(
        SitemapEntry(
            url=f"{options.site_url}{page.path}",
            lastmod=lastmod,
            priority=ROOT_PRIORITY if page.path == "/" else PAGE_PRIORITY,
        )
        for page in pages
    )


def sitemap_xml(entries: tuple[SitemapEntry, ...]) -> str:
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', f'<urlset xmlns="{SITEMAP_NS}">']
    for entry in entries:
        parts.append("  <url>")
        parts.append(f"    <loc>{escape(entry.url)}</loc>")
        parts.append(f"    <lastmod>{entry.lastmod}</lastmod>")
        parts.append(f"    <priority>{entry.priority:.1f}</priority>")
        parts.append("  </url>")
    parts.append("</urlset>")
    return "\n".join(parts) + "\n"


def build_robots(options: CompileOptions) -> str:
    return "\n".join(
        [
            "User-agent: *",
            "Allow: /",
            "",
            f"Sitemap: {options.site_url}/sitemap.xml",
            "",
            "# Crawl-delay for respectful crawling",
            f"Crawl-delay: {CRAWL_DELAY}",
            "",
        ]
    )


def build_global_css(website: Website) -> str:
    name = (website.name or "Untitled Site").replace("*/", "")
    return f"/* Global Styles for {name} */\n{GLOBAL_CSS}"


def build_service_worker(website: Website) -> str:
    cache_name = json.dumps(f"site-{website.id}", ensure_ascii=False)
    return SERVICE_WORKER_JS.replace("__CACHE_NAME__", cache_name)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _unique_pages(website: Website) -> list[Page]:
    pages: list[Page] = []
    ids: set[str] = set()
    paths: set[str] = set()
    assets: set[str] = set()
    for page in website.pages:
        if page.id in ids:
            logger.warning("site %s: skipping duplicate page id %s", website.id, page.id)
            continue
        if page.path in paths:
            logger.warning("site %s: skipping page %s, path %s already taken", website.id, page.id, page.path)
            continue
        if page.asset_id in assets:
            logger.warning("site %s: skipping page %s, asset name %s already taken", website.id, page.id, page.asset_id)
            continue
        ids.add(page.id)
        paths.add(page.path)
        assets.add(page.asset_id)
        pages.append(page)
    return pages


def _compile_pages(pages: list[Page], website: Website, options: CompileOptions) -> list[GeneratedPage]:
    if options.max_workers <= 1 or len(pages) <= 1:
        return [compile_page(page, website, options) for page in pages]
    with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
        return list(pool.map(lambda page: compile_page(page, website, options), pages))


GLOBAL_CSS = """
* {
  box-sizing: border-box;
  margin: 0;
  padding: 0;
}

body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;
  line-height: 1.6;
  color: #333;
  background-color: #fff;
}

img { max-width: 100%; }

.container { max-width: 1200px; margin: 0 auto; padding: 0 20px; }
.row { display: flex; flex-wrap: wrap; margin: 0 -15px; }
.col { flex: 1; padding: 0 15px; }

@media (max-width: 768px) {
  .container { padding: 0 15px; }
  .row { margin: 0 -10px; }
  .col { padding: 0 10px; }
}

.fade-in { animation: fadeIn 0.5s ease-in; }

@keyframes fadeIn {
  from { opacity: 0; transform: translateY(20px); }
  to { opacity: 1; transform: translateY(0); }
}

@keyframes spin {
  0% { transform: rotate(0deg); }
  100% { transform: rotate(360deg); }
}

.component-placeholder,
.unknown-component {
  padding: 16px;
  border: 1px dashed #d1d5db;
  color: #6b7280;
  background-color: #f9fafb;
  text-align: center;
}

.form-status:empty { display: none; }

.dynamic-component { position: relative; min-height: 50px; }

.dynamic-component.loading { opacity: 0.6; }

.dynamic-component.loading::before {
  content: '';
  position: absolute;
  top: 50%;
  left: 50%;
  transform: translate(-50%, -50%);
  width: 20px;
  height: 20px;
  border: 2px solid #f3f3f3;
  border-top: 2px solid #3498db;
  border-radius: 50%;
  animation: spin 1s linear infinite;
}

.island-error {
  color: #e74c3c;
  background-color: #fdf2f2;
  border: 1px solid #fecaca;
  padding: 10px;
  border-radius: 4px;
  margin: 10px 0;
  text-align: center;
}

.lightbox {
  position: fixed;
  inset: 0;
  background: rgba(0, 0, 0, 0.85);
  display: flex;
  align-items: center;
  justify-content: center;
  z-index: 2000;
}
.lightbox img { max-width: 90vw; max-height: 90vh; }
.lightbox-close {
  position: absolute;
  top: 16px;
  right: 16px;
  font-size: 2rem;
  color: #fff;
  background: none;
  border: none;
  cursor: pointer;
}
"""

# Cache-first for the shared shell, network-first for documents.
SERVICE_WORKER_JS = """const CACHE_NAME = __CACHE_NAME__;
const SHELL = ['/css/global.css', '/js/global.js', '/manifest.json'];

self.addEventListener('install', (event) => {
  event.waitUntil(caches.open(CACHE_NAME).then((cache) => cache.addAll(SHELL)));
  self.skipWaiting();
});

self.addEventListener('activate', (event) => {
  event.waitUntil(
    caches.keys().then((keys) => Promise.all(
      keys.filter((key) => key !== CACHE_NAME).map((key) => caches.delete(key))
    ))
  );
  self.clients.claim();
});

self.addEventListener('fetch', (event) => {
  const request = event.request;
  if (request.method !== 'GET') return;
  const url = new URL(request.url);
  if (url.origin !== self.location.origin || url.pathname.startsWith('/api/')) return;

  if (request.mode === 'navigate') {
    event.respondWith(
      fetch(request)
        .then((response) => {
          const copy = response.clone();
          caches.open(CACHE_NAME).then((cache) => cache.put(request, copy));
          return response;
        })
        .catch(() => caches.match(request))
    );
    return;
  }

  if (SHELL.includes(url.pathname)) {
    event.respondWith(caches.match(request).then((cached) => cached || fetch(request)));
  }
});
"""
