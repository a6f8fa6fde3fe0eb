"""
Site Compiler — Shared Types

Data classes used across the classifier, emitter, page and site compilers.
Inputs (Website, Page, ComponentNode) mirror what the page store hands us;
outputs (GeneratedPage, GeneratedSite) are frozen once produced.

Wire names are camelCase (the builder UI and the client runtime speak JSON),
Python attributes are snake_case. `to_dict` translates; the backend models
build Website and Page, and ComponentNode.from_dict reads each stored entry.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from engine.compiler.classifier import Classifier
    from engine.compiler.emitter import Emitter

CacheStrategy = Literal["static", "dynamic", "hybrid"]
HydrationStrategy = Literal["immediate", "lazy", "viewport"]

CACHE_STRATEGIES: set[str] = {"static", "dynamic", "hybrid"}
HYDRATION_STRATEGIES: set[str] = {"immediate", "lazy", "viewport"}

# Component ids double as DOM ids, CSS selectors and hydration keys.
_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")


# ---------------------------------------------------------------------------
# Inputs (read-only, owned by the page store)
# ---------------------------------------------------------------------------


@dataclass
class Page:
    id: str
    name: str | None
    slug: str | None
    content: str = ""  # serialized {"components": [...]}
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None

    @property
    def path(self) -> str:
        return page_path(self.slug)

    @property
    def asset_id(self) -> str:
        """Page id as used in /css/page-{id}.css and /js/page-{id}.js."""
        return page_asset_id(self.id)


@dataclass
class Website:
    id: str
    name: str | None
    description: str | None = None
    language: str | None = "en"
    pages: list[Page] = field(default_factory=list)
    theme: str = "light"


@dataclass
class ComponentNode:
    """One entry of a page's component list."""

    id: str
    type: str
    props: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any], index: int = 0) -> ComponentNode:
        props = d.get("props")
        return cls(
            id=normalize_component_id(d.get("id"), index),
            type=str(d.get("type") or ""),
            props=props if isinstance(props, dict) else {},
        )


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassificationRecord:
    """
    Compiled-in metadata for one component type.
    Invariant: is_dynamic is False ⇒ api_endpoint is None.
    """

    is_dynamic: bool = False
    api_endpoint: str | None = None
    cache_strategy: CacheStrategy = "static"
    hydration_strategy: HydrationStrategy = "lazy"

    def __post_init__(self) -> None:
        if not self.is_dynamic and self.api_endpoint is not None:
            raise ValueError("static component types cannot declare an api_endpoint")
        if self.cache_strategy not in CACHE_STRATEGIES:
            raise ValueError(f"unknown cache strategy: {self.cache_strategy}")
        if self.hydration_strategy not in HYDRATION_STRATEGIES:
            raise ValueError(f"unknown hydration strategy: {self.hydration_strategy}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "isDynamic": self.is_dynamic,
            "apiEndpoint": self.api_endpoint,
            "cacheStrategy": self.cache_strategy,
            "hydrationStrategy": self.hydration_strategy,
        }


@dataclass(frozen=True)
class DynamicComponentRecord:
    """One island, embedded in the page as window.__DYNAMIC_COMPONENTS__."""

    id: str
    type: str
    props: dict[str, Any]
    api_endpoint: str | None
    cache_strategy: CacheStrategy
    hydration_strategy: HydrationStrategy

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "props": self.props,
            "apiEndpoint": self.api_endpoint,
            "cacheStrategy": self.cache_strategy,
            "hydrationStrategy": self.hydration_strategy,
        }


# ---------------------------------------------------------------------------
# Emitter output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Fragment:
    """What an emitter returns for one component."""

    html: str
    css: str = ""
    js: str | None = None
    warning: CompileWarning | None = None


@dataclass(frozen=True)
class CompileWarning:
    """A problem the compiler recovered from."""

    code: str
    message: str
    component_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.component_id is not None:
            d["componentId"] = self.component_id
        return d


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SEO:
    title: str
    description: str
    keywords: tuple[str, ...]
    canonical: str
    og_image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "keywords": list(self.keywords),
            "canonical": self.canonical,
        }
        if self.og_image:
            d["ogImage"] = self.og_image
        return d


@dataclass(frozen=True)
class PerformanceHints:
    critical_css: str
    preload_assets: tuple[str, ...] = ()
    defer_assets: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "criticalCSS": self.critical_css,
            "preloadAssets": list(self.preload_assets),
            "deferAssets": list(self.defer_assets),
        }


@dataclass(frozen=True)
class GeneratedPage:
    page_id: str
    path: str
    html: str
    css: str
    js: str
    dynamic_components: tuple[DynamicComponentRecord, ...]
    seo: SEO
    performance: PerformanceHints
    warnings: tuple[CompileWarning, ...] = ()

    @property
    def asset_id(self) -> str:
        return page_asset_id(self.page_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pageId": self.page_id,
            "path": self.path,
            "html": self.html,
            "css": self.css,
            "js": self.js,
            "dynamicComponents": [c.to_dict() for c in self.dynamic_components],
            "seo": self.seo.to_dict(),
            "performance": self.performance.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class SitemapEntry:
    url: str
    lastmod: str  # ISO 8601 UTC
    priority: float

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "lastmod": self.lastmod, "priority": self.priority}


@dataclass(frozen=True)
class SiteFile:
    """One deployable file."""

    path: str
    content: str
    content_type: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "content": self.content, "type": self.content_type}


@dataclass(frozen=True)
class GeneratedSite:
    website_id: str
    pages: tuple[GeneratedPage, ...]
    global_css: str
    global_js: str
    service_worker: str
    assets: tuple[SiteFile, ...]
    manifest: dict[str, Any]
    sitemap: tuple[SitemapEntry, ...]
    robots: str

    def page_for(self, path: str) -> GeneratedPage | None:
        wanted = page_path(path)
        return next((p for p in self.pages if p.path == wanted), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "websiteId": self.website_id,
            "pages": [p.to_dict() for p in self.pages],
            "globalCSS": self.global_css,
            "globalJS": self.global_js,
            "assets": [a.to_dict() for a in self.assets],
            "manifest": self.manifest,
            "sitemap": [s.to_dict() for s in self.sitemap],
            "robots": self.robots,
        }


@dataclass
class CompileOptions:
    """
    Everything the compiler needs beyond (page, website).
    classifier / emitter default to the built-in tables when None.
    """

    base_url: str = "http://localhost:8000"
    api_base_url: str | None = None  # defaults to base_url
    classifier: Classifier | None = None
    emitter: Emitter | None = None
    theme_color: str = "#3b82f6"
    background_color: str = "#ffffff"
    max_workers: int = 1

    @property
    def site_url(self) -> str:
        return self.base_url.rstrip("/")

    @property
    def api_url(self) -> str:
        return (self.api_base_url or self.base_url).rstrip("/")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def page_path(slug: str | None) -> str:
    """
    Deployed path for a page slug. Empty slug is the root.

    Examples:
      None      → "/"
      "about"   → "/about"
      "/pricing" → "/pricing"
    """
    slug = (slug or "").strip()
    if not slug or slug == "/":
        return "/"
    return slug if slug.startswith("/") else f"/{slug}"


def normalize_component_id(raw: Any, index: int) -> str:
    """Make a builder id safe as DOM id and CSS selector; fall back to c{index}."""
    text = "" if raw is None else str(raw).strip()
    if not text:
        return f"c{index}"
    return _UNSAFE_ID_CHARS.sub("-", text)


def page_asset_id(page_id: str) -> str:
    """
    Page id as it appears in asset file names.
    Ids that had to be rewritten carry a digest of the raw id, so "a b" and
    "a-b" never share a file.
    """
    safe = _UNSAFE_ID_CHARS.sub("-", page_id)
    if safe and safe == page_id:
        return safe
    digest = hashlib.sha1(page_id.encode("utf-8"), usedforsecurity=False).hexdigest()[:8]
    return f"{safe or 'page'}-{digest}"
