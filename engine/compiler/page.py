"""
Site Compiler — Page Compiler

Pure function: (page, website, options?) → GeneratedPage
No IO. Deterministic: same input → same output, byte for byte.

Steps:
  1. parse page.content → ComponentNode list (bad JSON → zero components)
  2. per node, in document order: classify, emit, collect html/css/js,
     island records and asset hints
  3. SEO block with fallbacks, fixed critical CSS
  4. assemble the HTML document (head, skip-link, main, client globals)

Nothing in this module raises for bad content. Recovered problems end up in
GeneratedPage.warnings and in the log.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from engine.compiler.classifier import default_classifier
from engine.compiler.components.base import escape
from engine.compiler.emitter import Emitter, default_emitter, fallback_fragment
from engine.compiler.errors import ContentParseError, EmitterRenderError
from engine.compiler.props import safe_url
from engine.compiler.types import (
    SEO,
    CompileOptions,
    CompileWarning,
    ComponentNode,
    DynamicComponentRecord,
    Fragment,
    GeneratedPage,
    Page,
    PerformanceHints,
    Website,
)

logger = logging.getLogger(__name__)

# Deeper content is rejected; embedding props as JSON recurses once per level.
MAX_CONTENT_DEPTH = 64

# Above-the-fold baseline, identical for every page. Not derived from the
# component stylesheet, which loads deferred.
CRITICAL_CSS = (
    "* { box-sizing: border-box; } "
    "body { margin: 0; font-family: system-ui, -apple-system, sans-serif; } "
    ".skip-link { position: absolute; top: -40px; left: 6px; background: #000; color: #fff; "
    "padding: 8px; text-decoration: none; z-index: 1000; } "
    ".skip-link:focus { top: 6px; } "
    "#app { min-height: 100vh; } "
    "main { min-height: 100vh; } "
    ".hero-section { min-height: 60vh; display: flex; align-items: center; justify-content: center; } "
    ".navigation-container { position: sticky; top: 0; z-index: 100; }"
)

SERVICE_WORKER_REGISTRATION = """<script>
  if ('serviceWorker' in navigator) {
    window.addEventListener('load', function () {
      navigator.serviceWorker.register('/sw.js').catch(function (error) {
        console.log('SW registration failed', error);
      });
    });
  }
</script>"""


@dataclass
class PageContent:
    components: list[ComponentNode] = field(default_factory=list)
    og_image: str | None = None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compile_page(page: Page, website: Website, options: CompileOptions | None = None) -> GeneratedPage:
    """
    Compile one page into a complete HTML document plus its CSS and JS.
    Pure function. No side effects. No IO.
    """
    opts = options or CompileOptions()
    classifier = opts.classifier or default_classifier
    emitter = opts.emitter or default_emitter
    warnings: list[CompileWarning] = []

    try:
        content = parse_content(page.content)
    except ContentParseError as exc:
        logger.warning("page %s: %s; compiling with no components", page.id, exc)
        warnings.append(CompileWarning(exc.code, str(exc)))
        content = PageContent()

    html_parts: list[str] = []
    css_parts: list[str] = []
    js_parts: list[str] = []
    islands: list[DynamicComponentRecord] = []
    preload: list[str] = []
    defer: list[str] = []

    for node in content.components:
        record = classifier.classify(node.type)
        fragment = _emit(emitter, node)
        if fragment.warning is not None:
            warnings.append(fragment.warning)

        html_parts.append(fragment.html)
        if fragment.css:
            css_parts.append(fragment.css)
        if fragment.js:
            js_parts.append(_component_script(node, fragment.js))

        if record.is_dynamic:
            islands.append(
                DynamicComponentRecord(
                    id=node.id,
                    type=node.type,
                    props=dict(node.props),
                    api_endpoint=record.api_endpoint,
                    cache_strategy=record.cache_strategy,
                    hydration_strategy=record.hydration_strategy,
                )
            )

        _merge_hints(preload, classifier.preload_assets(node))
        _merge_hints(defer, classifier.defer_assets(node))

    seo = build_seo(page, website, opts, content.og_image)
    performance = PerformanceHints(
        critical_css=CRITICAL_CSS,
        preload_assets=tuple(preload),
        defer_assets=tuple(defer),
    )

    document = render_document(
        page=page,
        website=website,
        options=opts,
        seo=seo,
        performance=performance,
        body="\n".join(html_parts),
        islands=islands,
    )

    return GeneratedPage(
        page_id=page.id,
        path=page.path,
        html=document,
        css="\n".join(css_parts),
        js=_page_script(js_parts),
        dynamic_components=tuple(islands),
        seo=seo,
        performance=performance,
        warnings=tuple(warnings),
    )


def parse_content(content: str | None) -> PageContent:
    """
    Parse page.content: '{"components": [...], "ogImage"?: "..."}'.
    Empty content is an empty page. Raises ContentParseError otherwise.
    """
    if content is None or not content.strip():
        return PageContent()

    try:
        data = json.loads(content)
    except (TypeError, ValueError, RecursionError) as exc:
        raise ContentParseError(f"page content is not valid JSON: {exc}") from exc

    if _too_deep(data, MAX_CONTENT_DEPTH):
        raise ContentParseError(f"page content is nested deeper than {MAX_CONTENT_DEPTH} levels")

    if not isinstance(data, dict):
        raise ContentParseError("page content must be a JSON object")

    raw_components = data.get("components", [])
    if not isinstance(raw_components, list):
        raise ContentParseError("page content 'components' must be a list")

    nodes: list[ComponentNode] = []
    seen: dict[str, int] = {}
    for index, raw in enumerate(raw_components):
        if not isinstance(raw, dict):
            logger.warning("skipping component %d: expected an object, got %s", index, type(raw).__name__)
            continue
        node = ComponentNode.from_dict(raw, index)
        node.id = _unique_id(node.id, seen)
        nodes.append(node)

    og_image = data.get("ogImage")
    og_image = safe_url(og_image) if isinstance(og_image, str) and og_image.strip() else None
    return PageContent(components=nodes, og_image=og_image)


def build_seo(page: Page, website: Website, options: CompileOptions, og_image: str | None = None) -> SEO:
    title = page.meta_title or page.name or website.name or "Untitled Page"
    description = page.meta_description or website.description or ""
    keywords = tuple(k.strip() for k in (page.meta_keywords or "").split(",") if k.strip())
    return SEO(
        title=title,
        description=description,
        keywords=keywords,
        canonical=f"{options.site_url}{page.path}",
        og_image=og_image,
    )


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def render_document(
    page: Page,
    website: Website,
    options: CompileOptions,
    seo: SEO,
    performance: PerformanceHints,
    body: str,
    islands: list[DynamicComponentRecord],
) -> str:
    lang = escape(website.language or "en")
    title = escape(seo.title)
    description = escape(seo.description)
    canonical = escape(seo.canonical)
    site_name = escape(website.name or seo.title)
    page_id = escape(page.id)
    asset_id = page.asset_id

    parts: list[str] = []
    parts.append("<!DOCTYPE html>")
    parts.append(f'<html lang="{lang}" dir="ltr">')
    parts.append("<head>")
    parts.append('<meta charset="UTF-8">')
    parts.append('<meta name="viewport" content="width=device-width, initial-scale=1.0">')
    parts.append('<meta http-equiv="X-UA-Compatible" content="IE=edge">')

    parts.append(f"<title>{title}</title>")
    parts.append(f'<meta name="description" content="{description}">')
    if seo.keywords:
        parts.append(f'<meta name="keywords" content="{escape(", ".join(seo.keywords))}">')

    parts.append(f'<meta property="og:title" content="{title}">')
    parts.append(f'<meta property="og:description" content="{description}">')
    parts.append('<meta property="og:type" content="website">')
    parts.append(f'<meta property="og:url" content="{canonical}">')
    if seo.og_image:
        parts.append(f'<meta property="og:image" content="{escape(seo.og_image)}">')

    parts.append('<meta name="twitter:card" content="summary_large_image">')
    parts.append(f'<meta name="twitter:title" content="{title}">')
    parts.append(f'<meta name="twitter:description" content="{description}">')
    if seo.og_image:
        parts.append(f'<meta name="twitter:image" content="{escape(seo.og_image)}">')

    parts.append(f'<link rel="canonical" href="{canonical}">')

    parts.append(f'<meta name="theme-color" content="{escape(options.theme_color)}">')
    parts.append('<meta name="apple-mobile-web-app-capable" content="yes">')
    parts.append('<meta name="apple-mobile-web-app-status-bar-style" content="default">')
    parts.append(f'<meta name="apple-mobile-web-app-title" content="{site_name}">')

    parts.append(f"<style>{performance.critical_css}</style>")

    parts.append('<link rel="preload" href="/css/global.css" as="style">')
    parts.append('<link rel="preload" href="/js/global.js" as="script">')
    for asset in performance.preload_assets:
        parts.append(_preload_link(asset))

    parts.append("<link rel=\"stylesheet\" href=\"/css/global.css\" media=\"print\" onload=\"this.media='all'\">")
    parts.append(
        f"<link rel=\"stylesheet\" href=\"/css/page-{asset_id}.css\" media=\"print\" onload=\"this.media='all'\">"
    )
    parts.append("<noscript>")
    parts.append('<link rel="stylesheet" href="/css/global.css">')
    parts.append(f'<link rel="stylesheet" href="/css/page-{asset_id}.css">')
    parts.append("</noscript>")

    parts.append('<link rel="icon" type="image/x-icon" href="/favicon.ico">')
    parts.append('<link rel="apple-touch-icon" href="/apple-touch-icon.png">')
    parts.append('<link rel="manifest" href="/manifest.json">')
    parts.append("</head>")

    parts.append("<body>")
    parts.append('<a href="#main-content" class="skip-link">Skip to main content</a>')
    parts.append(f'<div id="app" data-page-id="{page_id}" data-page-slug="{escape(page.path)}">')
    parts.append('<main id="main-content" role="main">')
    if body:
        parts.append(body)
    parts.append("</main>")
    parts.append("</div>")

    parts.append(SERVICE_WORKER_REGISTRATION)

    site_config = {
        "id": website.id,
        "name": website.name or "",
        "language": website.language or "en",
        "theme": website.theme,
    }
    parts.append("<script>")
    parts.append(f"window.__DYNAMIC_COMPONENTS__ = {_script_json([r.to_dict() for r in islands])};")
    parts.append(f"window.__API_BASE_URL__ = {_script_json(options.api_url)};")
    parts.append(f"window.__SITE_CONFIG__ = {_script_json(site_config)};")
    parts.append("</script>")

    parts.append('<script src="/js/global.js" defer></script>')
    parts.append(f'<script src="/js/page-{asset_id}.js" defer></script>')

    for asset in performance.defer_assets:
        parts.append(f'<link rel="prefetch" href="{escape(asset)}">')

    parts.append("</body>")
    parts.append("</html>")
    return "\n".join(parts) + "\n"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit(emitter: Emitter, node: ComponentNode) -> Fragment:
    try:
        return emitter.emit(node)
    except EmitterRenderError as exc:
        logger.exception("page compiler: %s", exc)
        return fallback_fragment(node, CompileWarning(exc.code, str(exc), node.id))


def _too_deep(value: Any, limit: int) -> bool:
    stack = [(value, 1)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, dict):
            children = current.values()
        elif isinstance(current, list):
            children = current
        else:
            continue
        if depth > limit:
            return True
        stack.extend((child, depth + 1) for child in children)
    return False


def _unique_id(component_id: str, seen: dict[str, int]) -> str:
    """Repeated ids get -2, -3, ... in document order."""
    count = seen.get(component_id, 0) + 1
    seen[component_id] = count
    if count == 1:
        return component_id
    candidate = f"{component_id}-{count}"
    while candidate in seen:
        count += 1
        candidate = f"{component_id}-{count}"
    seen[candidate] = 1
    return candidate


def _merge_hints(target: list[str], hints: list[str]) -> None:
    for hint in hints:
        url = safe_url(hint)
        if url != "#" and url not in target:
            target.append(url)


def _preload_link(asset: str) -> str:
    href = escape(asset)
    if asset.endswith(".woff2"):
        return f'<link rel="preload" href="{href}" as="font" type="font/woff2" crossorigin>'
    return f'<link rel="preload" href="{href}" as="image">'


def _component_script(node: ComponentNode, script: str) -> str:
    """Run a component's behavior once its container exists, isolated from the others."""
    body = "\n".join(f"    {line}" if line.strip() else "" for line in script.strip("\n").splitlines())
    return "\n".join(
        [
            f"  /* {node.type.replace('*/', '')} ({node.id}) */",
            "  onReady(function () {",
            f"    var el = document.getElementById('component-{node.id}');",
            "    if (!el) return;",
            "    try {",
            body,
            "    } catch (error) {",
            f"      console.error('Component {node.id} script failed:', error);",
            "    }",
            "  });",
        ]
    )


def _page_script(component_scripts: list[str]) -> str:
    parts = [
        "(function () {",
        "  function onReady(fn) {",
        "    if (document.readyState === 'loading') {",
        "      document.addEventListener('DOMContentLoaded', fn);",
        "    } else {",
        "      fn();",
        "    }",
        "  }",
    ]
    parts.extend(component_scripts)
    parts.append("})();")
    return "\n".join(parts) + "\n"


def _script_json(value: Any) -> str:
    """JSON safe to inline in a <script> element."""
    return json.dumps(value, sort_keys=True, ensure_ascii=False).replace("</", "<\\/")
