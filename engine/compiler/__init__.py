"""
Site Compiler — the pure engine.

Five components:
  classifier  — component type → island metadata + asset hints
  emitter     — component type → markup/CSS/JS fragment (dispatch table)
  page        — (page, website) → GeneratedPage  (pure, deterministic)
  site        — website → GeneratedSite (pages + manifest, sitemap, robots)
  hydration   — the client runtime that re-activates dynamic islands
"""

from engine.compiler.classifier import Classifier, classify
from engine.compiler.emitter import Emitter, emit
from engine.compiler.page import compile_page, parse_content
from engine.compiler.site import compile_site, site_files
from engine.compiler.types import (
    ClassificationRecord,
    CompileOptions,
    ComponentNode,
    DynamicComponentRecord,
    GeneratedPage,
    GeneratedSite,
    Page,
    Website,
)

__all__ = [
    "classify",
    "Classifier",
    "emit",
    "Emitter",
    "compile_page",
    "parse_content",
    "compile_site",
    "site_files",
    "ClassificationRecord",
    "CompileOptions",
    "ComponentNode",
    "DynamicComponentRecord",
    "GeneratedPage",
    "GeneratedSite",
    "Page",
    "Website",
]
