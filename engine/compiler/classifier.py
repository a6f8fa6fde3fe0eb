"""
Site Compiler — Component Classifier

Static lookup: component type → ClassificationRecord (is it an island, where
its data lives, how cacheable it is, when to hydrate it), plus advisory
asset hints for the document head/body.

Dynamism is opt-in: any type missing from the table classifies as a plain
static component and is never added to the island manifest.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from engine.compiler.types import ClassificationRecord, ComponentNode

DEFAULT_RECORD = ClassificationRecord()

# Gallery images past this many are deferred; the first ones are likely above the fold.
EAGER_GALLERY_IMAGES = 3

CLASSIFICATION_TABLE: Mapping[str, ClassificationRecord] = MappingProxyType(
    {
        "ecommerce-product": ClassificationRecord(True, "/api/products", "dynamic", "lazy"),
        "ecommerce-cart": ClassificationRecord(True, "/api/cart", "dynamic", "immediate"),
        "blog-list": ClassificationRecord(True, "/api/blog/posts", "hybrid", "viewport"),
        "newsletter": ClassificationRecord(True, "/api/newsletter", "hybrid", "viewport"),
        "testimonials": ClassificationRecord(True, "/api/testimonials", "hybrid", "lazy"),
        "stats": ClassificationRecord(True, "/api/stats", "dynamic", "lazy"),
        "contact": ClassificationRecord(True, "/api/contact", "static", "immediate"),
        "countdown": ClassificationRecord(True, "/api/countdown", "dynamic", "immediate"),
    }
)


class Classifier:
    """Immutable view over a classification table."""

    def __init__(self, table: Mapping[str, ClassificationRecord] | None = None):
        self._table: Mapping[str, ClassificationRecord] = MappingProxyType(
            dict(CLASSIFICATION_TABLE if table is None else table)
        )

    @property
    def table(self) -> Mapping[str, ClassificationRecord]:
        return self._table

    def classify(self, component_type: str) -> ClassificationRecord:
        return self._table.get(component_type, DEFAULT_RECORD)

    def is_dynamic(self, component_type: str) -> bool:
        return self.classify(component_type).is_dynamic

    def preload_assets(self, node: ComponentNode) -> list[str]:
        """Assets worth a <link rel="preload">: hero backgrounds and custom fonts."""
        assets: list[str] = []
        props = node.props

        if node.type == "hero":
            background = _string(props.get("backgroundImage"))
            if background:
                assets.append(background)

        font = _string(props.get("fontFamily"))
        if font:
            assets.append(f"/fonts/{font}.woff2")

        return assets

    def defer_assets(self, node: ComponentNode) -> list[str]:
        """Assets that can wait: gallery images beyond the first few."""
        if node.type != "gallery":
            return []
        images = node.props.get("images")
        if not isinstance(images, list):
            return []
        sources = [_string(img.get("src")) for img in images if isinstance(img, dict)]
        return [src for src in sources[EAGER_GALLERY_IMAGES:] if src]


def _string(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


default_classifier = Classifier()


def classify(component_type: str) -> ClassificationRecord:
    """Classify against the built-in table."""
    return default_classifier.classify(component_type)
