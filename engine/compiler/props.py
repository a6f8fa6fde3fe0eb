"""
Site Compiler — Typed component props

The builder stores props as untyped JSON. Each component type declares a
dataclass whose fields name the JSON key, a coercion kind and a default:

    @dataclass
    class HeroProps(ComponentProps):
        title: str = prop("title", "Welcome")
        button_link: str = prop("buttonLink", "#", kind="url")

`HeroProps.from_props(raw)` never raises. Missing, empty or wrong-typed
values fall back to the field default (JS `value || default` semantics),
so every emitter sees a fully-populated, sanitized props object.

Kinds:
  text     str; numbers are stringified; "" → default
  url      text, then unsafe schemes (javascript:, data:, ...) → "#"
  number   int/float or numeric string
  bool     bool, 0/1, "true"/"false"
  choice   text restricted to metadata["choices"]
  list     list of dicts, each coerced through metadata["item"]
  strings  list of scalars → list[str], empties dropped
  links    {platform: url} mapping → [{"platform", "url"}]
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import MISSING, Field, asdict, dataclass, field, fields
from typing import Any, TypeVar

P = TypeVar("P", bound="ComponentProps")

_SAFE_SCHEMES = {"http", "https", "mailto", "tel"}
_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*):")
_CONTROL_RE = re.compile(r"[\s\x00-\x1f]+")
_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def prop(
    key: str,
    default: Any = "",
    *,
    kind: str = "text",
    item: type[ComponentProps] | None = None,
    choices: tuple[str, ...] = (),
) -> Any:
    """Declare a prop field. List defaults get a fresh list per instance."""
    metadata = {"key": key, "kind": kind, "item": item, "choices": choices}
    if isinstance(default, list):
        return field(default_factory=list, metadata=metadata)
    return field(default=default, metadata=metadata)


@dataclass
class ComponentProps:
    """Base for per-type prop models."""

    @classmethod
    def from_props(cls: type[P], props: Any) -> P:
        source = props if isinstance(props, Mapping) else {}
        values = {f.name: coerce(source.get(f.metadata.get("key", f.name)), f) for f in fields(cls)}
        return cls(**values)

    def context(self) -> dict[str, Any]:
        """Template context. Nested item dataclasses become plain dicts."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def coerce(raw: Any, f: Field) -> Any:
    kind = f.metadata.get("kind", "text")
    default = _default_of(f)
    if raw is None:
        return default

    if kind == "text":
        text = _as_text(raw)
        return text if text else default

    if kind == "url":
        text = _as_text(raw)
        return safe_url(text) if text else default

    if kind == "choice":
        text = _as_text(raw)
        return text if text in f.metadata.get("choices", ()) else default

    if kind == "number":
        number = _as_number(raw)
        return default if number is None else number

    if kind == "bool":
        return _as_bool(raw, default)

    if kind == "list":
        item_cls = f.metadata.get("item")
        if not isinstance(raw, list) or item_cls is None:
            return default
        return [item_cls.from_props(entry) for entry in raw if isinstance(entry, Mapping)]

    if kind == "strings":
        if not isinstance(raw, list):
            return default
        return [text for text in (_as_text(entry) for entry in raw) if text]

    if kind == "links":
        if not isinstance(raw, Mapping):
            return default
        return [
            {"platform": str(platform), "url": safe_url(url)}
            for platform, url in raw.items()
            if isinstance(url, str) and url.strip()
        ]

    return default


def safe_url(value: str) -> str:
    """Pass relative and http(s)/mailto/tel URLs through; anything else becomes '#'."""
    url = value.strip()
    compact = _CONTROL_RE.sub("", url).lower()
    match = _SCHEME_RE.match(compact)
    if match and match.group(1) not in _SAFE_SCHEMES:
        return "#"
    # Quotes would end url('...') and attribute values early.
    return url.replace("'", "%27").replace('"', "%22").replace("\\", "%5C")


def _default_of(f: Field) -> Any:
    if f.default is not MISSING:
        return f.default
    if f.default_factory is not MISSING:
        return f.default_factory()
    return None


def _as_text(raw: Any) -> str:
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    if isinstance(raw, (str, int, float)):
        return str(raw).strip()
    return ""


def _as_number(raw: Any) -> int | float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return raw if math.isfinite(raw) else None
    if isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def _as_bool(raw: Any, default: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return default
