"""
Site Compiler — Component Emitter

emit(node) → Fragment(html, css, js)

A flat dispatch table, type → renderer. Every fragment leaves here wrapped
in its container:

    <div id="component-{id}" class="component {type}" data-component-id="{id}">
      ...
    </div>

and its CSS is prefixed with the base `#component-{id}` rule (responsive
sizing + the builder's customCSS declarations).

Unknown types render the visible "Unknown component: {type}" fallback.
A renderer that raises is reported as EmitterRenderError; the page compiler
turns that into the same fallback.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from engine.compiler.components import COMPONENTS
from engine.compiler.components.base import escape, unknown_component
from engine.compiler.errors import EmitterRenderError, UnknownComponentType
from engine.compiler.types import CompileWarning, ComponentNode, Fragment

logger = logging.getLogger(__name__)

Renderer = Callable[[ComponentNode], Fragment]

# customCSS is spliced into a declaration block; these would let it escape.
_CSS_BREAKOUT = re.compile(r"[{}<>]")
_CSS_VALUE_BREAKOUT = re.compile(r"[;{}<>]")


class Emitter:
    """Immutable type → renderer table."""

    def __init__(self, table: Mapping[str, Renderer] | None = None):
        self._table: Mapping[str, Renderer] = MappingProxyType(dict(COMPONENTS if table is None else table))

    @property
    def table(self) -> Mapping[str, Renderer]:
        return self._table

    @property
    def types(self) -> tuple[str, ...]:
        return tuple(sorted(self._table))

    def renders(self, component_type: str) -> bool:
        return component_type in self._table

    def with_renderers(self, extra: Mapping[str, Renderer]) -> Emitter:
        """A new emitter with `extra` added over this table."""
        return Emitter({**self._table, **extra})

    def emit(self, node: ComponentNode) -> Fragment:
        try:
            renderer = self._renderer_for(node.type)
        except UnknownComponentType as exc:
            logger.warning("emitter: %s (component %s)", exc, node.id)
            return fallback_fragment(node, CompileWarning(exc.code, str(exc), node.id))

        try:
            inner = renderer(node)
        except Exception as exc:
            raise EmitterRenderError(node.type, node.id, exc) from exc

        return Fragment(
            html=wrap(node, inner.html),
            css=base_css(node) + inner.css,
            js=inner.js,
            warning=inner.warning,
        )

    def _renderer_for(self, component_type: str) -> Renderer:
        renderer = self._table.get(component_type)
        if renderer is None:
            raise UnknownComponentType(component_type)
        return renderer


# ---------------------------------------------------------------------------
# Container + base CSS
# ---------------------------------------------------------------------------


def wrap(node: ComponentNode, inner_html: str) -> str:
    cid = escape(node.id)
    ctype = escape(node.type)
    return "\n".join(
        [
            f'<div id="component-{cid}" class="component {ctype}" data-component-id="{cid}">',
            inner_html.strip("\n"),
            "</div>",
        ]
    )


def fallback_fragment(node: ComponentNode, warning: CompileWarning | None = None) -> Fragment:
    """Container holding the unknown-component marker. Used for unknown and crashed renderers."""
    return Fragment(html=wrap(node, unknown_component(node.type)), css=base_css(node), warning=warning)


def base_css(node: ComponentNode) -> str:
    props = node.props
    lines = [
        f"/* Component: {_CSS_BREAKOUT.sub('', node.type).replace('*/', '')} */",
        f"#component-{node.id} {{",
    ]
    if props.get("responsive") is True:
        lines.append("  display: block;")
        lines.append("  width: 100%;")
        lines.append(f"  max-width: {_css_value(props.get('maxWidth'), '100%')};")
        lines.append(f"  margin: {_css_value(props.get('margin'), '0 auto')};")
        lines.append(f"  padding: {_css_value(props.get('padding'), '0')};")
    custom = props.get("customCSS")
    if isinstance(custom, str) and custom.strip():
        lines.append(f"  {_CSS_BREAKOUT.sub('', custom.strip())}")
    lines.append("}")
    return "\n".join(lines) + "\n"


def _css_value(raw: Any, default: str) -> str:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return f"{raw}px"
    if isinstance(raw, str):
        value = _CSS_VALUE_BREAKOUT.sub("", raw).strip()
        if value:
            return value
    return default


default_emitter = Emitter()


def emit(node: ComponentNode) -> Fragment:
    """Emit with the built-in table."""
    return default_emitter.emit(node)
