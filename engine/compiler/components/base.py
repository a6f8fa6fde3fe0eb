"""
Component definitions — shared machinery.

A ComponentDefinition bundles everything one component type needs:
  props    typed prop model (engine.compiler.props)
  html     Mustache markup, rendered with chevron ({{var}} is HTML-escaped)
  css      Mustache stylesheet; {{scope}} is the container selector
  script   optional behavior JS; runs with `el` bound to the container
  required prop fields that must be non-empty, else a placeholder renders
  context  optional hook adding derived values (indexes, active flags)

Calling a definition with a ComponentNode returns the inner Fragment. The
Emitter adds the container div and the base rule.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from html import escape as _html_escape
from typing import Any

import chevron

from engine.compiler.props import ComponentProps
from engine.compiler.types import CompileWarning, ComponentNode, Fragment

ContextHook = Callable[[Any], dict[str, Any]]


@dataclass(frozen=True)
class ComponentDefinition:
    type: str
    props: type[ComponentProps]
    html: str
    css: str = ""
    script: str | None = None
    required: tuple[str, ...] = ()
    context: ContextHook | None = None

    def __call__(self, node: ComponentNode) -> Fragment:
        props = self.props.from_props(node.props)

        missing = [name for name in self.required if not getattr(props, name)]
        if missing:
            label = ", ".join(missing)
            return Fragment(
                html=placeholder(f"{self.type}: missing {label}"),
                warning=CompileWarning(
                    code="missing_required_prop",
                    message=f"{self.type} component is missing required prop(s): {label}",
                    component_id=node.id,
                ),
            )

        ctx = self.context(props) if self.context else props.context()
        ctx.setdefault("component_id", node.id)
        html = chevron.render(self.html, ctx, partials_dict=PARTIALS)
        css = chevron.render(self.css, {"scope": f"#component-{node.id}"}) if self.css else ""
        return Fragment(html=html, css=css, js=self.script)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def escape(text: str) -> str:
    """HTML-escape user content."""
    return _html_escape(str(text), quote=True)


def placeholder(message: str) -> str:
    """Visible marker for a component that could not render."""
    return f'<div class="component-placeholder" role="note">{escape(message)}</div>'


def unknown_component(component_type: str) -> str:
    return f'<div class="unknown-component">Unknown component: {escape(component_type)}</div>'


def indexed(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Add position data Mustache can't compute: index, first, side (left/right)."""
    return [
        {**item, "index": i, "first": i == 0, "side": "left" if i % 2 == 0 else "right"}
        for i, item in enumerate(items)
    ]


def with_indexes(*list_fields: str) -> ContextHook:
    """Context hook that runs `indexed` over the named list fields."""

    def hook(props: ComponentProps) -> dict[str, Any]:
        ctx = props.context()
        for name in list_fields:
            ctx[name] = indexed(ctx.get(name, []))
        return ctx

    return hook


# Shared partials, referenced as {{> name}} from any template.
FORM_PARTIAL = """
<form class="contact-form" data-form-id="{{form_id}}">
  <div class="form-group">
    <label for="{{component_id}}-name">Name</label>
    <input type="text" id="{{component_id}}-name" name="name" required>
  </div>
  <div class="form-group">
    <label for="{{component_id}}-email">Email</label>
    <input type="email" id="{{component_id}}-email" name="email" required>
  </div>
  <div class="form-group">
    <label for="{{component_id}}-message">Message</label>
    <textarea id="{{component_id}}-message" name="message" rows="5" required></textarea>
  </div>
  <button type="submit" class="submit-button">{{submit_text}}</button>
  <p class="form-status" role="status" aria-live="polite"></p>
</form>
"""

PARTIALS: dict[str, str] = {"form": FORM_PARTIAL}

FORM_CSS = """
{{scope}} .contact-form { max-width: 600px; margin: 0 auto; }
{{scope}} .form-group { margin-bottom: 20px; }
{{scope}} .form-group label { display: block; margin-bottom: 5px; font-weight: bold; }
{{scope}} .form-group input,
{{scope}} .form-group textarea {
  width: 100%;
  padding: 10px;
  border: 1px solid #ddd;
  border-radius: 4px;
  font-size: 16px;
}
{{scope}} .form-group input:focus,
{{scope}} .form-group textarea:focus {
  outline: none;
  border-color: #3498db;
  box-shadow: 0 0 5px rgba(52, 152, 219, 0.3);
}
{{scope}} .submit-button {
  background-color: #3498db;
  color: white;
  padding: 12px 30px;
  border: none;
  border-radius: 4px;
  cursor: pointer;
  font-size: 16px;
}
{{scope}} .submit-button:hover { background-color: #2980b9; }
"""

# Posts the form to /api/contact through the global API helper.
FORM_SCRIPT = """
var form = el.querySelector('.contact-form');
if (form) {
  var status = form.querySelector('.form-status');
  form.addEventListener('submit', function (e) {
    e.preventDefault();
    var data = Object.fromEntries(new FormData(form));
    window.API.post('/api/contact', data)
      .then(function () {
        if (status) status.textContent = 'Message sent successfully!';
        form.reset();
      })
      .catch(function () {
        if (status) status.textContent = 'Failed to send message. Please try again.';
      });
  });
}
"""
