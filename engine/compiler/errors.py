"""
Site Compiler — error taxonomy.

None of these escape the compiler. They are raised at the point of failure
and recovered at the page-compiler boundary, where they become a
CompileWarning plus (for component failures) a visible placeholder.
"""

from __future__ import annotations


class CompileError(Exception):
    """Base class for recoverable compile problems."""

    code = "compile_error"


class ContentParseError(CompileError):
    """Page content is not valid JSON or not shaped as {components: [...]}."""

    code = "content_parse_error"


class UnknownComponentType(CompileError):
    """A component type has no entry in the emitter table."""

    code = "unknown_component"

    def __init__(self, component_type: str):
        super().__init__(f"Unknown component: {component_type}")
        self.component_type = component_type


class EmitterRenderError(CompileError):
    """An emitter raised while rendering a component."""

    code = "emitter_error"

    def __init__(self, component_type: str, component_id: str, cause: BaseException):
        super().__init__(f"{component_type} ({component_id}) failed to render: {cause}")
        self.component_type = component_type
        self.component_id = component_id
        self.cause = cause
