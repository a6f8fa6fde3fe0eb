"""
Built-in component definitions, keyed by component type.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from engine.compiler.components import basic, interactive, listings
from engine.compiler.components.base import ComponentDefinition

COMPONENTS: Mapping[str, ComponentDefinition] = MappingProxyType(
    {d.type: d for d in (*basic.DEFINITIONS, *listings.DEFINITIONS, *interactive.DEFINITIONS)}
)

__all__ = ["COMPONENTS", "ComponentDefinition"]
