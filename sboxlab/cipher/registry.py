from __future__ import annotations

from typing import Dict

from .components import Component, builtin_components


class ComponentRegistry:
    def __init__(self):
        self._components: Dict[str, Component] = builtin_components()

    def get(self, component_id: str) -> Component:
        if component_id not in self._components:
            raise KeyError(f"Unknown component_id: {component_id}")
        return self._components[component_id]

    def exists(self, component_id: str) -> bool:
        return component_id in self._components
