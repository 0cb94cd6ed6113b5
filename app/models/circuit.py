"""
CircuitModel - The circuit snapshot handed to the netlist compiler.

A circuit is an ordered list of components. Order matters: node indices are
allocated in component order, so two snapshots with the same component order
always compile to the same node map.
"""

from dataclasses import dataclass, field
from typing import Iterator

from .component import ComponentData, ComponentKind


@dataclass
class CircuitModel:
    """Ordered collection of components plus lookup helpers."""

    components: list[ComponentData] = field(default_factory=list)

    def add_component(self, component: ComponentData) -> None:
        self.components.append(component)

    def get_component(self, component_id: str):
        for comp in self.components:
            if comp.component_id == component_id:
                return comp
        return None

    def of_kind(self, kind: ComponentKind) -> list[ComponentData]:
        return [c for c in self.components if c.kind is kind]

    def net_names(self) -> list[str]:
        """All non-blank raw net names, first-seen order, without duplicates."""
        seen = []
        for comp in self.components:
            for net in comp.nets():
                if net and net.strip() and net not in seen:
                    seen.append(net)
        return seen

    def __iter__(self) -> Iterator[ComponentData]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)

    def to_dict(self) -> dict:
        return {"components": [c.to_dict() for c in self.components]}

    @classmethod
    def from_dict(cls, data: dict) -> "CircuitModel":
        return cls(components=[ComponentData.from_dict(c) for c in data.get("components", [])])
