"""
simulation/junction_resolver.py

Breadboard junction semantics: every net wired to a junction/splitter is the
same electrical point, so all of them must resolve to one node index.
"""

import logging

from models.component import ComponentData

from .nets import GROUND_NET, normalize_net

logger = logging.getLogger(__name__)


class JunctionConflictError(ValueError):
    """A junction would merge nets that earlier devices already numbered apart."""

    def __init__(self, junction_ref: str, nodes: dict[str, int]):
        self.junction_ref = junction_ref
        self.nodes = dict(nodes)
        detail = ", ".join(f"{net}=node {index}" for net, index in self.nodes.items())
        super().__init__(
            f"Junction {junction_ref} joins nets already emitted on different nodes ({detail}); "
            f"place the junction before the devices that use these nets"
        )


class JunctionResolver:
    """Merges the nets of junction components through a shared ``NodeAllocator``."""

    def __init__(self, allocator):
        self.allocator = allocator

    @staticmethod
    def junction_nets(component: ComponentData) -> list[str]:
        """Normalised, non-ground, de-duplicated nets in pin declaration order."""
        nets = []
        for raw in component.nets():
            name = normalize_net(raw)
            if name and name != GROUND_NET and name not in nets:
                nets.append(name)
        return nets

    def resolve(self, component: ComponentData):
        """
        Alias every net of ``component`` to one node index.

        Returns the shared index, or None when fewer than two nets are wired.

        Raises:
            JunctionConflictError: two of the nets already carry different
                indices, so lines emitted earlier would disagree with the merge.
        """
        nets = self.junction_nets(component)
        if len(nets) < 2:
            return None

        existing = {}
        for net in nets:
            index = self.allocator.lookup(net)
            if index is not None:
                existing[net] = index

        if len(set(existing.values())) > 1:
            raise JunctionConflictError(component.designator(), existing)

        # Prefer a net that already has a node so earlier device lines stay valid
        primary = next(iter(existing), nets[0])
        primary_node = self.allocator.touch(primary)

        for net in nets:
            if net != primary:
                self.allocator.alias(net, primary_node)
                logger.debug(
                    "Junction %s: connecting %s to %s (node %d)",
                    component.designator(),
                    net,
                    primary,
                    primary_node,
                )
        return primary_node
