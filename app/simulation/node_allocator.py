"""
simulation/node_allocator.py

Lazy assignment of SPICE node indices to net names.

A net receives an index only when a device that is actually emitted touches
it, so the node map never contains nets that only display-only or skipped
components are wired to. Ground is pre-seeded as node 0.
"""

import logging
from collections.abc import Mapping
from typing import Iterator

from .nets import GROUND_NET, normalize_net

logger = logging.getLogger(__name__)


class NodeMap(Mapping):
    """
    Immutable mapping of canonical net name -> node index.

    Produced once per simulation request by ``NodeAllocator.freeze()``.
    Several net names may share an index when a junction merged them.
    """

    def __init__(self, entries: dict[str, int]):
        self._entries = dict(entries)
        self._entries.setdefault(GROUND_NET, 0)

    def __getitem__(self, net: str) -> int:
        return self._entries[net]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def node_for(self, raw_net):
        """Index for a raw (un-normalised) net name, or None when never touched."""
        return self._entries.get(normalize_net(raw_net))

    def node_indices(self) -> list[int]:
        """Sorted distinct non-ground node indices."""
        return sorted({index for index in self._entries.values() if index != 0})

    def inverse(self) -> dict[int, list[str]]:
        """Node index -> net names sharing it, in first-touch order."""
        inverse: dict[int, list[str]] = {}
        for net, index in self._entries.items():
            inverse.setdefault(index, []).append(net)
        return inverse

    def to_dict(self) -> dict[str, int]:
        return dict(self._entries)

    def __eq__(self, other) -> bool:
        if isinstance(other, NodeMap):
            return list(self._entries.items()) == list(other._entries.items())
        return dict(self._entries) == other

    def __hash__(self):
        return hash(tuple(self._entries.items()))

    def __repr__(self) -> str:
        return f"NodeMap({self._entries!r})"


class NodeAllocator:
    """
    Assigns node indices to net names at the moment they are touched.

    One allocator serves exactly one emission pass; never share an instance
    between simulation requests.
    """

    def __init__(self):
        self._net_to_node: dict[str, int] = {GROUND_NET: 0}

    def touch(self, net) -> int:
        """Return the node index for ``net``, allocating the next free one if new."""
        name = normalize_net(net)
        if not name or name == GROUND_NET:
            return 0

        index = self._net_to_node.get(name)
        if index is None:
            index = max(self._net_to_node.values()) + 1
            self._net_to_node[name] = index
            logger.debug("Registering net %r as node %d", name, index)
        return index

    def lookup(self, net):
        """Index already assigned to ``net`` or None; never allocates."""
        return self._net_to_node.get(normalize_net(net))

    def alias(self, net, index: int) -> None:
        """Point ``net`` at an existing node index, overwriting any previous entry."""
        name = normalize_net(net)
        if not name or name == GROUND_NET:
            return
        previous = self._net_to_node.get(name)
        self._net_to_node[name] = index
        if previous != index:
            logger.debug("Aliasing net %r to node %d (was %s)", name, index, previous)

    def freeze(self) -> NodeMap:
        return NodeMap(self._net_to_node)

    def __contains__(self, net) -> bool:
        return normalize_net(net) in self._net_to_node

    def __len__(self) -> int:
        return len(self._net_to_node)
