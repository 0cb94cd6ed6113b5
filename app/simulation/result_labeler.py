"""
simulation/result_labeler.py

Re-keys decoded series from node indices to net names by inverting the node
map of the same run. A node index with no net name means the deck and the map
disagree; it is kept under a placeholder label and reported, never hidden.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from models.component import ComponentData, ComponentKind

from .nets import GROUND_NET, normalize_net
from .node_allocator import NodeMap
from .result_parser import DecodedSeries

logger = logging.getLogger(__name__)


def placeholder_label(index: int) -> str:
    return f"node_{index}"


@dataclass
class LabeledSeries:
    """Net-name keyed time series, ready for external consumers."""

    time: list[float]
    voltages: dict[str, list[float]]
    currents: dict[str, list[float]] = field(default_factory=dict)
    diagnostics: list[str] = field(default_factory=list)

    def get(self, net) -> Optional[list[float]]:
        """Voltage series for a raw net name; ground always reads zeros."""
        name = normalize_net(net)
        if name == GROUND_NET:
            return [0.0] * len(self.time)
        return self.voltages.get(name)

    def to_dict(self) -> dict:
        return {"time": self.time, "voltages": self.voltages, "currents": self.currents}


def label_series(series: DecodedSeries, node_map: NodeMap) -> LabeledSeries:
    """
    Replace node-index keys with net names.

    Every net sharing an index (nets merged by a junction) receives the same
    vector, so consumers can look up any of the merged names.
    Ground is never reported; ``LabeledSeries.get`` reads it as zeros.
    """
    inverse = node_map.inverse()
    voltages: dict[str, list[float]] = {}
    diagnostics = []

    for index in series.node_indices():
        if index == 0:
            continue
        vector = series.voltages[index].tolist()
        names = inverse.get(index)
        if not names:
            label = placeholder_label(index)
            logger.warning("Node %d has no net name in the node map; reported as %r", index, label)
            diagnostics.append(f"Node {index} has no net name in the node map; reported as '{label}'")
            names = [label]
        for name in names:
            voltages[name] = list(vector)

    return LabeledSeries(
        time=series.time.tolist(),
        voltages=voltages,
        currents={name: vector.tolist() for name, vector in series.currents.items()},
        diagnostics=diagnostics,
    )


def resolve_probes(components: Iterable[ComponentData], labeled: LabeledSeries) -> dict[str, dict]:
    """
    Read display-only instruments off the labeled result.

    Returns ``{designator: {pin_label: series or None}}``. Instruments never
    take part in node allocation, so their pins are looked up by net name
    here; a pin on a net that no emitted device touched reads as None.
    """
    readings = {}
    for comp in components:
        if comp.kind is not ComponentKind.DISPLAY_ONLY:
            continue
        pins = {}
        for label, pin in comp.pins.items():
            net = normalize_net(pin.net)
            pins[label] = labeled.get(net) if net else None
            if net and pins[label] is None:
                labeled.diagnostics.append(
                    f"Probe {comp.designator()} pin {label}: net '{net}' was not simulated"
                )
        readings[comp.designator()] = pins
    return readings
