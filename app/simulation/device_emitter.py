"""
simulation/device_emitter.py

Turns one component into at most one SPICE device line, touching the nets of
its required pins through the shared node allocator.
"""

import logging
from typing import Optional

from models.component import (
    BJT_MODEL_FAMILIES,
    DEFAULT_BJT_MODEL,
    DEFAULT_DIODE_MODEL,
    DEFAULT_LED_MODEL,
    DEFAULT_VALUES,
    REQUIRED_PINS,
    ComponentData,
    ComponentKind,
)

from .junction_resolver import JunctionResolver
from .nets import normalize_net
from .units import format_spice_number, parse_quantity

logger = logging.getLogger(__name__)


def pick_bjt_model(component: ComponentData) -> str:
    """Choose a transistor model by substring match on the declared model."""
    declared = (component.model or "").upper()
    for family in BJT_MODEL_FAMILIES:
        if family in declared:
            return family
    return DEFAULT_BJT_MODEL


class DeviceEmitter:
    """
    Emits device lines for one compilation pass.

    ``diagnostics`` collects a message for every component that was skipped.
    """

    def __init__(self, allocator, junctions: Optional[JunctionResolver] = None):
        self.allocator = allocator
        self.junctions = junctions or JunctionResolver(allocator)
        self.diagnostics: list[str] = []
        self.used_models: list[str] = []

    def emit(self, component: ComponentData) -> Optional[str]:
        """
        Return the device line for ``component`` or None if it emits nothing.

        Raises:
            JunctionConflictError: propagated from the junction resolver.
        """
        kind = component.kind

        if kind is ComponentKind.DISPLAY_ONLY:
            logger.debug("Skipping display-only %s (%s)", component.designator(), component.source_kind)
            return None

        if kind is ComponentKind.JUNCTION:
            self.junctions.resolve(component)
            return None

        if kind is ComponentKind.UNSUPPORTED:
            self._skip(component, f"unsupported component kind '{component.source_kind}'")
            return None

        nets = self._required_nets(component)
        if nets is None:
            return None
        nodes = [self.allocator.touch(net) for net in nets]
        node_str = " ".join(str(n) for n in nodes)
        name = f"{component.get_spice_symbol()}{component.designator()}"

        if kind is ComponentKind.RESISTOR:
            ohms = parse_quantity(component.value, DEFAULT_VALUES[kind])
            return f"{name} {node_str} {format_spice_number(ohms)}"

        if kind is ComponentKind.CAPACITOR:
            farads = parse_quantity(component.value, DEFAULT_VALUES[kind])
            return f"{name} {node_str} {format_spice_number(farads)}"

        if kind in (ComponentKind.DIODE, ComponentKind.LED):
            default = DEFAULT_LED_MODEL if kind is ComponentKind.LED else DEFAULT_DIODE_MODEL
            model = (component.model or "").strip() or default
            self._use_model(model)
            return f"{name} {node_str} {model}"

        if kind is ComponentKind.VOLTAGE_SOURCE:
            volts = parse_quantity(component.value, DEFAULT_VALUES[kind])
            return f"{name} {node_str} DC {format_spice_number(volts)}"

        if kind is ComponentKind.TRANSISTOR:
            model = pick_bjt_model(component)
            self._use_model(model)
            logger.debug(
                "Transistor %s: C=node%d B=node%d E=node%d model=%s",
                name,
                nodes[0],
                nodes[1],
                nodes[2],
                model,
            )
            return f"{name} {node_str} {model}"

        raise AssertionError(f"unhandled component kind {kind!r}")

    def _required_nets(self, component: ComponentData) -> Optional[list[str]]:
        """Nets of the kind's required pins, or None (with a diagnostic) if any is missing."""
        nets = []
        missing = []
        for label in REQUIRED_PINS[component.kind]:
            net = normalize_net(component.pin_net(label))
            if not net:
                missing.append(label)
            nets.append(net)
        if missing:
            self._skip(component, f"pin(s) {', '.join(missing)} not connected")
            return None
        return nets

    def _use_model(self, model: str) -> None:
        if model not in self.used_models:
            self.used_models.append(model)

    def _skip(self, component: ComponentData, reason: str) -> None:
        logger.warning("Skipped %s: %s", component.designator(), reason)
        self.diagnostics.append(f"Skipped {component.designator()}: {reason}")
