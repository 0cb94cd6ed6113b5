"""
simulation/netlist_generator.py

Assembles the SPICE deck: title, device lines, model library, solver
options and the control block that asks ngspice for an operating point and a
transient run over exactly the nodes present in the node map.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from models.component import DEVICE_MODELS, ComponentData

from .device_emitter import DeviceEmitter
from .junction_resolver import JunctionResolver
from .node_allocator import NodeAllocator, NodeMap
from .settings import SimulationSettings

logger = logging.getLogger(__name__)

SOLVER_OPTIONS = [
    ".options reltol=1e-3 abstol=1e-12 vntol=1e-6",
    ".options gmin=1e-12 itl1=100 itl2=50",
    ".options temp=27 tnom=27",
]

_END_RE = re.compile(r"(?:\n\s*\.end\s*)+$", re.IGNORECASE)


def ensure_single_end(text: str) -> str:
    """Strip any trailing ``.end`` lines and terminate with exactly one."""
    body = _END_RE.sub("", "\n" + text.rstrip())
    return body.lstrip("\n").rstrip() + "\n.end\n"


@dataclass
class SimulationDeck:
    """A generated deck and the node map that numbered it."""

    text: str
    device_lines: list[str]
    node_map: NodeMap
    diagnostics: list[str] = field(default_factory=list)

    def print_vectors(self) -> list[str]:
        return [f"v({index})" for index in self.node_map.node_indices()]


class NetlistGenerator:
    """Generates a SPICE deck from an ordered list of components."""

    def __init__(self, components: Iterable[ComponentData], settings: Optional[SimulationSettings] = None):
        self.components = list(components)
        self.settings = settings or SimulationSettings()

    def generate(self) -> SimulationDeck:
        """
        Run one emission pass and build the deck.

        Raises:
            JunctionConflictError: a junction merges nets already numbered apart.
        """
        allocator = NodeAllocator()
        emitter = DeviceEmitter(allocator, JunctionResolver(allocator))

        device_lines = []
        for comp in self.components:
            line = emitter.emit(comp)
            if line:
                device_lines.append(line)

        node_map = allocator.freeze()
        diagnostics = list(emitter.diagnostics)
        for model in emitter.used_models:
            if model not in DEVICE_MODELS:
                diagnostics.append(f"Model '{model}' has no definition in the model library")

        lines = [self.settings.title, ""]
        lines.extend(device_lines)
        lines.append("")
        lines.extend(self._model_library())
        lines.append("")
        lines.append("* Solver options for convergence stability")
        lines.extend(SOLVER_OPTIONS)
        lines.append("")
        lines.extend(self._control_block(node_map))

        logger.info(
            "Generated deck with %d device line(s) and %d net(s)",
            len(device_lines),
            len(node_map),
        )
        return SimulationDeck(
            text=ensure_single_end("\n".join(lines)),
            device_lines=device_lines,
            node_map=node_map,
            diagnostics=diagnostics,
        )

    @staticmethod
    def _model_library() -> list[str]:
        lines = ["* --- Device models ---"]
        lines.extend(DEVICE_MODELS.values())
        return lines

    def _control_block(self, node_map: NodeMap) -> list[str]:
        tran = f"tran {self.settings.tran_step} {self.settings.tran_stop}"
        if self.settings.use_initial_conditions:
            tran += " uic"

        lines = [
            "* Analysis",
            ".control",
            "set filetype=ascii",
            "op",
            "print all",
            tran,
        ]
        vectors = " ".join(f"v({index})" for index in node_map.node_indices())
        if vectors:
            lines.append(f"print time {vectors}")
        lines.append(".endc")
        return lines
