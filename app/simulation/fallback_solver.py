"""
simulation/fallback_solver.py

Closed-form answer for the one circuit that needs no simulator: a single DC
voltage source driving a single resistor. Used only when nothing could be
decoded from the engine output. Not a general solver.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .result_parser import DecodedSeries
from .units import parse_quantity

logger = logging.getLogger(__name__)

FALLBACK_TIMES = (0.0, 1e-3)

_VSOURCE_RE = re.compile(r"^(V\S+)\s+(\d+)\s+(\d+)\s+DC\s+(\S+)\s*$", re.IGNORECASE)
_RESISTOR_RE = re.compile(r"^(R\S+)\s+(\d+)\s+(\d+)\s+(\S+)\s*$", re.IGNORECASE)


@dataclass
class FallbackResult:
    success: bool
    series: Optional[DecodedSeries] = None
    operating_point: dict[str, float] = field(default_factory=dict)
    error: str = ""


def _device_lines(deck_text: str) -> list[str]:
    """Element lines of a deck: no title, comments, directives or control block."""
    devices = []
    in_control = False
    for line in deck_text.splitlines()[1:]:
        stripped = line.strip()
        lowered = stripped.lower()
        if lowered.startswith(".control"):
            in_control = True
            continue
        if lowered.startswith(".endc"):
            in_control = False
            continue
        if in_control or not stripped or stripped[0] in "*.+;":
            continue
        devices.append(stripped)
    return devices


def solve_fallback(deck_text: str) -> FallbackResult:
    """
    Solve a lone DC source across a lone resistor with Ohm's law.

    Returns a two-sample constant series so callers always get a waveform for
    this circuit; any other topology yields ``success=False``.
    """
    devices = _device_lines(deck_text)
    unsupported = FallbackResult(
        success=False,
        error="Analytic fallback only handles one DC voltage source across one resistor",
    )
    if len(devices) != 2:
        return unsupported

    source = resistor = None
    for line in devices:
        source = source or _VSOURCE_RE.match(line)
        resistor = resistor or _RESISTOR_RE.match(line)
    if source is None or resistor is None:
        return unsupported

    pos, neg = int(source.group(2)), int(source.group(3))
    if {pos, neg} != {int(resistor.group(2)), int(resistor.group(3))} or pos == neg:
        return unsupported

    volts = parse_quantity(source.group(4), None)
    ohms = parse_quantity(resistor.group(4), None)
    if volts is None or ohms is None or ohms <= 0:
        return FallbackResult(success=False, error="Analytic fallback needs a positive resistance")

    current = volts / ohms
    source_name = source.group(1).lower()
    logger.info("Fallback analysis: %g V across %g ohm -> %g A", volts, ohms, current)

    # Ground stays at 0 V; a floating pair is referenced to the negative node
    if pos == 0:
        node_volts = {pos: 0.0, neg: -volts}
    else:
        node_volts = {pos: volts, neg: 0.0}

    voltages = {node: [v, v] for node, v in node_volts.items()}
    series = DecodedSeries(
        time=list(FALLBACK_TIMES),
        voltages=voltages,
        currents={source_name: [current, current]},
    )
    operating_point = {f"v_{node}": v for node, v in node_volts.items()}
    operating_point[f"i_{source_name}"] = current
    return FallbackResult(success=True, series=series, operating_point=operating_point)
