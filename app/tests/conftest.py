"""
Shared test fixtures for the netlist compiler test suite.

All fixtures build pure-Python model objects; nothing here needs ngspice.
"""

import sys
from pathlib import Path

# Ensure app/ is on sys.path so bare imports (models, simulation, controllers)
# work when running individual test files (e.g., python -m pytest app/tests/unit/test_foo.py).
_app_dir = str(Path(__file__).resolve().parent.parent)
if _app_dir not in sys.path:
    sys.path.insert(0, _app_dir)

import pytest
from models.component import ComponentData, PinData, kind_from_string


def make_component(kind, ref, value=None, model=None, component_id=None, **pins):
    """Helper to create a ComponentData with minimal boilerplate.

    Pins are given as keyword arguments; use ``pin_1="N1"`` for pin "1".
    """
    return ComponentData(
        component_id=component_id or f"id-{ref}",
        ref=ref,
        kind=kind_from_string(kind),
        value=value,
        model=model,
        pins={label.removeprefix("pin_"): PinData(net=net) for label, net in pins.items()},
        source_kind=kind,
    )


def make_resistor(ref, a, b, value="1k"):
    return make_component("resistor", ref, value, pin_1=a, pin_2=b)


def make_battery(ref, positive, negative, value="5V"):
    return make_component("battery", ref, value, pin_2=positive, pin_1=negative)


def make_junction(ref, *nets):
    return make_component("node", ref, **{f"pin_{i + 1}": net for i, net in enumerate(nets)})


def tabular_output(nodes, points, dt=1e-5, volts=None):
    """Build ngspice ``print time v(..)`` output with ``points`` rows."""
    volts = volts or {n: float(n) for n in nodes}
    header = "Index   time            " + "  ".join(f"v({n})" for n in nodes)
    lines = ["Transient Analysis", "-" * 70, header, "-" * 70]
    for i in range(points):
        values = "\t".join(f"{volts[n]:.6e}" for n in nodes)
        lines.append(f"{i}\t{i * dt:.6e}\t{values}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def simple_resistor_circuit():
    """
    V1 -- R1 -- GND

    V1 positive (pin 2) on net "VCC", negative (pin 1) on GND.
    R1 from VCC to GND.
    """
    return [
        make_battery("V1", "VCC", "GND"),
        make_resistor("R1", "VCC", "GND"),
    ]


@pytest.fixture
def divider_circuit():
    """V1 -- R1 -- MID -- R2 -- GND, plus an oscilloscope on MID."""
    return [
        make_battery("V1", "VCC", "GND", "9V"),
        make_resistor("R1", "VCC", "MID", "10k"),
        make_resistor("R2", "MID", "GND", "5k"),
        make_component("oscilloscope", "SCOPE1", pin_CH1="MID", pin_GND="GND"),
    ]


@pytest.fixture
def editor_circuit_data():
    """A circuit in the editor's JSON shape."""
    return {
        "components": [
            {"id": "b1", "ref": "B1", "kind": "battery", "value": "5V", "pins": {"1": {"net": "gnd"}, "2": {"net": "vcc"}}},
            {"id": "r1", "ref": "R1", "kind": "resistor", "value": "1kΩ", "pins": {"1": "vcc", "2": {"net": "GND"}}},
            {"id": "s1", "kind": "node", "type": "oscilloscope", "pins": {"probe": {"net": "vcc"}}},
        ]
    }
