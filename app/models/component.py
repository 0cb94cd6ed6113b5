"""
ComponentData - Pure Python data model for breadboard circuit components.

Components arrive from the editor as JSON objects with a free-form ``kind``
string and a table of named pins, each wired to a net by name. This module
maps those kinds onto the closed ``ComponentKind`` set understood by the
netlist compiler and holds the per-kind pin tables and device-model text.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ComponentKind(Enum):
    """Closed set of component kinds the netlist compiler dispatches on."""

    RESISTOR = "resistor"
    CAPACITOR = "capacitor"
    DIODE = "diode"
    LED = "led"
    TRANSISTOR = "transistor"
    VOLTAGE_SOURCE = "voltage_source"
    JUNCTION = "junction"
    DISPLAY_ONLY = "display_only"
    UNSUPPORTED = "unsupported"


# Editor kind strings -> canonical kind
_KIND_ALIASES = {
    "resistor": ComponentKind.RESISTOR,
    "capacitor": ComponentKind.CAPACITOR,
    "diode": ComponentKind.DIODE,
    "led": ComponentKind.LED,
    "transistor": ComponentKind.TRANSISTOR,
    "bjt": ComponentKind.TRANSISTOR,
    "battery": ComponentKind.VOLTAGE_SOURCE,
    "voltage_source": ComponentKind.VOLTAGE_SOURCE,
    "node": ComponentKind.JUNCTION,
    "junction": ComponentKind.JUNCTION,
    "splitter": ComponentKind.JUNCTION,
}

# Instruments and annotations that observe nets but never take part in them
DISPLAY_ONLY_TYPES = frozenset(
    {
        "oscilloscope",
        "label",
        "measurement",
        "multimeter",
        "probe",
    }
)

# SPICE device letter per emitted kind
SPICE_SYMBOLS = {
    ComponentKind.RESISTOR: "R",
    ComponentKind.CAPACITOR: "C",
    ComponentKind.DIODE: "D",
    ComponentKind.LED: "D",
    ComponentKind.TRANSISTOR: "Q",
    ComponentKind.VOLTAGE_SOURCE: "V",
}

# Required pins per kind, in the order their nets are touched.
# Voltage sources list the positive pin ("2") first.
REQUIRED_PINS = {
    ComponentKind.RESISTOR: ("1", "2"),
    ComponentKind.CAPACITOR: ("1", "2"),
    ComponentKind.DIODE: ("1", "2"),
    ComponentKind.LED: ("1", "2"),
    ComponentKind.VOLTAGE_SOURCE: ("2", "1"),
    ComponentKind.TRANSISTOR: ("C", "B", "E"),
}

# Values used when a component has no (or an unparseable) declared value
DEFAULT_VALUES = {
    ComponentKind.RESISTOR: 1e3,
    ComponentKind.CAPACITOR: 1e-6,
    ComponentKind.VOLTAGE_SOURCE: 5.0,
}

DEFAULT_DIODE_MODEL = "D1N4148"
DEFAULT_LED_MODEL = "LED_GENERIC"
DEFAULT_BJT_MODEL = "BC337"

# Part families recognised in a transistor's declared model string.
# Checked in order; the first substring hit wins.
BJT_MODEL_FAMILIES = ("BC549", "BC337", "BC327", "2N3904", "2N3906")

# Model cards appended to every deck. Keys are the model names referenced by
# emitted device lines.
DEVICE_MODELS = {
    "D1N4148": ".model D1N4148 D (IS=2.52n RS=0.568 N=1.752 CJO=4p M=0.4 TT=20n BV=100 IBV=100u)",
    "LED_GENERIC": ".model LED_GENERIC D (IS=1e-20 N=1.8 RS=5 EG=1.9 BV=5 IBV=10u)",
    "BC337": (
        ".model BC337 NPN (IS=1e-14 BF=200 VAF=100 NF=1 RB=100 RE=1 RC=1 "
        "CJE=5p VJE=0.7 CJC=3p VJC=0.3 TF=0.3n TR=10n KF=2e-14 AF=1)"
    ),
    "BC549": (
        ".model BC549 NPN (IS=1e-14 BF=300 VAF=150 NF=1 RB=150 RE=1 RC=1 "
        "CJE=6p VJE=0.7 CJC=3p VJC=0.3 TF=0.25n TR=8n KF=5e-15 AF=1)"
    ),
    "BC327": (
        ".model BC327 PNP (IS=2.294e-14 BF=200 VAF=115.7 NE=1.5 ISE=2.294e-14 "
        "IKF=0.15 BR=5 RC=1 CJC=9.81p CJE=34.3p TF=0.431n TR=23.9n RB=10)"
    ),
    "2N3904": ".model 2N3904 NPN (IS=6.734f BF=416.4 VAF=74.03 IKF=66.78m RB=10 CJE=4.493p CJC=3.638p TF=301.2p)",
    "2N3906": ".model 2N3906 PNP (IS=1.41f BF=180.7 VAF=18.7 IKF=80m RB=10 CJE=8.063p CJC=9.728p TF=513.3p)",
}


def kind_from_string(kind: Optional[str], type_hint: Optional[str] = None) -> ComponentKind:
    """
    Map an editor kind string onto the closed ``ComponentKind`` set.

    A display-only ``type_hint`` wins over the kind, so an oscilloscope drawn
    as a generic node is still treated as an observer.
    """
    kind_key = (kind or "").strip().lower()
    type_key = (type_hint or "").strip().lower()
    if kind_key in DISPLAY_ONLY_TYPES or type_key in DISPLAY_ONLY_TYPES:
        return ComponentKind.DISPLAY_ONLY
    return _KIND_ALIASES.get(kind_key, ComponentKind.UNSUPPORTED)


@dataclass
class PinData:
    """One component pin and the net it is wired to ("" when unconnected)."""

    net: str = ""
    polarity: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"net": self.net}
        if self.polarity:
            data["polarity"] = self.polarity
        return data

    @classmethod
    def from_dict(cls, data) -> "PinData":
        """Accept ``{"net": ..., "polarity": ...}`` or a bare net name."""
        if isinstance(data, (str, int)):
            return cls(net=str(data))
        net = data.get("net")
        net = "" if net is None else net
        return cls(net=str(net), polarity=data.get("polarity"))


@dataclass
class ComponentData:
    """
    Pure Python data class representing a breadboard component.

    ``pins`` preserves the declaration order of the editor's pin table; the
    junction resolver relies on it to pick the primary net.
    """

    component_id: str
    ref: str
    kind: ComponentKind
    value: Optional[str] = None
    model: Optional[str] = None
    pins: dict[str, PinData] = field(default_factory=dict)
    source_kind: str = ""
    type_hint: str = ""

    def pin_net(self, pin_label: str) -> str:
        """Return the raw net wired to ``pin_label`` or "" when absent."""
        pin = self.pins.get(pin_label)
        return pin.net if pin is not None else ""

    def nets(self) -> list[str]:
        """Raw net names on every pin, in pin declaration order."""
        return [pin.net for pin in self.pins.values()]

    def get_spice_symbol(self) -> str:
        return SPICE_SYMBOLS.get(self.kind, "X")

    def designator(self) -> str:
        """Reference designator, synthesised from the id when the editor left it blank."""
        if self.ref:
            return self.ref
        return f"{self.source_kind or self.kind.value}{self.component_id[:8]}"

    def to_dict(self) -> dict:
        data = {
            "id": self.component_id,
            "ref": self.ref,
            "kind": self.source_kind or self.kind.value,
            "pins": {label: pin.to_dict() for label, pin in self.pins.items()},
        }
        if self.value is not None:
            data["value"] = self.value
        if self.model is not None:
            data["model"] = self.model
        if self.type_hint:
            data["type"] = self.type_hint
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ComponentData":
        """Build a component from the editor's JSON shape."""
        source_kind = str(data.get("kind", ""))
        pins = {
            str(label): PinData.from_dict(pin if pin is not None else {})
            for label, pin in (data.get("pins") or {}).items()
        }
        value = data.get("value")
        model = data.get("model")
        return cls(
            component_id=str(data.get("id", "")),
            ref=str(data.get("ref") or ""),
            kind=kind_from_string(source_kind, data.get("type")),
            value=None if value is None else str(value),
            model=None if model is None else str(model),
            pins=pins,
            source_kind=source_kind,
            type_hint=str(data.get("type") or ""),
        )

    def __repr__(self) -> str:
        return f"ComponentData({self.designator()}, {self.kind.value}, pins={list(self.pins)})"
