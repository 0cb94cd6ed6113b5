"""
Pure Python data models for the netlist compiler.

This package contains plain data classes describing breadboard components
and circuits. No simulation logic lives here.
"""

from .circuit import CircuitModel
from .component import (
    DEFAULT_VALUES,
    DEVICE_MODELS,
    DISPLAY_ONLY_TYPES,
    REQUIRED_PINS,
    SPICE_SYMBOLS,
    ComponentData,
    ComponentKind,
    PinData,
    kind_from_string,
)

__all__ = [
    "CircuitModel",
    "ComponentData",
    "ComponentKind",
    "PinData",
    "DEFAULT_VALUES",
    "DEVICE_MODELS",
    "DISPLAY_ONLY_TYPES",
    "REQUIRED_PINS",
    "SPICE_SYMBOLS",
    "kind_from_string",
]
