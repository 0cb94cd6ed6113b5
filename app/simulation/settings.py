"""Simulation settings - defaults plus optional overrides from a JSON file."""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

NGSPICE_PATH_ENV = "NGSPICE_PATH"


@dataclass
class SimulationSettings:
    """Knobs for deck generation, engine invocation and decoding."""

    title: str = "Breadboard Circuit - Generated SPICE Netlist"
    tran_step: str = "0.1us"
    tran_stop: str = "5ms"
    use_initial_conditions: bool = True
    timeout: float = 60.0
    min_transient_points: int = 100
    ngspice_path: Optional[str] = None

    def __post_init__(self):
        if self.ngspice_path is None:
            self.ngspice_path = os.environ.get(NGSPICE_PATH_ENV) or None
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.min_transient_points < 0:
            raise ValueError("min_transient_points must not be negative")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationSettings":
        """
        Build settings from a dict, ignoring unknown keys.

        Raises:
            ValueError: a known key has a value of the wrong type.
        """
        known = {f.name: f for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown simulation setting %r", key)
                continue
            kwargs[key] = _coerce(key, value)
        return cls(**kwargs)


_EXPECTED_TYPES = {
    "title": str,
    "tran_step": str,
    "tran_stop": str,
    "use_initial_conditions": bool,
    "timeout": (int, float),
    "min_transient_points": int,
    "ngspice_path": (str, type(None)),
}


def _coerce(key, value):
    expected = _EXPECTED_TYPES[key]
    # bool is an int subclass; only accept it where a bool is expected
    if isinstance(value, bool) and expected is not bool:
        raise ValueError(f"Setting '{key}' must not be a boolean")
    if not isinstance(value, expected):
        raise ValueError(f"Setting '{key}' has invalid value {value!r}")
    if key == "timeout":
        return float(value)
    return value


def load_settings(path) -> SimulationSettings:
    """
    Load settings from a JSON object file.

    Raises:
        FileNotFoundError: the file does not exist.
        json.JSONDecodeError: the file is not valid JSON.
        ValueError: the JSON is not an object or holds invalid values.
    """
    path = Path(path)
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return SimulationSettings.from_dict(data)
