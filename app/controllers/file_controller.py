"""
FileController - Loads circuit snapshots and saved node maps from JSON.

Circuits use the editor's shape: ``{"components": [{"id", "kind", "pins",
...}]}``. Nothing is ever written back; circuit documents are owned by the
editor.
"""

import json
import logging
from pathlib import Path

from models.circuit import CircuitModel
from simulation import NodeMap

logger = logging.getLogger(__name__)


def validate_circuit_data(data) -> None:
    """
    Validate JSON structure before loading.

    Raises ValueError with a descriptive message if anything is wrong.
    """
    if not isinstance(data, dict):
        raise ValueError("File does not contain a valid circuit object.")

    if "components" not in data or not isinstance(data["components"], list):
        raise ValueError("Missing or invalid 'components' list.")

    comp_ids = set()
    for i, comp in enumerate(data["components"]):
        if not isinstance(comp, dict):
            raise ValueError(f"Component #{i + 1} is not an object.")
        for key in ("id", "kind"):
            if key not in comp:
                raise ValueError(f"Component #{i + 1} is missing required field '{key}'.")
        if comp["id"] in comp_ids:
            raise ValueError(f"Duplicate component id '{comp['id']}'.")
        comp_ids.add(comp["id"])

        pins = comp.get("pins", {})
        if not isinstance(pins, dict):
            raise ValueError(f"Component '{comp['id']}' has invalid pin data.")
        for label, pin in pins.items():
            if pin is None or isinstance(pin, str):
                continue
            if not isinstance(pin, dict):
                raise ValueError(f"Component '{comp['id']}' pin '{label}' must be an object or a net name.")
            net = pin.get("net")
            if net is not None and not isinstance(net, (str, int)):
                raise ValueError(f"Component '{comp['id']}' pin '{label}' has a non-string net.")


def load_circuit_file(filepath) -> CircuitModel:
    """
    Load a circuit from a JSON file.

    Raises:
        json.JSONDecodeError: If file is not valid JSON.
        ValueError: If file structure is invalid.
        OSError: If the file cannot be read.
    """
    filepath = Path(filepath)
    with open(filepath, "r") as f:
        data = json.load(f)

    validate_circuit_data(data)
    model = CircuitModel.from_dict(data)
    logger.info("Loaded %d component(s) from %s", len(model), filepath)
    return model


def load_node_map(filepath) -> NodeMap:
    """
    Load a node map saved by ``export --node-map``.

    Raises:
        ValueError: If the file does not map net names to integers.
    """
    with open(Path(filepath), "r") as f:
        data = json.load(f)
    if not isinstance(data, dict) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in data.values()
    ):
        raise ValueError("Node map must be a JSON object of net name -> node index.")
    return NodeMap({str(net): index for net, index in data.items()})
