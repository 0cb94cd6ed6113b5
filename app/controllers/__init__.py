"""
Controllers for the netlist compiler.

Qt-free orchestration between the circuit model and the simulation
pipeline.
"""

from .file_controller import load_circuit_file, load_node_map, validate_circuit_data
from .simulation_controller import SimulationController, SimulationResult

__all__ = [
    "SimulationController",
    "SimulationResult",
    "load_circuit_file",
    "load_node_map",
    "validate_circuit_data",
]
