"""
SimulationController - Orchestrates the simulation pipeline.

Coordinates netlist generation, ngspice execution, output decoding, the
analytic fallback and result labeling. Whatever goes wrong, callers get a
SimulationResult back; no exception escapes run_simulation().
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from models.circuit import CircuitModel
from models.component import ComponentData
from simulation import (
    NetlistGenerator,
    NgspiceRunner,
    ResultParser,
    SimulationDeck,
    SimulationSettings,
    diagnose_error,
    format_user_message,
    label_series,
    resolve_probes,
    solve_fallback,
)

logger = logging.getLogger(__name__)

NO_RESULTS_ERROR = "No simulation results could be decoded from the ngspice output"


@dataclass
class SimulationResult:
    """Result of a simulation run."""

    success: bool
    transient: Optional[dict] = None
    operating_point: dict[str, float] = field(default_factory=dict)
    error: str = ""
    warnings: list[str] = field(default_factory=list)
    netlist: str = ""
    raw_output: str = ""
    node_map: dict[str, int] = field(default_factory=dict)
    used_fallback: bool = False
    probes: dict = field(default_factory=dict)

    def to_dict(self, include_raw: bool = False) -> dict:
        data = {
            "success": self.success,
            "transient": self.transient,
            "operating_point": self.operating_point,
            "error": self.error,
            "warnings": self.warnings,
            "node_map": self.node_map,
            "used_fallback": self.used_fallback,
            "probes": self.probes,
            "netlist": self.netlist,
        }
        if include_raw:
            data["raw_output"] = self.raw_output
        return data


class SimulationController:
    """
    Controller for the simulation pipeline.

    Coordinates: generate netlist -> run ngspice -> decode -> (fallback) -> label
    """

    def __init__(
        self,
        model: Union[CircuitModel, Iterable[ComponentData], None] = None,
        settings: Optional[SimulationSettings] = None,
        runner=None,
    ):
        if isinstance(model, CircuitModel):
            self.model = model
        else:
            self.model = CircuitModel(list(model or []))
        self.settings = settings or SimulationSettings()
        self._runner = runner

    @property
    def runner(self):
        """Lazy initialization of NgspiceRunner."""
        if self._runner is None:
            self._runner = NgspiceRunner(
                ngspice_cmd=self.settings.ngspice_path,
                timeout=self.settings.timeout,
            )
        return self._runner

    def generate_netlist(self) -> SimulationDeck:
        """Generate a SPICE deck from the current circuit model."""
        return NetlistGenerator(self.model.components, self.settings).generate()

    def run_simulation(self, cancel_event=None) -> SimulationResult:
        """
        Run the full simulation pipeline.

        Steps: generate netlist -> run ngspice -> decode -> label
        """
        # 1. Generate netlist
        try:
            deck = self.generate_netlist()
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Netlist generation failed: %s", e)
            return SimulationResult(success=False, error=f"Netlist generation failed: {e}")

        # 2. Run simulation
        success, stdout, error = self.runner.run_simulation(deck.text, cancel_event=cancel_event)
        if not success:
            diagnosis = diagnose_error(error, stdout)
            logger.info("Simulation failed (%s): %s", diagnosis.category.value, error)
            return SimulationResult(
                success=False,
                error=format_user_message(diagnosis, error),
                warnings=list(deck.diagnostics),
                netlist=deck.text,
                raw_output=stdout,
                node_map=deck.node_map.to_dict(),
            )

        # 3. Decode and label
        return self.decode_output(stdout, deck)

    def decode_output(self, raw_output: str, deck: SimulationDeck) -> SimulationResult:
        """
        Decode engine output produced from ``deck``.

        Falls back to the closed-form solver only when neither a transient
        series nor an operating point could be decoded.
        """
        warnings = list(deck.diagnostics)
        try:
            outcome = ResultParser.decode(raw_output, self.settings.min_transient_points)
        except (ValueError, IndexError, KeyError) as e:
            logger.error("Result parsing failed: %s", e, exc_info=True)
            return self._failure(f"Result parsing failed: {e}", deck, raw_output, warnings)

        series = outcome.transient
        operating_point = outcome.operating_point
        used_fallback = False

        if outcome.is_empty:
            fallback = solve_fallback(deck.text)
            if not fallback.success:
                logger.info("Decode failed and fallback declined: %s", fallback.error)
                return self._failure(f"{NO_RESULTS_ERROR} ({fallback.error})", deck, raw_output, warnings)
            series = fallback.series
            operating_point = fallback.operating_point
            used_fallback = True
            warnings.append("ngspice output held no usable data; values come from the analytic fallback")

        transient = None
        probes = {}
        if series is not None:
            labeled = label_series(series, deck.node_map)
            probes = resolve_probes(self.model, labeled)
            warnings.extend(labeled.diagnostics)
            transient = labeled.to_dict()

        return SimulationResult(
            success=True,
            transient=transient,
            operating_point=operating_point,
            warnings=warnings,
            netlist=deck.text,
            raw_output=raw_output,
            node_map=deck.node_map.to_dict(),
            used_fallback=used_fallback,
            probes=probes,
        )

    @staticmethod
    def _failure(error: str, deck: SimulationDeck, raw_output: str, warnings: list[str]) -> SimulationResult:
        return SimulationResult(
            success=False,
            error=error,
            warnings=warnings,
            netlist=deck.text,
            raw_output=raw_output,
            node_map=deck.node_map.to_dict(),
        )
