"""
Command-line interface for the breadboard netlist compiler.

Compile circuits to SPICE decks, run them through ngspice and decode the
output without the editor.

Usage::

    python -m cli simulate circuit.json
    python -m cli simulate circuit.json --format csv --output results.csv
    python -m cli validate circuit.json
    python -m cli export circuit.json --output circuit.cir --node-map nodes.json
    python -m cli decode ngspice.log --deck circuit.cir --node-map nodes.json
    python -m cli batch circuits/ --output-dir results/
    python -m cli --settings sim.json --verbose simulate circuit.json
"""

import argparse
import glob
import json
import logging
import sys
from pathlib import Path

from controllers.file_controller import load_circuit_file, load_node_map
from controllers.simulation_controller import SimulationController
from models.circuit import CircuitModel
from simulation import NodeMap, SimulationDeck, SimulationSettings, load_settings
from simulation.csv_exporter import export_op_results, export_transient_results
from simulation.units import format_si


def try_load_circuit(filepath: str) -> tuple[CircuitModel | None, str]:
    """Load and validate a circuit JSON file without exiting.

    Returns:
        (model, "") on success, or (None, error_message) on failure.
    """
    path = Path(filepath)
    if not path.exists():
        return None, f"file not found: {filepath}"

    try:
        return load_circuit_file(path), ""
    except json.JSONDecodeError as e:
        return None, f"invalid JSON in {filepath}: {e}"
    except ValueError as e:
        return None, f"invalid circuit file: {e}"
    except OSError as e:
        return None, f"cannot read {filepath}: {e}"


def load_circuit(filepath: str) -> CircuitModel:
    """Load and validate a circuit JSON file.

    Raises:
        SystemExit: On file read or validation errors.
    """
    model, error = try_load_circuit(filepath)
    if model is None:
        print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)
    return model


def _load_settings(args: argparse.Namespace) -> SimulationSettings:
    if not args.settings:
        return SimulationSettings()
    try:
        return load_settings(args.settings)
    except (OSError, ValueError) as e:
        print(f"Error: invalid settings file {args.settings}: {e}", file=sys.stderr)
        sys.exit(1)


def _emit(text: str, output, what: str) -> None:
    if output:
        Path(output).write_text(text)
        print(f"{what} written to {output}", file=sys.stderr)
    else:
        print(text)


def cmd_simulate(args: argparse.Namespace) -> int:
    """Run simulation and output results."""
    model = load_circuit(args.circuit)
    sim = SimulationController(model, _load_settings(args))

    result = sim.run_simulation()
    return _report(result, args, Path(args.circuit).stem)


def _report(result, args: argparse.Namespace, circuit_name: str) -> int:
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if not result.success:
        print(f"Simulation failed: {result.error}", file=sys.stderr)
        return 1

    _emit(_format_result(result, args.format, circuit_name), args.output, "Results")
    if args.output:
        _print_operating_point(result.operating_point)
    return 0


def _print_operating_point(operating_point: dict) -> None:
    for key, value in sorted(operating_point.items()):
        unit = "A" if key.startswith("i_") else "V"
        print(f"  {key} = {format_si(value, unit)}", file=sys.stderr)


def cmd_validate(args: argparse.Namespace) -> int:
    """Compile a circuit without simulating and list what would be skipped."""
    model = load_circuit(args.circuit)
    sim = SimulationController(model, _load_settings(args))

    try:
        deck = sim.generate_netlist()
    except ValueError as e:
        print(f"Circuit has errors: {args.circuit}", file=sys.stderr)
        print(f"  - {e}", file=sys.stderr)
        return 1

    print(f"Circuit is valid: {args.circuit}")
    print(f"  {len(deck.device_lines)} device(s), {len(deck.node_map.node_indices())} node(s)")
    for warning in deck.diagnostics:
        print(f"  Warning: {warning}")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export the generated SPICE deck."""
    model = load_circuit(args.circuit)
    sim = SimulationController(model, _load_settings(args))
    try:
        deck = sim.generate_netlist()
    except ValueError as e:
        print(f"Error generating netlist: {e}", file=sys.stderr)
        return 1

    for warning in deck.diagnostics:
        print(f"Warning: {warning}", file=sys.stderr)
    _emit(deck.text, args.output, "Netlist")

    if args.node_map:
        Path(args.node_map).write_text(json.dumps(deck.node_map.to_dict(), indent=2))
        print(f"Node map written to {args.node_map}", file=sys.stderr)
    else:
        for net, index in deck.node_map.items():
            print(f"  {net} -> node {index}", file=sys.stderr)
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    """Decode a saved ngspice output against the deck that produced it."""
    try:
        raw_output = Path(args.output_log).read_text()
        deck_text = Path(args.deck).read_text()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    node_map = NodeMap({})
    if args.node_map:
        try:
            node_map = load_node_map(args.node_map)
        except (OSError, ValueError) as e:
            print(f"Error: invalid node map {args.node_map}: {e}", file=sys.stderr)
            return 1

    deck = SimulationDeck(text=deck_text, device_lines=[], node_map=node_map)
    sim = SimulationController(settings=_load_settings(args))
    result = sim.decode_output(raw_output, deck)
    return _report(result, args, Path(args.output_log).stem)


def _format_result(result, fmt: str, circuit_name: str = "") -> str:
    """Format simulation result as text."""
    if fmt == "csv":
        return _result_to_csv(result, circuit_name)
    return json.dumps(result.to_dict(), indent=2, default=str)


def _result_to_csv(result, circuit_name: str = "") -> str:
    """Transient series when there is one, operating point otherwise."""
    if result.transient:
        return export_transient_results(result.transient, circuit_name)
    return export_op_results(result.operating_point, circuit_name)


def cmd_batch(args: argparse.Namespace) -> int:
    """Run simulations on multiple circuit files."""
    pattern = args.path
    path = Path(pattern)
    if path.is_dir():
        files = sorted(path.glob("*.json"))
    elif "*" in pattern or "?" in pattern:
        files = sorted(Path(p) for p in glob.glob(pattern))
    else:
        print(f"Error: {pattern} is not a directory or glob pattern", file=sys.stderr)
        return 1

    if not files:
        print(f"No .json circuit files found matching: {pattern}", file=sys.stderr)
        return 1

    output_dir = None
    if args.output_dir:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    settings = _load_settings(args)
    results_summary = []
    any_failed = False

    for filepath in files:
        name = filepath.stem
        model, error = try_load_circuit(str(filepath))

        if model is None:
            results_summary.append({"file": filepath.name, "status": "LOAD_ERROR", "error": error})
            any_failed = True
            if args.fail_fast:
                break
            continue

        result = SimulationController(model, settings).run_simulation()

        if not result.success:
            results_summary.append(
                {"file": filepath.name, "status": "FAIL", "error": result.error.splitlines()[0]}
            )
            any_failed = True
            if args.fail_fast:
                break
            continue

        details = "fallback" if result.used_fallback else f"{len(result.node_map) - 1} net(s)"
        results_summary.append({"file": filepath.name, "status": "OK", "details": details})

        if output_dir:
            ext = "csv" if args.format == "csv" else "json"
            out_path = output_dir / f"{name}.{ext}"
            out_path.write_text(_format_result(result, args.format, name))

    print(f"\n{'File':<40} {'Status':<12} {'Details'}")
    print("-" * 70)
    for entry in results_summary:
        details = entry.get("details", entry.get("error", ""))
        print(f"{entry['file']:<40} {entry['status']:<12} {details}")

    total = len(results_summary)
    passed = sum(1 for e in results_summary if e["status"] == "OK")
    print(f"\n{passed}/{total} succeeded, {total - passed} failed")

    return 1 if any_failed else 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="netcore",
        description="Compile breadboard circuits to SPICE, run ngspice and decode the results.",
    )
    parser.add_argument("--settings", help="JSON file with simulation settings")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline details to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # simulate
    sim_parser = subparsers.add_parser("simulate", help="Run simulation and output results")
    sim_parser.add_argument("circuit", help="Path to circuit JSON file")
    sim_parser.add_argument("--format", choices=["json", "csv"], default="json", help="Output format (default: json)")
    sim_parser.add_argument("--output", "-o", help="Write results to file instead of stdout")

    # validate
    val_parser = subparsers.add_parser("validate", help="Compile a circuit and report skipped components")
    val_parser.add_argument("circuit", help="Path to circuit JSON file")

    # export
    exp_parser = subparsers.add_parser("export", help="Write the generated SPICE deck")
    exp_parser.add_argument("circuit", help="Path to circuit JSON file")
    exp_parser.add_argument("--output", "-o", help="Write the deck to file instead of stdout")
    exp_parser.add_argument("--node-map", help="Also write the net -> node map as JSON")

    # decode
    dec_parser = subparsers.add_parser("decode", help="Decode saved ngspice output")
    dec_parser.add_argument("output_log", help="Path to captured ngspice stdout")
    dec_parser.add_argument("--deck", required=True, help="Deck the output was produced from")
    dec_parser.add_argument("--node-map", help="Node map written by 'export --node-map'")
    dec_parser.add_argument("--format", choices=["json", "csv"], default="json", help="Output format (default: json)")
    dec_parser.add_argument("--output", "-o", help="Write results to file instead of stdout")

    # batch
    batch_parser = subparsers.add_parser("batch", help="Run simulations on multiple circuit files")
    batch_parser.add_argument("path", help="Directory or glob pattern matching circuit JSON files")
    batch_parser.add_argument(
        "--format", choices=["json", "csv"], default="json", help="Output format for per-file results (default: json)"
    )
    batch_parser.add_argument("--output-dir", help="Write per-file results to this directory")
    batch_parser.add_argument("--fail-fast", action="store_true", help="Stop on first error")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    handlers = {
        "simulate": cmd_simulate,
        "validate": cmd_validate,
        "export": cmd_export,
        "decode": cmd_decode,
        "batch": cmd_batch,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
