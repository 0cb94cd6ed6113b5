"""
simulation/csv_exporter.py

Export decoded simulation results to CSV format.
"""

import csv
import io
from datetime import datetime


def _write_preamble(writer, analysis: str, circuit_name: str) -> None:
    writer.writerow(["# Analysis Type", analysis])
    writer.writerow(["# Date", datetime.now().strftime("%Y-%m-%d %H:%M:%S")])
    if circuit_name:
        writer.writerow(["# Circuit", circuit_name])
    writer.writerow([])


def export_op_results(operating_point, circuit_name=""):
    """
    Export operating-point values to CSV string.

    Args:
        operating_point: dict mapping ``v_<node>`` / ``i_<device>`` -> float
        circuit_name: optional circuit filename

    Returns:
        str: CSV content
    """
    output = io.StringIO()
    writer = csv.writer(output)
    _write_preamble(writer, "Operating Point", circuit_name)

    writer.writerow(["Quantity", "Value"])
    for name, value in sorted(operating_point.items()):
        writer.writerow([name, value])

    return output.getvalue()


def export_transient_results(transient, circuit_name=""):
    """
    Export a net-name keyed transient series to CSV string.

    Args:
        transient: dict with 'time', 'voltages' (net -> list) and optional
            'currents' (device -> list)
        circuit_name: optional circuit filename

    Returns:
        str: CSV content, one row per time point
    """
    output = io.StringIO()
    writer = csv.writer(output)
    _write_preamble(writer, "Transient", circuit_name)

    if not transient or not transient.get("time"):
        return output.getvalue()

    voltages = transient.get("voltages", {})
    currents = transient.get("currents", {})
    nets = sorted(voltages)
    devices = sorted(currents)

    writer.writerow(["time"] + [f"V({net})" for net in nets] + [f"I({dev})" for dev in devices])
    for i, t in enumerate(transient["time"]):
        row = [t]
        row.extend(voltages[net][i] for net in nets)
        row.extend(currents[dev][i] for dev in devices)
        writer.writerow(row)

    return output.getvalue()


def write_csv(csv_content, filepath):
    """
    Write CSV content string to a file.

    Args:
        csv_content: str from one of the export_* functions
        filepath: destination path
    """
    with open(filepath, "w", newline="") as f:
        f.write(csv_content)
