"""
simulation/result_parser.py

Decodes ngspice text output into time-indexed node voltages.

Transient data is tried with an ordered list of strategies, first accepted
result wins:

1. ``parse_tabular_transient`` - the ``print time v(1) v(2) ...`` table,
   including rows where ngspice ran the numbers together.
2. ``parse_variables_block`` - an ASCII rawfile style ``Variables:`` /
   ``Values:`` section.

Operating-point lines are collected independently by ``parse_op_results``.
None of these functions raise on malformed input; bad rows are dropped.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_MIN_POINTS = 100

NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"

_HEADER_RE = re.compile(r"^\s*(?:index\s+)?time((?:\s+v\(\s*\d+\s*\))+)\s*$", re.IGNORECASE)
_HEADER_VECTOR_RE = re.compile(r"v\(\s*(\d+)\s*\)", re.IGNORECASE)

# Delimiter-free rows: the index runs straight into the first value, and
# each value is ngspice's d.dddddde+dd. Exponents take two or three digits
# but never swallow the leading digit of the next value.
_CONCAT_INDEX_RE = re.compile(r"(\d+?)(?=[-+]?\d\.)")
_CONCAT_FLOAT_RE = re.compile(r"[-+]?\d\.\d+(?:[eE][-+]?\d{2,3}(?!\.))?")

_VARIABLE_LINE_RE = re.compile(r"^\s*(\d+)\s+(\S+)")
_VOLTAGE_NAME_RE = re.compile(r"^v\((\d+)\)$", re.IGNORECASE)
_RAW_SECTION_RE = re.compile(
    r"^\s*(?:title|date|plotname|flags|command|variables|values|no\.\s*\w+)\s*:", re.IGNORECASE
)

_OP_PATTERNS = [
    (re.compile(rf"v\(([^)]+)\)\s*=\s*({NUMBER})", re.IGNORECASE), "v"),
    (re.compile(rf"^\s*V\(([^)]+)\)\s+({NUMBER})\s*$", re.IGNORECASE), "v"),
    (re.compile(rf"i\(([^)]+)\)\s*=\s*({NUMBER})", re.IGNORECASE), "i"),
    (re.compile(rf"([^#\s]+)#branch\s*=?\s*({NUMBER})", re.IGNORECASE), "i"),
]


@dataclass
class DecodedSeries:
    """Time vector plus per-node voltages (keyed by node index)."""

    time: np.ndarray
    voltages: dict[int, np.ndarray]
    currents: dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        self.time = np.asarray(self.time, dtype=float)
        self.voltages = {int(k): np.asarray(v, dtype=float) for k, v in self.voltages.items()}
        self.currents = {str(k): np.asarray(v, dtype=float) for k, v in self.currents.items()}
        n = len(self.time)
        for key, vector in list(self.voltages.items()) + list(self.currents.items()):
            if len(vector) != n:
                raise ValueError(f"Vector {key} has {len(vector)} points, expected {n}")
        if n > 1 and np.any(np.diff(self.time) < 0):
            raise ValueError("Time vector must be non-decreasing")

    def __len__(self) -> int:
        return len(self.time)

    def node_indices(self) -> list[int]:
        return sorted(self.voltages)


@dataclass
class DecodeOutcome:
    """What the decoder recovered from one engine run."""

    transient: Optional[DecodedSeries] = None
    operating_point: dict[str, float] = field(default_factory=dict)
    strategy: str = ""

    @property
    def is_empty(self) -> bool:
        return self.transient is None and not self.operating_point


def _to_float(token: str):
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def tokenize_concatenated_row(line: str):
    """
    Split a row whose numbers have no delimiters between them.

    "4999994.999830e-024.999830e-025.000000e+00" -> (499999, [0.0499983, 0.0499983, 5.0])

    Returns:
        (index, values) or None if the row is not a clean sequence of numbers.
    """
    s = re.sub(r"\s+", "", line)
    match = _CONCAT_INDEX_RE.match(s)
    if not match:
        return None
    index = int(match.group(1))

    values = []
    pos = match.end()
    while pos < len(s):
        number = _CONCAT_FLOAT_RE.match(s, pos)
        if not number:
            return None
        value = _to_float(number.group())
        if value is None:
            return None
        values.append(value)
        pos = number.end()

    return (index, values) if values else None


def parse_row(line: str):
    """
    Parse one data row as (index, values).

    Whitespace-delimited rows are the normal case; anything else goes through
    the delimiter-free tokenizer.
    """
    tokens = line.split()
    if not tokens:
        return None
    if len(tokens) > 1:
        try:
            index = int(tokens[0])
            values = [float(t) for t in tokens[1:]]
        except ValueError:
            pass
        else:
            if all(math.isfinite(v) for v in values):
                return index, values
            return None
    return tokenize_concatenated_row(line)


def parse_tabular_transient(output: str) -> Optional[DecodedSeries]:
    """
    Parse ``Index time v(1) v(2) ...`` tables printed by ngspice.

    Long vector lists are split by ngspice into several tables that share the
    row index, so rows are merged by index across tables. Rows whose token
    count disagrees with the header, or whose time would run backwards, are
    dropped.
    """
    columns = None
    all_nodes: list[int] = []
    points: dict[int, list] = {}
    dropped = 0

    for line in output.splitlines():
        header = _HEADER_RE.match(line)
        if header:
            columns = [int(i) for i in _HEADER_VECTOR_RE.findall(header.group(1))]
            for node in columns:
                if node not in all_nodes:
                    all_nodes.append(node)
            continue
        if columns is None or not line.strip() or set(line.strip()) <= {"-"}:
            continue

        parsed = parse_row(line)
        if parsed is None or len(parsed[1]) != len(columns) + 1:
            dropped += 1
            continue
        index, values = parsed
        entry = points.setdefault(index, [values[0], {}])
        entry[1].update(zip(columns, values[1:]))

    if not points:
        return None

    time = []
    voltages: dict[int, list[float]] = {node: [] for node in all_nodes}
    for _, (t, row) in sorted(points.items()):
        if len(row) != len(all_nodes) or (time and t < time[-1]):
            dropped += 1
            continue
        time.append(t)
        for node in all_nodes:
            voltages[node].append(row[node])

    if dropped:
        logger.debug("Tabular decode dropped %d row(s)", dropped)
    if not time:
        return None
    return DecodedSeries(time=time, voltages=voltages)


def _variable_blocks(lines: list[str]):
    """Yield (names, value_lines) for every Variables/Values section."""
    i = 0
    while i < len(lines):
        if lines[i].strip().lower() != "variables:":
            i += 1
            continue

        names = []
        i += 1
        while i < len(lines) and lines[i].strip().lower() != "values:":
            match = _VARIABLE_LINE_RE.match(lines[i])
            if match:
                names.append(match.group(2).lower())
            elif lines[i].strip():
                break
            i += 1
        if i >= len(lines) or lines[i].strip().lower() != "values:":
            continue

        # Points may be separated by blank lines; any text line ends the section
        values = []
        i += 1
        while i < len(lines) and not _RAW_SECTION_RE.match(lines[i]):
            stripped = lines[i].strip()
            if stripped and stripped[0] not in "0123456789+-.":
                break
            if stripped:
                values.append(lines[i])
            i += 1
        yield names, values


def _read_value_rows(value_lines: list[str], width: int):
    """
    Yield complete rows of ``width`` floats.

    Accepts one row per line ("0 t v1 v2") and the rawfile point layout where
    the first line holds the point index and first value and each following
    line holds one more value.
    """
    pending = None
    for line in value_lines:
        tokens = line.split()
        row = None
        if len(tokens) == width + 1 and tokens[0].isdigit():
            row, pending = tokens[1:], None
        elif len(tokens) == 2 and tokens[0].isdigit():
            pending = [tokens[1]]
        elif len(tokens) == 1 and pending is not None:
            pending.append(tokens[0])
        else:
            pending = None
            parsed = tokenize_concatenated_row(line)
            if parsed and len(parsed[1]) == width:
                yield parsed[1]
            continue

        if pending is not None and len(pending) == width:
            row, pending = pending, None
        if row is not None:
            floats = [_to_float(t) for t in row]
            if None not in floats:
                yield floats


def parse_variables_block(output: str) -> Optional[DecodedSeries]:
    """
    Parse a ``Variables:`` / ``Values:`` section.

    Column positions come from the variable names rather than being assumed,
    so ``v(3)`` listed before ``v(1)`` still lands on node 3.
    """
    for names, value_lines in _variable_blocks(output.splitlines()):
        if "time" not in names:
            continue
        time_col = names.index("time")
        node_cols = {}
        for col, name in enumerate(names):
            match = _VOLTAGE_NAME_RE.match(name)
            if match:
                node_cols[int(match.group(1))] = col

        time: list[float] = []
        voltages: dict[int, list[float]] = {node: [] for node in node_cols}
        for row in _read_value_rows(value_lines, len(names)):
            t = row[time_col]
            if time and t < time[-1]:
                continue
            time.append(t)
            for node, col in node_cols.items():
                voltages[node].append(row[col])

        if time:
            return DecodedSeries(time=time, voltages=voltages)
    return None


def parse_op_results(output: str) -> dict[str, float]:
    """
    Collect operating-point values.

    Node voltages become ``v_<id>`` and branch currents ``i_<device>``.
    """
    values: dict[str, float] = {}
    for line in output.splitlines():
        for pattern, prefix in _OP_PATTERNS:
            match = pattern.search(line)
            if not match:
                continue
            value = _to_float(match.group(2))
            if value is None:
                continue
            name = match.group(1).strip()
            if prefix == "i":
                name = name.lower()
            values[f"{prefix}_{name}"] = value
            break
    return values


# Tried in order; the first result with enough points wins
TRANSIENT_STRATEGIES = (parse_tabular_transient, parse_variables_block)


class ResultParser:
    """Parses ngspice simulation results"""

    strategies = TRANSIENT_STRATEGIES

    @staticmethod
    def decode(output: str, min_points: int = DEFAULT_MIN_POINTS) -> DecodeOutcome:
        """
        Decode raw engine output.

        A transient result is accepted only with more than ``min_points``
        points; shorter results are treated as truncated and discarded.
        """
        outcome = DecodeOutcome(operating_point=parse_op_results(output or ""))

        for strategy in ResultParser.strategies:
            series = strategy(output or "")
            if series is None:
                continue
            if len(series) > min_points:
                outcome.transient = series
                outcome.strategy = strategy.__name__
                logger.info("Decoded %d transient points with %s", len(series), strategy.__name__)
                break
            logger.info(
                "Rejected %d-point transient result from %s (need more than %d)",
                len(series),
                strategy.__name__,
                min_points,
            )

        return outcome
