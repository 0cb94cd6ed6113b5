"""
simulation/units.py

Parses physical quantities written as SI-prefixed free text ("15kΩ", "1µF",
"10meg", "3.3") and formats numbers for decks and for display.
"""

import math
import re

# Multipliers for SI prefixes. "meg" is matched before "m"; uppercase "M"
# alone is mega, lowercase "m" is milli. Everything else is case-insensitive.
SI_PREFIX_MULTIPLIERS = {
    "t": 1e12,
    "g": 1e9,
    "meg": 1e6,
    "k": 1e3,
    "m": 1e-3,
    "u": 1e-6,
    "µ": 1e-6,  # micro sign U+00B5
    "μ": 1e-6,  # greek mu U+03BC
    "n": 1e-9,
    "p": 1e-12,
    "f": 1e-15,
}

# Unit symbols that may follow the prefix. Matched case-insensitively, except
# farad which must be an uppercase "F" so that "1f" stays femto.
_UNIT_SYMBOLS = ("hz", "v", "a", "h", "s")

FORMATTING_PREFIXES = (
    (1e12, "T"),
    (1e9, "G"),
    (1e6, "M"),
    (1e3, "k"),
    (1.0, ""),
    (1e-3, "m"),
    (1e-6, "u"),
    (1e-9, "n"),
    (1e-12, "p"),
    (1e-15, "f"),
)

_OHM_RE = re.compile(r"[ΩΩ]|ohms?", re.IGNORECASE)
_QUANTITY_RE = re.compile(r"^([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)([a-zA-Zµμ]*)$")


def _is_unit(token: str) -> bool:
    return token == "F" or token.lower() in _UNIT_SYMBOLS


def _prefix_multiplier(suffix: str):
    """
    Return the multiplier for a prefix+unit suffix, or None if unrecognised.
    """
    if suffix == "" or _is_unit(suffix):
        return 1.0

    if suffix[:3].lower() == "meg":
        prefix, rest = "meg", suffix[3:]
    elif suffix[0] == "M":
        return 1e6 if suffix[1:] == "" or _is_unit(suffix[1:]) else None
    elif suffix[0] == "m":
        prefix, rest = "m", suffix[1:]
    else:
        prefix, rest = suffix[0].lower(), suffix[1:]

    multiplier = SI_PREFIX_MULTIPLIERS.get(prefix)
    if multiplier is None:
        return None
    if rest and not _is_unit(rest):
        return None
    return multiplier


def parse_quantity(value, fallback: float = 0.0) -> float:
    """
    Parse a physical quantity into base SI units.

    Examples: "15kΩ" -> 15000.0, "1µF" -> 1e-6, "10meg" -> 1e7, "1m" -> 1e-3.
    Never raises; returns ``fallback`` for anything it cannot read.
    """
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else fallback

    text = _OHM_RE.sub("", str(value))
    text = re.sub(r"[\s_]+", "", text)
    if not text:
        return fallback

    match = _QUANTITY_RE.match(text)
    if match:
        multiplier = _prefix_multiplier(match.group(2))
        if multiplier is not None:
            result = float(match.group(1)) * multiplier
            return result if math.isfinite(result) else fallback

    try:
        result = float(text)
    except ValueError:
        return fallback
    return result if math.isfinite(result) else fallback


def format_spice_number(value: float) -> str:
    """Render a number for a deck line: 1000.0 -> "1000", 1e-6 -> "1e-06"."""
    if not math.isfinite(value):
        return "0"
    return f"{value:.12g}"


def format_si(value: float, unit: str = "") -> str:
    """
    Format a float with the most appropriate SI prefix.

    Examples: 15000 -> "15k", 0.005 (unit "A") -> "5mA", 4.7e-6 -> "4.7u"
    """
    if not math.isfinite(value):
        return f"{value}{unit}"
    if value == 0:
        return f"0{unit}"

    abs_val = abs(value)
    for mult, prefix in FORMATTING_PREFIXES:
        if abs_val >= mult * (1 - 1e-12):
            scaled = f"{value / mult:.6f}".rstrip("0").rstrip(".")
            return f"{scaled}{prefix}{unit}"

    return f"{value:.3e}{unit}"
