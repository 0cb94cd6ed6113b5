"""
simulation/nets.py

Canonical spelling of net names. All ground aliases collapse to "0"; every
other name is trimmed and otherwise kept verbatim (case-sensitive).
"""

GROUND_NET = "0"

GROUND_ALIASES = frozenset({"0", "GND", "GROUND", "AGND", "DGND"})


def normalize_net(raw) -> str:
    """Return "" for blank input, "0" for any ground alias, else the trimmed name."""
    if raw is None:
        return ""
    name = str(raw).strip()
    if not name:
        return ""
    if name.upper() in GROUND_ALIASES:
        return GROUND_NET
    return name


def is_ground(raw) -> bool:
    return normalize_net(raw) == GROUND_NET
