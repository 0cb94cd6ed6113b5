"""
simulation/convergence.py

Classifies failed ngspice runs into categories with a short explanation
for the person who built the breadboard. Failures are reported, never
retried.
"""

import re
from dataclasses import dataclass
from enum import Enum


class ErrorCategory(Enum):
    """Categories of simulation-request failures."""

    EXECUTABLE_NOT_FOUND = "executable_not_found"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    SINGULAR_MATRIX = "singular_matrix"
    DC_CONVERGENCE = "dc_convergence"
    TIMESTEP_TOO_SMALL = "timestep_too_small"
    DECK_ERROR = "deck_error"
    UNKNOWN = "unknown"


# Runner error strings come first; engine output is searched afterwards.
_RUNNER_PATTERNS: list[tuple[re.Pattern, ErrorCategory]] = [
    (re.compile(r"executable not found|failed to start", re.IGNORECASE), ErrorCategory.EXECUTABLE_NOT_FOUND),
    (re.compile(r"timed out", re.IGNORECASE), ErrorCategory.TIMEOUT),
    (re.compile(r"cancelled", re.IGNORECASE), ErrorCategory.CANCELLED),
]

_ENGINE_PATTERNS: list[tuple[re.Pattern, ErrorCategory]] = [
    (re.compile(r"singular matrix", re.IGNORECASE), ErrorCategory.SINGULAR_MATRIX),
    (re.compile(r"timestep too small", re.IGNORECASE), ErrorCategory.TIMESTEP_TOO_SMALL),
    (re.compile(r"no convergence|gmin stepping failed|source stepping failed", re.IGNORECASE),
     ErrorCategory.DC_CONVERGENCE),
    (re.compile(r"unknown (?:device|model|subckt)|could not find (?:a valid )?model|syntax error",
                re.IGNORECASE), ErrorCategory.DECK_ERROR),
]


@dataclass
class ErrorDiagnosis:
    """Structured diagnosis of a simulation failure."""

    category: ErrorCategory
    message: str
    suggestions: list[str]


_DIAGNOSES: dict[ErrorCategory, ErrorDiagnosis] = {
    ErrorCategory.EXECUTABLE_NOT_FOUND: ErrorDiagnosis(
        category=ErrorCategory.EXECUTABLE_NOT_FOUND,
        message="ngspice could not be started.",
        suggestions=[
            "Install ngspice and make sure it is on PATH",
            "Or point NGSPICE_PATH (or ngspice_path in the settings file) at the executable",
        ],
    ),
    ErrorCategory.TIMEOUT: ErrorDiagnosis(
        category=ErrorCategory.TIMEOUT,
        message="The simulation took too long and was stopped.",
        suggestions=[
            "Shorten the transient stop time or use a larger time step",
            "Raise the timeout in the settings file",
        ],
    ),
    ErrorCategory.CANCELLED: ErrorDiagnosis(
        category=ErrorCategory.CANCELLED,
        message="The simulation was cancelled.",
        suggestions=[],
    ),
    ErrorCategory.SINGULAR_MATRIX: ErrorDiagnosis(
        category=ErrorCategory.SINGULAR_MATRIX,
        message="The circuit equations could not be solved (singular matrix).",
        suggestions=[
            "Check that every wire strip has a path to ground",
            "Make sure no two batteries are connected directly in parallel",
            "Look for parts with only one leg plugged in",
        ],
    ),
    ErrorCategory.DC_CONVERGENCE: ErrorDiagnosis(
        category=ErrorCategory.DC_CONVERGENCE,
        message="The simulator could not find a stable operating point.",
        suggestions=[
            "Check that every node has a DC path to ground",
            "Verify resistor and capacitor values are realistic",
            "Check transistor and LED orientation",
        ],
    ),
    ErrorCategory.TIMESTEP_TOO_SMALL: ErrorDiagnosis(
        category=ErrorCategory.TIMESTEP_TOO_SMALL,
        message="The transient run could not advance in time.",
        suggestions=[
            "Increase the transient time step",
            "Check for very small capacitors paired with very large resistors",
        ],
    ),
    ErrorCategory.DECK_ERROR: ErrorDiagnosis(
        category=ErrorCategory.DECK_ERROR,
        message="ngspice rejected the generated netlist.",
        suggestions=[
            "Check component values for typos",
            "Use a device model from the built-in library",
        ],
    ),
    ErrorCategory.UNKNOWN: ErrorDiagnosis(
        category=ErrorCategory.UNKNOWN,
        message="The simulation failed for an unexpected reason.",
        suggestions=[
            "Verify all components are connected properly",
            "Try a simpler circuit to isolate the problem",
        ],
    ),
}


def classify_error(error: str, stdout: str = "") -> ErrorCategory:
    """Classify a failure from the runner's error string and the engine output.

    Runner errors (missing executable, timeout, cancellation) win over
    anything ngspice printed before it was stopped.
    """
    if error:
        for pattern, category in _RUNNER_PATTERNS:
            if pattern.search(error):
                return category
    for text in (error, stdout):
        if not text:
            continue
        for pattern, category in _ENGINE_PATTERNS:
            if pattern.search(text):
                return category
    return ErrorCategory.UNKNOWN


def diagnose_error(error: str, stdout: str = "") -> ErrorDiagnosis:
    """Classify and return a full diagnosis for a simulation failure."""
    return _DIAGNOSES[classify_error(error, stdout)]


def format_user_message(diagnosis: ErrorDiagnosis, detail: str = "") -> str:
    """Build the error string handed back with a failed result.

    *detail* is the runner's own error text, kept so the captured diagnostic
    is never lost.
    """
    parts = [diagnosis.message]
    if detail:
        parts.append(f"({detail})")

    if diagnosis.suggestions:
        parts.append("\nSuggestions:")
        for suggestion in diagnosis.suggestions:
            parts.append(f"  - {suggestion}")

    return "\n".join(parts)
