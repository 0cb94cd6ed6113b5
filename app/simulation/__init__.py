from .convergence import ErrorCategory, ErrorDiagnosis, diagnose_error, format_user_message
from .fallback_solver import FallbackResult, solve_fallback
from .junction_resolver import JunctionConflictError, JunctionResolver
from .netlist_generator import NetlistGenerator, SimulationDeck
from .nets import GROUND_NET, is_ground, normalize_net
from .ngspice_runner import NgspiceRunner
from .node_allocator import NodeAllocator, NodeMap
from .result_labeler import LabeledSeries, label_series, resolve_probes
from .result_parser import DecodedSeries, DecodeOutcome, ResultParser
from .settings import SimulationSettings, load_settings
from .units import format_si, format_spice_number, parse_quantity

__all__ = [
    'NetlistGenerator',
    'NgspiceRunner',
    'ResultParser',
    'SimulationDeck',
    'SimulationSettings',
    'load_settings',
    'NodeAllocator',
    'NodeMap',
    'JunctionResolver',
    'JunctionConflictError',
    'DecodedSeries',
    'DecodeOutcome',
    'FallbackResult',
    'solve_fallback',
    'LabeledSeries',
    'label_series',
    'resolve_probes',
    'ErrorCategory',
    'ErrorDiagnosis',
    'diagnose_error',
    'format_user_message',
    'GROUND_NET',
    'is_ground',
    'normalize_net',
    'parse_quantity',
    'format_spice_number',
    'format_si',
]
