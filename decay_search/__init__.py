"""
Decay Radiation Search - Core Package

This package contains reusable, testable building blocks for:
- Parsing free-text energy queries ("662 keV 0.5%") into keV intervals
- Loading the read-only reference table of decay transitions
- Finding decays whose transitions explain ALL entered energies
- Formatting the matches as a text report and exporting them as CSV/PNG

The Streamlit web UI in `app.py` uses this package as its backend.

License: MIT
"""

from .config import DATABASE_PATH, DATABASE_VERSION
from .query import Energy, Modifier, QueryParseError, parse_line, parse_query
from .database import (
    RadiationType,
    Transition,
    TransitionTable,
    TransitionTableError,
    default_table,
    load_transition_table,
)
from .matcher import TransitionResult, intervals_overlap, search
from .report import PrintMode, format_results, search_energies
from .export import results_to_csv_bytes, results_to_png_bytes

__all__ = [
    "DATABASE_PATH",
    "DATABASE_VERSION",
    "Energy",
    "Modifier",
    "QueryParseError",
    "parse_line",
    "parse_query",
    "RadiationType",
    "Transition",
    "TransitionTable",
    "TransitionTableError",
    "default_table",
    "load_transition_table",
    "TransitionResult",
    "intervals_overlap",
    "search",
    "PrintMode",
    "format_results",
    "search_energies",
    "results_to_csv_bytes",
    "results_to_png_bytes",
]
