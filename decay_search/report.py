"""
Report formatting and the end-to-end search entry point.

License: MIT
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from .config import NO_RESULTS_MESSAGE, VERIFY_QUERY_MESSAGE
from .database import RadiationType, TransitionTable, default_table
from .matcher import TransitionResult, search
from .query import QueryParseError, parse_query


class PrintMode(str, Enum):
    EVERYTHING = "everything"
    ONLY_MATCHES = "only_matches"


def parse_print_mode(value: str) -> PrintMode:
    """Parse a print-mode string into PrintMode."""
    v = (value or "everything").strip().lower()
    if v in ("everything", "all"):
        return PrintMode.EVERYTHING
    if v in ("only_matches", "only-matches", "matches"):
        return PrintMode.ONLY_MATCHES
    raise ValueError(f"Unknown print mode '{value}' (use everything, only_matches).")


def parse_radiation_type(value: str) -> RadiationType:
    """Parse 'gamma'/'alpha' (or the one-letter codes) into RadiationType."""
    v = (value or "gamma").strip().lower()
    if v in ("gamma", "g"):
        return RadiationType.GAMMA
    if v in ("alpha", "a"):
        return RadiationType.ALPHA
    raise ValueError(f"Unknown radiation type '{value}' (use gamma, alpha).")


def format_results(results: Dict[str, List[TransitionResult]], print_mode: PrintMode) -> str:
    """
    Render a result set as text.

    One summary line, then per decay a blank line, the decay id and a
    numbered list of transitions ("*" marks a match). With ONLY_MATCHES the
    unmatched rows are left out and numbering counts printed rows only.
    """
    noun = "decay" if len(results) == 1 else "decays"
    lines = [f"{len(results)} {noun} found (energies are given in keV, * denotes a match):"]

    for decay_id, rows in results.items():
        lines.append("")
        lines.append(decay_id)
        i = 1
        for r in rows:
            if print_mode == PrintMode.ONLY_MATCHES and not r.matched:
                continue
            marker = "*" if r.matched else " "
            lines.append(f"{marker}{i:>5}{r.transition}")
            i += 1

    return "\n".join(lines) + "\n"


def search_energies(
    text: str,
    radiation_type: RadiationType,
    print_mode: PrintMode,
    table: Optional[TransitionTable] = None,
) -> str:
    """Parse `text`, search the table and return the report (or a user message)."""
    try:
        energies = parse_query(text)
    except QueryParseError:
        return VERIFY_QUERY_MESSAGE

    if table is None:
        table = default_table()

    results = search(energies, radiation_type, table)
    if results is None:
        return NO_RESULTS_MESSAGE
    return format_results(results, print_mode)
