"""
Matching engine.

Implements:
- Closed-interval overlap between query energies and reference transitions
- Decay selection: a decay survives only if EVERY query energy overlaps at
  least one of its transitions (AND across query lines)
- Transition flagging: a transition is marked if it overlaps ANY query
  energy (OR across query lines)
- Ascending energy order inside each decay

The two predicates are kept separate on purpose; they are not the same test.

License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set

import numpy as np

from .database import RadiationType, Transition, TransitionTable
from .query import Energy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionResult:
    transition: Transition
    matched: bool


def intervals_overlap(a_lower, a_upper, b_lower, b_upper):
    """
    True where [a_lower, a_upper] and [b_lower, b_upper] overlap.

    Symmetric; works on scalars and element-wise on arrays/Series.
    """
    a_in_b = np.logical_and(b_lower <= a_lower, a_lower <= b_upper)
    b_in_a = np.logical_and(a_lower <= b_lower, b_lower <= a_upper)
    return np.logical_or(a_in_b, b_in_a)


def decays_explaining(energy: Energy, radiation_type: RadiationType, table: TransitionTable) -> Set[str]:
    """Decay ids with at least one transition of this type overlapping `energy`."""
    sub = table.of_radiation_type(radiation_type)
    mask = intervals_overlap(energy.lower_keV, energy.upper_keV, sub["lower_keV"], sub["upper_keV"])
    return set(sub.loc[mask, "decay_type"])


def transition_matches_any(transition: Transition, energies: Sequence[Energy]) -> bool:
    """True if the transition overlaps at least one of the query energies."""
    return any(
        bool(intervals_overlap(e.lower_keV, e.upper_keV, transition.lower_keV, transition.upper_keV))
        for e in energies
    )


def mark_transitions(energies: Sequence[Energy], transitions: Sequence[Transition]) -> List[TransitionResult]:
    """Flag each transition against the query and sort by numeric energy."""
    results = [TransitionResult(t, transition_matches_any(t, energies)) for t in transitions]
    # energy_text is validated as numeric when the table is built
    results.sort(key=lambda r: r.transition.energy_keV)
    return results


def search(
    energies: Sequence[Energy],
    radiation_type: RadiationType,
    table: TransitionTable,
) -> Optional[Dict[str, List[TransitionResult]]]:
    """
    Find decays consistent with all query energies.

    Returns None when nothing was entered or no decay explains every energy.
    Otherwise returns {decay_id: [TransitionResult, ...]} with keys in
    lexicographic order and transitions in ascending energy.
    """
    if not energies:
        return None

    decays = decays_explaining(energies[0], radiation_type, table)
    for e in energies[1:]:
        if not decays:
            break
        decays &= decays_explaining(e, radiation_type, table)

    logger.debug("Search finished: %d decays %s", len(decays), sorted(decays))
    if not decays:
        return None

    return {
        d: mark_transitions(energies, table.transitions_for_decay(d, radiation_type))
        for d in sorted(decays)
    }
