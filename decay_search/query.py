"""
Query parsing.

Turns free text typed by the user into energy intervals (keV).

Grammar, one energy per line:

    [modifier] value unit [uncertainty%]

- "#" starts a comment that runs to the end of the line.
- Blank lines are ignored.
- The modifier is "definitely" or "maybe" (case-insensitive).

Lenient on purpose (do not "fix"):
- An unknown unit token is treated as keV (factor 1).
- An unknown modifier word is treated as "definitely".
- Anything after the recognised prefix of a line is ignored.

License: MIT
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

logger = logging.getLogger(__name__)

_LINE_PATTERN = re.compile(
    r"^(?P<modifier>[a-zA-Z]*)[ \t]*"
    r"(?P<energy>(?:[0-9]*\.)?[0-9]+)[ \t]*"
    r"(?P<unit>[a-zA-Z]+)"
    r"(?:[ \t]+(?P<uncertainty>(?:[0-9]*\.)?[0-9]+)%)?"
)

UNIT_FACTORS_TO_KEV = {
    "MeV": 1000.0,
    "keV": 1.0,
    "eV": 0.001,
}


class Modifier(str, Enum):
    DEFINITE = "definitely"
    MAYBE = "maybe"


class QueryParseError(ValueError):
    """A query line does not fit the expected grammar."""

    def __init__(self, line: str):
        super().__init__(f"Cannot parse query line: {line!r}")
        self.line = line


@dataclass(frozen=True)
class Energy:
    """An entered energy as a closed interval in keV."""
    lower_keV: float
    upper_keV: float
    modifier: Modifier = Modifier.DEFINITE

    def __str__(self) -> str:
        return (
            f"lower bound={self.lower_keV}; upper bound={self.upper_keV}; "
            f"modifier: {self.modifier.value}"
        )


def unit_factor(unit: str) -> float:
    """Multiplier converting `unit` to keV; unknown units fall back to 1."""
    return UNIT_FACTORS_TO_KEV.get(unit, 1.0)


def parse_modifier(word: str) -> Modifier:
    """Map a modifier word to Modifier; empty or unknown words mean DEFINITE."""
    w = word.lower()
    if w == "maybe":
        return Modifier.MAYBE
    if w in ("", "definitely"):
        return Modifier.DEFINITE
    # Unrecognised words are accepted as a plain measurement.
    return Modifier.DEFINITE


def energy_bounds(value: float, unit: str, uncertainty_pct: float = 0.0) -> Tuple[float, float]:
    """Return (lower, upper) in keV for a value with a relative uncertainty in %."""
    centre = value * unit_factor(unit)
    u = uncertainty_pct / 100.0
    # lower bound is clamped at 0 keV
    return max(0.0, centre * (1.0 - u)), centre * (1.0 + u)


def parse_line(line: str) -> Energy:
    """
    Parse one comment-stripped, trimmed query line.

    Raises QueryParseError when the line does not start with the
    `[modifier] value unit [uncertainty%]` shape, or when the numbers
    overflow to a non-finite interval.
    """
    m = _LINE_PATTERN.match(line)
    if m is None:
        logger.debug("No match: %s", line)
        raise QueryParseError(line)

    value = float(m.group("energy"))
    uncertainty = float(m.group("uncertainty") or 0.0)
    lower, upper = energy_bounds(value, m.group("unit"), uncertainty)
    if not all(math.isfinite(x) for x in (value, uncertainty, lower, upper)):
        logger.debug("Out of range: %s", line)
        raise QueryParseError(line)
    energy = Energy(
        lower_keV=lower,
        upper_keV=upper,
        modifier=parse_modifier(m.group("modifier")),
    )
    logger.debug("Parsed %r -> %s", line, energy)
    return energy


def parse_query(text: str) -> List[Energy]:
    """
    Parse a multi-line query into energies, in line order.

    Comments and blank lines are skipped, so a query made only of comments
    gives an empty list. The first bad line aborts the whole query.
    """
    energies: List[Energy] = []
    for raw in text.split("\n"):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        try:
            energies.append(parse_line(line))
        except QueryParseError:
            logger.error("Error while parsing line: %s", line)
            raise
    return energies
