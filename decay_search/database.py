"""
Reference transition table.

Expected CSV format (gzip-compressed in the packaged resource):

- parent, daughter, decay_type, radiation_type, energy_text,
  uncertainty_text, intensity, lower_keV, upper_keV

Notes:
- "decay_type" is the decay identifier (parent, daughter and decay mode in one
  string). It is used as an opaque grouping key.
- "radiation_type" is a one-letter code: "G" (gamma) or "A" (alpha).
- lower_keV/upper_keV are precomputed from energy_text and uncertainty_text.

The table is read-only: load it once and share the TransitionTable object.

License: MIT
"""

from __future__ import annotations

import logging
import zlib
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

from .config import DATABASE_PATH, DATABASE_VERSION

logger = logging.getLogger(__name__)

COLUMNS = [
    "parent",
    "daughter",
    "decay_type",
    "radiation_type",
    "energy_text",
    "uncertainty_text",
    "intensity",
    "lower_keV",
    "upper_keV",
]
_TEXT_COLS = ["parent", "daughter", "decay_type", "radiation_type", "energy_text", "uncertainty_text"]
_NUMERIC_COLS = ["intensity", "lower_keV", "upper_keV"]


class RadiationType(str, Enum):
    GAMMA = "G"
    ALPHA = "A"


class TransitionTableError(ValueError):
    """The reference table is missing columns or holds invalid rows."""


@dataclass(frozen=True)
class Transition:
    """One emission line of a decay dataset."""
    parent: str
    daughter: str
    decay_type: str
    radiation_type: RadiationType
    energy_text: str
    uncertainty_text: str
    intensity: float
    lower_keV: float
    upper_keV: float

    @property
    def energy_keV(self) -> float:
        return float(self.energy_text)

    def __str__(self) -> str:
        return f" {self.energy_text:>7.7} ({self.uncertainty_text})"


def _validate(df: pd.DataFrame) -> pd.DataFrame:
    """Check schema and content; return a cleaned copy with typed columns."""
    missing = set(COLUMNS) - set(df.columns)
    if missing:
        raise TransitionTableError(f"Transition table missing columns: {sorted(missing)}")

    df = df[COLUMNS].copy()
    for col in _TEXT_COLS:
        if df[col].isna().any():
            raise TransitionTableError(f"Transition table has empty values in '{col}'")
        df[col] = df[col].astype(str).str.strip()

    for col in _NUMERIC_COLS:
        df[col] = pd.to_numeric(df[col], errors="coerce")
        if not np.isfinite(df[col].to_numpy(dtype=float)).all():
            raise TransitionTableError(f"Transition table has non-numeric values in '{col}'")

    energies = pd.to_numeric(df["energy_text"], errors="coerce")
    if energies.isna().any():
        bad = df.loc[energies.isna(), "energy_text"].tolist()[:5]
        raise TransitionTableError(f"Non-numeric transition energies: {bad}")

    codes = {rt.value for rt in RadiationType}
    unknown = set(df["radiation_type"]) - codes
    if unknown:
        raise TransitionTableError(f"Unknown radiation types: {sorted(unknown)}")

    if (df["lower_keV"] > df["upper_keV"]).any() or (df["lower_keV"] < 0).any():
        raise TransitionTableError("Transition bounds must satisfy 0 <= lower_keV <= upper_keV")

    return df.reset_index(drop=True)


def _row_to_transition(row) -> Transition:
    return Transition(
        parent=row.parent,
        daughter=row.daughter,
        decay_type=row.decay_type,
        radiation_type=RadiationType(row.radiation_type),
        energy_text=row.energy_text,
        uncertainty_text=row.uncertainty_text,
        intensity=float(row.intensity),
        lower_keV=float(row.lower_keV),
        upper_keV=float(row.upper_keV),
    )


class TransitionTable:
    """
    Immutable in-memory collection of reference transitions.

    Construct once (see `load_transition_table` / `default_table`) and pass
    it to `matcher.search`.
    """

    def __init__(self, df: pd.DataFrame, *, version: Optional[str] = None):
        self._df = _validate(df)
        self.version = version
        self._by_type = {
            rt: self._df[self._df["radiation_type"] == rt.value].reset_index(drop=True)
            for rt in RadiationType
        }

    @classmethod
    def from_records(cls, records: Iterable[Mapping], *, version: Optional[str] = None) -> "TransitionTable":
        """Build a table from dict-like rows (enum values are accepted for radiation_type)."""
        rows = []
        for r in records:
            row = dict(r)
            rt = row.get("radiation_type")
            if isinstance(rt, RadiationType):
                row["radiation_type"] = rt.value
            rows.append(row)
        return cls(pd.DataFrame(rows, columns=COLUMNS), version=version)

    def __len__(self) -> int:
        return len(self._df)

    @property
    def dataframe(self) -> pd.DataFrame:
        """A copy of the underlying rows."""
        return self._df.copy()

    def of_radiation_type(self, radiation_type: RadiationType) -> pd.DataFrame:
        """A copy of the rows of one radiation type."""
        return self._rows(radiation_type).copy()

    def _rows(self, radiation_type: RadiationType) -> pd.DataFrame:
        # shared internal frame; callers must not modify it
        return self._by_type[RadiationType(radiation_type)]

    def decay_ids(self) -> List[str]:
        return sorted(self._df["decay_type"].unique())

    def transitions_for_decay(self, decay_id: str, radiation_type: RadiationType) -> List[Transition]:
        sub = self._rows(radiation_type)
        rows = sub[sub["decay_type"] == decay_id]
        return [_row_to_transition(row) for row in rows.itertuples(index=False)]


def load_transition_table(path: Optional[Path] = None) -> TransitionTable:
    """
    Load and validate the reference table.

    Raises FileNotFoundError if the file is missing and TransitionTableError
    if it cannot be read or fails validation.
    """
    path = Path(path) if path is not None else DATABASE_PATH
    if not path.exists():
        raise FileNotFoundError(str(path))
    try:
        df = pd.read_csv(path, dtype={"energy_text": str, "uncertainty_text": str}, compression="infer")
    except (ValueError, OSError, EOFError, zlib.error) as e:
        raise TransitionTableError(f"Cannot read transition table '{path}': {e}") from e

    table = TransitionTable(df, version=DATABASE_VERSION if path.resolve() == DATABASE_PATH.resolve() else None)
    logger.info("Loaded %d transitions from %s (version %s)", len(table), path, table.version)
    return table


@lru_cache(maxsize=1)
def default_table() -> TransitionTable:
    """The packaged table, loaded on first use and kept for the process lifetime."""
    return load_transition_table()
