"""
Export helpers for search results.

The Streamlit UI shows the text report.
This module provides CSV and static PNG exports for reporting.

License: MIT
"""

from __future__ import annotations

from io import BytesIO
from typing import Dict, List

import matplotlib.pyplot as plt
import pandas as pd

from .matcher import TransitionResult

RESULT_COLUMNS = [
    "decay_type",
    "parent",
    "daughter",
    "radiation_type",
    "energy_keV",
    "uncertainty",
    "intensity",
    "lower_keV",
    "upper_keV",
    "matched",
]


def results_to_dataframe(results: Dict[str, List[TransitionResult]]) -> pd.DataFrame:
    """Flatten a result set into one row per transition."""
    rows = []
    for decay_id, items in results.items():
        for r in items:
            t = r.transition
            rows.append(
                {
                    "decay_type": decay_id,
                    "parent": t.parent,
                    "daughter": t.daughter,
                    "radiation_type": t.radiation_type.value,
                    "energy_keV": t.energy_keV,
                    "uncertainty": t.uncertainty_text,
                    "intensity": t.intensity,
                    "lower_keV": t.lower_keV,
                    "upper_keV": t.upper_keV,
                    "matched": r.matched,
                }
            )
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def results_to_csv_bytes(results: Dict[str, List[TransitionResult]]) -> bytes:
    """Serialize a result set to UTF-8 CSV bytes."""
    return results_to_dataframe(results).to_csv(index=False).encode("utf-8")


def results_to_png_bytes(
    results: Dict[str, List[TransitionResult]],
    *,
    title: str,
    signature: str,
    dpi: int = 150,
) -> bytes:
    """
    Render the transitions of every decay as a stick plot (energy vs intensity).

    Matched lines are drawn solid, the rest faded. One color per decay.
    """
    df = results_to_dataframe(results)

    fig, ax = plt.subplots()
    for i, (decay_id, sub) in enumerate(df.groupby("decay_type", sort=True)):
        color = f"C{i % 10}"
        hit = sub[sub["matched"]]
        miss = sub[~sub["matched"]]
        ax.vlines(miss["energy_keV"], 0, miss["intensity"], colors=color, alpha=0.3)
        ax.vlines(hit["energy_keV"], 0, hit["intensity"], colors=color, label=decay_id)
    ax.set_xlabel("Energy (keV)")
    ax.set_ylabel("Intensity (%)")
    ax.set_title(title)
    if not df.empty:
        ax.legend(fontsize=7)

    ax.text(
        0.99,
        0.01,
        signature,
        transform=ax.transAxes,
        ha="right",
        va="bottom",
        fontsize=8,
    )

    fig.tight_layout()
    buf = BytesIO()
    fig.savefig(buf, format="png", dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    buf.seek(0)
    return buf.read()
