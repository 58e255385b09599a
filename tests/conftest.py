import pytest

from decay_search.database import TransitionTable


def row(decay_type, energy_text, uncertainty_text, *, radiation_type="G", intensity=1.0, lower=None, upper=None):
    """One reference record; bounds default to energy +/- uncertainty."""
    e = float(energy_text)
    u = float(uncertainty_text)
    parent, daughter = decay_type.split("->") if "->" in decay_type else (decay_type, decay_type)
    return {
        "parent": parent.strip(),
        "daughter": daughter.strip(),
        "decay_type": decay_type,
        "radiation_type": radiation_type,
        "energy_text": energy_text,
        "uncertainty_text": uncertainty_text,
        "intensity": intensity,
        "lower_keV": e - u if lower is None else lower,
        "upper_keV": e + u if upper is None else upper,
    }


@pytest.fixture
def table():
    # D1: two gamma lines at [6.9, 7.0] and [215, 216] keV
    # D2: one gamma line far away from D1
    # D3: alpha-only decay
    return TransitionTable.from_records(
        [
            row("D1", "215.5", "0.5", intensity=20.0),
            row("D1", "6.95", "0.05", intensity=80.0),
            row("D2", "100.5", "0.5"),
            row("D3", "5485.56", "0.12", radiation_type="A", intensity=84.8),
        ]
    )
