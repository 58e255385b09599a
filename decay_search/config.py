"""
Configuration for the decay radiation search.

Edit the data path here if you replace the packaged reference table.

Important:
- The reference table is read-only and loaded once per process.
- Bump DATABASE_VERSION whenever transitions.csv.gz is regenerated.

License: MIT
"""

from pathlib import Path

DATABASE_PATH = Path(__file__).resolve().parent / "data" / "transitions.csv.gz"
DATABASE_VERSION = "2024.1"

DEFAULT_QUERY = """# One energy per line: [modifier] value unit [uncertainty%]
1173 keV 0.1%
maybe 1.3325 MeV 0.1%  # second Co-60 line
"""

WAITING_MESSAGE = "Waiting for input"
NO_RESULTS_MESSAGE = "No results found"
VERIFY_QUERY_MESSAGE = "Verify the search query"

SOURCE_URL = "https://github.com/cristian-jfv/decay-radiation-search"
