#!/usr/bin/env python3
"""
Decay Radiation Search - Batch Search (CLI)

This script runs many energy queries in batch mode using a queries CSV file.

Why it exists
-------------
- The Streamlit app is great for interactive use.
- For checking a list of measured peaks (several samples, regression checks
  after a data update), a batch run via command line is more convenient.

Queries CSV format
------------------
Required columns:
  query

Optional columns:
  radiation_type,print_mode,out_prefix

Allowed values:
  radiation_type: gamma, alpha
  print_mode:     everything, only_matches

A query cell may hold several lines (quote it in the CSV); the usual query
grammar applies: [modifier] value unit [uncertainty%].

Output
------
For each valid query row:
  - <out>/<out_prefix>.txt   (text report)
  - <out>/<out_prefix>.csv   (matched decays, only when something was found)

How to run
------
python scripts/batch_search.py --queries queries.csv --out out/ --verbose


Notes
-----
- The reference table is loaded once; a missing or corrupt table aborts.
- Rows with an invalid query, radiation_type or print_mode are reported in
  their .txt file as such and counted as skipped.

License: MIT
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# -------------------------------------------------------------------------
# Make imports robust:
# Add the repository root to sys.path so `import decay_search` works
# regardless of how/where the script is invoked.
# -------------------------------------------------------------------------
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# Now we can import the package modules safely.
from decay_search.config import NO_RESULTS_MESSAGE, VERIFY_QUERY_MESSAGE  # noqa: E402
from decay_search.database import RadiationType, TransitionTableError, load_transition_table  # noqa: E402
from decay_search.export import results_to_csv_bytes  # noqa: E402
from decay_search.matcher import search  # noqa: E402
from decay_search.query import QueryParseError, parse_query  # noqa: E402
from decay_search.report import (  # noqa: E402
    PrintMode,
    format_results,
    parse_print_mode,
    parse_radiation_type,
)

logger = logging.getLogger("batch_search")


def _err(msg: str, code: int = 1) -> None:
    """Print an error message to stderr and exit with a non-zero code."""
    print(f"ERROR: {msg}", file=sys.stderr)
    raise SystemExit(code)


def load_queries_csv(path: Path) -> pd.DataFrame:
    """Load queries CSV with friendly errors."""
    if not path.exists():
        _err(f"Queries file not found: {path}")

    try:
        df = pd.read_csv(path)
    except Exception as e:
        _err(f"Failed to read queries file '{path}': {e}")

    if df.empty:
        _err(f"Queries file '{path}' is empty.")

    if "query" not in df.columns:
        _err("Queries CSV missing required column: 'query'")

    return df


def ensure_out_dir(out_dir: Path) -> None:
    """Create output directory with friendly errors."""
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except Exception as e:
        _err(f"Cannot create output directory '{out_dir}': {e}")


def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description="Batch search decay radiation energies.")
    ap.add_argument("--queries", required=True, type=Path, help="CSV file with one query per row.")
    ap.add_argument("--out", required=True, type=Path, help="Output directory.")
    ap.add_argument("--table", type=Path, default=None, help="Alternative transition table (CSV or CSV.GZ).")
    ap.add_argument("--verbose", action="store_true", help="Print skip reasons and progress.")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    queries = load_queries_csv(args.queries)
    ensure_out_dir(args.out)

    # ---------------------------------------------------------------------
    # Load the reference table ONCE. Without it nothing can be searched.
    # ---------------------------------------------------------------------
    try:
        table = load_transition_table(args.table)
    except (FileNotFoundError, TransitionTableError) as e:
        _err(f"Cannot load transition table: {e}")

    found = 0
    empty = 0
    skipped = 0

    # ---------------------------------------------------------------------
    # Process each row as one query
    # ---------------------------------------------------------------------
    for idx, row in queries.iterrows():
        out_prefix = f"{idx:04d}_query"
        if "out_prefix" in queries.columns and pd.notna(row.get("out_prefix")):
            out_prefix = str(row["out_prefix"]).strip()
        txt_path = args.out / f"{out_prefix}.txt"

        try:
            text = "" if pd.isna(row["query"]) else str(row["query"])

            rt = RadiationType.GAMMA
            if "radiation_type" in queries.columns and pd.notna(row.get("radiation_type")):
                rt = parse_radiation_type(str(row["radiation_type"]))

            mode = PrintMode.EVERYTHING
            if "print_mode" in queries.columns and pd.notna(row.get("print_mode")):
                mode = parse_print_mode(str(row["print_mode"]))
        except ValueError as e:
            skipped += 1
            txt_path.write_text(f"Invalid options: {e}\n", encoding="utf-8")
            logger.info("[SKIP row %s] %s", idx, e)
            continue

        try:
            energies = parse_query(text)
        except QueryParseError as e:
            skipped += 1
            txt_path.write_text(VERIFY_QUERY_MESSAGE + "\n", encoding="utf-8")
            logger.info("[SKIP row %s] %s", idx, e)
            continue

        results = search(energies, rt, table)
        if results is None:
            empty += 1
            txt_path.write_text(NO_RESULTS_MESSAGE + "\n", encoding="utf-8")
            logger.info("[EMPTY row %s] No decay explains all %d energies", idx, len(energies))
            continue

        txt_path.write_text(format_results(results, mode), encoding="utf-8")
        csv_path = args.out / f"{out_prefix}.csv"
        csv_path.write_bytes(results_to_csv_bytes(results))

        found += 1
        logger.info("[OK row %s] Wrote %s, %s | %d decays", idx, txt_path.name, csv_path.name, len(results))

    print(f"Batch search completed. With results: {found}, No results: {empty}, Skipped: {skipped}. Output dir: {args.out}")


if __name__ == "__main__":
    main()
