#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

ROOT = Path(__file__).resolve().parents[1]

# Allow running as "python tools/pf_batch.py" (so repo root is importable)
sys.path.insert(0, str(ROOT))

from calc_core import AwaitingInput, Rejected, Resolved, SolverSession, recompute  # noqa: E402
from calc_core.pf_fields import QUANTITIES  # noqa: E402

logger = logging.getLogger("pf_batch")


def _cell_text(value) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value)


def resolve_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Resolve every row independently (fresh session per row).

    Missing quantity columns are treated as empty. Resolved rows get all four
    quantities filled; other rows keep their input and carry a message.
    """
    out = df.copy()
    for q in QUANTITIES:
        if q not in out.columns:
            out[q] = None
    out[list(QUANTITIES)] = out[list(QUANTITIES)].astype(object)

    statuses: list[str] = []
    messages: list[str] = []
    for idx, row in out.iterrows():
        texts = {q: _cell_text(row[q]) for q in QUANTITIES}
        outcome = recompute(texts, SolverSession())
        if isinstance(outcome, Resolved):
            for q in QUANTITIES:
                out.at[idx, q] = outcome.values[q]
            statuses.append("RESOLVED")
            messages.append("")
        elif isinstance(outcome, Rejected):
            logger.info("Row %s rejected: %s", idx, outcome.message)
            statuses.append("REJECTED")
            messages.append(outcome.message)
        elif isinstance(outcome, AwaitingInput):
            statuses.append("AWAITING")
            messages.append(outcome.message)
    out["status"] = statuses
    out["message"] = messages
    return out


def main() -> int:
    ap = argparse.ArgumentParser(description="Resolve power-triangle rows from a CSV file.")
    ap.add_argument("input", help="CSV with any of: " + ", ".join(QUANTITIES))
    ap.add_argument("--out", required=True, help="Output CSV path")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    df = pd.read_csv(args.input, dtype=str, keep_default_na=False)
    result = resolve_frame(df)
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(out_path, index=False, encoding="utf-8")

    resolved = int((result["status"] == "RESOLVED").sum())
    print(f"OK: {resolved}/{len(result)} rows resolved -> {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
