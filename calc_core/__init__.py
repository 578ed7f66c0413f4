"""
calc_core — calculation core of the EE calculators.

- power-factor resolver: any two of kW / kVAR / kVA / PF -> the other two,
  with a per-panel lock on the supplied pair (pf_session.recompute)
- stateless calculators: voltage conversion, three-phase power, droop,
  SoC timing, round-trip efficiency

No UI imports here: the Streamlit app is only a renderer of these results.
"""

from .pf_resolver import ImpossibleCombination, resolve_pair
from .pf_session import (
    AwaitingInput,
    Rejected,
    Resolved,
    SolverSession,
    clear_session,
    recompute,
)

__all__ = [
    "AwaitingInput",
    "ImpossibleCombination",
    "Rejected",
    "Resolved",
    "SolverSession",
    "clear_session",
    "recompute",
    "resolve_pair",
]
