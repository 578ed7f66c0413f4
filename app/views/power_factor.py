"""
Power-factor panel: any two of kW / kVA / kVAR / PF, the other two computed.

The panel owns one SolverSession and one DebouncedScheduler in its session
state slot. Field edits only request a recompute; the request is run once per
script run, so several edits committed together collapse into one cycle.
"""
from __future__ import annotations

import pandas as pd
import streamlit as st

from app.i18n import t
from app.ui_components import field_key, init_fields, render_inputs, status_chip
from calc_core.pf_fields import QUANTITIES, SHORT_NAMES
from calc_core.pf_session import (
    AwaitingInput,
    Rejected,
    Resolved,
    SolverSession,
    apply_outcome,
    clear_session,
    read_only_ids,
    recompute,
)
from calc_core.registry import POWER_FACTOR_CALC
from calc_core.scheduler import DebouncedScheduler

CALC = POWER_FACTOR_CALC
SESSION_KEY = f"{CALC.id}._session"
SCHEDULER_KEY = f"{CALC.id}._scheduler"
OUTCOME_KEY = f"{CALC.id}._outcome"


def _panel(state: dict) -> tuple[SolverSession, DebouncedScheduler]:
    if SESSION_KEY not in state:
        state[SESSION_KEY] = SolverSession()
    if SCHEDULER_KEY not in state:
        state[SCHEDULER_KEY] = DebouncedScheduler(state.get("debounce_ms", 500) / 1000.0)
    init_fields(state, CALC)
    return state[SESSION_KEY], state[SCHEDULER_KEY]


def _texts(state: dict) -> dict[str, str]:
    return {q: str(state.get(field_key(CALC.id, q)) or "") for q in QUANTITIES}


def _run_recompute(state: dict) -> None:
    session = state[SESSION_KEY]
    texts = _texts(state)
    outcome = recompute(texts, session, translator=t)
    for q, text in apply_outcome(texts, outcome).items():
        state[field_key(CALC.id, q)] = text
    state[OUTCOME_KEY] = outcome


def _on_edit(state: dict) -> None:
    state[SCHEDULER_KEY].request(_run_recompute, state)


def _on_clear(state: dict) -> None:
    state[SCHEDULER_KEY].cancel()
    for q, text in clear_session(state[SESSION_KEY]).items():
        state[field_key(CALC.id, q)] = text
    state[OUTCOME_KEY] = None


def _status(outcome) -> tuple[str, str]:
    if isinstance(outcome, Resolved):
        return "RESOLVED", ""
    if isinstance(outcome, Rejected):
        return "REJECTED", outcome.message
    if isinstance(outcome, AwaitingInput) and outcome.message:
        return "AWAITING", outcome.message
    return "IDLE", ""


def _results_table(outcome: Resolved) -> pd.DataFrame:
    rows = [
        {
            t("pf.table.quantity"): SHORT_NAMES[q],
            t("pf.table.value"): round(outcome.values[q], 3),
            t("pf.table.role"): t("pf.role.source") if q in outcome.source_ids else t("pf.role.derived"),
        }
        for q in QUANTITIES
    ]
    return pd.DataFrame(rows)


def _settle(state: dict) -> None:
    _session, scheduler = _panel(state)
    scheduler.flush()


def render(state: dict) -> None:
    """
    Draw the panel, first running any recompute requested by the edits that
    triggered this rerun.

    Under Streamlit the pending request is flushed, not polled: the script only
    reruns once an edit is committed, so there is nothing left to wait for and
    the scheduler's quiet window (`debounce_ms`) is not used here. The window
    applies to owners that drive `poll()` from their own loop.
    """
    _settle(state)

    outcome = state.get(OUTCOME_KEY)
    st.header(t(CALC.title_key))
    st.caption(t(CALC.description_key))

    render_inputs(CALC, t=t, disabled_ids=read_only_ids(outcome), on_change=_on_edit, args=(state,))
    st.button(t("common.clear_all"), key=f"{CALC.id}.clear", on_click=_on_clear, args=(state,))

    status, message = _status(outcome)
    status_chip(t("pf.status_label"), status, t=t)
    if status == "REJECTED":
        st.error(message)
    elif message:
        st.info(message)

    if isinstance(outcome, Resolved):
        st.dataframe(_results_table(outcome), hide_index=True, use_container_width=True)
