from __future__ import annotations

from app.ui_components import field_key
from app.views import power_factor as panel
from calc_core import Rejected, Resolved
from calc_core.pf_fields import APPARENT_POWER, POWER_FACTOR, REACTIVE_POWER, REAL_POWER
from calc_core.pf_session import read_only_ids


def _key(q: str) -> str:
    return field_key(panel.CALC.id, q)


def _state() -> dict:
    state: dict = {"debounce_ms": 500}
    panel._panel(state)
    return state


def test_edits_are_coalesced_until_flush() -> None:
    state = _state()
    state[_key(REAL_POWER)] = "300"
    panel._on_edit(state)
    state[_key(REACTIVE_POWER)] = "400"
    panel._on_edit(state)
    assert state[panel.SCHEDULER_KEY].pending
    assert panel.OUTCOME_KEY not in state

    ran, _ = state[panel.SCHEDULER_KEY].flush()
    assert ran
    outcome = state[panel.OUTCOME_KEY]
    assert isinstance(outcome, Resolved)
    assert state[_key(APPARENT_POWER)] == "500.000"
    assert state[_key(POWER_FACTOR)] == "0.600"
    assert read_only_ids(outcome) == frozenset({APPARENT_POWER, POWER_FACTOR})


def test_clear_cancels_pending_and_unlocks() -> None:
    state = _state()
    state[_key(REAL_POWER)] = "3"
    state[_key(REACTIVE_POWER)] = "4"
    panel._run_recompute(state)
    assert state[panel.SESSION_KEY].is_locked

    state[_key(REAL_POWER)] = "6"
    panel._on_edit(state)
    panel._on_clear(state)
    assert not state[panel.SCHEDULER_KEY].pending
    assert not state[panel.SESSION_KEY].is_locked
    assert all(state[_key(q)] == "" for q in (REAL_POWER, REACTIVE_POWER, APPARENT_POWER, POWER_FACTOR))
    assert state[panel.OUTCOME_KEY] is None


def test_rejection_clears_derived_fields() -> None:
    state = _state()
    state[_key(APPARENT_POWER)] = "100"
    state[_key(REAL_POWER)] = "80"
    panel._run_recompute(state)
    state[_key(REAL_POWER)] = "120"
    panel._run_recompute(state)
    outcome = state[panel.OUTCOME_KEY]
    assert isinstance(outcome, Rejected)
    assert state[_key(REACTIVE_POWER)] == ""
    assert state[_key(POWER_FACTOR)] == ""
    assert state[_key(REAL_POWER)] == "120"
    assert panel._status(outcome)[0] == "REJECTED"


def test_scheduler_uses_configured_debounce() -> None:
    state: dict = {"debounce_ms": 250}
    _session, scheduler = panel._panel(state)
    assert scheduler.wait_s == 0.25


def test_rerun_runs_committed_edit_without_waiting_for_quiet_window() -> None:
    state: dict = {"debounce_ms": 60_000}
    panel._panel(state)
    state[_key(APPARENT_POWER)] = "500"
    state[_key(REAL_POWER)] = "300"
    panel._on_edit(state)

    # the timed path would still be waiting
    assert state[panel.SCHEDULER_KEY].poll() == (False, None)
    assert state[panel.SCHEDULER_KEY].pending

    panel._settle(state)
    assert not state[panel.SCHEDULER_KEY].pending
    assert isinstance(state[panel.OUTCOME_KEY], Resolved)
    assert state[_key(REACTIVE_POWER)] == "400.000"
