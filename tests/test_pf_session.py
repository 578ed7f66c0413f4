from __future__ import annotations

import logging

import pytest

from calc_core import AwaitingInput, Rejected, Resolved, SolverSession, clear_session, recompute
from calc_core.pf_fields import APPARENT_POWER, POWER_FACTOR, QUANTITIES, REACTIVE_POWER, REAL_POWER
from calc_core.pf_session import apply_outcome, read_only_ids


def _texts(**kwargs: str) -> dict[str, str]:
    texts = {q: "" for q in QUANTITIES}
    texts.update(kwargs)
    return texts


def test_empty_form_awaits_silently() -> None:
    session = SolverSession()
    outcome = recompute(_texts(), session)
    assert outcome == AwaitingInput("")
    assert not session.is_locked


def test_single_value_never_locks_or_derives() -> None:
    session = SolverSession()
    outcome = recompute(_texts(real_power="300"), session)
    assert isinstance(outcome, AwaitingInput)
    assert outcome.message == "Please provide one more value."
    assert not session.is_locked
    assert read_only_ids(outcome) == frozenset()
    assert apply_outcome(_texts(real_power="300"), outcome)[APPARENT_POWER] == ""


def test_three_values_while_unlocked_asks_for_exactly_two() -> None:
    session = SolverSession()
    outcome = recompute(_texts(real_power="3", reactive_power="4", apparent_power="5"), session)
    assert outcome == AwaitingInput("Please provide exactly two values.")
    assert not session.is_locked


def test_two_values_resolve_and_lock() -> None:
    session = SolverSession()
    outcome = recompute(_texts(apparent_power="500", real_power="300"), session)
    assert isinstance(outcome, Resolved)
    assert outcome.source_ids == frozenset({APPARENT_POWER, REAL_POWER})
    assert outcome.derived_ids == frozenset({REACTIVE_POWER, POWER_FACTOR})
    assert outcome.values[POWER_FACTOR] == pytest.approx(0.6)
    assert outcome.values[REACTIVE_POWER] == pytest.approx(400.0)
    assert session.locked_sources == frozenset({APPARENT_POWER, REAL_POWER})
    assert read_only_ids(outcome) == outcome.derived_ids


def test_locked_session_ignores_edits_to_derived_fields() -> None:
    session = SolverSession()
    first = recompute(_texts(apparent_power="500", real_power="300"), session)
    shown = apply_outcome(_texts(apparent_power="500", real_power="300"), first)
    assert shown[POWER_FACTOR] == "0.600"
    assert shown[REACTIVE_POWER] == "400.000"

    shown[REACTIVE_POWER] = "999"
    second = recompute(shown, session)
    assert isinstance(second, Resolved)
    assert second.values == first.values
    assert session.locked_sources == frozenset({APPARENT_POWER, REAL_POWER})


def test_locked_session_follows_source_edits() -> None:
    session = SolverSession()
    recompute(_texts(apparent_power="500", real_power="300"), session)
    outcome = recompute(_texts(apparent_power="500", real_power="400", reactive_power="400.000"), session)
    assert isinstance(outcome, Resolved)
    assert outcome.values[REACTIVE_POWER] == pytest.approx(300.0)
    assert outcome.values[POWER_FACTOR] == pytest.approx(0.8)


def test_emptied_source_rejects_and_clears_derived() -> None:
    session = SolverSession()
    first = recompute(_texts(apparent_power="500", real_power="300"), session)
    shown = apply_outcome(_texts(apparent_power="500", real_power="300"), first)
    shown[REAL_POWER] = ""
    outcome = recompute(shown, session)
    assert isinstance(outcome, Rejected)
    assert outcome.message == "Please provide a valid number for kW."
    assert outcome.cleared_ids == frozenset({REACTIVE_POWER, POWER_FACTOR})
    assert not session.is_locked
    assert read_only_ids(outcome) == frozenset()
    cleared = apply_outcome(shown, outcome)
    assert cleared[REACTIVE_POWER] == ""
    assert cleared[POWER_FACTOR] == ""
    assert cleared[APPARENT_POWER] == "500"


def test_locked_source_out_of_range_rejects() -> None:
    session = SolverSession()
    recompute(_texts(apparent_power="100", power_factor="0.8"), session)
    outcome = recompute(_texts(apparent_power="100", power_factor="1.5", real_power="80.000"), session)
    assert isinstance(outcome, Rejected)
    assert outcome.message == "Power Factor (PF) must be between 0 and 1."
    assert not session.is_locked


def test_reactive_exceeding_apparent_is_rejected() -> None:
    session = SolverSession()
    outcome = recompute(_texts(apparent_power="100", reactive_power="150"), session)
    assert isinstance(outcome, Rejected)
    assert outcome.message.startswith("Calculation Error: ")
    assert "kVAR" in outcome.message
    assert not session.is_locked
    assert read_only_ids(outcome) == frozenset()
    # nothing was derived yet, so user text stays
    assert outcome.cleared_ids == frozenset()


def test_unity_pf_with_reactive_power_is_rejected() -> None:
    outcome = recompute(_texts(reactive_power="100", power_factor="1"), SolverSession())
    assert isinstance(outcome, Rejected)
    assert "PF cannot be 1" in outcome.message


def test_invalid_text_rejects_and_clears_that_field() -> None:
    session = SolverSession()
    outcome = recompute(_texts(real_power="abc", apparent_power="10"), session)
    assert isinstance(outcome, Rejected)
    assert outcome.message == "Invalid number entered for kW."
    assert outcome.cleared_ids == frozenset({REAL_POWER})


def test_negative_power_while_unlocked() -> None:
    outcome = recompute(_texts(reactive_power="-1"), SolverSession())
    assert isinstance(outcome, Rejected)
    assert outcome.message == "Value for kVAR cannot be negative."


def test_last_field_error_wins() -> None:
    outcome = recompute(_texts(real_power="x", power_factor="7"), SolverSession())
    assert isinstance(outcome, Rejected)
    assert outcome.message == "Power Factor (PF) must be between 0 and 1."


def test_impossible_while_locked_clears_derived() -> None:
    session = SolverSession()
    recompute(_texts(apparent_power="100", real_power="80"), session)
    outcome = recompute(_texts(apparent_power="50", real_power="80", reactive_power="60.000"), session)
    assert isinstance(outcome, Rejected)
    assert outcome.cleared_ids == frozenset({REACTIVE_POWER, POWER_FACTOR})
    assert not session.is_locked


def test_relock_on_new_pair_after_reject() -> None:
    session = SolverSession()
    recompute(_texts(apparent_power="500", real_power="300"), session)
    recompute(_texts(apparent_power="500"), session)
    assert not session.is_locked
    outcome = recompute(_texts(apparent_power="500", power_factor="0.8"), session)
    assert isinstance(outcome, Resolved)
    assert session.locked_sources == frozenset({APPARENT_POWER, POWER_FACTOR})


def test_clear_session_unlocks_and_empties() -> None:
    session = SolverSession()
    recompute(_texts(real_power="3", reactive_power="4"), session)
    assert session.is_locked
    assert clear_session(session) == {q: "" for q in QUANTITIES}
    assert not session.is_locked


def test_round_trip_through_derived_pair() -> None:
    first = recompute(_texts(real_power="300", reactive_power="400"), SolverSession())
    assert isinstance(first, Resolved)
    s = first.values[APPARENT_POWER]
    f = first.values[POWER_FACTOR]
    assert s == pytest.approx(500.0)
    assert f == pytest.approx(0.6)

    second = recompute(_texts(apparent_power=repr(s), power_factor=repr(f)), SolverSession())
    assert isinstance(second, Resolved)
    assert second.values[REAL_POWER] == pytest.approx(300.0)
    assert second.values[REACTIVE_POWER] == pytest.approx(400.0)


def test_unity_pf_snaps_reactive_to_exact_zero() -> None:
    outcome = recompute(_texts(real_power="500", power_factor="1"), SolverSession())
    assert isinstance(outcome, Resolved)
    assert outcome.values[REACTIVE_POWER] == 0.0
    assert outcome.values[APPARENT_POWER] == pytest.approx(500.0)


def test_translator_receives_keys_and_params() -> None:
    calls: list[tuple[str, dict]] = []

    def fake_t(key: str, **kwargs) -> str:
        calls.append((key, kwargs))
        return key

    outcome = recompute(_texts(apparent_power="100", reactive_power="150"), SolverSession(), translator=fake_t)
    assert isinstance(outcome, Rejected)
    assert outcome.message == "pf.status.calc_error"
    assert ("pf.reason.kvar_exceeds_kva", {}) in calls
    assert ("pf.status.calc_error", {"reason": "pf.reason.kvar_exceeds_kva"}) in calls


def test_lock_release_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    session = SolverSession()
    recompute(_texts(apparent_power="500", real_power="300"), session)
    with caplog.at_level(logging.INFO, logger="calc_core.pf_session"):
        recompute(_texts(apparent_power="500"), session)
    assert any("released" in rec.getMessage() for rec in caplog.records)


def test_lock_requires_two_sources() -> None:
    with pytest.raises(ValueError):
        SolverSession().lock(frozenset({REAL_POWER}))


def test_huge_valid_inputs_never_show_nan() -> None:
    texts = _texts(apparent_power="1e200", real_power="6e199")
    outcome = recompute(texts, SolverSession())
    assert isinstance(outcome, Resolved)
    shown = apply_outcome(texts, outcome)
    assert "nan" not in shown[REACTIVE_POWER]
    assert "nan" not in shown[POWER_FACTOR]

    rejected = recompute(_texts(apparent_power="1.7e308", real_power="1e308"), SolverSession())
    assert isinstance(rejected, Rejected)
    assert rejected.message == "Calculation Error: Calculation resulted in a non-finite kVAR."
