from __future__ import annotations

import streamlit as st

from app.i18n import t
from app.ui_components import field_key, field_widget, init_fields, reset_fields
from app.validation import validate_voltage_text
from calc_core.registry import VOLTAGE_CONVERTER
from calc_core.voltage import ll_to_ln, ln_to_ll

CALC = VOLTAGE_CONVERTER
STATUS_KEY = f"{CALC.id}._status"


def _convert(state: dict, source: str, target: str, fn) -> None:
    """The edited field drives the other one; empty or unparseable input clears it."""
    check = validate_voltage_text(state.get(field_key(CALC.id, source)), translator=t)
    state[STATUS_KEY] = " ".join(check.errors)
    if check.ready:
        state[field_key(CALC.id, target)] = f"{fn(check.values['v']):.2f}"
    else:
        state[field_key(CALC.id, target)] = ""


def _from_ll(state: dict) -> None:
    _convert(state, "v_ll", "v_ln", ll_to_ln)


def _from_ln(state: dict) -> None:
    _convert(state, "v_ln", "v_ll", ln_to_ll)


def _on_clear(state: dict) -> None:
    reset_fields(state, CALC)
    state[STATUS_KEY] = ""


def render(state: dict) -> None:
    init_fields(state, CALC)
    st.header(t(CALC.title_key))
    st.caption(t(CALC.description_key))

    field_widget(CALC, CALC.field("v_ll"), t=t, on_change=_from_ll, args=(state,))
    field_widget(CALC, CALC.field("v_ln"), t=t, on_change=_from_ln, args=(state,))
    st.button(t("common.clear_all"), key=f"{CALC.id}.clear", on_click=_on_clear, args=(state,))

    if state.get(STATUS_KEY):
        st.error(state[STATUS_KEY])
