from __future__ import annotations

import streamlit as st

from app.i18n import t
from app.ui_components import (
    init_fields,
    read_texts,
    render_inputs,
    render_outputs,
    reset_fields,
)
from app.validation import validate_voltage_droop
from calc_core.droop import voltage_droop_q_response
from calc_core.registry import VOLTAGE_DROOP

CALC = VOLTAGE_DROOP


def _on_clear(state: dict) -> None:
    reset_fields(state, CALC)


def render(state: dict) -> None:
    init_fields(state, CALC)
    st.header(t(CALC.title_key))
    st.caption(t(CALC.description_key))

    render_inputs(CALC, t=t)
    st.button(t("common.clear_all"), key=f"{CALC.id}.clear", on_click=_on_clear, args=(state,))

    check = validate_voltage_droop(read_texts(state, CALC), translator=t)
    outputs: dict[str, str] = {}
    if check.has_errors:
        st.error(" ".join(check.errors))
    elif check.ready:
        q = voltage_droop_q_response(**check.values)
        outputs["q_response_var"] = f"{q:.3f}"
    render_outputs(state, CALC, outputs, t=t)
