from __future__ import annotations

import streamlit as st

from app.i18n import t
from app.ui_components import (
    init_fields,
    read_texts,
    render_inputs,
    render_outputs,
    reset_fields,
    show_errors,
)
from app.validation import validate_voltage_control_droop
from calc_core.droop import voltage_control_q_setpoint
from calc_core.registry import VOLTAGE_CONTROL_DROOP

CALC = VOLTAGE_CONTROL_DROOP


def _on_clear(state: dict) -> None:
    reset_fields(state, CALC)


def render(state: dict) -> None:
    init_fields(state, CALC)
    st.header(t(CALC.title_key))
    st.caption(t(CALC.description_key))

    render_inputs(CALC, t=t)
    st.button(t("common.clear_all"), key=f"{CALC.id}.clear", on_click=_on_clear, args=(state,))

    check = validate_voltage_control_droop(read_texts(state, CALC), translator=t)
    outputs: dict[str, str] = {}
    show_errors(check.errors, t=t)
    if check.ready:
        try:
            q = voltage_control_q_setpoint(**check.values)
            outputs["q_setpoint_kvar"] = f"{q:.3f}"
        except ValueError as exc:  # pragma: no cover - UI error path
            st.error(t("errors.calc_failed", exc=exc))
    render_outputs(state, CALC, outputs, t=t)
