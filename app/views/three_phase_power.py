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
from app.validation import validate_three_phase
from calc_core.registry import THREE_PHASE_POWER
from calc_core.voltage import three_phase_power

CALC = THREE_PHASE_POWER


def _on_clear(state: dict) -> None:
    reset_fields(state, CALC)


def render(state: dict) -> None:
    init_fields(state, CALC)
    st.header(t(CALC.title_key))
    st.caption(t(CALC.description_key))

    render_inputs(CALC, t=t)
    st.button(t("common.clear_all"), key=f"{CALC.id}.clear", on_click=_on_clear, args=(state,))

    check = validate_three_phase(read_texts(state, CALC), translator=t)
    outputs: dict[str, str] = {}
    if check.has_errors:
        st.warning(" ".join(check.errors))
    elif check.ready:
        v = check.values
        try:
            res = three_phase_power(
                v["current_a"],
                v["power_factor"],
                v_ll=v.get("v_ll"),
                v_ln=v.get("v_ln"),
            )
            outputs = {
                "apparent_kva": f"{res.apparent_kva:.3f}",
                "real_kw": f"{res.real_kw:.3f}",
                "reactive_kvar": f"{res.reactive_kvar:.3f}",
            }
        except ValueError as exc:  # pragma: no cover - UI error path
            st.error(t("errors.calc_failed", exc=exc))
    render_outputs(state, CALC, outputs, t=t)
