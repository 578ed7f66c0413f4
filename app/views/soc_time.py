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
from app.validation import validate_soc
from calc_core.battery import MODE_IDLE, soc_time_to_target
from calc_core.registry import SOC_TIME

CALC = SOC_TIME


def _on_clear(state: dict) -> None:
    # efficiency and aux-loss fields return to their defaults
    reset_fields(state, CALC)


def render(state: dict) -> None:
    init_fields(state, CALC)
    st.header(t(CALC.title_key))
    st.caption(t(CALC.description_key))

    render_inputs(CALC, t=t)
    st.button(t("common.clear_all"), key=f"{CALC.id}.clear", on_click=_on_clear, args=(state,))

    check = validate_soc(read_texts(state, CALC), translator=t)
    outputs: dict[str, str] = {}
    show_errors(check.errors, t=t)
    if check.ready:
        try:
            res = soc_time_to_target(**check.values)
            outputs["mode"] = t(f"soc.mode.{res.mode.lower()}")
            if res.mode == MODE_IDLE:
                outputs["time_to_target"] = t("soc.not_applicable")
            else:
                outputs["effective_power_kw"] = f"{res.effective_power_kw:.3f}"
                outputs["time_to_target"] = res.duration
        except ValueError as exc:  # pragma: no cover - UI error path
            st.error(t("errors.calc_failed", exc=exc))
    render_outputs(state, CALC, outputs, t=t)
