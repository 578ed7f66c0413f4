from __future__ import annotations

import streamlit as st

from app.i18n import t
from app.ui_components import (
    field_key,
    init_fields,
    read_texts,
    render_inputs,
    render_outputs,
    reset_fields,
)
from app.validation import validate_round_trip
from calc_core.battery import RTE_COMPONENT, round_trip_efficiency
from calc_core.registry import ROUND_TRIP_EFFICIENCY

CALC = ROUND_TRIP_EFFICIENCY


def _on_clear(state: dict) -> None:
    mode = state.get(field_key(CALC.id, "mode"))
    reset_fields(state, CALC)
    # the measurement point is a setting, not a value; keep it across clears
    if mode:
        state[field_key(CALC.id, "mode")] = mode


def render(state: dict) -> None:
    init_fields(state, CALC)
    st.header(t(CALC.title_key))
    st.caption(t(CALC.description_key))

    render_inputs(CALC, t=t)
    st.button(t("common.clear_all"), key=f"{CALC.id}.clear", on_click=_on_clear, args=(state,))

    texts = read_texts(state, CALC)
    if texts.get("mode") == RTE_COMPONENT:
        st.caption(t("rte.hint.component"))
    else:
        st.caption(t("rte.hint.system"))

    check = validate_round_trip(texts, translator=t)
    outputs: dict[str, str] = {}
    if check.has_errors:
        st.error(" ".join(check.errors))
    elif check.ready:
        res = round_trip_efficiency(
            check.values["energy_charged_kwh"],
            check.values["energy_discharged_kwh"],
            mode=texts.get("mode") or "system",
            aux_energy_kwh=check.values["aux_energy_kwh"],
        )
        if res.system_pct is not None:
            outputs["system_rte_pct"] = f"{res.system_pct:.2f}"
        if res.component_pct is not None:
            outputs["component_rte_pct"] = f"{res.component_pct:.2f}"
    render_outputs(state, CALC, outputs, t=t)
