from __future__ import annotations

from typing import Any, Callable, Mapping

import streamlit as st

from calc_core.registry import CalculatorSpec, FieldSpec

_STATUS_KEYS = {
    "RESOLVED": "status.resolved",
    "AWAITING": "status.awaiting",
    "REJECTED": "status.rejected",
    "IDLE": "status.idle",
}


def _status_style(status: str) -> tuple[str, str]:
    """
    Returns (bg_color, fg_color) for a status pill.
    Colors are chosen to be readable in both Streamlit light/dark themes.
    """
    s = (status or "").upper().strip()
    if s == "RESOLVED":
        return "#1f7a3a", "white"
    if s == "AWAITING":
        return "#b7791f", "white"
    if s == "REJECTED":
        return "#b91c1c", "white"
    return "#374151", "white"


def field_key(calc_id: str, field_id: str) -> str:
    return f"{calc_id}.{field_id}"


def read_texts(state: Mapping[str, Any], calc: CalculatorSpec) -> dict[str, str]:
    return {f.id: str(state.get(field_key(calc.id, f.id)) or "") for f in calc.inputs}


def init_fields(state: dict, calc: CalculatorSpec) -> None:
    for f in calc.fields:
        state.setdefault(field_key(calc.id, f.id), f.default)


def reset_fields(state: dict, calc: CalculatorSpec) -> None:
    """Restore descriptor defaults (empty unless the field defines one)."""
    for f in calc.fields:
        state[field_key(calc.id, f.id)] = f.default


def status_chip(label: str, status: str, *, t: Callable[..., str] | None = None) -> None:
    """Compact status pill; when t is provided, the status is localized."""
    bg, fg = _status_style(status)
    status_label = t(_STATUS_KEYS.get(status, "status.idle")) if t else status
    st.markdown(
        f"""
        <span style="
          display:inline-block;
          padding:0.15rem 0.55rem;
          border-radius:999px;
          background:{bg};
          color:{fg};
          font-weight:600;
          font-size:0.85rem;
          line-height:1.4;
          white-space:nowrap;
        ">{label}: {status_label}</span>
        """,
        unsafe_allow_html=True,
    )


def field_help(spec: FieldSpec, t: Callable[..., str]) -> str | None:
    """Help tooltip: the descriptor help text plus its range hint, if any."""
    parts = [t(spec.help_key)] if spec.help_key else []
    if spec.bounded:
        parts.append(t("common.range_hint", min=f"{spec.min_value:g}", max=f"{spec.max_value:g}"))
    return " ".join(parts) or None


def field_widget(
    calc: CalculatorSpec,
    spec: FieldSpec,
    *,
    t: Callable[..., str],
    disabled: bool = False,
    on_change: Callable[..., None] | None = None,
    args: tuple = (),
) -> Any:
    """Render one descriptor field; numbers are free text so bad input can be reported."""
    key = field_key(calc.id, spec.id)
    label = t(spec.label_key)
    help_text = field_help(spec, t)
    if spec.kind == "select":
        return st.selectbox(
            label,
            options=list(spec.options),
            format_func=lambda opt: t(f"option.{spec.id}.{opt}"),
            key=key,
            on_change=on_change,
            args=args,
            help=help_text,
        )
    placeholder = t("common.calculated") if disabled or spec.readonly else spec.placeholder
    return st.text_input(
        label,
        key=key,
        placeholder=placeholder,
        disabled=disabled or spec.readonly,
        on_change=on_change,
        args=args,
        help=help_text,
    )


def render_inputs(
    calc: CalculatorSpec,
    *,
    t: Callable[..., str],
    disabled_ids: frozenset[str] = frozenset(),
    on_change: Callable[..., None] | None = None,
    args: tuple = (),
) -> None:
    for spec in calc.inputs:
        field_widget(calc, spec, t=t, disabled=spec.id in disabled_ids, on_change=on_change, args=args)


def render_outputs(
    state: dict,
    calc: CalculatorSpec,
    values: Mapping[str, str],
    *,
    t: Callable[..., str],
) -> None:
    """Read-only result fields; values missing from the mapping render empty."""
    if not calc.outputs:
        return
    st.divider()
    for spec in calc.outputs:
        state[field_key(calc.id, spec.id)] = values.get(spec.id, "")
        field_widget(calc, spec, t=t)


def show_errors(errors: list[str], *, t: Callable[..., str]) -> None:
    if errors:
        st.error(t("common.validation_errors", errors=" ".join(errors)))
